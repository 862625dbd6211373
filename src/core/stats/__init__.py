"""Attribute aggregation.

This package computes effective attribute values:
- stat_calculator.py: Base value + flat modifiers, then multipliers, rounded once
- dynamic_modifiers.py: Modifiers derived from other live values (speed -> AC)
"""

from .stat_calculator import StatCalculator
from .dynamic_modifiers import DynamicModifierEvaluator, SPEED_TO_AC_RATIO

__all__ = [
    "StatCalculator",
    "DynamicModifierEvaluator",
    "SPEED_TO_AC_RATIO",
]

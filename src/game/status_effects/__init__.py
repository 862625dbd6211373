"""Status effects.

This package splits authored data from runtime state:
- definitions.py: Immutable status effect definitions (modifiers, periodic effects, behavior)
- runtime.py: Applied instances and the runtime that applies, ticks and removes them
"""

from .definitions import (
    BehavioralEffects,
    ModifierDefinition,
    PeriodicEffectDefinition,
    StatusEffectDefinition,
    INDEFINITE_DURATION,
)
from .runtime import AppliedStatusEffect, StatusEffectRuntime

__all__ = [
    "BehavioralEffects",
    "ModifierDefinition",
    "PeriodicEffectDefinition",
    "StatusEffectDefinition",
    "INDEFINITE_DURATION",
    "AppliedStatusEffect",
    "StatusEffectRuntime",
]

"""Targetable participants.

This package contains the damageable side of the rules core:
- combatant.py: Combatant base with health, energy, modifiers, resistances
  and active status effects, shared by vehicle components and standalone
  entities (turrets, golems, hazards with hit points)
"""

from .combatant import Combatant

__all__ = [
    "Combatant",
]

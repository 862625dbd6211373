"""Character sheets and D&D-style character formulas.

Characters are not combatants: they have no health or armor and are never
targeted. They sit in vehicle seats and contribute attribute modifiers,
proficiency and base attack bonus to the rolls their seat makes.

- character.py: Character data bag
- formulas.py: Attribute modifier, proficiency and half-level bonus
"""

from .character import Character
from .formulas import (
    calculate_attribute_modifier,
    calculate_half_level_bonus,
    calculate_proficiency_bonus,
)

__all__ = [
    "Character",
    "calculate_attribute_modifier",
    "calculate_half_level_bonus",
    "calculate_proficiency_bonus",
]

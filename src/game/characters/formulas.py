"""D&D 5e formulas for character mechanics.

Pure functions of the character's numbers; the Character class stays a data
bag and these interpret it.
"""


def calculate_attribute_modifier(score: int) -> int:
    """Attribute modifier from a raw score: (score - 10) / 2, rounded down.

    Rounds toward negative infinity, so a score of 9 gives -1.
    """
    return (score - 10) // 2


def calculate_proficiency_bonus(level: int) -> int:
    """Proficiency bonus: +2 at levels 1-4, +3 at 5-8, ... +6 at 17-20."""
    return 2 + (level - 1) // 4


def calculate_half_level_bonus(level: int) -> int:
    """Half level, added to character saving throws."""
    return level // 2

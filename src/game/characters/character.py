"""Character sheet: identity, level, attributes and skill proficiencies."""

from typing import Iterable, Optional

from ...core.data.data_structures import RollBonus
from ...core.data.game_enums import (
    CharacterAttribute,
    CharacterSkill,
    CHARACTER_ATTRIBUTE_NAMES,
    SKILL_ATTRIBUTES,
)
from .formulas import (
    calculate_attribute_modifier,
    calculate_half_level_bonus,
    calculate_proficiency_bonus,
)

MIN_LEVEL = 1
MAX_LEVEL = 20
MIN_SCORE = 3
MAX_SCORE = 20
DEFAULT_SCORE = 10


class Character:
    """A crew member that can occupy a vehicle seat.

    Scores default to 10 (modifier +0). Level and scores are validated on
    construction so a malformed sheet fails when it is authored rather than
    mid-combat.
    """

    def __init__(
        self,
        name: str,
        level: int = 1,
        attributes: Optional[dict[CharacterAttribute, int]] = None,
        proficient_skills: Iterable[CharacterSkill] = (),
        base_attack_bonus: int = 0,
        description: str = "",
    ):
        """Initialize a character sheet.

        Args:
            name: Display name
            level: Character level (1-20)
            attributes: Raw attribute scores (3-20); missing ones default to 10
            proficient_skills: Skills this character adds proficiency to
            base_attack_bonus: Bonus added to weapon attacks from this character's seat
            description: Free-form background text

        Raises:
            ValueError: If level or any attribute score is out of range
        """
        if not MIN_LEVEL <= level <= MAX_LEVEL:
            raise ValueError(f"Character level must be {MIN_LEVEL}-{MAX_LEVEL}, got {level}")

        self.name = name
        self.level = level
        self.description = description
        self.base_attack_bonus = base_attack_bonus
        self.proficient_skills: frozenset[CharacterSkill] = frozenset(proficient_skills)

        self.attributes: dict[CharacterAttribute, int] = {attr: DEFAULT_SCORE for attr in CharacterAttribute}
        for attribute, score in (attributes or {}).items():
            if not MIN_SCORE <= score <= MAX_SCORE:
                raise ValueError(
                    f"{CHARACTER_ATTRIBUTE_NAMES[attribute]} score must be {MIN_SCORE}-{MAX_SCORE}, got {score}"
                )
            self.attributes[attribute] = score

    def __repr__(self) -> str:
        return f"Character({self.name!r}, level={self.level})"

    # ============== Raw values ==============

    def get_attribute_score(self, attribute: CharacterAttribute) -> int:
        return self.attributes.get(attribute, DEFAULT_SCORE)

    def get_attribute_modifier(self, attribute: CharacterAttribute) -> int:
        return calculate_attribute_modifier(self.get_attribute_score(attribute))

    def is_proficient(self, skill: CharacterSkill) -> bool:
        return skill in self.proficient_skills

    @property
    def proficiency_bonus(self) -> int:
        return calculate_proficiency_bonus(self.level)

    @property
    def half_level_bonus(self) -> int:
        return calculate_half_level_bonus(self.level)

    # ============== Roll bonuses ==============

    def get_skill_check_bonuses(self, skill: CharacterSkill) -> list[RollBonus]:
        """Bonuses for a skill check: governing attribute modifier, then proficiency.

        Zero-valued terms are left out of the breakdown.
        """
        attribute = SKILL_ATTRIBUTES[skill]
        bonuses = self._attribute_bonus(attribute)
        if self.is_proficient(skill):
            bonuses.append(RollBonus("Proficiency", self.proficiency_bonus))
        return bonuses

    def get_save_bonuses(self, attribute: CharacterAttribute) -> list[RollBonus]:
        """Bonuses for a saving throw: attribute modifier, then half level."""
        bonuses = self._attribute_bonus(attribute)
        half_level = self.half_level_bonus
        if half_level != 0:
            bonuses.append(RollBonus("Half Level", half_level))
        return bonuses

    def get_skill_check_modifier(self, skill: CharacterSkill) -> int:
        """Total skill check bonus, used to pick the best crew member."""
        return sum(bonus.value for bonus in self.get_skill_check_bonuses(skill))

    def get_save_modifier(self, attribute: CharacterAttribute) -> int:
        return sum(bonus.value for bonus in self.get_save_bonuses(attribute))

    def _attribute_bonus(self, attribute: CharacterAttribute) -> list[RollBonus]:
        modifier = self.get_attribute_modifier(attribute)
        if modifier == 0:
            return []
        return [RollBonus(f"{CHARACTER_ATTRIBUTE_NAMES[attribute]} Modifier", modifier)]

"""Unified data structures and conversion utilities.

This module provides the small value types shared by every rules subsystem:
attribute modifiers, roll bonuses and dice formulas, plus conversion helpers
used when reading authored data.

Data Flow:
1. Authored data (YAML) -> templates and definitions
2. Definitions -> runtime modifiers and dice formulas
3. Calculators -> roll bonuses and outcome records

Modifiers are owned by exactly one creator and are compared by identity.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, TypeVar

from .game_enums import Attribute, ModifierCategory, ModifierType, DISPELLABLE_CATEGORIES

E = TypeVar("E", bound=Enum)

DICE_PATTERN = re.compile(r"^\s*(?:(\d*)d(\d+))?\s*([+-]\s*\d+)?\s*$", re.IGNORECASE)


@dataclass(eq=False)
class AttributeModifier:
    """A flat or multiplicative adjustment to one attribute.

    Equality is identity: two modifiers with equal values created by two
    different effects are still distinct, so removal never detaches the
    wrong one.
    """
    attribute: Attribute
    modifier_type: ModifierType
    value: float
    source: Optional[Any] = None
    category: ModifierCategory = ModifierCategory.OTHER
    label: Optional[str] = None

    @property
    def is_dispellable(self) -> bool:
        """Status effect and aura modifiers can be dispelled; equipment cannot."""
        return self.category in DISPELLABLE_CATEGORIES

    @property
    def display_name(self) -> str:
        """Label for breakdowns, falling back to the source's name."""
        if self.label:
            return self.label
        name = getattr(self.source, "name", None)
        return name if isinstance(name, str) else self.category.name.replace("_", " ").title()

    def __repr__(self) -> str:
        sign = "x" if self.modifier_type == ModifierType.MULTIPLIER else "+"
        return f"AttributeModifier({self.attribute.name} {sign}{self.value}, {self.display_name})"


@dataclass(frozen=True)
class RollBonus:
    """One labelled term added to a d20 roll."""
    label: str
    value: int

    @classmethod
    def from_modifier(cls, modifier: AttributeModifier) -> "RollBonus":
        """Convert a flat modifier into a roll bonus."""
        return cls(modifier.display_name, int(round(modifier.value)))

    def __str__(self) -> str:
        return f"{self.value:+d} {self.label}"


@dataclass(frozen=True)
class DiceFormula:
    """Dice plus a flat bonus, e.g. 2d6+3."""
    dice_count: int = 0
    die_size: int = 6
    bonus: int = 0

    @property
    def has_dice(self) -> bool:
        return self.dice_count > 0 and self.die_size > 0

    @property
    def is_empty(self) -> bool:
        """True when the formula can never produce a value."""
        return not self.has_dice and self.bonus == 0

    @classmethod
    def parse(cls, notation: Any) -> "DiceFormula":
        """Parse "2d6+3", "d8", "1d4-1" or a plain number like "5".

        Raises:
            ValueError: If the notation is not recognised
        """
        text = str(notation).strip()
        if text.lstrip("+-").isdigit():
            return cls(0, 6, int(text))
        match = DICE_PATTERN.match(text)
        if not match or not any(match.groups()):
            raise ValueError(f"Invalid dice notation: {notation!r}")
        count, size, bonus = match.groups()
        if size is None:
            return cls(0, 6, int(bonus.replace(" ", "")))
        return cls(
            dice_count=int(count) if count else 1,
            die_size=int(size),
            bonus=int(bonus.replace(" ", "")) if bonus else 0,
        )

    def notation(self) -> str:
        """Dice notation for display, e.g. "2d6+3" or "5" for flat values."""
        if not self.has_dice:
            return str(self.bonus)
        text = f"{self.dice_count}d{self.die_size}"
        if self.bonus:
            text += f"{self.bonus:+d}"
        return text


class DataConverter:
    """Utilities for converting authored values into rules types."""

    @staticmethod
    def parse_enum(enum_cls: type[E], value: Any) -> E:
        """Parse an enum member from its name, case and separator insensitive.

        Args:
            enum_cls: Enum class to parse into
            value: Member, or a name like "armor_class", "ArmorClass" or "ARMOR CLASS"

        Returns:
            The matching enum member

        Raises:
            ValueError: If no member matches
        """
        if isinstance(value, enum_cls):
            return value
        if not isinstance(value, str):
            raise ValueError(f"Expected a {enum_cls.__name__} name, got {value!r}")

        key = value.strip().replace("-", "_").replace(" ", "_")
        if "_" not in key and not key.isupper():
            # CamelCase -> SNAKE_CASE
            key = "".join(f"_{c}" if c.isupper() and i else c for i, c in enumerate(key))
        key = key.upper()

        try:
            return enum_cls[key]
        except KeyError:
            valid = ", ".join(member.name.lower() for member in enum_cls)
            raise ValueError(f"Unknown {enum_cls.__name__} '{value}' (valid: {valid})") from None

    @staticmethod
    def parse_flags(flag_cls: type[E], values: Any) -> E:
        """Combine a list of flag names into a single flag value."""
        result = flag_cls(0)
        if not values:
            return result
        if isinstance(values, str):
            values = [values]
        for value in values:
            result |= DataConverter.parse_enum(flag_cls, value)
        return result


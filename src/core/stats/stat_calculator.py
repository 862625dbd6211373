"""
Stat calculation: the single place effective attribute values are computed.

Entities store raw base values; this module gathers their modifiers and
computes finals. Every method is pure: it returns data and never mutates
its inputs.

Application order is fixed:
    base -> all flat modifiers (added) -> all multipliers (in list order) -> round once
"""

from typing import Any, Iterable, Optional

from ..data.data_structures import AttributeModifier
from ..data.game_enums import Attribute, ModifierCategory, ModifierType
from .dynamic_modifiers import DynamicModifierEvaluator


class StatCalculator:
    """Aggregates modifiers into effective attribute values."""

    @staticmethod
    def gather_attribute_value_with_breakdown(
        entity: Any,
        attribute: Attribute,
        base_value: Optional[float] = None,
    ) -> tuple[int, float, list[AttributeModifier]]:
        """Compute an attribute with its breakdown.

        Args:
            entity: Entity exposing get_base_value() and get_modifiers()
            attribute: Attribute to compute
            base_value: Override for the entity's stored base value

        Returns:
            Tuple of (total, base value, modifiers that contributed)
        """
        if base_value is None:
            base_value = entity.get_base_value(attribute)

        modifiers = StatCalculator.gather_entity_modifiers(entity, attribute)
        modifiers.extend(DynamicModifierEvaluator.evaluate_all(entity, attribute))

        total = StatCalculator.calculate_total(base_value, modifiers)
        return total, base_value, modifiers

    @staticmethod
    def gather_attribute_value(entity: Any, attribute: Attribute, base_value: Optional[float] = None) -> int:
        """Convenience wrapper when the breakdown is not needed."""
        total, _, _ = StatCalculator.gather_attribute_value_with_breakdown(entity, attribute, base_value)
        return total

    @staticmethod
    def gather_defense_value_with_breakdown(target: Any) -> tuple[int, float, list[AttributeModifier]]:
        """Armor class with breakdown."""
        return StatCalculator.gather_attribute_value_with_breakdown(target, Attribute.ARMOR_CLASS)

    @staticmethod
    def gather_defense_value(target: Any) -> int:
        return StatCalculator.gather_attribute_value(target, Attribute.ARMOR_CLASS)

    @staticmethod
    def gather_entity_modifiers(
        entity: Any,
        attribute: Attribute,
        categories: Optional[Iterable[ModifierCategory]] = None,
    ) -> list[AttributeModifier]:
        """Collect an entity's non-zero modifiers for an attribute.

        Args:
            entity: Entity to read
            attribute: Attribute to filter on
            categories: Optional category filter

        Returns:
            A new list; the entity is not touched
        """
        allowed = set(categories) if categories is not None else None
        return [
            modifier
            for modifier in entity.get_modifiers()
            if modifier.attribute == attribute
            and modifier.value != 0
            and (allowed is None or modifier.category in allowed)
        ]

    @staticmethod
    def calculate_total(base_value: float, modifiers: Iterable[AttributeModifier]) -> int:
        """Apply flat modifiers, then multipliers, then round once to the nearest integer."""
        modifiers = list(modifiers)
        total = float(base_value)

        for modifier in modifiers:
            if modifier.modifier_type == ModifierType.FLAT:
                total += modifier.value

        for modifier in modifiers:
            if modifier.modifier_type == ModifierType.MULTIPLIER:
                total *= modifier.value

        return int(round(total))

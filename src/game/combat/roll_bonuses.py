"""Helpers that turn entity stats into labelled roll bonuses."""

from typing import Any, Iterable

from ...core.data.data_structures import RollBonus
from ...core.data.game_enums import Attribute, ModifierCategory, ModifierType, VehicleCheckAttribute
from ...core.stats.stat_calculator import StatCalculator


def vehicle_check_bonuses(entity: Any, check_attribute: VehicleCheckAttribute) -> list[RollBonus]:
    """One bonus named after the rolling component, worth its aggregated attribute."""
    value = StatCalculator.gather_attribute_value(entity, check_attribute.to_attribute())
    if value == 0:
        return []
    return [RollBonus(entity.name, value)]


def modifier_bonuses(entity: Any, attribute: Attribute, categories: Iterable[ModifierCategory]) -> list[RollBonus]:
    """Flat modifiers of the given categories as individual roll bonuses."""
    return [
        RollBonus.from_modifier(modifier)
        for modifier in StatCalculator.gather_entity_modifiers(entity, attribute, categories)
        if modifier.modifier_type == ModifierType.FLAT
    ]

"""Core data structures and definitions.

This package contains fundamental data types and rules definitions:
- data_structures.py: AttributeModifier, RollBonus, DiceFormula and conversion helpers
- game_enums.py: Centralized enums for attributes, skills, damage and components
"""

from .data_structures import AttributeModifier, RollBonus, DiceFormula, DataConverter
from .game_enums import (
    Attribute,
    ModifierType,
    ModifierCategory,
    DISPELLABLE_CATEGORIES,
    ComponentType,
    ComponentTargetMode,
    VehicleCheckAttribute,
    CharacterAttribute,
    CharacterSkill,
    CheckKind,
    DamageType,
    DamageSource,
    DamageMode,
    ResistanceLevel,
    PeriodicEffectType,
    ResourceType,
    EntityFeature,
    SKILL_ATTRIBUTES,
    CHARACTER_ATTRIBUTE_NAMES,
    CHARACTER_SKILL_NAMES,
    VEHICLE_CHECK_ATTRIBUTE_NAMES,
    DAMAGE_TYPE_NAMES,
    COMPONENT_TYPE_NAMES,
)

__all__ = [
    "AttributeModifier",
    "RollBonus",
    "DiceFormula",
    "DataConverter",
    "Attribute",
    "ModifierType",
    "ModifierCategory",
    "DISPELLABLE_CATEGORIES",
    "ComponentType",
    "ComponentTargetMode",
    "VehicleCheckAttribute",
    "CharacterAttribute",
    "CharacterSkill",
    "CheckKind",
    "DamageType",
    "DamageSource",
    "DamageMode",
    "ResistanceLevel",
    "PeriodicEffectType",
    "ResourceType",
    "EntityFeature",
    "SKILL_ATTRIBUTES",
    "CHARACTER_ATTRIBUTE_NAMES",
    "CHARACTER_SKILL_NAMES",
    "VEHICLE_CHECK_ATTRIBUTE_NAMES",
    "DAMAGE_TYPE_NAMES",
    "COMPONENT_TYPE_NAMES",
]

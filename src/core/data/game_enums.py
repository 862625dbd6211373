"""Centralized game enums and constants.

This module contains all core rules enums that are used across multiple modules,
eliminating duplication and providing a single source of truth.
"""

from enum import Enum, Flag, auto


class Attribute(Enum):
    """Stat keys that modifiers can target on vehicles and components."""
    # Core stats
    SPEED = auto()
    ARMOR_CLASS = auto()
    ATTACK_BONUS = auto()
    MAX_HEALTH = auto()
    MAX_ENERGY = auto()
    ENERGY_REGEN = auto()

    # Check attributes
    MOBILITY = auto()
    STABILITY = auto()

    # Drive stats
    ACCELERATION = auto()

    # Weapon stats
    DAMAGE_DICE = auto()
    DAMAGE_DIE_SIZE = auto()
    DAMAGE_BONUS = auto()

    # Component stats
    COMPONENT_SPACE = auto()
    POWER_DRAW = auto()


class ModifierType(Enum):
    """How a modifier combines with the base value."""
    FLAT = auto()        # Added to the base value
    MULTIPLIER = auto()  # Multiplies the result after all flat modifiers


class ModifierCategory(Enum):
    """Where a modifier came from; decides whether it can be dispelled."""
    EQUIPMENT = auto()     # Permanent, provided by components
    STATUS_EFFECT = auto() # Owned by an applied status effect
    AURA = auto()          # Area effects
    SKILL = auto()         # Skill-granted bonuses
    DYNAMIC = auto()       # Derived at calculation time (speed -> AC)
    OTHER = auto()


DISPELLABLE_CATEGORIES = frozenset({ModifierCategory.STATUS_EFFECT, ModifierCategory.AURA})


class ComponentType(Enum):
    """Category of a vehicle component."""
    POWER_CORE = auto()
    POWER_ACCESSORY = auto()
    CHASSIS = auto()
    DRIVE = auto()
    WEAPON = auto()
    UTILITY_WEAPON = auto()
    ACTIVE_DEFENSE = auto()
    UTILITY = auto()
    SENSORS = auto()
    COMMUNICATIONS = auto()
    STORAGE = auto()
    ENTERTAINMENT = auto()
    SPECIAL = auto()
    CUSTOM = auto()


class ComponentTargetMode(Enum):
    """Which sibling components receive a provided equipment modifier."""
    CHASSIS = auto()
    POWER_CORE = auto()
    DRIVE = auto()
    ALL_WEAPONS = auto()
    ALL_COMPONENTS = auto()


class VehicleCheckAttribute(Enum):
    """Vehicle attributes that can be rolled against in checks and saves."""
    MOBILITY = auto()   # Dodging, evasion, reaction speed
    STABILITY = auto()  # Holding course, resisting knockback

    def to_attribute(self) -> Attribute:
        """Map to the modifier attribute gathered for this check."""
        return Attribute[self.name]


class CharacterAttribute(Enum):
    """Standard character ability scores."""
    STRENGTH = auto()
    DEXTERITY = auto()
    INTELLIGENCE = auto()
    WISDOM = auto()
    CONSTITUTION = auto()
    CHARISMA = auto()


class CharacterSkill(Enum):
    """Trained character skills, each governed by a CharacterAttribute."""
    # Physical control (DEX)
    PILOTING = auto()
    DEFENSIVE_MANEUVERS = auto()
    STUNTS = auto()

    # Awareness (WIS)
    PERCEPTION = auto()
    SURVIVAL = auto()

    # Technical (INT)
    MECHANICS = auto()
    ARCANA = auto()

    # Subterfuge (mixed)
    STEALTH = auto()
    DECEPTION = auto()
    INTIMIDATION = auto()


class CheckKind(Enum):
    """Kinds of d20 rolls; natural 20/1 handling is configured per kind."""
    ATTACK = auto()
    SAVE = auto()
    SKILL_CHECK = auto()


class DamageType(Enum):
    """Damage types that resistances are keyed on."""
    PHYSICAL = auto()
    BLUDGEONING = auto()
    PIERCING = auto()
    SLASHING = auto()
    FIRE = auto()
    COLD = auto()
    LIGHTNING = auto()
    ACID = auto()
    FORCE = auto()
    PSYCHIC = auto()
    NECROTIC = auto()
    RADIANT = auto()


class DamageSource(Enum):
    """What caused a damage instance."""
    WEAPON = auto()       # Weapon component attack
    ABILITY = auto()      # Character skill or spell
    ENVIRONMENT = auto()  # Stage hazards, traps
    EFFECT = auto()       # Damage over time from status effects
    COLLISION = auto()    # Vehicle collisions


class DamageMode(Enum):
    """How a damage formula interacts with the attacking weapon."""
    BASE_ONLY = auto()         # Formula dice only
    WEAPON_ONLY = auto()       # Weapon dice only
    WEAPON_PLUS_BASE = auto()  # Weapon dice plus formula dice


class ResistanceLevel(Enum):
    """Resistance of a target to a damage type."""
    VULNERABLE = auto()  # x2
    NORMAL = auto()      # x1
    RESISTANT = auto()   # x0.5, truncated
    IMMUNE = auto()      # x0


class PeriodicEffectType(Enum):
    """Per-turn effects resolved by status effects."""
    DAMAGE = auto()
    HEALING = auto()
    ENERGY_DRAIN = auto()
    ENERGY_RESTORE = auto()


class ResourceType(Enum):
    """Resources tracked on combat entities."""
    HEALTH = auto()
    ENERGY = auto()


class EntityFeature(Flag):
    """Capability flags used to validate status effect targeting."""
    NONE = 0

    # Core capabilities
    HAS_HEALTH = auto()
    HAS_ARMOR = auto()
    HAS_ENERGY = auto()

    # Material properties
    IS_FLAMMABLE = auto()
    IS_ELECTRONIC = auto()
    IS_MECHANICAL = auto()
    IS_ORGANIC = auto()

    # Entity type
    IS_LIVING = auto()
    IS_MACHINE = auto()

    # Specific immunities
    IMMUNE_TO_FIRE = auto()
    IMMUNE_TO_COLD = auto()
    IMMUNE_TO_STUN = auto()


# Primary attribute for every skill
SKILL_ATTRIBUTES = {
    CharacterSkill.PILOTING: CharacterAttribute.DEXTERITY,
    CharacterSkill.DEFENSIVE_MANEUVERS: CharacterAttribute.DEXTERITY,
    CharacterSkill.STUNTS: CharacterAttribute.DEXTERITY,
    CharacterSkill.PERCEPTION: CharacterAttribute.WISDOM,
    CharacterSkill.SURVIVAL: CharacterAttribute.WISDOM,
    CharacterSkill.MECHANICS: CharacterAttribute.INTELLIGENCE,
    CharacterSkill.ARCANA: CharacterAttribute.INTELLIGENCE,
    CharacterSkill.STEALTH: CharacterAttribute.DEXTERITY,
    CharacterSkill.DECEPTION: CharacterAttribute.CHARISMA,
    CharacterSkill.INTIMIDATION: CharacterAttribute.CHARISMA,
}


# Convenience mappings for display labels
CHARACTER_ATTRIBUTE_NAMES = {
    CharacterAttribute.STRENGTH: "Strength",
    CharacterAttribute.DEXTERITY: "Dexterity",
    CharacterAttribute.INTELLIGENCE: "Intelligence",
    CharacterAttribute.WISDOM: "Wisdom",
    CharacterAttribute.CONSTITUTION: "Constitution",
    CharacterAttribute.CHARISMA: "Charisma",
}

CHARACTER_SKILL_NAMES = {
    CharacterSkill.PILOTING: "Piloting",
    CharacterSkill.DEFENSIVE_MANEUVERS: "Defensive Maneuvers",
    CharacterSkill.STUNTS: "Stunts",
    CharacterSkill.PERCEPTION: "Perception",
    CharacterSkill.SURVIVAL: "Survival",
    CharacterSkill.MECHANICS: "Mechanics",
    CharacterSkill.ARCANA: "Arcana",
    CharacterSkill.STEALTH: "Stealth",
    CharacterSkill.DECEPTION: "Deception",
    CharacterSkill.INTIMIDATION: "Intimidation",
}

VEHICLE_CHECK_ATTRIBUTE_NAMES = {
    VehicleCheckAttribute.MOBILITY: "Mobility",
    VehicleCheckAttribute.STABILITY: "Stability",
}

DAMAGE_TYPE_NAMES = {damage_type: damage_type.name.capitalize() for damage_type in DamageType}

COMPONENT_TYPE_NAMES = {
    component_type: component_type.name.replace("_", " ").title() for component_type in ComponentType
}

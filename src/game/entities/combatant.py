"""Combatant: anything with health that can be targeted, damaged and buffed.

Combatants store raw base values only. Effective values always go through the
stat calculator so that modifiers (equipment, status effects, dynamic) are
applied in one place. Vehicle components and standalone entities (turrets,
golems) are both combatants; a vehicle itself is not.
"""

import uuid
from typing import Any, Optional, TYPE_CHECKING

from ...core.data.data_structures import AttributeModifier
from ...core.data.game_enums import Attribute, DamageType, EntityFeature, ResistanceLevel
from ...core.stats.stat_calculator import StatCalculator

if TYPE_CHECKING:
    from ..status_effects.runtime import AppliedStatusEffect

IMMUNITY_FEATURES = {
    DamageType.FIRE: EntityFeature.IMMUNE_TO_FIRE,
    DamageType.COLD: EntityFeature.IMMUNE_TO_COLD,
}


class Combatant:
    """Damageable participant with modifiers, resistances and status effects."""

    def __init__(
        self,
        name: str,
        max_health: int = 100,
        armor_class: int = 10,
        max_energy: int = 0,
        base_attributes: Optional[dict[Attribute, float]] = None,
        features: EntityFeature = EntityFeature.NONE,
        resistances: Optional[dict[DamageType, ResistanceLevel]] = None,
    ):
        """Initialize a combatant at full health and energy.

        Args:
            name: Display name
            max_health: Base maximum health before modifiers
            armor_class: Base armor class before modifiers
            max_energy: Base maximum energy before modifiers (0 = no energy pool)
            base_attributes: Any other base attribute values
            features: Capability flags for status effect targeting
            resistances: Resistance level per damage type (Normal if absent)
        """
        self.entity_id: str = str(uuid.uuid4())
        self.name = name
        self.base_attributes: dict[Attribute, float] = {
            Attribute.MAX_HEALTH: max_health,
            Attribute.ARMOR_CLASS: armor_class,
            Attribute.MAX_ENERGY: max_energy,
        }
        if base_attributes:
            self.base_attributes.update(base_attributes)

        self.features = features
        self.resistances: dict[DamageType, ResistanceLevel] = dict(resistances or {})

        self.health = max_health
        self.energy = max_energy
        self.is_destroyed = False

        # Owned by their creators: equipment by components, the rest by applied effects
        self.modifiers: list[AttributeModifier] = []
        self.active_status_effects: list["AppliedStatusEffect"] = []

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.name!r}, hp={self.health})"

    # Stat accessors

    def get_base_value(self, attribute: Attribute) -> float:
        """Raw base value for an attribute before modifiers."""
        return self.base_attributes.get(attribute, 0)

    def set_base_value(self, attribute: Attribute, value: float) -> None:
        self.base_attributes[attribute] = value

    def get_stat(self, attribute: Attribute) -> int:
        """Effective value for an attribute with all modifiers applied."""
        return StatCalculator.gather_attribute_value(self, attribute)

    def get_max_health(self) -> int:
        return self.get_stat(Attribute.MAX_HEALTH)

    def get_armor_class(self) -> int:
        return self.get_stat(Attribute.ARMOR_CLASS)

    def get_max_energy(self) -> int:
        return self.get_stat(Attribute.MAX_ENERGY)

    def get_current_speed(self) -> float:
        """Current movement speed; standalone combatants do not move."""
        return 0

    # Features and resistances

    def has_feature(self, feature: EntityFeature) -> bool:
        """True when every flag in ``feature`` is set."""
        return (self.features & feature) == feature

    def has_any_feature(self, features: EntityFeature) -> bool:
        return bool(self.features & features)

    def get_resistance(self, damage_type: DamageType) -> ResistanceLevel:
        """Resistance to a damage type; immunity features override the table."""
        immunity = IMMUNITY_FEATURES.get(damage_type)
        if immunity is not None and self.has_feature(immunity):
            return ResistanceLevel.IMMUNE
        return self.resistances.get(damage_type, ResistanceLevel.NORMAL)

    # Status effect queries (live views over active effects)

    def get_damage_amplification(self) -> float:
        """Product of every active effect's damage amplification."""
        amplification = 1.0
        for effect in self.active_status_effects:
            amplification *= effect.damage_amplification
        return amplification

    def prevents_actions(self) -> bool:
        return any(effect.prevents_actions for effect in self.active_status_effects)

    def prevents_movement(self) -> bool:
        return any(effect.prevents_movement for effect in self.active_status_effects)

    def prevents_skill_use(self) -> bool:
        return any(effect.prevents_skill_use for effect in self.active_status_effects)

    # Health and energy

    def take_damage(self, amount: int) -> int:
        """Apply damage to this combatant.

        Args:
            amount: Amount of damage to apply

        Returns:
            Actual damage dealt (0 when already destroyed, capped at current health)

        Raises:
            ValueError: If amount is negative
        """
        if amount < 0:
            raise ValueError("Damage amount cannot be negative")
        if self.is_destroyed:
            return 0

        old_health = self.health
        self.health = max(0, self.health - amount)

        if self.health <= 0:
            self.is_destroyed = True
            self.on_destroyed()

        return old_health - self.health

    def heal(self, amount: int) -> int:
        """Apply healing to this combatant.

        Returns:
            Actual healing done (0 when destroyed, capped at max health)

        Raises:
            ValueError: If amount is negative
        """
        if amount < 0:
            raise ValueError("Healing amount cannot be negative")
        if self.is_destroyed:
            return 0

        old_health = self.health
        self.health = min(self.get_max_health(), self.health + amount)
        return self.health - old_health

    def set_health(self, value: int) -> None:
        """Set health directly, clamped to [0, max]. Bypasses the destroyed check."""
        self.health = max(0, min(value, self.get_max_health()))

    def drain_energy(self, amount: int) -> int:
        """Remove energy, never below zero.

        Returns:
            Energy actually drained
        """
        if amount < 0:
            raise ValueError("Energy drain cannot be negative")
        old_energy = self.energy
        self.energy = max(0, self.energy - amount)
        return old_energy - self.energy

    def restore_energy(self, amount: int) -> int:
        """Add energy, capped at max energy.

        Returns:
            Energy actually restored
        """
        if amount < 0:
            raise ValueError("Energy restore cannot be negative")
        old_energy = self.energy
        self.energy = min(self.get_max_energy(), self.energy + amount)
        return self.energy - old_energy

    def on_destroyed(self) -> None:
        """Hook called once when health reaches zero."""
        pass

    # Modifiers

    def add_modifier(self, modifier: AttributeModifier) -> None:
        self.modifiers.append(modifier)

    def remove_modifier(self, modifier: AttributeModifier) -> bool:
        """Detach a modifier by identity.

        Returns:
            True if the modifier was attached and has been removed
        """
        for index, existing in enumerate(self.modifiers):
            if existing is modifier:
                del self.modifiers[index]
                return True
        return False

    def remove_modifiers_from_source(self, source: Any) -> int:
        """Detach every modifier whose source is ``source``.

        Returns:
            Number of modifiers removed
        """
        before = len(self.modifiers)
        self.modifiers = [m for m in self.modifiers if m.source is not source]
        return before - len(self.modifiers)

    def get_modifiers(self) -> list[AttributeModifier]:
        """Snapshot of attached modifiers, safe to iterate while removing."""
        return list(self.modifiers)

    # Targeting

    def can_be_targeted(self) -> bool:
        return not self.is_destroyed

    def get_display_name(self) -> str:
        return self.name

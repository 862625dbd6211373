"""Vehicle components: the targetable parts a vehicle is assembled from.

Each component is both a Component of its Vehicle and a Combatant with its
own health, armor class, modifiers and status effects. Components may provide
equipment modifiers to their siblings (armor plating -> chassis AC); those are
attached when the vehicle initializes and removed by source when the provider
is destroyed or disabled.
"""

from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING

from ...core.data.data_structures import AttributeModifier, DiceFormula
from ...core.data.game_enums import (
    Attribute,
    ComponentTargetMode,
    ComponentType,
    DamageType,
    ModifierCategory,
    ModifierType,
    COMPONENT_TYPE_NAMES,
    DAMAGE_TYPE_NAMES,
)
from ...core.entities.components import Component
from ..entities.combatant import Combatant

if TYPE_CHECKING:
    from .vehicle import Vehicle


@dataclass(frozen=True)
class ProvidedModifier:
    """Authored cross-component modifier: what to modify and on which siblings."""
    attribute: Attribute
    value: float
    modifier_type: ModifierType = ModifierType.FLAT
    target_mode: ComponentTargetMode = ComponentTargetMode.CHASSIS


class VehicleComponent(Component, Combatant):
    """Base class for every part of a vehicle."""

    component_type: ComponentType = ComponentType.CUSTOM

    def __init__(
        self,
        name: str,
        max_health: int = 50,
        armor_class: int = 10,
        provided_modifiers: Optional[list[ProvidedModifier]] = None,
        **kwargs,
    ):
        Combatant.__init__(self, name, max_health=max_health, armor_class=armor_class, **kwargs)
        Component.__init__(self, None)
        self.is_disabled = False
        self.provided_modifiers: list[ProvidedModifier] = list(provided_modifiers or [])

    def get_component_type(self) -> ComponentType:
        return self.component_type

    @property
    def vehicle(self) -> Optional["Vehicle"]:
        return self.entity

    @property
    def is_operational(self) -> bool:
        return not self.is_destroyed and not self.is_disabled

    def get_type_name(self) -> str:
        return COMPONENT_TYPE_NAMES[self.component_type]

    def get_current_speed(self) -> float:
        """Every part of a moving vehicle moves with it."""
        vehicle = self.vehicle
        return vehicle.current_speed if vehicle is not None else 0

    def can_be_targeted(self) -> bool:
        return not self.is_destroyed

    # ============== Cross-component modifiers ==============

    def apply_provided_modifiers(self) -> int:
        """Attach this component's provided modifiers to their sibling targets.

        Returns:
            Number of modifiers attached
        """
        vehicle = self.vehicle
        if vehicle is None or not self.is_operational:
            return 0

        attached = 0
        for provided in self.provided_modifiers:
            for target in self._resolve_targets(vehicle, provided.target_mode):
                if target.is_destroyed:
                    continue
                target.add_modifier(AttributeModifier(
                    attribute=provided.attribute,
                    modifier_type=provided.modifier_type,
                    value=provided.value,
                    source=self,
                    category=ModifierCategory.EQUIPMENT,
                ))
                attached += 1
        return attached

    def remove_provided_modifiers(self) -> int:
        """Detach everything this component provided, from every sibling.

        Returns:
            Number of modifiers removed
        """
        vehicle = self.vehicle
        if vehicle is None:
            return 0
        return sum(component.remove_modifiers_from_source(self) for component in vehicle.all_components)

    @staticmethod
    def _resolve_targets(vehicle: "Vehicle", target_mode: ComponentTargetMode) -> list["VehicleComponent"]:
        if target_mode == ComponentTargetMode.CHASSIS:
            return [vehicle.chassis] if vehicle.chassis else []
        if target_mode == ComponentTargetMode.POWER_CORE:
            return [vehicle.power_core] if vehicle.power_core else []
        if target_mode == ComponentTargetMode.DRIVE:
            drive = vehicle.get_drive_component()
            return [drive] if drive else []
        if target_mode == ComponentTargetMode.ALL_WEAPONS:
            return vehicle.get_weapons()
        return vehicle.all_components

    def set_disabled(self, disabled: bool) -> None:
        """Disable or re-enable this component, toggling its provided modifiers."""
        if self.is_disabled == disabled:
            return
        self.is_disabled = disabled
        if disabled:
            self.remove_provided_modifiers()
        else:
            self.apply_provided_modifiers()

    def on_destroyed(self) -> None:
        self.remove_provided_modifiers()

    # ============== Behavioral queries ==============

    def can_act(self) -> bool:
        """Operational and not stunned, here or on the chassis (vehicle-wide effects)."""
        if not self.is_operational:
            return False
        return not any(effect.prevents_actions for effect in self._effects_in_scope())

    def _effects_in_scope(self):
        effects = list(self.active_status_effects)
        vehicle = self.vehicle
        if vehicle is not None and vehicle.chassis is not None and vehicle.chassis is not self:
            effects.extend(vehicle.chassis.active_status_effects)
        return effects


class ChassisComponent(VehicleComponent):
    """Structural frame: holds the vehicle's hit points, AC and mobility."""

    component_type = ComponentType.CHASSIS

    def __init__(self, name: str = "Chassis", max_health: int = 100, armor_class: int = 18, mobility: int = 8, **kwargs):
        super().__init__(name, max_health=max_health, armor_class=armor_class, **kwargs)
        self.set_base_value(Attribute.MOBILITY, mobility)

    def get_mobility(self) -> int:
        return self.get_stat(Attribute.MOBILITY)


class PowerCoreComponent(VehicleComponent):
    """Energy source; the vehicle stops operating without one."""

    component_type = ComponentType.POWER_CORE

    def __init__(self, name: str = "Power Core", max_health: int = 60, armor_class: int = 16,
                 max_energy: int = 100, energy_regen: int = 10, **kwargs):
        super().__init__(name, max_health=max_health, armor_class=armor_class, max_energy=max_energy, **kwargs)
        self.set_base_value(Attribute.ENERGY_REGEN, energy_regen)

    def regenerate(self) -> int:
        """Restore this turn's energy regeneration.

        Returns:
            Energy actually restored
        """
        if not self.is_operational:
            return 0
        return self.restore_energy(max(0, self.get_stat(Attribute.ENERGY_REGEN)))


class DriveComponent(VehicleComponent):
    """Propulsion: speed, acceleration and stability."""

    component_type = ComponentType.DRIVE

    def __init__(self, name: str = "Drive", max_health: int = 60, armor_class: int = 16,
                 max_speed: float = 10, acceleration: float = 1, stability: float = 5, **kwargs):
        super().__init__(name, max_health=max_health, armor_class=armor_class, **kwargs)
        self.set_base_value(Attribute.SPEED, max_speed)
        self.set_base_value(Attribute.ACCELERATION, acceleration)
        self.set_base_value(Attribute.STABILITY, stability)
        self.current_speed: float = 0

    def get_max_speed(self) -> int:
        return self.get_stat(Attribute.SPEED)

    def set_current_speed(self, speed: float) -> None:
        """Set actual movement speed, clamped to [0, max speed]."""
        self.current_speed = max(0, min(speed, self.get_max_speed()))


class WeaponComponent(VehicleComponent):
    """Weapon mount with its own attack bonus and damage dice."""

    component_type = ComponentType.WEAPON

    def __init__(
        self,
        name: str = "Weapon",
        max_health: int = 40,
        armor_class: int = 14,
        attack_bonus: int = 0,
        damage: DiceFormula = DiceFormula(1, 8, 0),
        damage_type: DamageType = DamageType.PHYSICAL,
        **kwargs,
    ):
        super().__init__(name, max_health=max_health, armor_class=armor_class, **kwargs)
        self.set_base_value(Attribute.ATTACK_BONUS, attack_bonus)
        self.set_base_value(Attribute.DAMAGE_BONUS, damage.bonus)
        self.damage = damage
        self.damage_type = damage_type

    def get_attack_bonus(self) -> int:
        return self.get_stat(Attribute.ATTACK_BONUS)

    def get_damage_formula(self) -> DiceFormula:
        """Weapon dice with the modified damage bonus."""
        return DiceFormula(self.damage.dice_count, self.damage.die_size, self.get_stat(Attribute.DAMAGE_BONUS))

    @property
    def damage_string(self) -> str:
        return f"{self.get_damage_formula().notation()} {DAMAGE_TYPE_NAMES[self.damage_type]}"


class GenericComponent(VehicleComponent):
    """Any other part (sensors, armor plating, utilities) identified by its type."""

    def __init__(self, name: str, component_type: ComponentType = ComponentType.CUSTOM, **kwargs):
        super().__init__(name, **kwargs)
        self.component_type = component_type

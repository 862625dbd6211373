"""Vehicle: an Entity assembled from components and crewed through seats.

A vehicle is not itself a combatant. Attacks, saves and status effects land
on its components; the chassis stands for the vehicle as a whole (hit
points, AC, mobility) and the power core supplies energy.
"""

from typing import Optional

from ...core.data.game_enums import Attribute, ComponentType, VehicleCheckAttribute
from ...core.entities.components import Entity
from ..characters.character import Character
from .seats import VehicleSeat
from .vehicle_components import (
    ChassisComponent,
    DriveComponent,
    PowerCoreComponent,
    VehicleComponent,
    WeaponComponent,
)

# Attributes owned by the power core or the drive; everything else lives on the chassis
POWER_CORE_ATTRIBUTES = frozenset({Attribute.MAX_ENERGY, Attribute.ENERGY_REGEN})
DRIVE_ATTRIBUTES = frozenset({Attribute.SPEED, Attribute.ACCELERATION, Attribute.STABILITY})


class Vehicle(Entity):
    """A crewed vehicle.

    Components are kept in insertion order. At most one chassis and one power
    core may be installed.
    """

    UNIQUE_COMPONENT_TYPES = frozenset({ComponentType.CHASSIS, ComponentType.POWER_CORE})

    def __init__(self, name: str, components: Optional[list[VehicleComponent]] = None,
                 seats: Optional[list[VehicleSeat]] = None):
        super().__init__(name)
        self.seats: list[VehicleSeat] = []
        for component in components or []:
            self.add_component(component)
        for seat in seats or []:
            self.add_seat(seat)

    def __repr__(self) -> str:
        return f"Vehicle({self.name!r}, components={len(self.components)}, seats={len(self.seats)})"

    # ============== Components ==============

    @property
    def all_components(self) -> list[VehicleComponent]:
        return self.get_all_components()

    @property
    def chassis(self) -> Optional[ChassisComponent]:
        return self.get_component(ComponentType.CHASSIS)

    @property
    def power_core(self) -> Optional[PowerCoreComponent]:
        return self.get_component(ComponentType.POWER_CORE)

    def get_drive_component(self) -> Optional[DriveComponent]:
        return self.get_component(ComponentType.DRIVE)

    def get_weapons(self) -> list[WeaponComponent]:
        return [c for c in self.components if isinstance(c, WeaponComponent)]

    def get_operational_component(self, component_type: ComponentType) -> Optional[VehicleComponent]:
        """First operational component of a type, if any."""
        for component in self.get_components(component_type):
            if component.is_operational:
                return component
        return None

    def find_component(self, name: str) -> Optional[VehicleComponent]:
        for component in self.components:
            if component.name == name:
                return component
        return None

    def resolve_modifier_target(self, attribute: Attribute) -> Optional[VehicleComponent]:
        """Component that owns an attribute for this vehicle.

        Energy attributes live on the power core, movement attributes on the
        drive and the rest (health, AC, mobility) on the chassis.
        """
        if attribute in POWER_CORE_ATTRIBUTES:
            return self.power_core
        if attribute in DRIVE_ATTRIBUTES:
            return self.get_drive_component()
        return self.chassis

    def resolve_check_component(self, check_attribute: VehicleCheckAttribute) -> Optional[VehicleComponent]:
        """Component that rolls a vehicle check or save for ``check_attribute``."""
        return self.resolve_modifier_target(check_attribute.to_attribute())

    def initialize_component_modifiers(self) -> int:
        """Attach every operational component's provided modifiers.

        Call once after the vehicle is assembled.

        Returns:
            Number of modifiers attached
        """
        return sum(component.apply_provided_modifiers() for component in self.all_components)

    # ============== Seats ==============

    def add_seat(self, seat: VehicleSeat) -> VehicleSeat:
        """Add a seat; its controlled components must belong to this vehicle.

        Raises:
            ValueError: If a controlled component is not installed on this vehicle
        """
        for component in seat.controlled_components:
            if component.vehicle is not self:
                raise ValueError(f"Seat '{seat.name}' controls '{component.name}', which is not on {self.name}")
        self.seats.append(seat)
        return seat

    def get_seat_for_component(self, component: Optional[VehicleComponent]) -> Optional[VehicleSeat]:
        if component is None:
            return None
        for seat in self.seats:
            if seat.controls(component):
                return seat
        return None

    def get_character_for_component(self, component: Optional[VehicleComponent]) -> Optional[Character]:
        seat = self.get_seat_for_component(component)
        return seat.assigned_character if seat else None

    def get_active_seats(self) -> list[VehicleSeat]:
        return [seat for seat in self.seats if seat.can_act()]

    def get_assigned_characters(self) -> list[Character]:
        return [seat.assigned_character for seat in self.seats if seat.assigned_character is not None]

    def reset_seats(self) -> None:
        """Start-of-turn reset: every seat may act again."""
        for seat in self.seats:
            seat.reset_turn_state()

    # ============== State ==============

    @property
    def current_speed(self) -> float:
        drive = self.get_drive_component()
        if drive is None or not drive.is_operational:
            return 0
        return drive.current_speed

    def non_operational_reason(self) -> Optional[str]:
        """Why the vehicle cannot operate, or None if it can."""
        chassis = self.chassis
        power_core = self.power_core
        if chassis is None:
            return "No chassis installed"
        if chassis.is_destroyed:
            return "Chassis destroyed"
        if power_core is None:
            return "No power core installed"
        if power_core.is_destroyed:
            return "Power core destroyed - no power"
        return None

    @property
    def is_operational(self) -> bool:
        return self.non_operational_reason() is None

    @property
    def is_destroyed(self) -> bool:
        chassis = self.chassis
        return chassis is not None and chassis.is_destroyed

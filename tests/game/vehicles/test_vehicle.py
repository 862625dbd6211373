"""
Unit tests for vehicles, their components and seats.
"""

import pytest

from src.core.data.data_structures import DiceFormula
from src.core.data.game_enums import (
    Attribute,
    ComponentTargetMode,
    ComponentType,
    ModifierCategory,
    VehicleCheckAttribute,
)
from src.core.entities.components import DuplicateComponentError
from src.game.characters.character import Character
from src.game.vehicles.seats import VehicleSeat
from src.game.vehicles.vehicle import Vehicle
from src.game.vehicles.vehicle_components import (
    ChassisComponent,
    DriveComponent,
    GenericComponent,
    PowerCoreComponent,
    ProvidedModifier,
    WeaponComponent,
)


class TestAssembly:
    """Test component installation rules."""

    def test_components_know_their_vehicle(self, vehicle):
        assert all(component.vehicle is vehicle for component in vehicle.all_components)
        assert vehicle.chassis.name == "Hull"
        assert vehicle.power_core.name == "Core"
        assert vehicle.get_drive_component().name == "Wheels"
        assert [weapon.name for weapon in vehicle.get_weapons()] == ["Turret"]

    def test_only_one_chassis(self):
        vehicle = Vehicle("Rig", [ChassisComponent()])

        with pytest.raises(DuplicateComponentError):
            vehicle.add_component(ChassisComponent("Spare"))

    def test_multiple_weapons_allowed(self):
        vehicle = Vehicle("Rig", [ChassisComponent(), WeaponComponent("Left"), WeaponComponent("Right")])

        assert len(vehicle.get_weapons()) == 2

    def test_seat_must_control_own_components(self, vehicle):
        stranger = WeaponComponent("Borrowed")

        with pytest.raises(ValueError):
            vehicle.add_seat(VehicleSeat("Passenger", [stranger]))

    def test_find_component(self, vehicle):
        assert vehicle.find_component("Turret") is vehicle.get_weapons()[0]
        assert vehicle.find_component("Missing") is None


class TestAttributeRouting:
    """Test which component owns each vehicle attribute."""

    @pytest.mark.parametrize("attribute,owner", [
        (Attribute.MAX_ENERGY, "Core"),
        (Attribute.ENERGY_REGEN, "Core"),
        (Attribute.SPEED, "Wheels"),
        (Attribute.ACCELERATION, "Wheels"),
        (Attribute.STABILITY, "Wheels"),
        (Attribute.ARMOR_CLASS, "Hull"),
        (Attribute.MAX_HEALTH, "Hull"),
        (Attribute.MOBILITY, "Hull"),
    ])
    def test_resolve_modifier_target(self, vehicle, attribute, owner):
        assert vehicle.resolve_modifier_target(attribute).name == owner

    def test_check_component_for_mobility_and_stability(self, vehicle):
        assert vehicle.resolve_check_component(VehicleCheckAttribute.MOBILITY) is vehicle.chassis
        assert vehicle.resolve_check_component(VehicleCheckAttribute.STABILITY) is vehicle.get_drive_component()

    def test_missing_owner_resolves_to_none(self):
        vehicle = Vehicle("Frame Only", [ChassisComponent()])

        assert vehicle.resolve_modifier_target(Attribute.SPEED) is None
        assert vehicle.resolve_modifier_target(Attribute.MAX_ENERGY) is None


class TestProvidedModifiers:
    """Test cross-component equipment modifiers."""

    @pytest.fixture
    def plated_vehicle(self):
        chassis = ChassisComponent("Hull", armor_class=12)
        weapon_a = WeaponComponent("Gun A", attack_bonus=2)
        weapon_b = WeaponComponent("Gun B", attack_bonus=0)
        plating = GenericComponent("Plating", ComponentType.UTILITY, provided_modifiers=[
            ProvidedModifier(Attribute.ARMOR_CLASS, 2),
        ])
        sensors = GenericComponent("Sensors", ComponentType.SENSORS, provided_modifiers=[
            ProvidedModifier(Attribute.ATTACK_BONUS, 1, target_mode=ComponentTargetMode.ALL_WEAPONS),
        ])
        vehicle = Vehicle("Plated", [chassis, PowerCoreComponent(), weapon_a, weapon_b, plating, sensors])
        vehicle.initialize_component_modifiers()
        return vehicle

    def test_initialize_attaches_to_targets(self, plated_vehicle):
        chassis = plated_vehicle.chassis
        gun_a, gun_b = plated_vehicle.get_weapons()

        assert chassis.get_armor_class() == 14
        assert gun_a.get_attack_bonus() == 3
        assert gun_b.get_attack_bonus() == 1
        assert all(m.category == ModifierCategory.EQUIPMENT for m in chassis.modifiers)

    def test_destroyed_provider_removes_its_modifiers(self, plated_vehicle):
        plating = plated_vehicle.find_component("Plating")

        plating.take_damage(plating.health)

        assert plated_vehicle.chassis.get_armor_class() == 12

    def test_disable_and_enable_toggle_modifiers(self, plated_vehicle):
        sensors = plated_vehicle.find_component("Sensors")
        gun_a = plated_vehicle.find_component("Gun A")

        sensors.set_disabled(True)
        assert gun_a.get_attack_bonus() == 2
        assert not sensors.is_operational

        sensors.set_disabled(False)
        assert gun_a.get_attack_bonus() == 3

    def test_all_components_mode_includes_provider(self):
        beacon = GenericComponent("Beacon", provided_modifiers=[
            ProvidedModifier(Attribute.ARMOR_CLASS, 1, target_mode=ComponentTargetMode.ALL_COMPONENTS),
        ], armor_class=10)
        vehicle = Vehicle("Rig", [ChassisComponent("Hull", armor_class=10), beacon])

        assert vehicle.initialize_component_modifiers() == 2
        assert beacon.get_armor_class() == 11


class TestComponents:
    """Test component-specific behavior."""

    def test_power_core_regenerates(self):
        core = PowerCoreComponent(max_energy=20, energy_regen=6)
        core.drain_energy(10)

        assert core.regenerate() == 6
        assert core.energy == 16

    def test_destroyed_core_does_not_regenerate(self):
        core = PowerCoreComponent(max_energy=20)
        core.drain_energy(10)
        core.take_damage(core.health)

        assert core.regenerate() == 0

    def test_drive_speed_clamped(self):
        drive = DriveComponent(max_speed=6)

        drive.set_current_speed(10)
        assert drive.current_speed == 6
        drive.set_current_speed(-1)
        assert drive.current_speed == 0

    def test_weapon_damage_formula_uses_modified_bonus(self):
        weapon = WeaponComponent("Cannon", damage=DiceFormula(2, 6, 1))

        assert weapon.get_damage_formula() == DiceFormula(2, 6, 1)
        assert weapon.damage_string == "2d6+1 Physical"

    def test_components_share_vehicle_speed(self, vehicle):
        vehicle.get_drive_component().set_current_speed(3)

        assert vehicle.current_speed == 3
        assert vehicle.find_component("Turret").get_current_speed() == 3

    def test_destroyed_drive_stops_vehicle(self, vehicle):
        drive = vehicle.get_drive_component()
        drive.set_current_speed(3)
        drive.take_damage(drive.health)

        assert vehicle.current_speed == 0


class TestVehicleState:
    """Test operational and destroyed state."""

    def test_operational_requires_chassis_and_core(self, vehicle):
        assert vehicle.is_operational

        vehicle.power_core.take_damage(vehicle.power_core.health)

        assert not vehicle.is_operational
        assert vehicle.non_operational_reason() == "Power core destroyed - no power"
        assert not vehicle.is_destroyed

    def test_destroyed_chassis_destroys_vehicle(self, vehicle):
        vehicle.chassis.take_damage(vehicle.chassis.health)

        assert vehicle.is_destroyed
        assert vehicle.non_operational_reason() == "Chassis destroyed"

    def test_no_chassis(self):
        assert Vehicle("Empty").non_operational_reason() == "No chassis installed"


class TestSeats:
    """Test seat lookup and turn state."""

    def test_character_for_component(self, vehicle, pilot, gunner):
        assert vehicle.get_character_for_component(vehicle.get_drive_component()) is pilot
        assert vehicle.get_character_for_component(vehicle.find_component("Turret")) is gunner
        assert vehicle.get_character_for_component(vehicle.chassis) is None
        assert vehicle.get_character_for_component(None) is None

    def test_empty_seat_cannot_act(self, vehicle_factory):
        vehicle = vehicle_factory("Ghost Rig")

        seat = vehicle.seats[0]
        assert not seat.can_act()
        assert seat.cannot_act_reason() == "No character assigned"
        assert vehicle.get_active_seats() == []

    def test_seat_with_destroyed_components_cannot_act(self, vehicle):
        driver = vehicle.seats[0]
        drive = vehicle.get_drive_component()
        drive.take_damage(drive.health)

        assert driver.cannot_act_reason() == "All controlled components destroyed or disabled"

    def test_reset_seats(self, vehicle):
        for seat in vehicle.seats:
            seat.mark_as_acted()

        vehicle.reset_seats()

        assert not any(seat.has_acted_this_turn for seat in vehicle.seats)

    def test_assigned_characters_in_seat_order(self, vehicle, pilot, gunner):
        assert vehicle.get_assigned_characters() == [pilot, gunner]
        assert Character("Spare") not in vehicle.get_assigned_characters()

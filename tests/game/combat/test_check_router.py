"""
Unit tests for check and save routing.
"""

import pytest

from src.core.data.game_enums import (
    CharacterAttribute,
    CharacterSkill,
    ComponentType,
    VehicleCheckAttribute,
)
from src.game.characters.character import Character
from src.game.combat.check_router import CheckRouter, RoutingResult
from src.game.combat.check_specs import (
    CharacterCheckSpec,
    CharacterSaveSpec,
    VehicleCheckSpec,
    VehicleSaveSpec,
    spec_is_configured,
)


class TestVehicleRouting:
    """Vehicle checks and saves go to the owning component."""

    def test_stability_routes_to_drive(self, vehicle):
        routing = CheckRouter.route_skill_check(vehicle, VehicleCheckSpec(VehicleCheckAttribute.STABILITY))

        assert routing.can_attempt
        assert routing.resolved_entity is vehicle.get_drive_component()
        assert routing.resolved_character is None

    def test_mobility_save_routes_to_chassis(self, vehicle):
        routing = CheckRouter.route_save(vehicle, VehicleSaveSpec(VehicleCheckAttribute.MOBILITY))

        assert routing.resolved_entity is vehicle.chassis

    def test_destroyed_owner_fails(self, vehicle):
        drive = vehicle.get_drive_component()
        drive.take_damage(drive.health)

        routing = CheckRouter.route_skill_check(vehicle, VehicleCheckSpec(VehicleCheckAttribute.STABILITY))

        assert not routing.can_attempt
        assert routing.failure_reason == "Wheels is destroyed"
        assert not routing.is_configuration_error

    def test_missing_owner_fails(self, vehicle):
        vehicle.remove_component(vehicle.get_drive_component())

        routing = CheckRouter.route_save(vehicle, VehicleSaveSpec(VehicleCheckAttribute.STABILITY))

        assert routing.failure_reason == "No component available for Stability"


class TestCharacterCheckRouting:
    """Character checks go to a seat's occupant."""

    def test_required_component_uses_operator(self, vehicle, pilot):
        spec = CharacterCheckSpec(CharacterSkill.PILOTING, ComponentType.DRIVE)

        routing = CheckRouter.route_skill_check(vehicle, spec)

        assert routing.resolved_character is pilot
        assert routing.resolved_entity is vehicle.get_drive_component()

    def test_required_component_missing(self, vehicle):
        spec = CharacterCheckSpec(CharacterSkill.MECHANICS, ComponentType.SENSORS)

        routing = CheckRouter.route_skill_check(vehicle, spec)

        assert routing.failure_reason == "No Sensors component on vehicle"

    def test_required_component_not_operational(self, vehicle):
        drive = vehicle.get_drive_component()
        drive.set_disabled(True)

        routing = CheckRouter.route_skill_check(vehicle, CharacterCheckSpec(CharacterSkill.PILOTING, ComponentType.DRIVE))

        assert routing.failure_reason == "Wheels is not operational"

    def test_required_component_without_operator(self, vehicle_factory):
        vehicle = vehicle_factory("Ghost Rig")

        routing = CheckRouter.route_skill_check(vehicle, CharacterCheckSpec(CharacterSkill.PILOTING, ComponentType.DRIVE))

        assert routing.failure_reason == "Driver has no assigned character"

    def test_initiating_character_rolls(self, vehicle, gunner):
        routing = CheckRouter.route_skill_check(vehicle, CharacterCheckSpec(CharacterSkill.STUNTS), gunner)

        assert routing.resolved_character is gunner
        assert routing.resolved_entity is None

    def test_best_character_chosen(self, vehicle, pilot, gunner):
        """Perception: Rook has WIS 13 (+1) and proficiency (+2) against Vex's +0."""
        routing = CheckRouter.route_skill_check(vehicle, CharacterCheckSpec(CharacterSkill.PERCEPTION))

        assert routing.resolved_character is gunner

    def test_ties_go_to_first_seat(self, vehicle, pilot):
        """Nobody has Charisma: both +0, Driver's seat comes first."""
        routing = CheckRouter.route_skill_check(vehicle, CharacterCheckSpec(CharacterSkill.DECEPTION))

        assert routing.resolved_character is pilot

    def test_no_crew(self, vehicle_factory):
        routing = CheckRouter.route_skill_check(vehicle_factory(), CharacterCheckSpec(CharacterSkill.STUNTS))

        assert routing.failure_reason == "No character available for Stunts"


class TestCharacterSaveRouting:
    """Character saves prefer the crew at the attacked location."""

    def test_target_component_operator_saves(self, vehicle, gunner):
        turret = vehicle.find_component("Turret")

        routing = CheckRouter.route_save(vehicle, CharacterSaveSpec(CharacterAttribute.DEXTERITY), turret)

        assert routing.resolved_character is gunner
        assert routing.resolved_entity is turret

    def test_unoperated_target_falls_back_to_best_saver(self, vehicle, pilot):
        routing = CheckRouter.route_save(vehicle, CharacterSaveSpec(CharacterAttribute.DEXTERITY), vehicle.chassis)

        assert routing.resolved_character is pilot
        assert routing.resolved_entity is None

    def test_destroyed_target_falls_back_to_best_saver(self, vehicle, pilot):
        turret = vehicle.find_component("Turret")
        turret.take_damage(turret.health)

        routing = CheckRouter.route_save(vehicle, CharacterSaveSpec(CharacterAttribute.CONSTITUTION), turret)

        assert routing.resolved_character is pilot

    def test_required_component_for_save(self, vehicle, gunner):
        spec = CharacterSaveSpec(CharacterAttribute.WISDOM, ComponentType.WEAPON)

        routing = CheckRouter.route_save(vehicle, spec)

        assert routing.resolved_character is gunner

    def test_no_crew(self, vehicle_factory):
        routing = CheckRouter.route_save(vehicle_factory(), CharacterSaveSpec(CharacterAttribute.WISDOM))

        assert routing.failure_reason == "No character available for save"


class TestMisconfiguration:
    """Authoring mistakes are flagged as configuration errors."""

    @pytest.mark.parametrize("spec", [
        VehicleCheckSpec(None),
        CharacterCheckSpec(None),
        "piloting",
        None,
    ])
    def test_bad_check_spec(self, vehicle, spec):
        routing = CheckRouter.route_skill_check(vehicle, spec)

        assert not routing.can_attempt
        assert routing.is_configuration_error

    def test_save_spec_rejected_for_skill_check(self, vehicle):
        routing = CheckRouter.route_skill_check(vehicle, VehicleSaveSpec(VehicleCheckAttribute.MOBILITY))

        assert routing.is_configuration_error

    def test_bad_save_spec(self, vehicle):
        routing = CheckRouter.route_save(vehicle, CharacterSaveSpec(None))

        assert routing.is_configuration_error
        assert not spec_is_configured(CharacterSaveSpec(None))

    def test_no_vehicle(self):
        routing = CheckRouter.route(None, VehicleSaveSpec(VehicleCheckAttribute.MOBILITY))

        assert routing.failure_reason == "No vehicle"
        assert not routing.is_configuration_error

    def test_route_dispatches_on_spec_kind(self, vehicle, pilot):
        save = CheckRouter.route(vehicle, VehicleSaveSpec(VehicleCheckAttribute.MOBILITY))
        check = CheckRouter.route(vehicle, CharacterCheckSpec(CharacterSkill.PILOTING), pilot)

        assert save.resolved_entity is vehicle.chassis
        assert check.resolved_character is pilot

    def test_routing_result_constructors(self):
        assert RoutingResult.success().can_attempt
        assert RoutingResult.failure("x").failure_reason == "x"
        assert RoutingResult.misconfigured("y").is_configuration_error

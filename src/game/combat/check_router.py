"""
Check routing: who actually rolls a check or save.

Routing turns a spec plus the current vehicle state into a concrete component
and/or character. It never mutates anything and never rolls, so the same
inputs always give the same answer. Failing to find a participant is a normal
outcome (can_attempt=False), which callers convert into an auto-fail.
"""

from dataclasses import dataclass
from typing import Any, Callable, Optional

from ...core.data.game_enums import ComponentType, COMPONENT_TYPE_NAMES
from ..characters.character import Character
from ..vehicles.vehicle import Vehicle
from ..vehicles.vehicle_components import VehicleComponent
from .check_specs import (
    CharacterCheckSpec,
    CharacterSaveSpec,
    VehicleCheckSpec,
    VehicleSaveSpec,
    describe_spec,
    spec_is_configured,
)


@dataclass(frozen=True)
class RoutingResult:
    """Resolution-time answer to "who rolls this?"."""
    can_attempt: bool
    resolved_entity: Optional[VehicleComponent] = None
    resolved_character: Optional[Character] = None
    failure_reason: Optional[str] = None
    is_configuration_error: bool = False

    @classmethod
    def success(cls, entity: Optional[VehicleComponent] = None,
                character: Optional[Character] = None) -> "RoutingResult":
        return cls(can_attempt=True, resolved_entity=entity, resolved_character=character)

    @classmethod
    def failure(cls, reason: str) -> "RoutingResult":
        return cls(can_attempt=False, failure_reason=reason)

    @classmethod
    def misconfigured(cls, reason: str) -> "RoutingResult":
        """Authoring error: treated as a failure, flagged for diagnostics."""
        return cls(can_attempt=False, failure_reason=reason, is_configuration_error=True)


class CheckRouter:
    """Pure routing functions for skill checks and saving throws."""

    @staticmethod
    def route(vehicle: Optional[Vehicle], spec: Any,
              initiating_character: Optional[Character] = None,
              target_component: Optional[VehicleComponent] = None) -> RoutingResult:
        """Route any check or save spec."""
        if isinstance(spec, (VehicleSaveSpec, CharacterSaveSpec)):
            return CheckRouter.route_save(vehicle, spec, target_component)
        return CheckRouter.route_skill_check(vehicle, spec, initiating_character)

    @staticmethod
    def route_skill_check(vehicle: Optional[Vehicle], spec: Any,
                          initiating_character: Optional[Character] = None) -> RoutingResult:
        """Resolve who makes a skill check.

        Args:
            vehicle: Vehicle making the check
            spec: VehicleCheckSpec or CharacterCheckSpec
            initiating_character: Character who started the action, if any

        Returns:
            RoutingResult naming the component and/or character that rolls
        """
        if not isinstance(spec, (VehicleCheckSpec, CharacterCheckSpec)) or not spec_is_configured(spec):
            return RoutingResult.misconfigured(f"Skill check spec is not configured: {spec!r}")
        if vehicle is None:
            return RoutingResult.failure("No vehicle")

        if isinstance(spec, VehicleCheckSpec):
            return CheckRouter._route_vehicle_attribute(vehicle, spec)
        return CheckRouter._route_character_check(vehicle, spec, initiating_character)

    @staticmethod
    def route_save(vehicle: Optional[Vehicle], spec: Any,
                   target_component: Optional[VehicleComponent] = None) -> RoutingResult:
        """Resolve who makes a saving throw.

        Args:
            vehicle: Vehicle making the save
            spec: VehicleSaveSpec or CharacterSaveSpec
            target_component: Component the triggering effect was aimed at, if any
        """
        if not isinstance(spec, (VehicleSaveSpec, CharacterSaveSpec)) or not spec_is_configured(spec):
            return RoutingResult.misconfigured(f"Save spec is not configured: {spec!r}")
        if vehicle is None:
            return RoutingResult.failure("No vehicle")

        if isinstance(spec, VehicleSaveSpec):
            return CheckRouter._route_vehicle_attribute(vehicle, spec)
        return CheckRouter._route_character_save(vehicle, spec, target_component)

    # ============== Vehicle domain ==============

    @staticmethod
    def _route_vehicle_attribute(vehicle: Vehicle, spec: Any) -> RoutingResult:
        component = vehicle.resolve_check_component(spec.attribute)
        if component is None:
            return RoutingResult.failure(f"No component available for {describe_spec(spec)}")
        if component.is_destroyed:
            return RoutingResult.failure(f"{component.name} is destroyed")
        return RoutingResult.success(component)

    # ============== Character domain ==============

    @staticmethod
    def _route_character_check(vehicle: Vehicle, spec: CharacterCheckSpec,
                               initiating_character: Optional[Character]) -> RoutingResult:
        if spec.requires_component:
            return CheckRouter._route_component_operator(vehicle, spec.required_component_type)

        if initiating_character is not None:
            return RoutingResult.success(character=initiating_character)

        best = CheckRouter._best_character(vehicle, lambda c: c.get_skill_check_modifier(spec.skill))
        if best is None:
            return RoutingResult.failure(f"No character available for {spec.display_name}")
        return RoutingResult.success(character=best)

    @staticmethod
    def _route_character_save(vehicle: Vehicle, spec: CharacterSaveSpec,
                              target_component: Optional[VehicleComponent]) -> RoutingResult:
        if spec.requires_component:
            return CheckRouter._route_component_operator(vehicle, spec.required_component_type)

        # The crew member at the attacked location saves first
        if target_component is not None and target_component.is_operational:
            character = vehicle.get_character_for_component(target_component)
            if character is not None:
                return RoutingResult.success(target_component, character)

        # Otherwise the best saver aboard, first seat on ties
        best = CheckRouter._best_character(vehicle, lambda c: c.get_save_modifier(spec.attribute))
        if best is None:
            return RoutingResult.failure("No character available for save")
        return RoutingResult.success(character=best)

    @staticmethod
    def _route_component_operator(vehicle: Vehicle, component_type: ComponentType) -> RoutingResult:
        """Operator of the first operational component of a type."""
        type_name = COMPONENT_TYPE_NAMES[component_type]
        component = vehicle.get_operational_component(component_type)
        if component is None:
            installed = vehicle.get_components(component_type)
            if installed:
                return RoutingResult.failure(f"{installed[0].name} is not operational")
            return RoutingResult.failure(f"No {type_name} component on vehicle")

        seat = vehicle.get_seat_for_component(component)
        if seat is None:
            return RoutingResult.failure(f"No seat controls {component.name}")
        if seat.assigned_character is None:
            return RoutingResult.failure(f"{seat.name} has no assigned character")
        return RoutingResult.success(component, seat.assigned_character)

    @staticmethod
    def _best_character(vehicle: Vehicle, score: Callable[[Character], int]) -> Optional[Character]:
        """Highest scoring assigned character; seat order breaks ties."""
        best: Optional[Character] = None
        best_score = 0
        for character in vehicle.get_assigned_characters():
            value = score(character)
            if best is None or value > best_score:
                best = character
                best_score = value
        return best


"""Saving throws: route, gather bonuses, roll, emit."""

from dataclasses import dataclass
from typing import Any, Optional, TYPE_CHECKING

from ...core.data.data_structures import RollBonus
from ...core.data.game_enums import CheckKind
from ...core.events.events import SavingThrowEvent
from .check_router import CheckRouter
from .check_specs import CharacterSaveSpec, SaveSpec, VehicleSaveSpec, describe_spec
from .roll_bonuses import vehicle_check_bonuses
from .roll_engine import RollEngine, RollOutcome

if TYPE_CHECKING:
    from ...core.events.combat_event_bus import CombatEventBus
    from ..characters.character import Character
    from ..entities.combatant import Combatant
    from ..vehicles.vehicle import Vehicle
    from ..vehicles.vehicle_components import VehicleComponent


@dataclass(frozen=True)
class SaveResult:
    """A saving throw outcome with who rolled it."""
    roll: RollOutcome
    spec: SaveSpec
    character: Optional["Character"] = None
    component: Optional["Combatant"] = None
    failure_reason: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.roll.success

    @property
    def is_auto_fail(self) -> bool:
        return self.roll.is_auto_fail


class SaveCalculator:
    """Bonus gathering and rolling for saving throws."""

    def __init__(self, roll_engine: RollEngine):
        self.roll_engine = roll_engine

    @staticmethod
    def gather_bonuses(spec: SaveSpec, entity: Optional["Combatant"] = None,
                       character: Optional["Character"] = None) -> list[RollBonus]:
        """Vehicle saves use the saving component; character saves add attribute and half level."""
        if isinstance(spec, VehicleSaveSpec) and entity is not None:
            return vehicle_check_bonuses(entity, spec.attribute)
        if isinstance(spec, CharacterSaveSpec) and character is not None:
            return character.get_save_bonuses(spec.attribute)
        return []

    def compute(self, spec: SaveSpec, dc: int, entity: Optional["Combatant"] = None,
                character: Optional["Character"] = None) -> SaveResult:
        bonuses = self.gather_bonuses(spec, entity, character)
        roll = self.roll_engine.roll(bonuses, dc, CheckKind.SAVE)
        return SaveResult(roll=roll, spec=spec, character=character, component=entity)

    def auto_fail(self, spec: SaveSpec, dc: int, reason: Optional[str] = None) -> SaveResult:
        return SaveResult(roll=RollEngine.auto_fail(dc, CheckKind.SAVE), spec=spec, failure_reason=reason)


class SavePerformer:
    """Full saving throw pipeline with event emission."""

    def __init__(self, calculator: SaveCalculator, event_bus: "CombatEventBus"):
        self.calculator = calculator
        self.event_bus = event_bus

    def execute(self, vehicle: "Vehicle", spec: SaveSpec, dc: int, causal_source: Optional[Any] = None,
                target_component: Optional["VehicleComponent"] = None) -> SaveResult:
        """Route, roll (or auto-fail) and emit a saving throw for a vehicle.

        Args:
            vehicle: Vehicle making the save
            spec: What is being saved against
            dc: Difficulty class
            causal_source: Skill, event card or hazard that forced the save
            target_component: Component the effect was aimed at, if any
        """
        routing = CheckRouter.route_save(vehicle, spec, target_component)
        if routing.is_configuration_error:
            self.event_bus.emit_debug(
                f"Misconfigured save: {routing.failure_reason}",
                source="SavePerformer",
                context={"spec": describe_spec(spec)},
            )

        if routing.can_attempt:
            result = self.calculator.compute(spec, dc, routing.resolved_entity, routing.resolved_character)
        else:
            result = self.calculator.auto_fail(spec, dc, routing.failure_reason)

        target = routing.resolved_entity or (vehicle.chassis if vehicle is not None else None)
        self._emit(result, target, causal_source, target_component)
        return result

    def execute_for_entity(self, entity: "Combatant", spec: SaveSpec, dc: int,
                           causal_source: Optional[Any] = None,
                           character: Optional["Character"] = None) -> SaveResult:
        """Saving throw for a standalone entity; no routing."""
        result = self.calculator.compute(spec, dc, entity, character)
        self._emit(result, entity, causal_source, None)
        return result

    def _emit(self, result: SaveResult, target: Optional[Any], causal_source: Optional[Any],
              target_component: Optional["VehicleComponent"]) -> None:
        self.event_bus.emit(
            SavingThrowEvent(
                turn=self.event_bus.current_turn,
                result=result,
                target=target,
                causal_source=causal_source,
                character=result.character,
                target_component_name=target_component.name if target_component is not None else None,
            ),
            source="SavePerformer",
        )

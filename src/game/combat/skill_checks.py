"""Skill checks: route, gather bonuses, roll, emit.

SkillCheckCalculator is pure (bonuses + roll). SkillCheckPerformer runs the
full pipeline for a vehicle and reports the result on the event bus, so every
check produces exactly one SkillCheckEvent, auto-fails included.
"""

from dataclasses import dataclass
from typing import Any, Optional, TYPE_CHECKING

from ...core.data.data_structures import RollBonus
from ...core.data.game_enums import CheckKind
from ...core.events.events import SkillCheckEvent
from .check_router import CheckRouter, RoutingResult
from .check_specs import CharacterCheckSpec, CheckSpec, VehicleCheckSpec, describe_spec
from .roll_bonuses import vehicle_check_bonuses
from .roll_engine import RollEngine, RollOutcome

if TYPE_CHECKING:
    from ...core.events.combat_event_bus import CombatEventBus
    from ..characters.character import Character
    from ..entities.combatant import Combatant
    from ..vehicles.vehicle import Vehicle


@dataclass(frozen=True)
class SkillCheckResult:
    """A skill check outcome with who rolled it."""
    roll: RollOutcome
    spec: CheckSpec
    character: Optional["Character"] = None
    component: Optional["Combatant"] = None
    failure_reason: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.roll.success

    @property
    def is_auto_fail(self) -> bool:
        return self.roll.is_auto_fail

    @property
    def total(self) -> int:
        return self.roll.total


class SkillCheckCalculator:
    """Bonus gathering and rolling for skill checks."""

    def __init__(self, roll_engine: RollEngine):
        self.roll_engine = roll_engine

    @staticmethod
    def gather_bonuses(spec: CheckSpec, entity: Optional["Combatant"] = None,
                       character: Optional["Character"] = None) -> list[RollBonus]:
        """Vehicle checks use the rolling component; character checks use the character sheet."""
        if isinstance(spec, VehicleCheckSpec) and entity is not None:
            return vehicle_check_bonuses(entity, spec.attribute)
        if isinstance(spec, CharacterCheckSpec) and character is not None:
            return character.get_skill_check_bonuses(spec.skill)
        return []

    def compute(self, spec: CheckSpec, dc: int, entity: Optional["Combatant"] = None,
                character: Optional["Character"] = None) -> SkillCheckResult:
        bonuses = self.gather_bonuses(spec, entity, character)
        roll = self.roll_engine.roll(bonuses, dc, CheckKind.SKILL_CHECK)
        return SkillCheckResult(roll=roll, spec=spec, character=character, component=entity)

    def auto_fail(self, spec: CheckSpec, dc: int, reason: Optional[str] = None) -> SkillCheckResult:
        return SkillCheckResult(
            roll=RollEngine.auto_fail(dc, CheckKind.SKILL_CHECK),
            spec=spec,
            failure_reason=reason,
        )


class SkillCheckPerformer:
    """Full skill check pipeline with event emission."""

    def __init__(self, calculator: SkillCheckCalculator, event_bus: "CombatEventBus"):
        self.calculator = calculator
        self.event_bus = event_bus

    def execute(self, vehicle: "Vehicle", spec: CheckSpec, dc: int, causal_source: Optional[Any] = None,
                initiating_character: Optional["Character"] = None) -> SkillCheckResult:
        """Route, roll (or auto-fail) and emit a skill check for a vehicle.

        Args:
            vehicle: Vehicle making the check
            spec: What is being tested
            dc: Difficulty class
            causal_source: Skill, event card or hazard that called for the check
            initiating_character: Character who started the action, if any

        Returns:
            The check result; never None
        """
        routing = CheckRouter.route_skill_check(vehicle, spec, initiating_character)
        self._report_routing(routing, spec)

        if routing.can_attempt:
            result = self.calculator.compute(spec, dc, routing.resolved_entity, routing.resolved_character)
        else:
            result = self.calculator.auto_fail(spec, dc, routing.failure_reason)

        actor = routing.resolved_entity or (vehicle.chassis if vehicle is not None else None)
        self._emit(result, actor, causal_source)
        return result

    def execute_for_entity(self, entity: "Combatant", spec: CheckSpec, dc: int,
                           causal_source: Optional[Any] = None,
                           character: Optional["Character"] = None) -> SkillCheckResult:
        """Skill check for a standalone entity; no routing."""
        result = self.calculator.compute(spec, dc, entity, character)
        self._emit(result, entity, causal_source)
        return result

    def _report_routing(self, routing: RoutingResult, spec: Any) -> None:
        if routing.is_configuration_error:
            self.event_bus.emit_debug(
                f"Misconfigured skill check: {routing.failure_reason}",
                source="SkillCheckPerformer",
                context={"spec": describe_spec(spec)},
            )

    def _emit(self, result: SkillCheckResult, actor: Optional[Any], causal_source: Optional[Any]) -> None:
        self.event_bus.emit(
            SkillCheckEvent(
                turn=self.event_bus.current_turn,
                result=result,
                actor=actor,
                causal_source=causal_source,
                character=result.character,
            ),
            source="SkillCheckPerformer",
        )

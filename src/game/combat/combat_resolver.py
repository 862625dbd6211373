"""
Combat resolution facade.

CombatResolver is what skills, event cards and hazards call into. It owns one
instance of every calculator and performer, all sharing the same dice and
event bus, and exposes the rules core as a handful of operations:

    perform_attack / perform_save / perform_skill_check
    compute_damage / apply_damage
    apply_status_effect / tick_status_effects / remove_status_effect

Every operation returns its result and reports it on the event bus.
"""

from typing import Any, Iterable, Optional, TYPE_CHECKING

from ...core.data.game_enums import DamageSource, ResistanceLevel
from ...core.dice import DiceRoller
from ...core.events.combat_event_bus import CombatEventBus
from ..config.rules_config import RulesConfig
from .attacks import AttackCalculator, AttackPerformer, AttackResult
from .check_specs import AttackSpec, CheckSpec, SaveSpec
from .damage_applicator import DamageApplicator
from .damage_engine import DamageEngine, DamageFormula, DamageResult
from .roll_engine import RollEngine
from .saves import SaveCalculator, SavePerformer, SaveResult
from .skill_checks import SkillCheckCalculator, SkillCheckPerformer, SkillCheckResult
from .special_rules import ComponentFallbackRule
from ..status_effects.runtime import AppliedStatusEffect, StatusEffectRuntime

if TYPE_CHECKING:
    from ..characters.character import Character
    from ..entities.combatant import Combatant
    from ..status_effects.definitions import StatusEffectDefinition
    from ..vehicles.vehicle import Vehicle
    from ..vehicles.vehicle_components import VehicleComponent


class CombatResolver:
    """Entry point to the rules core."""

    def __init__(
        self,
        event_bus: Optional[CombatEventBus] = None,
        dice: Optional[DiceRoller] = None,
        config: Optional[RulesConfig] = None,
    ):
        """Wire the rules core.

        Args:
            event_bus: Bus every result is reported on (created from the
                config if omitted)
            dice: Dice source shared by rolls and damage (seeded from the
                config if omitted)
            config: Rule switches; defaults when omitted
        """
        self.config = config or RulesConfig()
        self.event_bus = event_bus or CombatEventBus(
            enable_debug_logging=self.config.enable_debug_logging,
            strict_invariants=self.config.strict_invariants,
        )
        self.dice = dice or DiceRoller(self.config.dice_seed)

        self.roll_engine = RollEngine(self.dice, self.config.natural_overrides)
        self.damage_engine = DamageEngine(self.dice, self.event_bus)
        self.damage_applicator = DamageApplicator(self.event_bus)

        self.attack_calculator = AttackCalculator(self.roll_engine, self.event_bus)
        self.fallback_rule = ComponentFallbackRule(
            penalty=self.config.component_fallback_penalty,
            enabled=self.config.component_fallback_enabled,
        )
        self.attack_performer = AttackPerformer(self.attack_calculator, self.event_bus, [self.fallback_rule])

        self.save_calculator = SaveCalculator(self.roll_engine)
        self.save_performer = SavePerformer(self.save_calculator, self.event_bus)
        self.skill_check_calculator = SkillCheckCalculator(self.roll_engine)
        self.skill_check_performer = SkillCheckPerformer(self.skill_check_calculator, self.event_bus)

        self.status_effects = StatusEffectRuntime(self.event_bus, self.damage_engine, self.damage_applicator)

    # ============== Rolls ==============

    def perform_attack(self, spec: AttackSpec) -> AttackResult:
        return self.attack_performer.execute(spec)

    def perform_save(
        self,
        vehicle: "Vehicle",
        spec: SaveSpec,
        dc: int,
        causal_source: Optional[Any] = None,
        target_component: Optional["VehicleComponent"] = None,
    ) -> SaveResult:
        return self.save_performer.execute(vehicle, spec, dc, causal_source, target_component)

    def perform_save_for_entity(
        self,
        entity: "Combatant",
        spec: SaveSpec,
        dc: int,
        causal_source: Optional[Any] = None,
        character: Optional["Character"] = None,
    ) -> SaveResult:
        return self.save_performer.execute_for_entity(entity, spec, dc, causal_source, character)

    def perform_skill_check(
        self,
        vehicle: "Vehicle",
        spec: CheckSpec,
        dc: int,
        causal_source: Optional[Any] = None,
        initiating_character: Optional["Character"] = None,
    ) -> SkillCheckResult:
        return self.skill_check_performer.execute(vehicle, spec, dc, causal_source, initiating_character)

    def perform_skill_check_for_entity(
        self,
        entity: "Combatant",
        spec: CheckSpec,
        dc: int,
        causal_source: Optional[Any] = None,
        character: Optional["Character"] = None,
    ) -> SkillCheckResult:
        return self.skill_check_performer.execute_for_entity(entity, spec, dc, causal_source, character)

    # ============== Damage ==============

    def compute_damage(
        self,
        formula: DamageFormula,
        resistance: ResistanceLevel = ResistanceLevel.NORMAL,
        is_critical_hit: bool = False,
    ) -> DamageResult:
        return self.damage_engine.compute(formula, resistance, is_critical_hit)

    def apply_damage(
        self,
        result: DamageResult,
        target: "Combatant",
        source: Optional["Combatant"] = None,
        causal_source: Optional[Any] = None,
        source_type: DamageSource = DamageSource.ABILITY,
    ) -> int:
        return self.damage_applicator.apply(result, target, source, causal_source, source_type)

    def deal_damage(
        self,
        formulas: Iterable[DamageFormula],
        target: "Combatant",
        source: Optional["Combatant"] = None,
        causal_source: Optional[Any] = None,
        is_critical_hit: bool = False,
        source_type: DamageSource = DamageSource.ABILITY,
    ) -> list[DamageResult]:
        """Compute and apply composite damage against a target's resistances.

        Returns:
            One result per formula, in order
        """
        results = self.damage_engine.compute_composite(formulas, target, is_critical_hit)
        self.damage_applicator.apply_all(results, target, source, causal_source, source_type)
        return results

    # ============== Status effects ==============

    def apply_status_effect(
        self,
        definition: "StatusEffectDefinition",
        target: "Combatant",
        applier: Optional[Any] = None,
    ) -> Optional[AppliedStatusEffect]:
        return self.status_effects.apply(definition, target, applier)

    def tick_status_effects(self, target: "Combatant") -> list[AppliedStatusEffect]:
        return self.status_effects.tick(target)

    def remove_status_effect(self, instance: AppliedStatusEffect) -> bool:
        return self.status_effects.remove(instance)

    def remove_status_effects_from_source(self, target: "Combatant", applier: Any) -> int:
        return self.status_effects.remove_from_source(target, applier)

    # ============== Turn processing ==============

    def tick_vehicle(self, vehicle: "Vehicle") -> list[AppliedStatusEffect]:
        """Tick status effects on every component of a vehicle."""
        expired: list[AppliedStatusEffect] = []
        for component in vehicle.all_components:
            expired.extend(self.status_effects.tick(component))
        return expired

    def start_turn(self, vehicles: Iterable["Vehicle"] = ()) -> int:
        """Advance the turn counter and let every seat act again.

        Returns:
            The new turn number
        """
        turn = self.event_bus.advance_turn()
        for vehicle in vehicles:
            vehicle.reset_seats()
        return turn

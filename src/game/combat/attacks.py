"""
Attack rolls.

AttackCalculator gathers attack bonuses and rolls against the target's armor
class. AttackPerformer is the entry point callers use: it runs the primary
roll, reports it, then gives the special rules a chance to follow up.

Attack bonus sources, in order:
1. the attacker's own attack bonus (base value plus equipment modifiers)
2. the operating character's base attack bonus
3. status effect modifiers on the attacker's attack bonus, one term each
4. any extra penalty (component targeting)
"""

from dataclasses import dataclass
from typing import Optional, Sequence, TYPE_CHECKING

from ...core.data.data_structures import RollBonus
from ...core.data.game_enums import Attribute, CheckKind, ModifierCategory, ModifierType
from ...core.events.events import AttackRollEvent
from ...core.stats.stat_calculator import StatCalculator
from ..vehicles.vehicle_components import VehicleComponent
from .check_specs import AttackSpec
from .roll_bonuses import modifier_bonuses
from .roll_engine import RollEngine, RollOutcome
from .special_rules import AttackPhase, AttackSpecialRule, ComponentFallbackRule

if TYPE_CHECKING:
    from ...core.events.combat_event_bus import CombatEventBus
    from ..characters.character import Character
    from ..entities.combatant import Combatant

TARGETING_PENALTY_LABEL = "Targeting Penalty"


@dataclass(frozen=True)
class AttackResult:
    """One attack roll against one target.

    Attributes:
        roll: The d20 outcome against the target's armor class
        target: Who was rolled against
        attacker: Weapon component or entity making the attack
        character: Character operating the attacker, if any
        was_fallback: True for a special-rule retry
        primary: The missed primary attempt, set on fallback results
    """
    roll: RollOutcome
    target: "Combatant"
    attacker: Optional["Combatant"] = None
    character: Optional["Character"] = None
    was_fallback: bool = False
    primary: Optional["AttackResult"] = None

    @property
    def is_hit(self) -> bool:
        return self.roll.success

    @property
    def is_critical_hit(self) -> bool:
        return self.roll.is_critical_hit

    @property
    def hit_target(self) -> Optional["Combatant"]:
        """The entity that was hit, None on a miss."""
        return self.target if self.roll.success else None


class AttackCalculator:
    """Bonus gathering and rolling for attacks."""

    def __init__(self, roll_engine: RollEngine, event_bus: Optional["CombatEventBus"] = None):
        """Initialize the calculator.

        Args:
            roll_engine: Rolls the d20
            event_bus: Where authoring diagnostics go; silent when omitted
        """
        self.roll_engine = roll_engine
        self.event_bus = event_bus

    @staticmethod
    def resolve_character(attacker: Optional["Combatant"], character: Optional["Character"] = None) -> Optional["Character"]:
        """Explicit character, otherwise whoever sits at the attacking component."""
        if character is not None:
            return character
        if isinstance(attacker, VehicleComponent) and attacker.vehicle is not None:
            return attacker.vehicle.get_character_for_component(attacker)
        return None

    @staticmethod
    def gather_attack_bonuses(
        attacker: Optional["Combatant"],
        character: Optional["Character"] = None,
        additional_penalty: int = 0,
    ) -> list[RollBonus]:
        """Collect every attack bonus term; zero terms are omitted."""
        bonuses: list[RollBonus] = []

        if attacker is not None:
            equipment = [
                modifier
                for modifier in StatCalculator.gather_entity_modifiers(attacker, Attribute.ATTACK_BONUS)
                if modifier.category != ModifierCategory.STATUS_EFFECT
            ]
            own_bonus = StatCalculator.calculate_total(attacker.get_base_value(Attribute.ATTACK_BONUS), equipment)
            if own_bonus != 0:
                bonuses.append(RollBonus(attacker.name, own_bonus))

        if character is not None and character.base_attack_bonus != 0:
            bonuses.append(RollBonus("Base Attack Bonus", character.base_attack_bonus))

        if attacker is not None:
            bonuses.extend(modifier_bonuses(attacker, Attribute.ATTACK_BONUS, [ModifierCategory.STATUS_EFFECT]))

        if additional_penalty != 0:
            bonuses.append(RollBonus(TARGETING_PENALTY_LABEL, -additional_penalty))

        return bonuses

    def compute(
        self,
        target: "Combatant",
        attacker: Optional["Combatant"] = None,
        character: Optional["Character"] = None,
        additional_penalty: int = 0,
        was_fallback: bool = False,
    ) -> AttackResult:
        """Roll one attack against a target's armor class.

        Args:
            target: Entity being attacked
            attacker: Weapon component or entity attacking
            character: Operating character (resolved from the attacker's seat if omitted)
            additional_penalty: Positive number subtracted from the roll
            was_fallback: Tag the result as a special-rule retry
        """
        character = self.resolve_character(attacker, character)
        bonuses = self.gather_attack_bonuses(attacker, character, additional_penalty)
        if attacker is not None:
            self._report_ignored_multipliers(attacker)
        defense = StatCalculator.gather_defense_value(target)
        roll = self.roll_engine.roll(bonuses, defense, CheckKind.ATTACK)
        return AttackResult(
            roll=roll,
            target=target,
            attacker=attacker,
            character=character,
            was_fallback=was_fallback,
        )

    def _report_ignored_multipliers(self, attacker: "Combatant") -> None:
        """Report status effect multipliers on the attack bonus, which have no single-term form."""
        if self.event_bus is None:
            return
        for modifier in StatCalculator.gather_entity_modifiers(
            attacker, Attribute.ATTACK_BONUS, [ModifierCategory.STATUS_EFFECT]
        ):
            if modifier.modifier_type == ModifierType.MULTIPLIER:
                self.event_bus.emit_debug(
                    f"Ignoring multiplier {modifier.value} on {attacker.name}'s attack bonus from {modifier.display_name}",
                    source="AttackCalculator",
                )


class AttackPerformer:
    """Runs an attack through primary attempt, special rules and event emission."""

    def __init__(
        self,
        calculator: AttackCalculator,
        event_bus: "CombatEventBus",
        special_rules: Optional[Sequence[AttackSpecialRule]] = None,
    ):
        self.calculator = calculator
        self.event_bus = event_bus
        self.special_rules: list[AttackSpecialRule] = (
            list(special_rules) if special_rules is not None else [ComponentFallbackRule()]
        )

    def get_rule(self, name: str) -> Optional[AttackSpecialRule]:
        for rule in self.special_rules:
            if rule.name == name:
                return rule
        return None

    def execute(self, spec: AttackSpec) -> AttackResult:
        """Resolve an attack.

        The primary roll is always reported first. On a miss, the first
        enabled special rule that applies makes one follow-up roll, reported
        as a separate fallback event.

        Returns:
            The fallback result when a rule fired, otherwise the primary result
        """
        phase = AttackPhase.PRIMARY_ATTEMPT
        result: Optional[AttackResult] = None

        while phase != AttackPhase.RESOLVED:
            if phase == AttackPhase.PRIMARY_ATTEMPT:
                result = self.calculator.compute(spec.target, spec.attacker, spec.character)
                self._emit(spec, result)
                phase = AttackPhase.RESOLVED if result.is_hit else AttackPhase.FALLBACK_ATTEMPT

            elif phase == AttackPhase.FALLBACK_ATTEMPT:
                fallback = self._try_special_rules(spec, result)
                if fallback is not None:
                    result = fallback
                    self._emit(spec, result)
                phase = AttackPhase.RESOLVED

        return result

    def _try_special_rules(self, spec: AttackSpec, primary: AttackResult) -> Optional[AttackResult]:
        for rule in self.special_rules:
            if not rule.enabled:
                continue
            follow_up = rule.try_apply(spec, primary, self.calculator)
            if follow_up is not None:
                return AttackResult(
                    roll=follow_up.roll,
                    target=follow_up.target,
                    attacker=follow_up.attacker,
                    character=follow_up.character,
                    was_fallback=True,
                    primary=primary,
                )
        return None

    def _emit(self, spec: AttackSpec, result: AttackResult) -> None:
        self.event_bus.emit(
            AttackRollEvent(
                turn=self.event_bus.current_turn,
                result=result,
                attacker=result.attacker,
                target=result.target,
                causal_source=spec.causal_source,
                character=result.character,
                target_component_name=spec.target.name if spec.target is not None else None,
                is_fallback=result.was_fallback,
            ),
            source="AttackPerformer",
        )

"""
Status effect runtime: applying, ticking and removing effects on targets.

Lifecycle of one application:
    Applying -> Active -> (Ticking)* -> Removing -> Removed

AppliedStatusEffect owns the modifiers it attaches and detaches exactly those
(by identity) when it ends. StatusEffectRuntime decides when that happens:
stacking on apply, periodic effects and duration on tick, and removal on
expiry, dispel or source cleanup.
"""

from typing import Any, Optional, TYPE_CHECKING

from ...core.data.data_structures import AttributeModifier
from ...core.data.game_enums import DamageSource, ModifierCategory, PeriodicEffectType, ResourceType
from ...core.events.events import StatusEffectAppliedEvent, StatusEffectExpiredEvent
from ..entities.combatant import Combatant
from .definitions import PeriodicEffectDefinition, StatusEffectDefinition

if TYPE_CHECKING:
    from ...core.events.combat_event_bus import CombatEventBus
    from ..combat.damage_applicator import DamageApplicator
    from ..combat.damage_engine import DamageEngine


class AppliedStatusEffect:
    """A status effect active on one target."""

    def __init__(self, definition: StatusEffectDefinition, target: Combatant, applier: Optional[Any] = None):
        self.definition = definition
        self.target = target
        self.applier = applier
        self.turns_remaining = definition.base_duration
        self.created_modifiers: list[AttributeModifier] = []
        self.is_removed = False

    def __repr__(self) -> str:
        duration = "indefinite" if self.is_indefinite else f"{self.turns_remaining} turns"
        return f"AppliedStatusEffect({self.name!r} on {self.target.name!r}, {duration})"

    @property
    def name(self) -> str:
        return self.definition.name

    @property
    def is_indefinite(self) -> bool:
        return self.turns_remaining < 0

    @property
    def is_expired(self) -> bool:
        return self.turns_remaining == 0

    # ============== Lifecycle ==============

    def on_apply(self) -> None:
        """Create this application's modifiers and attach them to the target."""
        for modifier_def in self.definition.modifiers:
            modifier = AttributeModifier(
                attribute=modifier_def.attribute,
                modifier_type=modifier_def.modifier_type,
                value=modifier_def.value,
                source=self.definition,
                category=ModifierCategory.STATUS_EFFECT,
                label=self.definition.name,
            )
            self.created_modifiers.append(modifier)
            self.target.add_modifier(modifier)

    def on_tick(self, damage_engine: "DamageEngine", damage_applicator: "DamageApplicator") -> None:
        """Resolve every periodic effect once."""
        for periodic in self.definition.periodic_effects:
            self._apply_periodic(periodic, damage_engine, damage_applicator)

    def on_remove(self) -> None:
        """Detach every modifier this application created. Safe to call twice."""
        for modifier in self.created_modifiers:
            self.target.remove_modifier(modifier)
        self.created_modifiers.clear()
        self.is_removed = True

    def decrement_duration(self) -> None:
        if self.is_indefinite:
            return
        self.turns_remaining = max(0, self.turns_remaining - 1)

    def _apply_periodic(
        self,
        periodic: PeriodicEffectDefinition,
        damage_engine: "DamageEngine",
        damage_applicator: "DamageApplicator",
    ) -> None:
        source = self.applier if isinstance(self.applier, Combatant) else None

        if periodic.effect_type == PeriodicEffectType.DAMAGE:
            result = damage_engine.compute_dice(
                periodic.formula,
                periodic.damage_type,
                self.target.get_resistance(periodic.damage_type),
                label=self.definition.name,
            )
            damage_applicator.apply(result, self.target, source, self.definition, DamageSource.EFFECT)
            return

        amount = periodic.roll(damage_engine.dice)
        if periodic.effect_type == PeriodicEffectType.HEALING:
            damage_applicator.change_resource(self.target, ResourceType.HEALTH, amount, source, self.definition)
        elif periodic.effect_type == PeriodicEffectType.ENERGY_DRAIN:
            damage_applicator.change_resource(self.target, ResourceType.ENERGY, -amount, source, self.definition)
        elif periodic.effect_type == PeriodicEffectType.ENERGY_RESTORE:
            damage_applicator.change_resource(self.target, ResourceType.ENERGY, amount, source, self.definition)

    # ============== Behavioral queries ==============

    @property
    def prevents_actions(self) -> bool:
        return not self.is_removed and self.definition.behavior.prevents_actions

    @property
    def prevents_movement(self) -> bool:
        return not self.is_removed and self.definition.behavior.prevents_movement

    @property
    def prevents_skill_use(self) -> bool:
        return not self.is_removed and self.definition.behavior.prevents_skill_use

    @property
    def damage_amplification(self) -> float:
        return 1.0 if self.is_removed else self.definition.behavior.damage_amplification


class StatusEffectRuntime:
    """Applies, ticks and removes status effects, reporting on the event bus."""

    def __init__(
        self,
        event_bus: "CombatEventBus",
        damage_engine: "DamageEngine",
        damage_applicator: "DamageApplicator",
    ):
        self.event_bus = event_bus
        self.damage_engine = damage_engine
        self.damage_applicator = damage_applicator

    def apply(
        self,
        definition: StatusEffectDefinition,
        target: Combatant,
        applier: Optional[Any] = None,
    ) -> Optional[AppliedStatusEffect]:
        """Apply a status effect, honouring feature requirements and stacking.

        Stacking: when an effect with the same name is already active, the
        stronger one (total modifier magnitude, then remaining duration) is
        kept. Losing applications return the existing instance unchanged.

        Returns:
            The active instance, or None when the target's features block it
        """
        block_reason = definition.block_reason(target)
        if block_reason is not None:
            self.event_bus.emit(
                StatusEffectAppliedEvent(
                    turn=self.event_bus.current_turn,
                    applied=None,
                    definition=definition,
                    source=applier,
                    target=target,
                    block_reason=block_reason,
                ),
                source="StatusEffectRuntime",
            )
            return None

        existing = self.find_active(target, definition.name)
        was_replacement = False
        if existing is not None:
            if not self.should_replace(existing, definition):
                return existing
            self._detach(existing)
            was_replacement = True

        applied = AppliedStatusEffect(definition, target, applier)
        applied.on_apply()
        target.active_status_effects.append(applied)

        self.event_bus.emit(
            StatusEffectAppliedEvent(
                turn=self.event_bus.current_turn,
                applied=applied,
                definition=definition,
                source=applier,
                target=target,
                was_replacement=was_replacement,
            ),
            source="StatusEffectRuntime",
        )
        return applied

    def tick(self, target: Combatant) -> list[AppliedStatusEffect]:
        """Run one turn of status effects on a target.

        Already-expired instances are removed first, then every active effect
        resolves its periodic effects, then durations count down and effects
        reaching zero are removed.

        Returns:
            The instances that expired this tick
        """
        expired = [effect for effect in target.active_status_effects if effect.is_expired]
        for effect in expired:
            self._expire(effect)

        for effect in list(target.active_status_effects):
            if effect in target.active_status_effects:
                effect.on_tick(self.damage_engine, self.damage_applicator)

        for effect in list(target.active_status_effects):
            effect.decrement_duration()
            if effect.is_expired:
                self._expire(effect)
                expired.append(effect)

        return expired

    def remove(self, instance: AppliedStatusEffect) -> bool:
        """Dispel one active instance.

        Removing an instance that is not active on its target is an invariant
        violation: it raises when strict, otherwise it changes nothing.

        Returns:
            True if the instance was active and has been removed
        """
        if instance not in instance.target.active_status_effects:
            self.event_bus.invariant_violation(
                f"Status effect {instance.name} is not active on {instance.target.name}",
                source="StatusEffectRuntime",
                context={"already_removed": instance.is_removed},
            )
            return False
        self._detach(instance)
        return True

    def remove_from_source(self, target: Combatant, applier: Any) -> int:
        """Remove every effect a given applier put on a target (e.g. leaving a hazard).

        Returns:
            Number of effects removed
        """
        if applier is None:
            return 0
        matching = [effect for effect in target.active_status_effects if effect.applier is applier]
        for effect in matching:
            self._detach(effect)
        return len(matching)

    @staticmethod
    def find_active(target: Combatant, name: str) -> Optional[AppliedStatusEffect]:
        for effect in target.active_status_effects:
            if effect.name == name:
                return effect
        return None

    @staticmethod
    def should_replace(existing: AppliedStatusEffect, definition: StatusEffectDefinition) -> bool:
        """Higher magnitude wins, then longer duration; indefinite counts as longest."""
        existing_magnitude = existing.definition.total_magnitude
        new_magnitude = definition.total_magnitude
        if new_magnitude != existing_magnitude:
            return new_magnitude > existing_magnitude

        if existing.is_indefinite:
            return False
        if definition.is_indefinite:
            return True
        return definition.base_duration > existing.turns_remaining

    def _detach(self, effect: AppliedStatusEffect) -> None:
        effect.target.active_status_effects.remove(effect)
        effect.on_remove()

    def _expire(self, effect: AppliedStatusEffect) -> None:
        self.event_bus.emit(
            StatusEffectExpiredEvent(turn=self.event_bus.current_turn, expired=effect, target=effect.target),
            source="StatusEffectRuntime",
        )
        self._detach(effect)

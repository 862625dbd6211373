"""Applies computed damage to targets and reports it."""

from typing import Any, Optional, TYPE_CHECKING

from ...core.data.game_enums import DamageSource, ResourceType
from ...core.events.events import DamageEvent, ResourceChangedEvent

if TYPE_CHECKING:
    from ...core.events.combat_event_bus import CombatEventBus
    from ..entities.combatant import Combatant
    from .damage_engine import DamageResult


class DamageApplicator:
    """Single entry point for taking health off a target.

    Skills, status effects and hazards all funnel through apply(), so every
    instance of damage produces a DamageEvent, zero damage included.
    """

    def __init__(self, event_bus: "CombatEventBus"):
        self.event_bus = event_bus

    def apply(
        self,
        result: "DamageResult",
        target: "Combatant",
        source: Optional["Combatant"] = None,
        causal_source: Optional[Any] = None,
        source_type: DamageSource = DamageSource.ABILITY,
    ) -> int:
        """Apply a damage result to a target.

        The final damage is scaled by the target's damage amplification
        (product over its active status effects) and rounded once.

        Args:
            result: Computed damage
            target: Entity taking the damage
            source: Entity dealing the damage (None for environmental)
            causal_source: Skill, status effect or hazard responsible
            source_type: Category of the damage source

        Returns:
            Health actually removed
        """
        previous_health = target.health

        if target.is_destroyed:
            applied = 0
        else:
            amount = int(round(result.final_damage * target.get_damage_amplification()))
            applied = target.take_damage(max(amount, 0))

        self.event_bus.emit(
            DamageEvent(
                turn=self.event_bus.current_turn,
                result=result,
                source=source,
                target=target,
                causal_source=causal_source,
                source_type=source_type,
                applied_damage=applied,
            ),
            source="DamageApplicator",
        )

        if target.health != previous_health:
            self.event_bus.emit(
                ResourceChangedEvent(
                    turn=self.event_bus.current_turn,
                    target=target,
                    resource=ResourceType.HEALTH,
                    previous_value=previous_health,
                    new_value=target.health,
                    source=source,
                    causal_source=causal_source,
                ),
                source="DamageApplicator",
            )

        return applied

    def apply_all(
        self,
        results: list["DamageResult"],
        target: "Combatant",
        source: Optional["Combatant"] = None,
        causal_source: Optional[Any] = None,
        source_type: DamageSource = DamageSource.ABILITY,
    ) -> int:
        """Apply composite damage in order; returns total health removed."""
        return sum(self.apply(result, target, source, causal_source, source_type) for result in results)

    def change_resource(
        self,
        target: "Combatant",
        resource: ResourceType,
        amount: int,
        source: Optional["Combatant"] = None,
        causal_source: Optional[Any] = None,
    ) -> int:
        """Heal or drain/restore energy directly, bypassing resistance.

        Positive amounts restore, negative amounts drain. Health can only be
        restored here; damage goes through apply().

        Returns:
            Signed change actually made
        """
        if resource == ResourceType.HEALTH:
            previous = target.health
            if amount > 0:
                target.heal(amount)
            current = target.health
        else:
            previous = target.energy
            if amount >= 0:
                target.restore_energy(amount)
            else:
                target.drain_energy(-amount)
            current = target.energy

        if current != previous:
            self.event_bus.emit(
                ResourceChangedEvent(
                    turn=self.event_bus.current_turn,
                    target=target,
                    resource=resource,
                    previous_value=previous,
                    new_value=current,
                    source=source,
                    causal_source=causal_source,
                ),
                source="DamageApplicator",
            )
        return current - previous

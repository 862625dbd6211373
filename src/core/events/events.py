"""Combat events and logging events.

This module defines every event the rules core publishes. Subscribers (log,
UI, narrative) consume these instead of calling back into the calculators.

Event Design Principles:
- Events are immutable dataclasses with rich object payloads
- All events carry the turn they happened on
- Each event carries the full numeric breakdown, so consumers never need
  to re-derive an outcome; the event is the audit record
- Events use proper enums instead of magic strings
"""

from dataclasses import dataclass, field
from typing import Any, Optional, TYPE_CHECKING
from abc import ABC
from enum import Enum, auto

from ..data.game_enums import DamageSource, ResourceType

if TYPE_CHECKING:
    from .combat_event_bus import CombatAction
    from ...game.entities.combatant import Combatant
    from ...game.characters.character import Character
    from ...game.combat.attacks import AttackResult
    from ...game.combat.saves import SaveResult
    from ...game.combat.skill_checks import SkillCheckResult
    from ...game.combat.damage_engine import DamageResult
    from ...game.status_effects.definitions import StatusEffectDefinition
    from ...game.status_effects.runtime import AppliedStatusEffect


class EventType(Enum):
    """Types of events that subscribers can listen to."""
    # Turn events
    TURN_STARTED = auto()

    # Roll events
    ATTACK_ROLL = auto()
    SAVING_THROW = auto()
    SKILL_CHECK = auto()

    # Damage and resource events
    DAMAGE = auto()
    RESOURCE_CHANGED = auto()

    # Status effect events
    STATUS_EFFECT_APPLIED = auto()
    STATUS_EFFECT_EXPIRED = auto()

    # Action scoping
    COMBAT_ACTION_COMPLETED = auto()

    # Logging events
    LOG_MESSAGE = auto()
    DEBUG_MESSAGE = auto()


@dataclass(frozen=True)
class GameEvent(ABC):
    """Base class for all events."""
    turn: int
    event_type: EventType = field(init=False)


@dataclass(frozen=True)
class TurnStarted(GameEvent):
    """Event emitted when the bus advances to a new turn."""

    def __post_init__(self):
        # Set event_type since dataclass frozen=True prevents normal assignment
        object.__setattr__(self, 'event_type', EventType.TURN_STARTED)


# Roll Events
@dataclass(frozen=True)
class AttackRollEvent(GameEvent):
    """Event emitted for every attack roll, hit or miss."""
    result: "AttackResult"
    attacker: Optional["Combatant"]
    target: "Combatant"
    causal_source: Optional[Any] = None
    character: Optional["Character"] = None
    target_component_name: Optional[str] = None
    is_fallback: bool = False  # Chassis retry after a missed component attack

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.ATTACK_ROLL)

    @property
    def is_hit(self) -> bool:
        return self.result.is_hit


@dataclass(frozen=True)
class SavingThrowEvent(GameEvent):
    """Event emitted when a target rolls a saving throw."""
    result: "SaveResult"
    target: Optional[Any]  # Vehicle or standalone entity
    causal_source: Optional[Any] = None
    character: Optional["Character"] = None
    target_component_name: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.SAVING_THROW)

    @property
    def succeeded(self) -> bool:
        return self.result.succeeded


@dataclass(frozen=True)
class SkillCheckEvent(GameEvent):
    """Event emitted when a skill check is rolled (or auto-failed)."""
    result: "SkillCheckResult"
    actor: Optional[Any]  # Vehicle or standalone entity
    causal_source: Optional[Any] = None
    character: Optional["Character"] = None

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.SKILL_CHECK)

    @property
    def succeeded(self) -> bool:
        return self.result.succeeded


# Damage and Resource Events
@dataclass(frozen=True)
class DamageEvent(GameEvent):
    """Event emitted whenever damage resolves against a target, including zero damage."""
    result: "DamageResult"
    source: Optional["Combatant"]
    target: "Combatant"
    causal_source: Optional[Any] = None
    source_type: DamageSource = DamageSource.ABILITY
    applied_damage: int = 0  # After damage amplification and the health floor

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.DAMAGE)


@dataclass(frozen=True)
class ResourceChangedEvent(GameEvent):
    """Event emitted when health or energy changes on a target."""
    target: "Combatant"
    resource: ResourceType
    previous_value: int
    new_value: int
    source: Optional["Combatant"] = None
    causal_source: Optional[Any] = None

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.RESOURCE_CHANGED)

    @property
    def delta(self) -> int:
        return self.new_value - self.previous_value


# Status Effect Events
@dataclass(frozen=True)
class StatusEffectAppliedEvent(GameEvent):
    """Event emitted when a status effect application is attempted.

    ``applied`` is None when the application was blocked; ``block_reason``
    then says why.
    """
    applied: Optional["AppliedStatusEffect"]
    definition: "StatusEffectDefinition"
    source: Optional[Any]
    target: "Combatant"
    was_replacement: bool = False
    block_reason: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.STATUS_EFFECT_APPLIED)

    @property
    def was_blocked(self) -> bool:
        return self.applied is None


@dataclass(frozen=True)
class StatusEffectExpiredEvent(GameEvent):
    """Event emitted when a status effect runs out of turns."""
    expired: "AppliedStatusEffect"
    target: "Combatant"

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.STATUS_EFFECT_EXPIRED)


@dataclass(frozen=True)
class CombatActionCompleted(GameEvent):
    """Event emitted after all events of an action scope were delivered."""
    action: "CombatAction"

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.COMBAT_ACTION_COMPLETED)


# Logging Events
@dataclass(frozen=True)
class LogMessage(GameEvent):
    """Event emitted when a log message is created."""
    message: str
    category: str
    level: str
    source: str

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.LOG_MESSAGE)


@dataclass(frozen=True)
class DebugMessage(GameEvent):
    """Event emitted for developer diagnostics (authoring errors, invariant breaks)."""
    message: str
    source: str
    context: Optional[dict] = None

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.DEBUG_MESSAGE)

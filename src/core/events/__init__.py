"""Event system for publisher-subscriber communication.

This package contains the complete event-driven architecture:
- event_manager.py: Publisher-subscriber event routing and coordination
- combat_event_bus.py: Turn tracking, action scoping and diagnostics on top of the manager
- events.py: Event definitions published by the rules core
"""

from .event_manager import EventManager, EventPriority, QueuedEvent
from .combat_event_bus import CombatEventBus, CombatAction, InvariantViolation
from .events import (
    GameEvent,
    EventType,
    TurnStarted,
    AttackRollEvent,
    SavingThrowEvent,
    SkillCheckEvent,
    DamageEvent,
    ResourceChangedEvent,
    StatusEffectAppliedEvent,
    StatusEffectExpiredEvent,
    CombatActionCompleted,
    LogMessage,
    DebugMessage,
)

__all__ = [
    "EventManager",
    "EventPriority",
    "QueuedEvent",
    "CombatEventBus",
    "CombatAction",
    "InvariantViolation",
    "GameEvent",
    "EventType",
    "TurnStarted",
    "AttackRollEvent",
    "SavingThrowEvent",
    "SkillCheckEvent",
    "DamageEvent",
    "ResourceChangedEvent",
    "StatusEffectAppliedEvent",
    "StatusEffectExpiredEvent",
    "CombatActionCompleted",
    "LogMessage",
    "DebugMessage",
]

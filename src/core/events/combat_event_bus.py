"""
Combat event bus: the injectable channel every resolution step reports to.

Extends the generic EventManager with what the rules core needs:
- a turn counter stamped onto every event
- action scoping, so all events of one skill use are grouped into a
  CombatAction and delivered together when the action ends
- diagnostics for authoring errors and invariant violations

There is no module-level instance. Create one bus per game session and pass
it to whichever calculator needs to emit.
"""

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Iterator, Optional, TYPE_CHECKING

from .event_manager import EventManager
from .events import (
    CombatActionCompleted,
    DebugMessage,
    EventType,
    GameEvent,
    LogMessage,
    TurnStarted,
)

if TYPE_CHECKING:
    from ...game.entities.combatant import Combatant


class InvariantViolation(AssertionError):
    """Raised for programming errors when strict invariant checking is on."""


@dataclass
class CombatAction:
    """All events emitted while one action (skill use, event card) resolves."""
    actor: Optional["Combatant"]
    source: Optional[Any]
    turn: int
    primary_target: Optional[Any] = None
    events: list[GameEvent] = field(default_factory=list)
    completed: bool = False

    def add_event(self, event: GameEvent) -> None:
        self.events.append(event)

    def events_of_type(self, event_type: EventType) -> list[GameEvent]:
        return [event for event in self.events if event.event_type == event_type]

    @property
    def has_events(self) -> bool:
        return bool(self.events)

    @property
    def source_name(self) -> str:
        return getattr(self.source, "name", None) or "Unknown"


class CombatEventBus(EventManager):
    """Event bus with turn tracking, action scoping and diagnostics."""

    def __init__(
        self,
        enable_debug_logging: bool = False,
        strict_invariants: Optional[bool] = None,
        history_size: int = 1000,
    ):
        """Initialize the combat event bus.

        Args:
            enable_debug_logging: Whether to enable detailed event logging
            strict_invariants: Raise on invariant violations instead of
                degrading to a no-op. Defaults to ``__debug__``.
            history_size: Number of processed events kept for debugging
        """
        super().__init__(enable_debug_logging=enable_debug_logging, history_size=history_size)
        self.strict_invariants = __debug__ if strict_invariants is None else strict_invariants
        self.current_turn = 0
        self._action_stack: list[CombatAction] = []

    # Turn tracking

    def advance_turn(self) -> int:
        """Move to the next turn and announce it."""
        self.current_turn += 1
        self.publish_immediate(TurnStarted(turn=self.current_turn), source="CombatEventBus")
        return self.current_turn

    # Action scoping

    def begin_action(
        self,
        actor: Optional["Combatant"],
        source: Optional[Any] = None,
        primary_target: Optional[Any] = None,
    ) -> CombatAction:
        """Open an action scope; events emitted until end_action() are grouped."""
        action = CombatAction(actor=actor, source=source, turn=self.current_turn, primary_target=primary_target)
        self._action_stack.append(action)
        return action

    def end_action(self) -> Optional[CombatAction]:
        """Close the innermost action scope and deliver its events in order."""
        if not self._action_stack:
            self.invariant_violation("end_action called with no active action", source="CombatEventBus")
            return None

        action = self._action_stack.pop()
        action.completed = True
        completed = CombatActionCompleted(turn=self.current_turn, action=action)

        if self._action_stack:
            # Nested: delivered together with the enclosing action
            self.publish(completed, source="CombatEventBus")
        else:
            self.process_events()
            self.publish_immediate(completed, source="CombatEventBus")
        return action

    @contextmanager
    def action(
        self,
        actor: Optional["Combatant"],
        source: Optional[Any] = None,
        primary_target: Optional[Any] = None,
    ) -> Iterator[CombatAction]:
        """Context manager form of begin_action()/end_action()."""
        action = self.begin_action(actor, source, primary_target)
        try:
            yield action
        finally:
            if self._action_stack and self._action_stack[-1] is action:
                self.end_action()

    @property
    def has_active_action(self) -> bool:
        return bool(self._action_stack)

    @property
    def current_action(self) -> Optional[CombatAction]:
        return self._action_stack[-1] if self._action_stack else None

    # Emission

    def emit(self, event: GameEvent, source: Optional[str] = None) -> None:
        """Emit an event.

        Inside an action scope the event is recorded on the action and queued
        until the scope ends; otherwise it is delivered immediately (damage
        over time, environmental effects).
        """
        if self._action_stack:
            self._action_stack[-1].add_event(event)
            self.publish(event, source=source)
        else:
            self.publish_immediate(event, source=source)

    def emit_log(self, message: str, source: str, category: str = "BATTLE", level: str = "INFO") -> None:
        """Emit a log message event."""
        self.emit(
            LogMessage(
                turn=self.current_turn,
                message=message,
                category=category,
                level=level,
                source=source,
            ),
            source=source,
        )

    def emit_debug(self, message: str, source: str, context: Optional[dict] = None) -> None:
        """Emit a developer diagnostic, delivered immediately."""
        self.publish_immediate(
            DebugMessage(turn=self.current_turn, message=message, source=source, context=context),
            source=source,
        )

    def invariant_violation(self, message: str, source: str, context: Optional[dict] = None) -> None:
        """Report a programming error.

        Raises:
            InvariantViolation: When strict invariant checking is enabled
        """
        self.emit_debug(f"Invariant violation: {message}", source=source, context=context)
        if self.strict_invariants:
            raise InvariantViolation(message)

    def clear_actions(self) -> None:
        """Drop all open action scopes and anything they queued."""
        self._action_stack.clear()
        self.clear_queue()

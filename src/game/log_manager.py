"""
Combat log.

Turns what the rules core reports on the event bus into readable, categorized
log lines: every roll with its bonus breakdown, damage with its sources and
resistance, status effect lifecycle and resource changes. Explicit log and
debug messages are collected too.
"""
import os
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import Any, Optional, TYPE_CHECKING

from ..core.data.game_enums import ResourceType
from ..core.events.events import (
    AttackRollEvent,
    DamageEvent,
    DebugMessage,
    EventType,
    LogMessage,
    ResourceChangedEvent,
    SavingThrowEvent,
    SkillCheckEvent,
    StatusEffectAppliedEvent,
    StatusEffectExpiredEvent,
    TurnStarted,
)
from .combat.check_specs import describe_spec

if TYPE_CHECKING:
    from ..core.events.combat_event_bus import CombatEventBus


class LogCategory(Enum):
    """Categories for log entries."""
    SYSTEM = auto()     # Loading, turn changes
    BATTLE = auto()     # Attack rolls
    CHECK = auto()      # Saving throws and skill checks
    DAMAGE = auto()     # Damage dealt
    EFFECT = auto()     # Status effects applied, blocked, expired
    RESOURCE = auto()   # Health and energy changes
    DEBUG = auto()      # Diagnostics
    WARNING = auto()
    ERROR = auto()


CATEGORY_TAGS = {
    LogCategory.SYSTEM: "SYS",
    LogCategory.BATTLE: "BTL",
    LogCategory.CHECK: "CHK",
    LogCategory.DAMAGE: "DMG",
    LogCategory.EFFECT: "EFF",
    LogCategory.RESOURCE: "RES",
    LogCategory.DEBUG: "DBG",
    LogCategory.WARNING: "WRN",
    LogCategory.ERROR: "ERR",
}


@dataclass
class LogEntry:
    """A single log line with metadata."""
    text: str
    category: LogCategory
    turn: int = 0
    timestamp: datetime = field(default_factory=datetime.now)

    def format(self, include_timestamp: bool = False, include_category: bool = True) -> str:
        """Format the entry for display."""
        parts = []

        if include_timestamp:
            parts.append(f"[{self.timestamp.strftime('%H:%M:%S')}]")

        if include_category:
            parts.append(f"[{CATEGORY_TAGS.get(self.category, '???')}]")

        parts.append(self.text)
        return " ".join(parts)


class LogLevel(Enum):
    """Log levels for filtering."""
    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3


def _name(obj: Any, default: str = "Unknown") -> str:
    return getattr(obj, "name", None) or default


class LogManager:
    """Collects combat events into a bounded, filterable log."""

    def __init__(
        self,
        event_bus: "CombatEventBus",
        max_messages: int = 1000,
        default_level: LogLevel = LogLevel.INFO,
    ):
        """Initialize the log manager.

        Args:
            event_bus: Bus to listen on
            max_messages: Maximum number of entries kept in the buffer
            default_level: Default log level for filtering
        """
        self.messages: deque[LogEntry] = deque(maxlen=max_messages)
        self.log_level = default_level
        self.enabled_categories = set(LogCategory)
        self.event_bus = event_bus

        self.category_levels = {
            LogCategory.DEBUG: LogLevel.DEBUG,
            LogCategory.WARNING: LogLevel.WARNING,
            LogCategory.ERROR: LogLevel.ERROR,
            # Everything else is INFO
        }

        self._setup_event_subscriptions()

    def _setup_event_subscriptions(self) -> None:
        handlers = {
            EventType.LOG_MESSAGE: self._handle_log_message_event,
            EventType.DEBUG_MESSAGE: self._handle_debug_message_event,
            EventType.TURN_STARTED: self._handle_turn_started,
            EventType.ATTACK_ROLL: self._handle_attack_roll,
            EventType.SAVING_THROW: self._handle_saving_throw,
            EventType.SKILL_CHECK: self._handle_skill_check,
            EventType.DAMAGE: self._handle_damage,
            EventType.RESOURCE_CHANGED: self._handle_resource_changed,
            EventType.STATUS_EFFECT_APPLIED: self._handle_status_effect_applied,
            EventType.STATUS_EFFECT_EXPIRED: self._handle_status_effect_expired,
        }
        for event_type, handler in handlers.items():
            self.event_bus.subscribe(event_type, handler, subscriber_name=f"LogManager.{event_type.name.lower()}")

    # ============== Event handlers ==============

    def _handle_log_message_event(self, event: LogMessage) -> None:
        try:
            category = LogCategory[event.category.upper()]
        except (KeyError, AttributeError):
            category = LogCategory.SYSTEM
        self.log(event.message, category, event.turn)

    def _handle_debug_message_event(self, event: DebugMessage) -> None:
        self.log(f"[{event.source}] {event.message}", LogCategory.DEBUG, event.turn)

    def _handle_turn_started(self, event: TurnStarted) -> None:
        self.log(f"--- Turn {event.turn} ---", LogCategory.SYSTEM, event.turn)

    def _handle_attack_roll(self, event: AttackRollEvent) -> None:
        roll = event.result.roll
        if roll.is_critical_hit:
            verdict = "CRITICAL HIT"
        elif roll.is_fumble:
            verdict = "fumble"
        else:
            verdict = "hit" if event.is_hit else "miss"

        target = _name(event.target)
        if event.is_fallback:
            target = f"{target} (fallback from {event.target_component_name})"
        attacker = _name(event.attacker, "Attack")
        self.log(f"{attacker} -> {target}: {roll.describe()}, {verdict}", LogCategory.BATTLE, event.turn)

    def _handle_saving_throw(self, event: SavingThrowEvent) -> None:
        result = event.result
        subject = _name(event.target)
        if event.target_component_name:
            subject = f"{subject} ({event.target_component_name})"
        self.log(
            f"{subject} {describe_spec(result.spec)} save: {self._describe_check(result)}",
            LogCategory.CHECK,
            event.turn,
        )

    def _handle_skill_check(self, event: SkillCheckEvent) -> None:
        result = event.result
        self.log(
            f"{_name(event.actor)} {describe_spec(result.spec)} check: {self._describe_check(result)}",
            LogCategory.CHECK,
            event.turn,
        )

    @staticmethod
    def _describe_check(result: Any) -> str:
        if result.is_auto_fail:
            return f"auto-fail ({result.failure_reason})"
        return f"{result.roll.describe()}, {'success' if result.succeeded else 'failure'}"

    def _handle_damage(self, event: DamageEvent) -> None:
        text = f"{_name(event.target)} takes {event.applied_damage}: {event.result.describe()}"
        self.log(text, LogCategory.DAMAGE, event.turn)

    def _handle_resource_changed(self, event: ResourceChangedEvent) -> None:
        resource = "HP" if event.resource == ResourceType.HEALTH else "energy"
        self.log(
            f"{_name(event.target)} {resource} {event.previous_value} -> {event.new_value} ({event.delta:+d})",
            LogCategory.RESOURCE,
            event.turn,
        )

    def _handle_status_effect_applied(self, event: StatusEffectAppliedEvent) -> None:
        name = event.definition.name
        target = _name(event.target)
        if event.was_blocked:
            self.log(f"{name} blocked on {target}: {event.block_reason}", LogCategory.EFFECT, event.turn)
        elif event.was_replacement:
            self.log(f"{name} refreshed on {target}", LogCategory.EFFECT, event.turn)
        else:
            self.log(f"{target} gains {name}", LogCategory.EFFECT, event.turn)

    def _handle_status_effect_expired(self, event: StatusEffectExpiredEvent) -> None:
        self.log(f"{event.expired.name} expires on {_name(event.target)}", LogCategory.EFFECT, event.turn)

    # ============== Logging ==============

    def log(self, text: str, category: LogCategory = LogCategory.SYSTEM, turn: Optional[int] = None) -> None:
        """Add an entry to the log.

        Args:
            text: The entry text
            category: The category of the entry
            turn: Turn the entry belongs to; the bus's current turn if omitted
        """
        if turn is None:
            turn = self.event_bus.current_turn
        self.messages.append(LogEntry(text=text, category=category, turn=turn))

    def system(self, text: str) -> None:
        self.log(text, LogCategory.SYSTEM)

    def battle(self, text: str) -> None:
        self.log(text, LogCategory.BATTLE)

    def debug(self, text: str) -> None:
        self.log(text, LogCategory.DEBUG)

    def warning(self, text: str) -> None:
        self.log(text, LogCategory.WARNING)

    def error(self, text: str) -> None:
        self.log(text, LogCategory.ERROR)

    # ============== Queries ==============

    def get_messages(
        self,
        count: Optional[int] = None,
        categories: Optional[set[LogCategory]] = None,
    ) -> list[LogEntry]:
        """Get recent entries, optionally filtered by category.

        Args:
            count: Maximum number of entries to return (None for all)
            categories: Categories to include (None for all enabled at the
                current log level)

        Returns:
            Most recent entries, oldest first
        """
        if categories:
            filtered = [
                msg for msg in self.messages
                if msg.category in categories and msg.category in self.enabled_categories
            ]
        else:
            filtered = [
                msg for msg in self.messages
                if msg.category in self.enabled_categories
                and self.category_levels.get(msg.category, LogLevel.INFO).value >= self.log_level.value
            ]

        if count is not None and count < len(filtered):
            return filtered[-count:]
        return filtered

    def formatted(self, count: Optional[int] = None) -> list[str]:
        return [msg.format() for msg in self.get_messages(count)]

    def clear(self) -> None:
        self.messages.clear()

    def enable_category(self, category: LogCategory) -> None:
        self.enabled_categories.add(category)

    def disable_category(self, category: LogCategory) -> None:
        self.enabled_categories.discard(category)

    def set_log_level(self, level: LogLevel) -> None:
        self.log_level = level

    def is_debug_enabled(self) -> bool:
        return LogCategory.DEBUG in self.enabled_categories and self.log_level == LogLevel.DEBUG

    def toggle_debug(self) -> None:
        """Toggle debug entry visibility."""
        if self.is_debug_enabled():
            self.disable_category(LogCategory.DEBUG)
            self.set_log_level(LogLevel.INFO)
        else:
            self.enable_category(LogCategory.DEBUG)
            self.set_log_level(LogLevel.DEBUG)

    def save_log_to_file(self, log_dir: str = "logs") -> Optional[str]:
        """Save every buffered entry, ignoring filters, to a timestamped file.

        Returns:
            Path of the written file, or None if it could not be written
        """
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filepath = os.path.join(log_dir, f"combat_{timestamp}.log")

        try:
            os.makedirs(log_dir, exist_ok=True)
            with open(filepath, "w", encoding="utf-8") as f:
                f.write("Combat Log\n")
                f.write(f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}\n")
                f.write("=" * 60 + "\n\n")

                if not self.messages:
                    f.write("No messages to save.\n")
                for msg in self.messages:
                    timestamp_str = msg.timestamp.strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]
                    f.write(f"[{timestamp_str}] [T{msg.turn}] [{msg.category.name}] {msg.text}\n")
        except OSError as e:
            self.error(f"Failed to save log file: {e}")
            return None

        self.system(f"Combat log saved to {filepath}")
        return filepath

"""
Rules configuration.

Table-level switches for the rules core, loaded from YAML:
- natural 20/1 overrides per check kind
- the component fallback rule (on/off, penalty)
- strict invariant checking and debug logging
- an optional dice seed for reproducible sessions

A missing file means "use the defaults"; a malformed one is an error.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from ...core.data.data_structures import DataConverter
from ...core.data.game_enums import CheckKind

DEFAULT_RULES_PATH = "assets/config/rules.yaml"

# src/game/config -> project root
PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent.parent


class ConfigError(ValueError):
    """Raised when authored configuration cannot be understood."""


def resolve_path(path: str) -> Path:
    """Relative paths are taken from the project root."""
    if os.path.isabs(path):
        return Path(path)
    return PROJECT_ROOT / path


@dataclass
class RulesConfig:
    """Switches the combat resolver is built from."""
    natural_overrides: dict[CheckKind, bool] = field(default_factory=lambda: {kind: True for kind in CheckKind})
    component_fallback_enabled: bool = True
    component_fallback_penalty: int = 5
    strict_invariants: Optional[bool] = None  # None = follow __debug__
    enable_debug_logging: bool = False
    dice_seed: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]]) -> "RulesConfig":
        """Build a config from parsed YAML; absent sections keep their defaults.

        Raises:
            ConfigError: If a section or value has the wrong shape
        """
        config = cls()
        if not data:
            return config
        if not isinstance(data, dict):
            raise ConfigError(f"Rules config must be a mapping, got {type(data).__name__}")

        try:
            rolls = data.get("rolls", {}) or {}
            for kind_name, enabled in (rolls.get("natural_overrides", {}) or {}).items():
                kind = DataConverter.parse_enum(CheckKind, kind_name)
                config.natural_overrides[kind] = _as_bool(enabled, f"rolls.natural_overrides.{kind_name}")

            fallback = (data.get("special_rules", {}) or {}).get("component_fallback", {}) or {}
            if "enabled" in fallback:
                config.component_fallback_enabled = _as_bool(fallback["enabled"], "component_fallback.enabled")
            if "penalty" in fallback:
                config.component_fallback_penalty = int(fallback["penalty"])

            diagnostics = data.get("diagnostics", {}) or {}
            if diagnostics.get("strict_invariants") is not None:
                config.strict_invariants = _as_bool(diagnostics["strict_invariants"], "diagnostics.strict_invariants")
            if "debug_logging" in diagnostics:
                config.enable_debug_logging = _as_bool(diagnostics["debug_logging"], "diagnostics.debug_logging")

            seed = (data.get("dice", {}) or {}).get("seed")
            config.dice_seed = int(seed) if seed is not None else None
        except ConfigError:
            raise
        except (AttributeError, TypeError, ValueError) as e:
            raise ConfigError(f"Invalid rules config: {e}") from e

        return config

    @classmethod
    def load_from_file(cls, path: Optional[str] = None) -> "RulesConfig":
        """Load the rules config from YAML.

        Args:
            path: File path; relative paths are resolved from the project root

        Returns:
            The loaded config, or the defaults when the file does not exist

        Raises:
            ConfigError: If the file exists but cannot be parsed
        """
        config_file = resolve_path(path or DEFAULT_RULES_PATH)
        if not config_file.exists():
            return cls()

        try:
            with open(config_file, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Could not parse {config_file}: {e}") from e

        return cls.from_dict(data)

    def to_dict(self) -> dict[str, Any]:
        """Inverse of from_dict(), for writing a config back out."""
        return {
            "rolls": {
                "natural_overrides": {kind.name.lower(): enabled for kind, enabled in self.natural_overrides.items()},
            },
            "special_rules": {
                "component_fallback": {
                    "enabled": self.component_fallback_enabled,
                    "penalty": self.component_fallback_penalty,
                },
            },
            "diagnostics": {
                "strict_invariants": self.strict_invariants,
                "debug_logging": self.enable_debug_logging,
            },
            "dice": {"seed": self.dice_seed},
        }


def _as_bool(value: Any, key: str) -> bool:
    if isinstance(value, bool):
        return value
    raise ConfigError(f"{key} must be true or false, got {value!r}")

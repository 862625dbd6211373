"""Configuration and authored data.

This package loads everything the rules core reads but never mutates:
- rules_config.py: Table-level rule switches (natural rolls, special rules, diagnostics)
- template_loader.py: Status effect, character and vehicle templates
"""

from .rules_config import ConfigError, RulesConfig, DEFAULT_RULES_PATH
from .template_loader import TemplateError, TemplateLoader

__all__ = [
    "ConfigError",
    "RulesConfig",
    "DEFAULT_RULES_PATH",
    "TemplateError",
    "TemplateLoader",
]

"""Combat system components.

This package contains the rules-resolution core with clear separation of concerns:
- roll_engine.py: d20 resolution shared by attacks, saves and skill checks
- check_specs.py / check_router.py: What is tested, and who rolls it
- attacks.py / special_rules.py: Attack rolls and the follow-up rules layered on them
- saves.py / skill_checks.py: Saving throws and skill checks
- damage_engine.py / damage_applicator.py: Damage computation and application
- combat_resolver.py: The facade callers use
"""

from .attacks import AttackCalculator, AttackPerformer, AttackResult
from .check_router import CheckRouter, RoutingResult
from .check_specs import (
    AttackSpec,
    CharacterCheckSpec,
    CharacterSaveSpec,
    CheckSpec,
    SaveSpec,
    VehicleCheckSpec,
    VehicleSaveSpec,
)
from .combat_resolver import CombatResolver
from .damage_applicator import DamageApplicator
from .damage_engine import DamageEngine, DamageFormula, DamageResult, DamageSourceEntry, apply_resistance
from .roll_engine import RollEngine, RollOutcome
from .saves import SaveCalculator, SavePerformer, SaveResult
from .skill_checks import SkillCheckCalculator, SkillCheckPerformer, SkillCheckResult
from .special_rules import AttackPhase, AttackSpecialRule, ComponentFallbackRule

__all__ = [
    "AttackCalculator",
    "AttackPerformer",
    "AttackResult",
    "CheckRouter",
    "RoutingResult",
    "AttackSpec",
    "CharacterCheckSpec",
    "CharacterSaveSpec",
    "CheckSpec",
    "SaveSpec",
    "VehicleCheckSpec",
    "VehicleSaveSpec",
    "CombatResolver",
    "DamageApplicator",
    "DamageEngine",
    "DamageFormula",
    "DamageResult",
    "DamageSourceEntry",
    "apply_resistance",
    "RollEngine",
    "RollOutcome",
    "SaveCalculator",
    "SavePerformer",
    "SaveResult",
    "SkillCheckCalculator",
    "SkillCheckPerformer",
    "SkillCheckResult",
    "AttackPhase",
    "AttackSpecialRule",
    "ComponentFallbackRule",
]

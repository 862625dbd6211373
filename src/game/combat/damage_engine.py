"""
Damage computation: formula -> dice -> resistance -> final integer.

This is the only place damage numbers are produced. It never touches
targets; DamageApplicator applies results and reports them.

Rules:
- critical hits double the dice count, never the flat bonus
- raw total = dice sum + bonus
- Vulnerable x2, Normal x1, Resistant halved (truncated), Immune 0
- composite damage (weapon + skill, physical + fire) is several independent
  results, each resisted on its own
"""

from dataclasses import dataclass
from typing import Iterable, Optional, TYPE_CHECKING

from ...core.data.data_structures import DiceFormula
from ...core.data.game_enums import DamageMode, DamageType, ResistanceLevel, DAMAGE_TYPE_NAMES
from ...core.dice import DiceRoller

if TYPE_CHECKING:
    from ...core.events.combat_event_bus import CombatEventBus
    from ..entities.combatant import Combatant
    from ..vehicles.vehicle_components import WeaponComponent

CRIT_SUFFIX = " (CRIT)"


@dataclass(frozen=True)
class DamageFormula:
    """Dice, flat bonus and damage type, e.g. 2d6+3 fire."""
    dice_count: int = 0
    die_size: int = 6
    bonus: int = 0
    damage_type: DamageType = DamageType.PHYSICAL
    label: str = "Damage"

    @classmethod
    def from_dice(cls, dice: DiceFormula, damage_type: DamageType = DamageType.PHYSICAL,
                  label: str = "Damage") -> "DamageFormula":
        return cls(dice.dice_count, dice.die_size, dice.bonus, damage_type, label)

    @property
    def dice(self) -> DiceFormula:
        return DiceFormula(self.dice_count, self.die_size, self.bonus)

    @property
    def is_empty(self) -> bool:
        return self.dice.is_empty

    def notation(self) -> str:
        return f"{self.dice.notation()} {DAMAGE_TYPE_NAMES[self.damage_type]}"


@dataclass(frozen=True)
class DamageSourceEntry:
    """One labelled dice group inside a damage result."""
    label: str
    dice_count: int
    die_size: int
    bonus: int
    rolled: tuple[int, ...] = ()

    @property
    def dice_total(self) -> int:
        return sum(self.rolled)

    @property
    def total(self) -> int:
        return self.dice_total + self.bonus

    def notation(self) -> str:
        return DiceFormula(self.dice_count, self.die_size, self.bonus).notation()


@dataclass(frozen=True)
class DamageResult:
    """Immutable record of one damage computation."""
    damage_type: DamageType
    sources: tuple[DamageSourceEntry, ...]
    resistance_level: ResistanceLevel
    final_damage: int
    is_critical_hit: bool = False

    @property
    def raw_total(self) -> int:
        return sum(source.total for source in self.sources)

    @property
    def is_empty(self) -> bool:
        return not self.sources

    def describe(self) -> str:
        """E.g. "10 (Damage 1d8+2 [8]) Physical, Resistant -> 5"."""
        parts = ", ".join(f"{source.label} {source.notation()} {list(source.rolled)}" for source in self.sources)
        text = f"{self.raw_total} ({parts}) {DAMAGE_TYPE_NAMES[self.damage_type]}"
        if self.resistance_level != ResistanceLevel.NORMAL:
            text += f", {self.resistance_level.name.title()}"
        return f"{text} -> {self.final_damage}"


def apply_resistance(raw_total: int, resistance: ResistanceLevel) -> int:
    """Scale raw damage by resistance.

    The sign is kept; negative totals are clamped to zero only when applied.
    """
    if resistance == ResistanceLevel.VULNERABLE:
        return raw_total * 2
    if resistance == ResistanceLevel.RESISTANT:
        return raw_total // 2
    if resistance == ResistanceLevel.IMMUNE:
        return 0
    return raw_total


class DamageEngine:
    """Rolls damage formulas into DamageResults."""

    def __init__(self, dice: Optional[DiceRoller] = None, event_bus: Optional["CombatEventBus"] = None):
        """Initialize the damage engine.

        Args:
            dice: Dice source (a fresh unseeded DiceRoller if omitted)
            event_bus: Where authoring diagnostics go; silent when omitted
        """
        self.dice = dice or DiceRoller()
        self.event_bus = event_bus

    def compute(
        self,
        formula: DamageFormula,
        resistance: ResistanceLevel = ResistanceLevel.NORMAL,
        is_critical_hit: bool = False,
    ) -> DamageResult:
        """Roll one formula and apply resistance.

        A formula with no dice and no bonus yields an empty zero result and a
        diagnostic instead of failing.
        """
        if formula.is_empty:
            self._report_empty(formula.label)
            return self.empty_result(formula.damage_type, resistance)

        entry = self._roll_entry(formula.label, formula.dice_count, formula.die_size, formula.bonus, is_critical_hit)
        crit_applied = is_critical_hit and formula.dice_count > 0
        return self._build(formula.damage_type, (entry,), resistance, crit_applied)

    def compute_dice(
        self,
        dice_formula: DiceFormula,
        damage_type: DamageType,
        resistance: ResistanceLevel = ResistanceLevel.NORMAL,
        label: str = "Damage",
        is_critical_hit: bool = False,
    ) -> DamageResult:
        """compute() for a bare dice formula plus damage type."""
        return self.compute(DamageFormula.from_dice(dice_formula, damage_type, label), resistance, is_critical_hit)

    def compute_against(self, formula: DamageFormula, target: "Combatant", is_critical_hit: bool = False) -> DamageResult:
        """compute() using the target's resistance to the formula's damage type."""
        return self.compute(formula, target.get_resistance(formula.damage_type), is_critical_hit)

    def compute_composite(
        self,
        formulas: Iterable[DamageFormula],
        target: "Combatant",
        is_critical_hit: bool = False,
    ) -> list[DamageResult]:
        """One independent, separately resisted result per formula."""
        return [self.compute_against(formula, target, is_critical_hit) for formula in formulas]

    def resolve_skill_damage(
        self,
        mode: DamageMode,
        base: DamageFormula,
        weapon: Optional["WeaponComponent"] = None,
        resistance: ResistanceLevel = ResistanceLevel.NORMAL,
        is_critical_hit: bool = False,
        use_weapon_damage_type: bool = True,
    ) -> DamageResult:
        """Resolve a skill's damage formula against the weapon used.

        Args:
            mode: Whether the skill dice, the weapon dice, or both are rolled
            base: The skill's own damage formula
            weapon: Weapon the skill was used through, if any
            resistance: Target's resistance to the resulting damage type
            is_critical_hit: Double dice counts (bonuses unchanged)
            use_weapon_damage_type: In WEAPON_PLUS_BASE mode, deal the
                weapon's damage type instead of the skill's

        Returns:
            A single result; weapon and skill dice appear as separate sources
        """
        if mode == DamageMode.BASE_ONLY:
            return self.compute(DamageFormula(base.dice_count, base.die_size, base.bonus, base.damage_type, "Skill"),
                                resistance, is_critical_hit)

        if weapon is None:
            if self.event_bus is not None:
                self.event_bus.emit_debug(
                    f"Damage mode {mode.name} needs a weapon but none was supplied",
                    source="DamageEngine",
                    context={"formula": base.notation()},
                )
            return self.empty_result(base.damage_type, resistance)

        weapon_dice = weapon.get_damage_formula()
        if mode == DamageMode.WEAPON_ONLY:
            return self.compute_dice(weapon_dice, weapon.damage_type, resistance, "Weapon", is_critical_hit)

        damage_type = weapon.damage_type if use_weapon_damage_type else base.damage_type
        entries = (
            self._roll_entry("Weapon", weapon_dice.dice_count, weapon_dice.die_size, weapon_dice.bonus, is_critical_hit),
            self._roll_entry("Skill", base.dice_count, base.die_size, base.bonus, is_critical_hit),
        )
        crit_applied = is_critical_hit and (weapon_dice.dice_count > 0 or base.dice_count > 0)
        return self._build(damage_type, entries, resistance, crit_applied)

    @staticmethod
    def empty_result(damage_type: DamageType = DamageType.PHYSICAL,
                     resistance: ResistanceLevel = ResistanceLevel.NORMAL) -> DamageResult:
        return DamageResult(damage_type=damage_type, sources=(), resistance_level=resistance, final_damage=0)

    # ============== Internals ==============

    def _roll_entry(self, label: str, dice_count: int, die_size: int, bonus: int, is_critical_hit: bool) -> DamageSourceEntry:
        count = dice_count
        if is_critical_hit and count > 0:
            count *= 2
            label += CRIT_SUFFIX
        rolled = tuple(self.dice.roll_dice(count, die_size)) if count > 0 and die_size > 0 else ()
        return DamageSourceEntry(label=label, dice_count=count, die_size=die_size, bonus=bonus, rolled=rolled)

    @staticmethod
    def _build(damage_type: DamageType, entries: tuple[DamageSourceEntry, ...],
               resistance: ResistanceLevel, is_critical_hit: bool) -> DamageResult:
        raw_total = sum(entry.total for entry in entries)
        return DamageResult(
            damage_type=damage_type,
            sources=entries,
            resistance_level=resistance,
            final_damage=apply_resistance(raw_total, resistance),
            is_critical_hit=is_critical_hit,
        )

    def _report_empty(self, label: str) -> None:
        if self.event_bus is not None:
            self.event_bus.emit_debug(
                f"Damage formula '{label}' has no dice and no bonus",
                source="DamageEngine",
            )


def total_final_damage(results: Iterable[DamageResult]) -> int:
    """Damage a composite result list would deal, each part clamped at zero."""
    return sum(max(result.final_damage, 0) for result in results)


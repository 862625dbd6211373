"""
Unit tests for d20 resolution.
"""

import pytest

from src.core.data.data_structures import RollBonus
from src.core.data.game_enums import CheckKind
from src.core.dice import DiceRoller, ScriptedDiceRoller
from src.game.combat.roll_engine import RollEngine


class TestRollEngine:
    """Test totals, natural overrides and auto-fail outcomes."""

    def test_total_is_roll_plus_bonuses(self):
        engine = RollEngine(ScriptedDiceRoller([10]))

        outcome = engine.roll([RollBonus("Dexterity Modifier", 3), RollBonus("Proficiency", 3)], 15, CheckKind.SKILL_CHECK)

        assert outcome.base_roll == 10
        assert outcome.total_modifier == 6
        assert outcome.total == 16
        assert outcome.margin == 1
        assert outcome.success
        assert outcome.kind == CheckKind.SKILL_CHECK

    def test_meeting_target_succeeds(self):
        outcome = RollEngine().from_roll(12, [RollBonus("Turret", 3)], 15)

        assert outcome.success

    def test_missing_target_fails(self):
        outcome = RollEngine().from_roll(11, [RollBonus("Turret", 3)], 15)

        assert not outcome.success
        assert outcome.margin == -1

    def test_natural_twenty_always_succeeds(self):
        outcome = RollEngine().from_roll(20, [RollBonus("Penalty", -10)], 40)

        assert outcome.success
        assert outcome.is_critical_hit
        assert not outcome.is_fumble

    def test_natural_one_always_fails(self):
        outcome = RollEngine().from_roll(1, [RollBonus("Bonus", 30)], 5)

        assert not outcome.success
        assert outcome.is_fumble
        assert not outcome.is_critical_hit

    def test_overrides_disabled_per_kind(self):
        """With overrides off, naturals are ordinary numbers."""
        engine = RollEngine(natural_overrides={CheckKind.SAVE: False})

        save = engine.from_roll(1, [RollBonus("Bonus", 30)], 5, CheckKind.SAVE)
        attack = engine.from_roll(1, [RollBonus("Bonus", 30)], 5, CheckKind.ATTACK)

        assert save.success
        assert not save.is_fumble
        assert not attack.success
        assert engine.uses_natural_rules(CheckKind.SKILL_CHECK)

    def test_invalid_base_roll(self):
        with pytest.raises(ValueError):
            RollEngine().from_roll(0, [], 10)
        with pytest.raises(ValueError):
            RollEngine().from_roll(21, [], 10)

    def test_auto_fail_shape(self):
        """Auto-fail: no roll, no bonuses, failed, flagged."""
        outcome = RollEngine.auto_fail(15, CheckKind.SAVE)

        assert outcome.base_roll == 0
        assert outcome.bonuses == ()
        assert not outcome.success
        assert outcome.is_auto_fail
        assert not outcome.is_critical_hit
        assert not outcome.is_fumble
        assert outcome.describe() == "auto-fail vs 15"

    def test_bonuses_stored_in_order(self):
        bonuses = [RollBonus("A", 1), RollBonus("B", -2), RollBonus("C", 3)]

        outcome = RollEngine().from_roll(10, bonuses, 10)

        assert [bonus.label for bonus in outcome.bonuses] == ["A", "B", "C"]

    def test_describe(self):
        outcome = RollEngine().from_roll(10, [RollBonus("Dexterity Modifier", 3), RollBonus("Proficiency", 1)], 15)

        assert outcome.describe() == "14 (10 +3 Dexterity Modifier +1 Proficiency) vs 15"

    def test_random_rolls_stay_in_bounds(self):
        engine = RollEngine(DiceRoller(seed=11))

        for _ in range(200):
            outcome = engine.roll([], 11)
            assert 1 <= outcome.base_roll <= 20
            assert outcome.is_critical_hit == (outcome.base_roll == 20)
            assert outcome.is_fumble == (outcome.base_roll == 1)

"""
Integration tests for full combat rounds.

Vehicles come from the shipped templates and every roll is scripted, so each
test reads as a turn of play with its expected log.
"""

import pytest

from src.core.data.game_enums import (
    CharacterAttribute,
    CharacterSkill,
    ComponentType,
    DamageSource,
    EntityFeature,
    VehicleCheckAttribute,
)
from src.core.dice import ScriptedDiceRoller
from src.core.events.combat_event_bus import CombatEventBus
from src.core.events.events import EventType
from src.game.combat import (
    AttackSpec,
    CharacterCheckSpec,
    CharacterSaveSpec,
    CombatResolver,
    DamageFormula,
    VehicleSaveSpec,
)
from src.game.config import RulesConfig, TemplateLoader
from src.game.log_manager import LogCategory, LogManager
from tests.conftest import EventRecorder


@pytest.fixture
def arena():
    """War rig (full crew) against an interceptor piloted by Vex."""
    bus = CombatEventBus(strict_invariants=True)
    dice = ScriptedDiceRoller(seed=7)
    templates = TemplateLoader().load_all()
    return {
        "bus": bus,
        "dice": dice,
        "recorder": EventRecorder(bus),
        "log": LogManager(bus),
        "resolver": CombatResolver(event_bus=bus, dice=dice, config=RulesConfig()),
        "templates": templates,
        "war_rig": templates.create_vehicle("war_rig"),
        "interceptor": templates.create_vehicle("interceptor", crew={"Pilot": templates.get_character("vex")}),
    }


def weapon_damage(weapon):
    return DamageFormula.from_dice(weapon.get_damage_formula(), weapon.damage_type, weapon.name)


@pytest.mark.integration
class TestTurretVolley:
    """The war rig's turret fires on the interceptor's drive."""

    def test_miss_falls_back_to_chassis_and_damages_it(self, arena):
        resolver, dice, recorder = arena["resolver"], arena["dice"], arena["recorder"]
        turret = arena["war_rig"].find_component("Turret")
        turbines = arena["interceptor"].get_drive_component()
        frame = arena["interceptor"].chassis

        resolver.start_turn([arena["war_rig"], arena["interceptor"]])
        # Turret: +4 base, +1 Targeting Array, Rook +3 BAB = +8
        dice.queue_d20(5, 10)
        dice.queue_dice(4, 6)

        with arena["bus"].action(turret, source=turret, primary_target=turbines):
            attack = resolver.perform_attack(AttackSpec(target=turbines, attacker=turret))
            resolver.deal_damage([weapon_damage(turret)], attack.hit_target, turret, turret,
                                 source_type=DamageSource.WEAPON)

        # 5 + 8 = 13 vs 14 misses; 10 + 8 - 5 = 13 vs 13 hits the frame
        assert attack.was_fallback
        assert attack.target is frame
        assert frame.health == 70 - 12
        assert turbines.health == 40

        action_events = [event.event_type for event in recorder.events][1:]
        assert action_events == [
            EventType.ATTACK_ROLL,
            EventType.ATTACK_ROLL,
            EventType.DAMAGE,
            EventType.RESOURCE_CHANGED,
            EventType.COMBAT_ACTION_COMPLETED,
        ]

        lines = [entry.text for entry in arena["log"].get_messages(categories={LogCategory.BATTLE})]
        assert lines == [
            "Turret -> Twin Turbines: 13 (5 +5 Turret +3 Base Attack Bonus) vs 14, miss",
            "Turret -> Light Frame (fallback from Twin Turbines): "
            "13 (10 +5 Turret +3 Base Attack Bonus -5 Targeting Penalty) vs 13, hit",
        ]

    def test_crit_on_resistant_hull(self, arena):
        resolver, dice = arena["resolver"], arena["dice"]
        turret = arena["war_rig"].find_component("Turret")
        hull = arena["war_rig"].chassis
        dice.queue_d20(20)
        dice.queue_dice(8, 8, 8, 8)

        attack = resolver.perform_attack(AttackSpec(target=hull, attacker=turret))
        results = resolver.deal_damage([weapon_damage(turret)], hull, turret, is_critical_hit=attack.is_critical_hit)

        # 4d8 (32) + 2 = 34 piercing, hull resistant: 17
        assert attack.is_critical_hit
        assert results[0].final_damage == 17
        assert hull.health == 120 - 17


@pytest.mark.integration
class TestFlamerRun:
    """The interceptor torches the war rig's core."""

    def test_burning_core_ticks_and_expires(self, arena):
        resolver, dice = arena["resolver"], arena["dice"]
        core = arena["war_rig"].power_core
        burning = arena["templates"].get_status_effect("burning")

        resolver.apply_status_effect(burning, core, arena["interceptor"].find_component("Flamer"))
        dice.queue_dice(2, 3, 4)
        for _ in range(3):
            resolver.start_turn([arena["war_rig"], arena["interceptor"]])
            resolver.tick_vehicle(arena["war_rig"])

        assert core.health == 60 - 9
        assert core.active_status_effects == []
        expired = arena["recorder"].of_type(EventType.STATUS_EFFECT_EXPIRED)
        assert len(expired) == 1
        assert expired[0].turn == 3

    def test_fireproof_target_blocks_burning(self, arena):
        core = arena["war_rig"].power_core
        core.features |= EntityFeature.IMMUNE_TO_FIRE

        applied = arena["resolver"].apply_status_effect(arena["templates"].get_status_effect("burning"), core)

        assert applied is None
        assert arena["recorder"].of_type(EventType.STATUS_EFFECT_APPLIED)[0].was_blocked


@pytest.mark.integration
class TestCrewChecks:
    """Checks routed to the right crew member."""

    def test_piloting_goes_to_driver(self, arena):
        arena["dice"].queue_d20(10)

        result = arena["resolver"].perform_skill_check(
            arena["war_rig"], CharacterCheckSpec(CharacterSkill.PILOTING, ComponentType.DRIVE), 15
        )

        assert result.character.name == "Vex"
        assert result.total == 16

    def test_engineer_saves_for_core(self, arena):
        arena["dice"].queue_d20(9)

        result = arena["resolver"].perform_save(
            arena["war_rig"], CharacterSaveSpec(CharacterAttribute.INTELLIGENCE, ComponentType.POWER_CORE), 13
        )

        # Sprocket: INT 17 (+3), level 3 (+1)
        assert result.character.name == "Sprocket"
        assert result.roll.total == 13
        assert result.succeeded

    def test_unpiloted_interceptor_auto_fails(self, arena):
        ghost = arena["templates"].create_vehicle("interceptor")

        result = arena["resolver"].perform_skill_check(
            ghost, CharacterCheckSpec(CharacterSkill.PILOTING, ComponentType.DRIVE), 10
        )

        assert result.is_auto_fail
        assert result.failure_reason == "Pilot has no assigned character"

    def test_stability_save_uses_tracks(self, arena):
        arena["dice"].queue_d20(5)

        result = arena["resolver"].perform_save(arena["war_rig"], VehicleSaveSpec(VehicleCheckAttribute.STABILITY), 12)

        assert result.component.name == "Tracks"
        assert result.succeeded


@pytest.mark.integration
class TestSkirmish:
    """The command-line demo plays through without errors."""

    def test_seeded_skirmish_is_reproducible(self):
        from main import run_skirmish

        first = run_skirmish(3, RulesConfig(dice_seed=11, strict_invariants=True)).formatted()
        second = run_skirmish(3, RulesConfig(dice_seed=11, strict_invariants=True)).formatted()

        assert first == second
        assert first[0].startswith("[SYS] Loaded Vehicle('War Rig'")
        assert "[SYS] --- Turn 1 ---" in first

#!/usr/bin/env python3

import argparse

from src.core.data.game_enums import CharacterAttribute, CharacterSkill, ComponentType, VehicleCheckAttribute
from src.core.events.combat_event_bus import CombatEventBus
from src.game.combat import (
    AttackSpec,
    CharacterCheckSpec,
    CharacterSaveSpec,
    CombatResolver,
    DamageFormula,
    VehicleSaveSpec,
)
from src.game.config import ConfigError, RulesConfig, TemplateLoader
from src.game.log_manager import LogManager
from src.game.vehicles import WeaponComponent


def weapon_damage(weapon: WeaponComponent) -> DamageFormula:
    return DamageFormula.from_dice(weapon.get_damage_formula(), weapon.damage_type, weapon.name)


def run_skirmish(rounds: int, config: RulesConfig) -> LogManager:
    """Pit the war rig against the interceptor for a few rounds."""
    bus = CombatEventBus(
        enable_debug_logging=config.enable_debug_logging,
        strict_invariants=config.strict_invariants,
    )
    log = LogManager(bus)
    resolver = CombatResolver(event_bus=bus, config=config)

    templates = TemplateLoader().load_all()
    war_rig = templates.create_vehicle("war_rig")
    interceptor = templates.create_vehicle("interceptor", crew={"Pilot": templates.get_character("vex")})
    log.system(f"Loaded {war_rig} and {interceptor}")

    turret = war_rig.find_component("Turret")
    flamer = interceptor.find_component("Flamer")
    burning = templates.get_status_effect("burning")

    for _ in range(rounds):
        resolver.start_turn([war_rig, interceptor])

        with bus.action(turret, source=turret, primary_target=interceptor.get_drive_component()):
            attack = resolver.perform_attack(AttackSpec(target=interceptor.get_drive_component(), attacker=turret))
            if attack.is_hit:
                resolver.deal_damage(
                    [weapon_damage(turret)], attack.hit_target, turret, turret,
                    is_critical_hit=attack.is_critical_hit,
                )

        with bus.action(flamer, source=flamer, primary_target=war_rig.chassis):
            attack = resolver.perform_attack(AttackSpec(target=war_rig.chassis, attacker=flamer))
            if attack.is_hit:
                resolver.deal_damage(
                    [weapon_damage(flamer)], attack.hit_target, flamer, flamer,
                    is_critical_hit=attack.is_critical_hit,
                )
                save = resolver.perform_save(war_rig, VehicleSaveSpec(VehicleCheckAttribute.STABILITY), 12, flamer)
                if not save.succeeded:
                    resolver.apply_status_effect(burning, war_rig.power_core, flamer)

        resolver.perform_skill_check(
            interceptor, CharacterCheckSpec(CharacterSkill.PILOTING, ComponentType.DRIVE), 15
        )
        resolver.perform_save(war_rig, CharacterSaveSpec(CharacterAttribute.INTELLIGENCE, ComponentType.POWER_CORE), 13)

        resolver.tick_vehicle(war_rig)
        resolver.tick_vehicle(interceptor)

        if war_rig.is_destroyed or interceptor.is_destroyed:
            break

    return log


def main():
    parser = argparse.ArgumentParser(description="Run a short scripted vehicle skirmish and print the combat log")
    parser.add_argument("--rounds", type=int, default=3, help="Number of rounds to play")
    parser.add_argument("--seed", type=int, help="Dice seed for a reproducible skirmish")
    parser.add_argument("--config", help="Rules config file (default: assets/config/rules.yaml)")
    parser.add_argument("--debug", action="store_true", help="Show debug diagnostics")
    parser.add_argument("--save-log", action="store_true", help="Write the log to logs/")
    args = parser.parse_args()

    try:
        config = RulesConfig.load_from_file(args.config)
    except ConfigError as e:
        print(f"Error: {e}")
        raise SystemExit(1)
    if args.seed is not None:
        config.dice_seed = args.seed

    log = run_skirmish(args.rounds, config)
    if args.debug:
        log.toggle_debug()

    for line in log.formatted():
        print(line)

    if args.save_log:
        log.save_log_to_file()


if __name__ == "__main__":
    main()

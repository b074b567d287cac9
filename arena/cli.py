from __future__ import annotations
import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

from arena.battle.machine import MAX_AUTO_ROUNDS, BattleStateMachine
from arena.battle.models import LogCategory, Side
from arena.core.errors import CreatureFetchError, MalformedCreatureRecord
from arena.core.logging import logger
from arena.data.catalog import CreatureCatalog
from arena.system.settings import Settings
from arena.ui.log_colors import style_entry, style_line

def _parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="arena", description="Resolve a 1v1 creature battle from the catalog.")
    p.add_argument("player", nargs="?", help="player creature (name or id)")
    p.add_argument("opponent", nargs="?", help="opponent creature (name or id); random if omitted")
    p.add_argument("--list", action="store_true", help="print the player roster and exit")
    p.add_argument("--seed", type=int, default=None, help="seed for reproducible battles")
    p.add_argument("--catalog", type=Path, default=None, help="alternate catalog JSON file")
    return p

def _hp_line(machine: BattleStateMachine, side: Side) -> str:
    state = machine.state
    return f"{state.creature(side).display_name}: {state.hp(side)}/{state.max_hp(side)} ({state.hp_ratio(side):.0%})"

def run(argv: Optional[Sequence[str]] = None, settings: Optional[Settings] = None) -> int:
    args = _parser().parse_args(argv)
    settings = settings or Settings.load()
    if args.seed is not None:
        settings.data.seed = args.seed
    settings.apply()
    catalog = CreatureCatalog(args.catalog or settings.catalog_file())
    rng = settings.make_rng()

    try:
        if args.list or not args.player:
            for entry in catalog.list_creatures(settings.data.roster_size):
                print(f"{entry.id:>4}  {entry.name}")
            return 0
        player = catalog.get_creature(args.player)
        if args.opponent:
            opponent = catalog.get_creature(args.opponent)
        else:
            opponent = catalog.random_opponent(rng, settings.data.opponent_pool)
    except (CreatureFetchError, MalformedCreatureRecord) as e:
        logger.error("BattleSetupFailed", error=str(e))
        print(style_line(LogCategory.ERROR, str(e)))
        return 1

    machine = BattleStateMachine(player, opponent, rng)
    print(style_line(LogCategory.SYSTEM, f"{player.display_name} vs {opponent.display_name}!"))
    rounds = 0
    while not machine.is_over() and rounds < MAX_AUTO_ROUNDS:
        for entry in machine.play_round():
            print(style_entry(entry))
        rounds += 1
    if not machine.is_over():
        print(style_line(LogCategory.INFO, "Neither side can hurt the other. The battle is a draw."))
    print(_hp_line(machine, Side.PLAYER))
    print(_hp_line(machine, Side.OPPONENT))
    return 0

def main():
    sys.exit(run())

if __name__ == "__main__":
    main()

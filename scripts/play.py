#!/usr/bin/env python3
import argparse
import sys
import uuid
from typing import Iterable

from adaptive_battleship.domain.config import BOARD_HEIGHT, BOARD_WIDTH, DEFAULT_PROFILE_DIR, DEFAULT_ROSTER
from adaptive_battleship.game.loop import run_game
from adaptive_battleship.persistence.profile_store import ProfileStore
from adaptive_battleship.strategies.registry import build_player, player_keys
from adaptive_battleship.utils.debug import enable_debug


def main(argv: Iterable[str] = None) -> int:
    parser = argparse.ArgumentParser(description="Play one game of battleship over stdin/stdout.")
    parser.add_argument("opponent", nargs="?", default=None, help="Opponent id (random if omitted)")
    parser.add_argument("--width", type=int, default=BOARD_WIDTH)
    parser.add_argument("--height", type=int, default=BOARD_HEIGHT)
    parser.add_argument("--player", default="adaptive", choices=player_keys())
    parser.add_argument("--profile-dir", default=DEFAULT_PROFILE_DIR, help="Where opponent profiles are kept")
    parser.add_argument("--debug", nargs="?", const="", default=None, metavar="LOG", help="Write a debug log")
    args = parser.parse_args(list(argv) if argv is not None else None)

    if args.debug is not None:
        enable_debug(args.debug or None)

    opponent = args.opponent or str(uuid.uuid4())
    player = build_player(args.player, ProfileStore(args.profile_dir))
    run_game(player, opponent, args.width, args.height, DEFAULT_ROSTER, sys.stdin, sys.stdout)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

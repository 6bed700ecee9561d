import traceback
from typing import Callable, Dict, List, Optional, Sequence, TextIO

from adaptive_battleship.domain.types import GameResult, Position, Ship
from adaptive_battleship.utils import debug

from .player import Player, RosterEntry

_END_COMMANDS = {
    "win": GameResult.WIN,
    "loss": GameResult.LOSS,
    "tie": GameResult.TIE,
}


def _send(stdout: TextIO, line: str) -> None:
    stdout.write(line + "\n")
    stdout.flush()
    debug.debug_event("Protocol", f">> {line}")


def _read_enemy_positions(stdin: TextIO, count: int) -> List[Ship]:
    ships: List[Ship] = []
    while len(ships) < count:
        line = stdin.readline()
        if not line:
            break
        line = line.strip()
        if not line:
            continue
        debug.debug_event("Protocol", f"<< {line}")
        ships.append(Ship.parse(line))
    return ships


def run_game(
    player: Player,
    opponent: str,
    width: int,
    height: int,
    roster: Sequence[RosterEntry],
    stdin: TextIO,
    stdout: TextIO,
    instant: Optional[int] = None,
) -> Optional[GameResult]:
    """Play one game over the line protocol.

    Returns the final result, or None if the referee stopped the game
    (reject, exit, end of input) before announcing one.
    """
    ctx = player.initialize(width, height, roster, opponent, instant=instant)

    def _fire(arg: str) -> bool:
        _send(stdout, str(player.fire()))
        return True

    def _sink(arg: str) -> bool:
        player.sink(arg)
        return True

    def _incoming(arg: str) -> bool:
        player.incoming_shot(Position.parse(arg))
        return True

    def _reject(arg: str) -> bool:
        debug.debug_event("Protocol", "layout rejected", level="warning")
        return False

    commands: Dict[str, Callable[[str], bool]] = {
        "accept": lambda arg: True,
        "reject": _reject,
        "fire": _fire,
        "hit": lambda arg: player.hit() or True,
        "miss": lambda arg: player.miss() or True,
        "sink": _sink,
        "incoming": _incoming,
        "exit": lambda arg: False,
    }

    try:
        for ship in player.place_ships():
            _send(stdout, str(ship))

        while True:
            line = stdin.readline()
            if not line or not line.strip():
                debug.debug_event("Protocol", "no more input; stopping")
                return None
            debug.debug_event("Protocol", f"<< {line.strip()}")

            parts = line.split()
            name = parts[0].lower()
            arg = parts[1] if len(parts) > 1 else ""

            if name in _END_COMMANDS:
                result = _END_COMMANDS[name]
                try:
                    enemy = _read_enemy_positions(stdin, len(ctx.roster))
                except ValueError as e:
                    # The announced result stands; only the layout is lost.
                    debug.debug_event("Protocol", f"unreadable enemy layout: {e}", level="warning")
                else:
                    player.register_enemy_positions(enemy)
                player.cleanup(result)
                return result

            handler = commands.get(name)
            if handler is None:
                debug.debug_event("Protocol", f"unknown command: {line.strip()}", level="warning")
                continue
            if not handler(arg):
                return None
    except Exception as e:
        debug.debug_event("Protocol", f"game aborted: {e}", traceback.format_exc(), level="error")
        if player.ctx is not None:
            player.cleanup(GameResult.LOSS)
        raise

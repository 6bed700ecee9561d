import random
from typing import Dict, Optional, Sequence, Set

from adaptive_battleship.domain.context import GameContext
from adaptive_battleship.domain.types import GameResult, Position, Ship, ShipSpec
from adaptive_battleship.persistence.profile import OpponentProfile
from adaptive_battleship.strategies.base import Offense


def simulate_offense_game(
    offense: Offense,
    layout: Sequence[Ship],
    width: int,
    height: int,
    roster: Sequence[ShipSpec],
    rng: Optional[random.Random] = None,
    max_shots: Optional[int] = None,
    profile: Optional[OpponentProfile] = None,
    opponent: str = "sim",
) -> int:
    """Referee one game of `offense` against a known layout; returns shots taken.

    The offense gets hit/miss after every shot and sink once every cell of a
    ship has been hit. A repeated shot or running past `max_shots` (default:
    one shot per cell) raises RuntimeError.
    """
    if rng is None:
        rng = random.Random()
    if profile is None:
        profile = OpponentProfile.fresh(opponent, width, height)
    if max_shots is None:
        max_shots = width * height

    ctx = GameContext(
        opponent=opponent,
        width=width,
        height=height,
        roster=tuple(roster),
        profile=profile,
        rng=rng,
    )
    offense.initialize(ctx)

    owner: Dict[Position, int] = {}
    remaining: Dict[int, int] = {}
    for i, ship in enumerate(layout):
        for p in ship.cells():
            owner[p] = i
        remaining[i] = ship.size

    fired: Set[Position] = set()
    shots = 0
    afloat = len(layout)
    while afloat > 0:
        if shots >= max_shots:
            raise RuntimeError(f"offense did not finish within {max_shots} shots")
        pos = offense.fire(ctx)
        if pos in fired:
            raise RuntimeError(f"offense repeated a shot at {pos}")
        fired.add(pos)
        shots += 1

        i = owner.get(pos)
        if i is None:
            offense.miss(ctx)
            continue
        offense.hit(ctx)
        remaining[i] -= 1
        if remaining[i] == 0:
            afloat -= 1
            offense.sink(ctx, layout[i].code)

    offense.register_enemy_positions(ctx, layout)
    offense.cleanup(ctx, GameResult.WIN)
    return shots

from typing import List, Optional, Sequence, Tuple, Union

from adaptive_battleship.domain.context import GameContext, make_rng
from adaptive_battleship.domain.types import GameResult, Position, Ship, ShipSpec
from adaptive_battleship.domain.validation import validate_game
from adaptive_battleship.persistence.profile import OpponentProfile
from adaptive_battleship.persistence.profile_store import ProfileKey
from adaptive_battleship.strategies.base import Defense, Offense

RosterEntry = Union[ShipSpec, Tuple[str, int]]


def normalize_roster(roster: Sequence[RosterEntry]) -> Tuple[ShipSpec, ...]:
    out = []
    for entry in roster:
        if isinstance(entry, ShipSpec):
            out.append(entry)
        else:
            code, size = entry
            out.append(ShipSpec(str(code), int(size)))
    return tuple(out)


class Player:
    """One offense plus one defense sharing an opponent profile for a game."""

    def __init__(self, offense: Offense, defense: Defense, store):
        self.offense = offense
        self.defense = defense
        self.store = store
        self.ctx: Optional[GameContext] = None
        self._key: Optional[ProfileKey] = None

    def initialize(
        self,
        width: int,
        height: int,
        roster: Sequence[RosterEntry],
        opponent: str,
        instant: Optional[int] = None,
    ) -> GameContext:
        specs = normalize_roster(roster)
        errors = validate_game(width, height, specs)
        if errors:
            raise ValueError("; ".join(errors))

        self._key = ProfileKey(opponent, width, height)
        profile = self.store.load(self._key)
        if profile is None:
            profile = OpponentProfile.fresh(opponent, width, height)

        self.ctx = GameContext(
            opponent=opponent,
            width=width,
            height=height,
            roster=specs,
            profile=profile,
            rng=make_rng(opponent, instant),
        )
        self.offense.initialize(self.ctx)
        self.defense.initialize(self.ctx)
        return self.ctx

    def _context(self) -> GameContext:
        if self.ctx is None:
            raise RuntimeError("player used before initialize()")
        return self.ctx

    def place_ships(self) -> List[Ship]:
        return self.defense.place_ships(self._context())

    def fire(self) -> Position:
        return self.offense.fire(self._context())

    def hit(self) -> None:
        self.offense.hit(self._context())

    def miss(self) -> None:
        self.offense.miss(self._context())

    def sink(self, code: str) -> None:
        self.offense.sink(self._context(), code)

    def incoming_shot(self, pos: Position) -> None:
        ctx = self._context()
        self.defense.incoming_shot(ctx, pos)
        ctx.next_turn()

    def register_enemy_positions(self, ships: Sequence[Ship]) -> None:
        self.offense.register_enemy_positions(self._context(), ships)

    def cleanup(self, result: GameResult) -> None:
        ctx = self._context()
        self.offense.cleanup(ctx, result)
        self.defense.cleanup(ctx, result)
        ctx.profile.record_result(result, ctx.turn)
        self.store.save(self._key, ctx.profile)
        self.ctx = None

from typing import List, Sequence

from adaptive_battleship.domain.config import SHIP_PLACEMENT_ATTEMPTS
from adaptive_battleship.domain.context import GameContext
from adaptive_battleship.domain.types import GameResult, Position, Ship

from .placement import PlacementError, sample_layout
from .targeting import TargetingError


class RandomOffense:
    """Shoots uniformly among cells it has not fired at. A sanity baseline."""

    def __init__(self):
        self._open: List[Position] = []

    def initialize(self, ctx: GameContext) -> None:
        self._open = [Position(r, c) for r in range(ctx.height) for c in range(ctx.width)]

    def fire(self, ctx: GameContext) -> Position:
        if not self._open:
            raise TargetingError("every cell has already been fired upon")
        idx = ctx.rng.randrange(len(self._open))
        self._open[idx], self._open[-1] = self._open[-1], self._open[idx]
        return self._open.pop()

    def hit(self, ctx: GameContext) -> None:
        pass

    def miss(self, ctx: GameContext) -> None:
        pass

    def sink(self, ctx: GameContext, code: str) -> None:
        pass

    def register_enemy_positions(self, ctx: GameContext, ships: Sequence[Ship]) -> None:
        pass

    def cleanup(self, ctx: GameContext, result: GameResult) -> None:
        pass


class RandomDefense:
    """Random non-overlapping, non-touching layout; ignores history."""

    def __init__(self, attempts: int = SHIP_PLACEMENT_ATTEMPTS):
        self.attempts = attempts

    def initialize(self, ctx: GameContext) -> None:
        pass

    def place_ships(self, ctx: GameContext) -> List[Ship]:
        for allow_touching in (False, True):
            for _ in range(self.attempts):
                layout = sample_layout(ctx, allow_touching, self.attempts)
                if layout is not None:
                    return layout
        raise PlacementError(f"no legal layout for {len(ctx.roster)} ships on a {ctx.width}x{ctx.height} board")

    def incoming_shot(self, ctx: GameContext, pos: Position) -> None:
        pass

    def cleanup(self, ctx: GameContext, result: GameResult) -> None:
        pass

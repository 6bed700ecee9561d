from typing import List, Protocol, Sequence

from adaptive_battleship.domain.context import GameContext
from adaptive_battleship.domain.types import GameResult, Position, Ship


class Offense(Protocol):
    """Shoots at the opponent's board."""

    def initialize(self, ctx: GameContext) -> None: ...

    def fire(self, ctx: GameContext) -> Position: ...

    def hit(self, ctx: GameContext) -> None: ...

    def miss(self, ctx: GameContext) -> None: ...

    def sink(self, ctx: GameContext, code: str) -> None: ...

    def register_enemy_positions(self, ctx: GameContext, ships: Sequence[Ship]) -> None: ...

    def cleanup(self, ctx: GameContext, result: GameResult) -> None: ...


class Defense(Protocol):
    """Places our fleet and watches where the opponent shoots."""

    def initialize(self, ctx: GameContext) -> None: ...

    def place_ships(self, ctx: GameContext) -> List[Ship]: ...

    def incoming_shot(self, ctx: GameContext, pos: Position) -> None: ...

    def cleanup(self, ctx: GameContext, result: GameResult) -> None: ...

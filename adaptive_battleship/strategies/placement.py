from typing import List, Optional

from adaptive_battleship.domain.config import (
    HEAT_SCALE,
    NO_TOUCH_CHANCE,
    PLACEMENT_SAMPLES,
    SHIP_PLACEMENT_ATTEMPTS,
)
from adaptive_battleship.domain.context import GameContext
from adaptive_battleship.domain.geometry import in_bounds, possibility_matrix, random_ship
from adaptive_battleship.domain.types import GameResult, Position, Ship
from adaptive_battleship.utils import debug


class PlacementError(RuntimeError):
    pass


def _heat_total(heat) -> int:
    return sum(sum(row) for row in heat)


def sample_layout(
    ctx: GameContext,
    allow_touching: bool,
    attempts: int = SHIP_PLACEMENT_ATTEMPTS,
) -> Optional[List[Ship]]:
    """Drop the roster ship by ship at random; None if some ship found no room."""
    placed: List[Ship] = []
    for spec in ctx.roster:
        for _ in range(attempts):
            ship = random_ship(spec, ctx.width, ctx.height, ctx.rng)
            if allow_touching:
                clash = any(ship.intersects(other) for other in placed)
            else:
                clash = any(ship.intersects_or_adjacent(other) for other in placed)
            if not clash:
                placed.append(ship)
                break
        else:
            return None
    return placed


class PlacementEngine:
    """Monte-Carlo defense.

    Draws random layouts and keeps the one sitting on the coldest cells of the
    opponent's incoming-shot heatmap. The chosen cells are then warmed up so
    the same layout is less attractive next game.
    """

    def __init__(self, samples: int = PLACEMENT_SAMPLES, attempts: int = SHIP_PLACEMENT_ATTEMPTS):
        if samples <= 0 or attempts <= 0:
            raise ValueError("samples and attempts must be positive")
        self.samples = samples
        self.attempts = attempts
        self.allow_touching = False
        self.last_score: Optional[float] = None
        self._shot_turns: List[List[int]] = []

    def initialize(self, ctx: GameContext) -> None:
        heat = ctx.profile.incoming_shots
        if ctx.profile.games_played == 0 and _heat_total(heat) == 0:
            # No history yet: expect shots where ships are most likely to be.
            seeded = possibility_matrix(ctx.width, ctx.height, [s.size for s in ctx.roster])
            for r in range(ctx.height):
                heat[r][:] = seeded[r]
        self._shot_turns = [[0 for _ in range(ctx.width)] for _ in range(ctx.height)]
        self.allow_touching = False
        self.last_score = None

    def place_ships(self, ctx: GameContext) -> List[Ship]:
        self.allow_touching = ctx.rng.random() >= NO_TOUCH_CHANCE
        layout = self._best_layout(ctx, self.allow_touching)
        if layout is None and not self.allow_touching:
            debug.debug_event("Placement", "no layout without touching ships; allowing touches", level="warning")
            self.allow_touching = True
            layout = self._best_layout(ctx, True)
        if layout is None:
            raise PlacementError(f"no legal layout for {len(ctx.roster)} ships on a {ctx.width}x{ctx.height} board")

        self._inflate(ctx, layout)
        debug.debug_event(
            "Placement",
            f"layout vs {ctx.opponent} score={self.last_score:.4f} touching={self.allow_touching}",
            "\n".join(str(s) for s in layout),
        )
        return layout

    def _best_layout(self, ctx: GameContext, allow_touching: bool) -> Optional[List[Ship]]:
        heat = ctx.profile.incoming_shots
        total = _heat_total(heat)
        best: Optional[List[Ship]] = None
        best_score = 0.0
        for _ in range(self.samples):
            layout = sample_layout(ctx, allow_touching, self.attempts)
            if layout is None:
                continue
            score = 0.0
            if total > 0:
                score = sum(heat[p.row][p.column] for ship in layout for p in ship.cells()) / total
            if best is None or score < best_score:
                best = layout
                best_score = score
        if best is not None:
            self.last_score = best_score
        return best

    def _inflate(self, ctx: GameContext, layout: List[Ship]) -> None:
        heat = ctx.profile.incoming_shots
        fleet = sum(ship.size for ship in layout)
        for ship in layout:
            bump = int(ship.size / fleet * HEAT_SCALE)
            for p in ship.cells():
                heat[p.row][p.column] += bump

    def incoming_shot(self, ctx: GameContext, pos: Position) -> None:
        if not in_bounds(pos, ctx.width, ctx.height):
            debug.debug_event("Placement", f"incoming shot off the board at {pos}; ignored", level="warning")
            return
        if self._shot_turns[pos.row][pos.column] == 0:
            self._shot_turns[pos.row][pos.column] = ctx.turn

    def cleanup(self, ctx: GameContext, result: GameResult) -> None:
        # Early shots say more about where the opponent opens than late ones.
        turn = max(ctx.turn, 1)
        heat = ctx.profile.incoming_shots
        for r in range(ctx.height):
            for c in range(ctx.width):
                shot = self._shot_turns[r][c]
                if shot > 0:
                    heat[r][c] += int((turn - shot + 1) / turn * HEAT_SCALE)

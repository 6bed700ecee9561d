from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from adaptive_battleship.domain.config import LAPLACE_SMOOTH_FACTOR, SCORE_EPSILON
from adaptive_battleship.domain.context import GameContext
from adaptive_battleship.domain.geometry import axis_step, in_bounds, neighbours4, ships_touch
from adaptive_battleship.domain.types import GameResult, Orientation, Position, Ship, ShipSpec
from adaptive_battleship.scoring.grid import GridVariant, ProbabilityGrid, format_matrix
from adaptive_battleship.utils import debug


class TargetMode(Enum):
    # No unresolved hit: hunt the whole board.
    SEARCH = "search"
    # Finishing a ship we have already hit.
    DESTROY = "destroy"


class TargetingError(RuntimeError):
    pass


class TargetingEngine:
    """Adaptive offense.

    Two probability grids are kept in lockstep: one that lets ships touch and
    one that assumes they never do. Decisions use the strict grid until the
    opponent shows touching ships, after which the permissive grid is used for
    the rest of the game. Grid probabilities are weighted by a smoothed
    per-cell hit rate from earlier games against the same opponent.
    """

    def __init__(self, smooth_factor: int = LAPLACE_SMOOTH_FACTOR):
        if smooth_factor <= 0:
            raise ValueError("smooth_factor must be positive")
        self.smooth_factor = smooth_factor
        self.reset()

    def reset(self) -> None:
        self.width = 0
        self.height = 0
        self._grids: Dict[GridVariant, ProbabilityGrid] = {}
        self._remaining: List[ShipSpec] = []
        self.mode = TargetMode.SEARCH
        self.hits: List[Position] = []
        self.all_hits: List[Position] = []
        self.last_shot: Optional[Position] = None
        self.orientation = Orientation.BOTH
        self.assume_adjacent = False
        self._sunk_spots = 0
        self._parity = 0
        self._smooth_hits = 0.0
        self._fired: Set[Position] = set()
        self._awaiting_result = False

    # -----------------------------
    # State
    # -----------------------------

    @property
    def active_variant(self) -> GridVariant:
        return GridVariant.PERMISSIVE if self.assume_adjacent else GridVariant.STRICT

    @property
    def grid(self) -> ProbabilityGrid:
        return self._grids[self.active_variant]

    def grid_for(self, variant: GridVariant) -> ProbabilityGrid:
        return self._grids[variant]

    @property
    def remaining(self) -> Tuple[ShipSpec, ...]:
        return tuple(self._remaining)

    @property
    def sunk_spots(self) -> int:
        return self._sunk_spots

    @property
    def parity(self) -> int:
        return self._parity

    def initialize(self, ctx: GameContext) -> None:
        self.reset()
        self.width = ctx.width
        self.height = ctx.height
        self._remaining = list(ctx.roster)
        sizes = [s.size for s in self._remaining]
        self._grids = {variant: ProbabilityGrid(ctx.width, ctx.height, sizes) for variant in GridVariant}
        # Virtual hits so that an unseen cell starts at the expected ship density.
        self._smooth_hits = self.smooth_factor * ctx.fleet_size / ctx.cell_count
        self._parity = 0 if ctx.rng.random() < 0.5 else 1
        # Once an opponent has been seen with touching ships, never assume otherwise.
        self.assume_adjacent = ctx.profile.allows_adjacent > 0

    # -----------------------------
    # Scoring
    # -----------------------------

    def historical_hit_rate(self, ctx: GameContext, pos: Position) -> float:
        hits = ctx.profile.outgoing_hits[pos.row][pos.column]
        misses = ctx.profile.outgoing_misses[pos.row][pos.column]
        return (hits + self._smooth_hits) / (hits + misses + self.smooth_factor)

    def cell_score(self, ctx: GameContext, pos: Position) -> float:
        grid = self.grid
        if grid.total <= 0:
            return 0.0
        return grid.score(pos) / grid.total * self.historical_hit_rate(ctx, pos)

    def neighbour_average(self, ctx: GameContext, pos: Position) -> float:
        scores = [
            self.cell_score(ctx, n)
            for n in neighbours4(pos, self.width, self.height)
            if self.grid.score(n) > 0
        ]
        if not scores:
            return 0.0
        return sum(scores) / len(scores)

    def _is_candidate(self, pos: Position) -> bool:
        return self.grid.is_open(pos) and pos not in self._fired

    def _best(self, ctx: GameContext, cells: Iterable[Position]) -> List[Position]:
        best: List[Position] = []
        best_score = 0.0
        for p in cells:
            score = self.cell_score(ctx, p)
            if not best or score > best_score + SCORE_EPSILON:
                best_score = score
                best = [p]
            elif abs(score - best_score) <= SCORE_EPSILON:
                best.append(p)
        return best

    # -----------------------------
    # Fire
    # -----------------------------

    def fire(self, ctx: GameContext) -> Position:
        if debug.DEBUG_ENABLED:
            self._dump_probabilities(ctx)

        candidates: List[Position] = []
        if self.mode == TargetMode.DESTROY:
            candidates = self._destroy_candidates(ctx)
        if not candidates:
            candidates = self._search_candidates(ctx)
        if not candidates and self.hits:
            candidates = self._unfired_hit_neighbours()

        if not candidates:
            pos = self._fallback_shot(ctx)
        elif len(candidates) == 1:
            pos = candidates[0]
        else:
            pos = self._break_tie(ctx, candidates)

        self.aim(pos)
        return pos

    def aim(self, pos: Position) -> None:
        """Make `pos` the shot awaiting a hit/miss report."""
        self.last_shot = pos
        self._fired.add(pos)
        self._awaiting_result = True

    def _break_tie(self, ctx: GameContext, candidates: Sequence[Position]) -> Position:
        averaged = [(self.neighbour_average(ctx, p), p) for p in candidates]
        top = max(avg for avg, _ in averaged)
        finalists = [p for avg, p in averaged if abs(avg - top) <= SCORE_EPSILON]
        return ctx.rng.choice(finalists)

    def _parity_cells(self, parity: int) -> List[Position]:
        return [
            p
            for p in self.grid.open_cells()
            if (p.row + p.column) % 2 == parity and p not in self._fired
        ]

    def _search_candidates(self, ctx: GameContext) -> List[Position]:
        # Minimum ship size 2 means one checkerboard colour is enough to find every ship.
        for parity in (self._parity, 1 - self._parity):
            cells = self._parity_cells(parity)
            if not cells and not self.assume_adjacent:
                self._assume_touching("no open search cell left on the strict grid")
                cells = self._parity_cells(parity)
            if cells:
                return self._best(ctx, cells)
        return []

    def _hit_neighbours(self, mask: Orientation) -> List[Position]:
        seen: Set[Position] = set()
        out: List[Position] = []
        for h in self.hits:
            steps = []
            if mask & Orientation.VERTICAL:
                steps += [(-1, 0), (1, 0)]
            if mask & Orientation.HORIZONTAL:
                steps += [(0, -1), (0, 1)]
            for dr, dc in steps:
                p = h.offset(dr, dc)
                if p not in seen and self._is_candidate(p):
                    seen.add(p)
                    out.append(p)
        return out

    def _destroy_candidates(self, ctx: GameContext) -> List[Position]:
        cells = self._hit_neighbours(self.orientation)
        if not cells and self.orientation != Orientation.BOTH:
            self.orientation = Orientation.BOTH
            cells = self._hit_neighbours(self.orientation)
        if not cells and not self.assume_adjacent:
            self._assume_touching("no open neighbour around unresolved hits")
            cells = self._hit_neighbours(self.orientation)
        return self._best(ctx, cells)

    def _unfired_hit_neighbours(self) -> List[Position]:
        """On-board neighbours of unresolved hits, whatever the grid says."""
        out: List[Position] = []
        for h in self.hits:
            for p in neighbours4(h, self.width, self.height):
                if p not in self._fired and p not in out:
                    out.append(p)
        return out

    def _fallback_shot(self, ctx: GameContext) -> Position:
        debug.debug_event("Targeting", "grid exhausted, falling back to a random open cell", level="warning")
        for _ in range(ctx.cell_count):
            p = Position(ctx.rng.randrange(self.height), ctx.rng.randrange(self.width))
            if p not in self._fired:
                return p
        for r in range(self.height):
            for c in range(self.width):
                p = Position(r, c)
                if p not in self._fired:
                    return p
        raise TargetingError("every cell has already been fired upon")

    # -----------------------------
    # Feedback
    # -----------------------------

    def _take_result(self, what: str) -> Optional[Position]:
        if not self._awaiting_result or self.last_shot is None:
            debug.debug_event("Targeting", f"{what} reported without a pending shot; ignored", level="warning")
            return None
        self._awaiting_result = False
        return self.last_shot

    def hit(self, ctx: GameContext) -> None:
        pos = self._take_result("hit")
        if pos is None:
            return
        self.hits.append(pos)
        self.all_hits.append(pos)
        # A hit cell still belongs to a ship: its neighbours are only
        # re-split once the ship is resolved by sink().
        for grid in self._grids.values():
            grid.clear(pos)

        if self.mode != TargetMode.DESTROY:
            self.mode = TargetMode.DESTROY
            self.orientation = Orientation.BOTH
        elif len(self.hits) > 1:
            prev, last = self.hits[-2], self.hits[-1]
            if prev.row == last.row:
                self.orientation = Orientation.HORIZONTAL
            elif prev.column == last.column:
                self.orientation = Orientation.VERTICAL

    def miss(self, ctx: GameContext) -> None:
        pos = self._take_result("miss")
        if pos is None:
            return
        for grid in self._grids.values():
            grid.invalidate(pos)
        if self.mode == TargetMode.DESTROY:
            self._narrow_after_miss(pos)

    def _narrow_after_miss(self, pos: Position) -> None:
        # A miss beside a hit only narrows the mask once the hit run has no
        # open cell left at either end along that axis; a miss on one end
        # alone still leaves the other end to try.
        for h in self.hits:
            if abs(h.row - pos.row) + abs(h.column - pos.column) != 1:
                continue
            axis = Orientation.HORIZONTAL if h.row == pos.row else Orientation.VERTICAL
            if self._axis_exhausted(h, axis):
                self.orientation = axis.other()
                return

    def _axis_exhausted(self, start: Position, axis: Orientation) -> bool:
        """True when the hit run through `start` cannot grow along `axis`."""
        hit_set = set(self.hits)
        dr, dc = axis_step(axis)
        for sign in (-1, 1):
            p = start.offset(dr * sign, dc * sign)
            while p in hit_set:
                p = p.offset(dr * sign, dc * sign)
            if self._is_candidate(p):
                return False
        return True

    def sink(self, ctx: GameContext, code: str) -> None:
        ship = next((s for s in self._remaining if s.code == code), None)
        if ship is None:
            debug.debug_event("Targeting", f"sink for unknown ship code {code!r}; ignored", level="warning")
            return

        self._remaining.remove(ship)
        for grid in self._grids.values():
            grid.sink(ship.size)
        self._sunk_spots += ship.size

        if self._sunk_spots < len(self.hits):
            # More hits than sunk ships can account for: two ships were touching.
            self._assume_touching(f"ship {ship.code} sunk with {len(self.hits)} unresolved hits")
            run = self._sunk_run(ship.size)
            if run is not None:
                self._settle(run)
                self._sunk_spots -= ship.size
        elif self._sunk_spots > len(self.hits):
            debug.debug_event(
                "Targeting",
                f"ship {ship.code} sunk but only {len(self.hits)} unresolved hits for {self._sunk_spots} cells",
                level="warning",
            )

        if self._sunk_spots == len(self.hits):
            self._resolve_all()

        self.orientation = Orientation.BOTH

    def _sunk_run(self, size: int) -> Optional[Tuple[Position, ...]]:
        """The only run of `size` unresolved hits through the last shot, if unique."""
        last = self.last_shot
        hit_set = set(self.hits)
        if last is None or last not in hit_set:
            return None
        runs: Set[Tuple[Position, ...]] = set()
        for axis in (Orientation.HORIZONTAL, Orientation.VERTICAL):
            dr, dc = axis_step(axis)
            for back in range(size):
                first = last.offset(-dr * back, -dc * back)
                cells = tuple(first.offset(dr * i, dc * i) for i in range(size))
                if all(c in hit_set for c in cells):
                    runs.add(cells)
        if len(runs) != 1:
            return None
        return next(iter(runs))

    def _settle(self, cells: Iterable[Position]) -> None:
        settled = set(cells)
        self.hits = [h for h in self.hits if h not in settled]
        for p in settled:
            for grid in self._grids.values():
                grid.invalidate(p)

    def _resolve_all(self) -> None:
        hit_set = set(self.hits)
        border: List[Position] = []
        for p in self.hits:
            for grid in self._grids.values():
                grid.invalidate(p)
            for n in neighbours4(p, self.width, self.height):
                if n not in hit_set and n not in border:
                    border.append(n)
        strict = self._grids[GridVariant.STRICT]
        for n in border:
            strict.invalidate(n)

        self.hits = []
        self._sunk_spots = 0
        self.mode = TargetMode.SEARCH

    def _assume_touching(self, reason: str) -> None:
        if self.assume_adjacent:
            return
        self.assume_adjacent = True
        debug.debug_event("Targeting", "assuming ships may touch", reason)

    # -----------------------------
    # End of game
    # -----------------------------

    def register_enemy_positions(self, ctx: GameContext, ships: Sequence[Ship]) -> None:
        profile = ctx.profile
        for r in range(ctx.height):
            for c in range(ctx.width):
                profile.outgoing_misses[r][c] += 1
        for ship in ships:
            for p in ship.cells():
                if not in_bounds(p, ctx.width, ctx.height):
                    continue
                profile.outgoing_misses[p.row][p.column] -= 1
                profile.outgoing_hits[p.row][p.column] += 1
        if ships_touch(list(ships)):
            profile.allows_adjacent += 1

    def cleanup(self, ctx: GameContext, result: GameResult) -> None:
        debug.debug_event(
            "Targeting",
            f"game over vs {ctx.opponent}: {result.value}",
            f"shots={len(self._fired)} hits={len(self.all_hits)} touching={self.assume_adjacent}",
        )

    def _dump_probabilities(self, ctx: GameContext) -> None:
        grid = self.grid
        blended = [
            [self.cell_score(ctx, Position(r, c)) * 1000.0 for c in range(self.width)]
            for r in range(self.height)
        ]
        debug.debug_event(
            "Targeting",
            f"mode={self.mode.value} grid={self.active_variant.value} total={grid.total}",
            format_matrix(grid.snapshot()) + "\n" + format_matrix(blended, lambda v: f"{v:07.2f}"),
        )

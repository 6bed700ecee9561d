from enum import Enum
from typing import Callable, Iterator, List, Sequence

from adaptive_battleship.domain.geometry import axis_step, in_bounds
from adaptive_battleship.domain.types import Orientation, Position

from .dimension import CellScore


class GridVariant(Enum):
    # Ships may touch each other.
    PERMISSIVE = "permissive"
    # Ships never touch: cells bordering a sunk ship are ruled out too.
    STRICT = "strict"


class ProbabilityGrid:
    """Per-cell count of ship placements still consistent with the shots so far.

    `total` always equals the sum of the cell scores and is maintained
    incrementally; only construction sums the whole board.
    """

    def __init__(self, width: int, height: int, sizes: Sequence[int]):
        self.width = width
        self.height = height
        self._cells: List[List[CellScore]] = []
        total = 0
        for r in range(height):
            row: List[CellScore] = []
            for c in range(width):
                cell = CellScore()
                cell.initialize(sizes, r, c, width, height)
                total += cell.score
                row.append(cell)
            self._cells.append(row)
        self.total = total

    def cell(self, pos: Position) -> CellScore:
        return self._cells[pos.row][pos.column]

    def score(self, pos: Position) -> int:
        return self._cells[pos.row][pos.column].score

    def is_open(self, pos: Position) -> bool:
        return in_bounds(pos, self.width, self.height) and self.score(pos) > 0

    def open_cells(self) -> Iterator[Position]:
        for r in range(self.height):
            for c in range(self.width):
                if self._cells[r][c].score > 0:
                    yield Position(r, c)

    def snapshot(self) -> List[List[int]]:
        return [[cell.score for cell in row] for row in self._cells]

    def clear(self, pos: Position) -> None:
        """Rule out `pos` alone, leaving its neighbours' scores as they are."""
        cell = self._cells[pos.row][pos.column]
        self.total -= cell.score
        cell.clear()

    def invalidate(self, pos: Position) -> None:
        """Rule out `pos` and re-split the open runs on all four sides of it.

        Cells whose score collapses to zero while re-splitting are ruled out
        in turn, through a worklist rather than recursion.
        """
        pending = [pos]
        while pending:
            p = pending.pop()
            cell = self._cells[p.row][p.column]
            self.total -= cell.score
            cell.clear()
            for axis in (Orientation.VERTICAL, Orientation.HORIZONTAL):
                dr, dc = axis_step(axis)
                for sign in (-1, 1):
                    run = self._open_run(p, dr * sign, dc * sign)
                    pending.extend(self._apply_run(run, axis))

    def _open_run(self, origin: Position, dr: int, dc: int) -> List[Position]:
        run: List[Position] = []
        p = origin.offset(dr, dc)
        while in_bounds(p, self.width, self.height) and self.score(p) > 0:
            run.append(p)
            p = p.offset(dr, dc)
        return run

    def _apply_run(self, run: List[Position], axis: Orientation) -> List[Position]:
        length = len(run)
        collapsed: List[Position] = []
        for index, p in enumerate(run):
            cell = self._cells[p.row][p.column]
            before = cell.score
            if axis == Orientation.VERTICAL:
                cell.apply_vertical(index, length)
            else:
                cell.apply_horizontal(index, length)
            self.total += cell.score - before
            if before > 0 and cell.score == 0:
                collapsed.append(p)
        return collapsed

    def sink(self, size: int) -> None:
        """Drop one ship of `size` from every open cell on both axes."""
        for row in self._cells:
            for cell in row:
                before = cell.score
                if before > 0:
                    cell.sink(size)
                    self.total += cell.score - before

    def recalculate(self) -> int:
        return sum(cell.score for row in self._cells for cell in row)


def format_matrix(values, fmt: Callable[[object], str] = str) -> str:
    """Tab separated dump with row letters and column digits."""
    if not values:
        return ""
    lines = ["\t" + "\t".join(str(c) for c in range(len(values[0])))]
    for r, row in enumerate(values):
        lines.append(chr(ord("A") + r) + "\t" + "\t".join(fmt(v) for v in row))
    return "\n".join(lines)

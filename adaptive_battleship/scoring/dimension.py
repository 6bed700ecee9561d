from typing import List, Sequence

from adaptive_battleship.domain.geometry import possibilities


class DimensionScore:
    """Remaining ship placements covering one cell along one axis.

    One entry per live ship (so two ships of the same size count twice),
    each holding the number of placements of that ship that still cover the
    cell within the open run of the row or column.
    """

    __slots__ = ("_entries", "_total")

    def __init__(self) -> None:
        self._entries: List[List[int]] = []
        self._total = 0

    @property
    def total(self) -> int:
        return self._total

    def sizes(self) -> List[int]:
        return [size for size, _ in self._entries]

    def count_for(self, size: int) -> int:
        return sum(count for s, count in self._entries if s == size)

    def initialize(self, sizes: Sequence[int], index: int, length: int) -> None:
        self._entries = [[size, possibilities(index, length, size)] for size in sizes]
        self._total = sum(count for _, count in self._entries)

    def apply(self, index: int, length: int) -> None:
        """Re-split over an open run of `length` cells, `index` from its edge.

        Entries that already dropped to zero stay at zero.
        """
        total = 0
        for entry in self._entries:
            if entry[1] > 0:
                entry[1] = possibilities(index, length, entry[0])
                total += entry[1]
        self._total = total

    def sink(self, size: int) -> None:
        for i, (s, _) in enumerate(self._entries):
            if s == size:
                del self._entries[i]
                break
        self.recalculate()

    def clear(self) -> None:
        self._entries = []
        self._total = 0

    def recalculate(self) -> None:
        self._total = sum(count for _, count in self._entries)


class CellScore:
    """Horizontal plus vertical placements covering a cell. Zero rules it out."""

    __slots__ = ("horizontal", "vertical")

    def __init__(self) -> None:
        self.horizontal = DimensionScore()
        self.vertical = DimensionScore()

    @property
    def score(self) -> int:
        return self.horizontal.total + self.vertical.total

    def initialize(self, sizes: Sequence[int], row: int, column: int, width: int, height: int) -> None:
        self.horizontal.initialize(sizes, column, width)
        self.vertical.initialize(sizes, row, height)

    def apply_horizontal(self, index: int, length: int) -> None:
        self.horizontal.apply(index, length)

    def apply_vertical(self, index: int, length: int) -> None:
        self.vertical.apply(index, length)

    def sink(self, size: int) -> None:
        self.horizontal.sink(size)
        self.vertical.sink(size)

    def clear(self) -> None:
        self.horizontal.clear()
        self.vertical.clear()

    def recalculate(self) -> None:
        self.horizontal.recalculate()
        self.vertical.recalculate()

from dataclasses import dataclass
from enum import Enum, IntFlag
from typing import Iterator, Tuple


class Orientation(IntFlag):
    NONE = 0
    HORIZONTAL = 1
    VERTICAL = 2
    BOTH = 3

    def other(self) -> "Orientation":
        """The perpendicular axis (only meaningful for a single axis)."""
        if self == Orientation.HORIZONTAL:
            return Orientation.VERTICAL
        if self == Orientation.VERTICAL:
            return Orientation.HORIZONTAL
        return self


class GameResult(Enum):
    WIN = "win"
    LOSS = "loss"
    TIE = "tie"


@dataclass(frozen=True, order=True)
class Position:
    row: int
    column: int

    def __str__(self) -> str:
        return chr(ord("A") + self.row) + chr(ord("0") + self.column)

    @classmethod
    def parse(cls, text: str) -> "Position":
        text = (text or "").strip()
        if len(text) != 2:
            raise ValueError(f"invalid position: {text!r}")
        row = ord(text[0]) - ord("A")
        column = ord(text[1]) - ord("0")
        if row < 0 or column < 0:
            raise ValueError(f"invalid position: {text!r}")
        return cls(row, column)

    def offset(self, dr: int, dc: int) -> "Position":
        return Position(self.row + dr, self.column + dc)


@dataclass(frozen=True)
class ShipSpec:
    code: str
    size: int


@dataclass(frozen=True)
class Ship:
    code: str
    size: int
    start: Position
    orientation: Orientation = Orientation.HORIZONTAL

    @property
    def end(self) -> Position:
        if self.orientation == Orientation.VERTICAL:
            return self.start.offset(self.size - 1, 0)
        return self.start.offset(0, self.size - 1)

    def cells(self) -> Iterator[Position]:
        for i in range(self.size):
            if self.orientation == Orientation.VERTICAL:
                yield self.start.offset(i, 0)
            else:
                yield self.start.offset(0, i)

    def cell_set(self) -> Tuple[Position, ...]:
        return tuple(self.cells())

    def _span(self, p: Position) -> Tuple[int, int, int]:
        # (distance across the ship's axis, first index, target index) along the ship
        if self.orientation == Orientation.VERTICAL:
            return abs(self.start.column - p.column), self.start.row, p.row
        return abs(self.start.row - p.row), self.start.column, p.column

    def at(self, p: Position) -> bool:
        across, first, idx = self._span(p)
        return across == 0 and first <= idx < first + self.size

    def at_or_adjacent(self, p: Position) -> bool:
        """True when p is on the ship or in its orthogonal one-cell border."""
        across, first, idx = self._span(p)
        if across < 2 and first <= idx < first + self.size:
            return True
        return across == 0 and first - 1 <= idx <= first + self.size

    def adjacent_to(self, p: Position) -> bool:
        return self.at_or_adjacent(p) and not self.at(p)

    def intersects(self, other: "Ship") -> bool:
        return any(self.at(p) for p in other.cells())

    def intersects_or_adjacent(self, other: "Ship") -> bool:
        return any(self.at_or_adjacent(p) for p in other.cells())

    def touches(self, other: "Ship") -> bool:
        return any(self.adjacent_to(p) for p in other.cells())

    def __str__(self) -> str:
        return f"{self.code} {self.start} {self.end}"

    @classmethod
    def parse(cls, text: str) -> "Ship":
        parts = (text or "").split()
        if len(parts) != 3:
            raise ValueError(f"invalid ship placement: {text!r}")
        code = parts[0]
        p1 = Position.parse(parts[1])
        p2 = Position.parse(parts[2])
        if p2 < p1:
            p1, p2 = p2, p1
        if p1.row == p2.row:
            return cls(code, p2.column - p1.column + 1, p1, Orientation.HORIZONTAL)
        if p1.column == p2.column:
            return cls(code, p2.row - p1.row + 1, p1, Orientation.VERTICAL)
        raise ValueError(f"ship endpoints are not collinear: {text!r}")

import random
from typing import Iterator, List, Sequence

from .types import Orientation, Position, Ship, ShipSpec


def possibilities(index: int, length: int, size: int) -> int:
    """Number of placements of a `size`-long ship on a `length`-long line that cover `index`."""
    if size > length:
        bound = 0
    elif size == length:
        bound = 1
    else:
        bound = size
    return min(index + 1, length - index, bound)


def possibility_matrix(width: int, height: int, sizes: Sequence[int]) -> List[List[int]]:
    """Per-cell count of row + column placements over the open board."""
    matrix = [[0 for _ in range(width)] for _ in range(height)]
    for r in range(height):
        for c in range(width):
            total = 0
            for size in sizes:
                total += possibilities(r, height, size)
                total += possibilities(c, width, size)
            matrix[r][c] = total
    return matrix


def in_bounds(pos: Position, width: int, height: int) -> bool:
    return 0 <= pos.row < height and 0 <= pos.column < width


def neighbours4(pos: Position, width: int, height: int) -> Iterator[Position]:
    for dr, dc in [(-1, 0), (1, 0), (0, -1), (0, 1)]:
        p = pos.offset(dr, dc)
        if in_bounds(p, width, height):
            yield p


def axis_step(axis: Orientation):
    return (0, 1) if axis == Orientation.HORIZONTAL else (1, 0)


def random_ship(spec: ShipSpec, width: int, height: int, rng: random.Random) -> Ship:
    """Uniform random start and orientation with the whole ship on the board."""
    orientations = []
    if spec.size <= width:
        orientations.append(Orientation.HORIZONTAL)
    if spec.size <= height:
        orientations.append(Orientation.VERTICAL)
    if not orientations:
        raise ValueError(f"ship {spec.code} of size {spec.size} does not fit on {width}x{height}")
    orientation = rng.choice(orientations)
    if orientation == Orientation.HORIZONTAL:
        start = Position(rng.randrange(height), rng.randrange(width - spec.size + 1))
    else:
        start = Position(rng.randrange(height - spec.size + 1), rng.randrange(width))
    return Ship(spec.code, spec.size, start, orientation)


def ships_touch(ships: Sequence[Ship]) -> bool:
    for i in range(len(ships)):
        for j in range(i + 1, len(ships)):
            if ships[i].touches(ships[j]):
                return True
    return False

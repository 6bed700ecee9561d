from typing import List, Sequence

from .types import ShipSpec


def validate_game(width: int, height: int, roster: Sequence[ShipSpec]) -> List[str]:
    errors: List[str] = []

    if width <= 0:
        errors.append("width must be positive")
    if height <= 0:
        errors.append("height must be positive")

    if not roster:
        errors.append("roster must define at least one ship")

    # Codes may repeat (the referee can field two ships under one code);
    # Sink then resolves the first remaining match.
    for ship in roster:
        _validate_ship(ship, width, height, errors)

    return errors


def _validate_ship(ship: ShipSpec, width: int, height: int, errors: List[str]) -> None:
    if not ship.code or " " in ship.code:
        errors.append(f"ship code must be a non-empty word: {ship.code!r}")

    if ship.size <= 0:
        errors.append(f"ship {ship.code} must have size > 0")
    elif width > 0 and height > 0 and ship.size > max(width, height):
        errors.append(f"ship {ship.code} of size {ship.size} does not fit on a {width}x{height} board")

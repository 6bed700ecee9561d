import hashlib
import random
import time
from dataclasses import dataclass
from typing import Optional, Tuple

from adaptive_battleship.persistence.profile import OpponentProfile

from .types import ShipSpec


def make_rng(opponent: str, instant: Optional[int] = None) -> random.Random:
    """Per-game generator seeded from the opponent id and an instant.

    Pass `instant` explicitly to replay a game; it defaults to the wall clock.
    """
    if instant is None:
        instant = time.time_ns()
    payload = f"{opponent}|{int(instant)}".encode("utf-8")
    digest = hashlib.blake2b(payload, digest_size=8).digest()
    return random.Random(int.from_bytes(digest, "little") & 0x7FFFFFFF)


@dataclass
class GameContext:
    opponent: str
    width: int
    height: int
    roster: Tuple[ShipSpec, ...]
    profile: OpponentProfile
    rng: random.Random
    turn: int = 1

    @property
    def cell_count(self) -> int:
        return self.width * self.height

    @property
    def fleet_size(self) -> int:
        return sum(s.size for s in self.roster)

    def next_turn(self) -> None:
        self.turn += 1

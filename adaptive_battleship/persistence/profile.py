from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from adaptive_battleship.domain.types import GameResult

PROFILE_SCHEMA = 1

Matrix = List[List[int]]


def _zeros(width: int, height: int) -> Matrix:
    return [[0 for _ in range(width)] for _ in range(height)]


def _matrix_from(raw: Any, width: int, height: int) -> Optional[Matrix]:
    if not isinstance(raw, list) or len(raw) != height:
        return None
    out: Matrix = []
    for row in raw:
        if not isinstance(row, list) or len(row) != width:
            return None
        try:
            out.append([int(v) for v in row])
        except (TypeError, ValueError):
            return None
    return out


@dataclass
class OpponentProfile:
    """What we have learned about one opponent on one board size.

    `incoming_shots` is keyed by our board (where they like to shoot);
    `outgoing_hits` / `outgoing_misses` by theirs (where their ships sat).
    """

    opponent: str
    width: int
    height: int
    incoming_shots: Matrix = field(default_factory=list)
    outgoing_hits: Matrix = field(default_factory=list)
    outgoing_misses: Matrix = field(default_factory=list)
    allows_adjacent: int = 0
    wins: int = 0
    losses: int = 0
    ties: int = 0
    min_turns: Optional[int] = None
    max_turns: int = 0
    average_turns: float = 0.0

    @classmethod
    def fresh(cls, opponent: str, width: int, height: int) -> "OpponentProfile":
        return cls(
            opponent=opponent,
            width=width,
            height=height,
            incoming_shots=_zeros(width, height),
            outgoing_hits=_zeros(width, height),
            outgoing_misses=_zeros(width, height),
        )

    @property
    def games_played(self) -> int:
        return self.wins + self.losses + self.ties

    def record_result(self, result: GameResult, turns: int) -> None:
        if result == GameResult.WIN:
            self.wins += 1
        elif result == GameResult.LOSS:
            self.losses += 1
        else:
            self.ties += 1

        if self.min_turns is None or turns < self.min_turns:
            self.min_turns = turns
        if turns > self.max_turns:
            self.max_turns = turns

        games = self.games_played
        self.average_turns = (self.average_turns * (games - 1) + turns) / games

    def to_dict(self) -> Dict[str, Any]:
        return {
            "schema": PROFILE_SCHEMA,
            "opponent": self.opponent,
            "width": self.width,
            "height": self.height,
            "incoming_shots": self.incoming_shots,
            "outgoing_hits": self.outgoing_hits,
            "outgoing_misses": self.outgoing_misses,
            "allows_adjacent": self.allows_adjacent,
            "wins": self.wins,
            "losses": self.losses,
            "ties": self.ties,
            "min_turns": self.min_turns,
            "max_turns": self.max_turns,
            "average_turns": self.average_turns,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Optional["OpponentProfile"]:
        if not isinstance(data, dict):
            return None
        try:
            width = int(data.get("width", 0))
            height = int(data.get("height", 0))
        except (TypeError, ValueError):
            return None
        if width <= 0 or height <= 0:
            return None

        incoming = _matrix_from(data.get("incoming_shots"), width, height)
        hits = _matrix_from(data.get("outgoing_hits"), width, height)
        misses = _matrix_from(data.get("outgoing_misses"), width, height)
        if incoming is None or hits is None or misses is None:
            return None

        def _int(key: str) -> int:
            try:
                return max(0, int(data.get(key, 0) or 0))
            except (TypeError, ValueError):
                return 0

        min_turns = data.get("min_turns")
        try:
            min_turns = int(min_turns) if min_turns is not None else None
        except (TypeError, ValueError):
            min_turns = None
        try:
            average = float(data.get("average_turns", 0.0) or 0.0)
        except (TypeError, ValueError):
            average = 0.0

        return cls(
            opponent=str(data.get("opponent", "")),
            width=width,
            height=height,
            incoming_shots=incoming,
            outgoing_hits=hits,
            outgoing_misses=misses,
            allows_adjacent=_int("allows_adjacent"),
            wins=_int("wins"),
            losses=_int("losses"),
            ties=_int("ties"),
            min_turns=min_turns,
            max_turns=_int("max_turns"),
            average_turns=average,
        )

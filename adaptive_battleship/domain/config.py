import os

# Board defaults (classic game)
BOARD_WIDTH = 10
BOARD_HEIGHT = 10

# (code, size) in the order the referee announces them
DEFAULT_ROSTER = (
    ("D", 2),
    ("S", 3),
    ("C", 3),
    ("B", 4),
    ("A", 5),
)


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return str(raw).strip().lower() not in {"0", "false", "no", "off", ""}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(str(raw).strip())
        return value if value > 0 else default
    except ValueError:
        return default


def _env_str(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip()


# Defense: Monte-Carlo layouts drawn per game, keep the coldest one.
PLACEMENT_SAMPLES = _env_int("BATTLESHIP_PLACEMENT_SAMPLES", 1000)

# Chance that a game forbids our own ships from touching.
NO_TOUCH_CHANCE = 0.6

# Attempts to drop one ship into a partially built layout before the
# whole sample is thrown away.
SHIP_PLACEMENT_ATTEMPTS = 200

# Persisted heat increments are integers on this scale.
HEAT_SCALE = 1000

# Offense: Laplace smoothing of historical hit rates. The "virtual hits"
# term is derived per game from ship density (see TargetingEngine).
LAPLACE_SMOOTH_FACTOR = 15

# Scores closer than this are treated as ties.
SCORE_EPSILON = 1e-12

DEBUG_ENV = "BATTLESHIP_DEBUG"
DEBUG_LOG_ENV = "BATTLESHIP_DEBUG_LOG"
PROFILE_DIR_ENV = "BATTLESHIP_PROFILE_DIR"
DEFAULT_PROFILE_DIR = _env_str(PROFILE_DIR_ENV, "battleship_profiles")

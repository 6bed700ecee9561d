from datetime import datetime
from typing import Optional

from adaptive_battleship.domain.config import DEBUG_ENV, DEBUG_LOG_ENV, _env_flag, _env_str

# -----------------------------
# Debug helpers (enable with --debug or env BATTLESHIP_DEBUG=1)
# -----------------------------
DEBUG_ENABLED = _env_flag(DEBUG_ENV, False)
DEBUG_LOG_PATH = _env_str(DEBUG_LOG_ENV, "battleship_debug.log")


def enable_debug(path: Optional[str] = None) -> None:
    global DEBUG_ENABLED, DEBUG_LOG_PATH
    DEBUG_ENABLED = True
    if path:
        DEBUG_LOG_PATH = path


def _debug_log_line(line: str) -> None:
    try:
        ts = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        with open(DEBUG_LOG_PATH, "a", encoding="utf-8") as f:
            f.write(f"[{ts}] {line}\n")
    except OSError:
        pass


def debug_event(
    title: str,
    message: str,
    details: str = "",
    *,
    level: str = "info",
) -> None:
    """Append a debug event to the log file. Errors are always written."""
    if not DEBUG_ENABLED and level != "error":
        return
    _debug_log_line(f"{level.upper()} | {title} | {message}")
    if details:
        for ln in details.splitlines():
            _debug_log_line(f"    {ln}")

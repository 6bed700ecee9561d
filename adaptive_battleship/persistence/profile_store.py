import copy
import hashlib
import json
import os
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional

from adaptive_battleship.domain.config import DEFAULT_PROFILE_DIR

from .profile import OpponentProfile


@dataclass(frozen=True)
class ProfileKey:
    opponent: str
    width: int
    height: int


def profile_filename(key: ProfileKey) -> str:
    safe = re.sub(r"[^A-Za-z0-9_.-]+", "_", key.opponent).strip("._")[:48] or "opponent"
    digest = hashlib.sha256(key.opponent.encode("utf-8")).hexdigest()[:8]
    return f"{safe}-{digest}_{int(key.width)}_{int(key.height)}.json"


def _write_atomic(path: str, data: Dict[str, Any]) -> None:
    tmp_path = f"{path}.tmp"
    try:
        with open(tmp_path, "w") as f:
            json.dump(data, f)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
    except OSError:
        try:
            os.remove(tmp_path)
        except OSError:
            pass


class ProfileStore:
    """One JSON file per (opponent, width, height)."""

    def __init__(self, directory: str = DEFAULT_PROFILE_DIR):
        self.directory = directory

    def path_for(self, key: ProfileKey) -> str:
        return os.path.join(self.directory, profile_filename(key))

    def load(self, key: ProfileKey) -> Optional[OpponentProfile]:
        path = self.path_for(key)
        if not os.path.exists(path):
            return None
        try:
            with open(path, "r") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError):
            return None
        profile = OpponentProfile.from_dict(data)
        if profile is None or profile.width != key.width or profile.height != key.height:
            return None
        return profile

    def save(self, key: ProfileKey, profile: OpponentProfile) -> None:
        try:
            os.makedirs(self.directory, exist_ok=True)
        except OSError:
            return
        _write_atomic(self.path_for(key), profile.to_dict())


class MemoryProfileStore:
    """Keeps profiles in memory; used by simulations and tests."""

    def __init__(self):
        self._profiles: Dict[ProfileKey, Dict[str, Any]] = {}

    def load(self, key: ProfileKey) -> Optional[OpponentProfile]:
        data = self._profiles.get(key)
        if data is None:
            return None
        return OpponentProfile.from_dict(copy.deepcopy(data))

    def save(self, key: ProfileKey, profile: OpponentProfile) -> None:
        self._profiles[key] = copy.deepcopy(profile.to_dict())

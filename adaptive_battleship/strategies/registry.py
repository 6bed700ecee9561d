from typing import Dict, List

from adaptive_battleship.game.player import Player

from .placement import PlacementEngine
from .random_player import RandomDefense, RandomOffense
from .targeting import TargetingEngine


def player_defs() -> List[Dict[str, object]]:
    # Keep in sync with build_player.
    return [
        {
            "key": "adaptive",
            "name": "Adaptive",
            "description": "Probability-grid targeting blended with per-opponent history; Monte-Carlo placement away from their favourite cells.",
            "notes": "Learns across games: keep the profile directory between runs against the same opponent.",
        },
        {
            "key": "random",
            "name": "Random",
            "description": "Shoots uniformly among unfired cells and places ships at random.",
            "notes": "A sanity-check baseline; performance should be the worst.",
        },
    ]


def player_keys() -> List[str]:
    return [str(pd["key"]) for pd in player_defs()]


def build_player(key: str, store) -> Player:
    key = (key or "adaptive").strip().lower()
    if key == "adaptive":
        return Player(TargetingEngine(), PlacementEngine(), store)
    if key == "random":
        return Player(RandomOffense(), RandomDefense(), store)
    raise ValueError(f"Unknown player '{key}'. Choose one of: {', '.join(player_keys())}")

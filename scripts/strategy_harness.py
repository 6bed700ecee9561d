#!/usr/bin/env python3
import argparse
import hashlib
import random
import statistics
import time
from typing import Iterable, List

from adaptive_battleship.domain.config import BOARD_HEIGHT, BOARD_WIDTH, DEFAULT_ROSTER
from adaptive_battleship.domain.context import GameContext
from adaptive_battleship.domain.types import ShipSpec
from adaptive_battleship.persistence.profile import OpponentProfile
from adaptive_battleship.persistence.profile_store import MemoryProfileStore
from adaptive_battleship.sim.attack_sim import simulate_offense_game
from adaptive_battleship.strategies.placement import sample_layout
from adaptive_battleship.strategies.registry import build_player, player_keys


def _stable_seed(global_seed: int, player_key: str, game_index: int) -> int:
    payload = f"{int(global_seed)}|{player_key}|{int(game_index)}".encode("utf-8")
    digest = hashlib.blake2b(payload, digest_size=8).digest()
    return int.from_bytes(digest, "little") & 0x7FFFFFFF


def _percentile(values: List[int], pct: float) -> float:
    if not values:
        return 0.0
    if pct <= 0:
        return float(values[0])
    if pct >= 100:
        return float(values[-1])
    k = (len(values) - 1) * (pct / 100.0)
    f = int(k)
    c = min(f + 1, len(values) - 1)
    if f == c:
        return float(values[f])
    d0 = values[f] * (c - k)
    d1 = values[c] * (k - f)
    return float(d0 + d1)


def _resolve_players(raw: str) -> List[str]:
    all_keys = player_keys()
    if not raw or raw.strip().lower() in {"all", "*"}:
        return list(all_keys)
    keys = [k.strip() for k in raw.split(",") if k.strip()]
    for key in keys:
        if key not in all_keys:
            raise ValueError(f"Unknown player key '{key}'.")
    return keys


def _run_player(key: str, width: int, height: int, roster, games: int, seed: int, allow_touching: bool) -> dict:
    shots: List[int] = []
    # One profile per player so the adaptive offense learns across the run.
    profile = OpponentProfile.fresh("harness", width, height)
    start = time.perf_counter()
    for i in range(games):
        rng = random.Random(_stable_seed(seed, key, i))
        layout_ctx = GameContext("harness", width, height, roster, OpponentProfile.fresh("harness", width, height), rng)
        layout = sample_layout(layout_ctx, allow_touching)
        if layout is None:
            raise RuntimeError("could not draw a target layout")
        offense = build_player(key, MemoryProfileStore()).offense
        shots.append(simulate_offense_game(offense, layout, width, height, roster, rng=rng, profile=profile))
    elapsed = time.perf_counter() - start
    shots_sorted = sorted(shots)
    return {
        "games": games,
        "mean": statistics.mean(shots) if shots else 0.0,
        "median": statistics.median(shots_sorted) if shots_sorted else 0.0,
        "p90": _percentile(shots_sorted, 90.0),
        "min": shots_sorted[0] if shots_sorted else 0,
        "max": shots_sorted[-1] if shots_sorted else 0,
        "time": elapsed,
    }


def main(argv: Iterable[str] = None) -> int:
    parser = argparse.ArgumentParser(description="Strategy harness: compare offenses on fixed RNG seeds.")
    parser.add_argument("--width", type=int, default=BOARD_WIDTH)
    parser.add_argument("--height", type=int, default=BOARD_HEIGHT)
    parser.add_argument("--games", type=int, default=200, help="Games per player")
    parser.add_argument("--seed", type=int, default=1337, help="Global seed")
    parser.add_argument("--players", default="all", help="Comma-separated player keys or 'all'")
    parser.add_argument("--touching", action="store_true", help="Let target ships touch")
    args = parser.parse_args(list(argv) if argv is not None else None)

    roster = tuple(ShipSpec(code, size) for code, size in DEFAULT_ROSTER)
    players = _resolve_players(args.players)

    print(f"Board: {args.width}x{args.height}, touching={args.touching}")
    print(f"Games per player: {args.games}, Seed: {args.seed}")
    print()

    rows = []
    for key in players:
        stats = _run_player(key, args.width, args.height, roster, args.games, args.seed, args.touching)
        rows.append((key, stats))

    header = f"{'Player':<12} {'Mean':>6} {'Median':>6} {'P90':>6} {'Min':>5} {'Max':>5} {'Time(s)':>8}"
    print(header)
    print("-" * len(header))
    for key, s in rows:
        print(
            f"{key:<12} {s['mean']:>6.2f} {s['median']:>6.0f} {s['p90']:>6.0f} "
            f"{s['min']:>5} {s['max']:>5} {s['time']:>8.2f}"
        )

    return 0


if __name__ == "__main__":
    raise SystemExit(main())

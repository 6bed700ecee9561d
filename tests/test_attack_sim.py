import random
import unittest

from adaptive_battleship.domain.context import GameContext
from adaptive_battleship.domain.types import Orientation, Position, Ship, ShipSpec
from adaptive_battleship.persistence.profile import OpponentProfile
from adaptive_battleship.sim.attack_sim import simulate_offense_game
from adaptive_battleship.strategies.placement import sample_layout
from adaptive_battleship.strategies.random_player import RandomOffense
from adaptive_battleship.strategies.targeting import TargetingEngine

CLASSIC = (
    ShipSpec("D", 2),
    ShipSpec("S", 3),
    ShipSpec("C", 3),
    ShipSpec("B", 4),
    ShipSpec("A", 5),
)


def _layout(seed, allow_touching):
    ctx = GameContext("sim", 10, 10, CLASSIC, OpponentProfile.fresh("sim", 10, 10), random.Random(seed))
    layout = sample_layout(ctx, allow_touching)
    assert layout is not None
    return layout


class _WatchedEngine(TargetingEngine):
    """Counts shots at ruled-out cells and random fallbacks."""

    def __init__(self):
        super().__init__()
        self.zero_score_shots = 0
        self.fallbacks = 0

    def fire(self, ctx):
        pos = super().fire(ctx)
        # grids only change on hit/miss, so this is the score the shot was chosen on
        if self.grid.score(pos) <= 0:
            self.zero_score_shots += 1
        return pos

    def _fallback_shot(self, ctx):
        self.fallbacks += 1
        return super()._fallback_shot(ctx)


class AttackSimTests(unittest.TestCase):
    def test_every_shot_targets_an_open_cell(self):
        shots = []
        for seed in range(12):
            engine = _WatchedEngine()
            layout = _layout(200 + seed, allow_touching=seed % 2 == 1)
            shots.append(simulate_offense_game(engine, layout, 10, 10, CLASSIC, rng=random.Random(seed)))
            self.assertEqual(engine.fallbacks, 0)
            self.assertEqual(engine.zero_score_shots, 0)
        self.assertLess(sum(shots) / len(shots), 55)

    def test_adaptive_offense_finishes_without_repeats(self):
        # simulate_offense_game raises on a repeated shot or on running past 100
        for seed in range(8):
            shots = simulate_offense_game(
                TargetingEngine(), _layout(seed, allow_touching=False), 10, 10, CLASSIC, rng=random.Random(seed)
            )
            self.assertGreaterEqual(shots, 17)
            self.assertLessEqual(shots, 100)

    def test_adaptive_offense_handles_touching_ships(self):
        for seed in range(8):
            shots = simulate_offense_game(
                TargetingEngine(), _layout(100 + seed, allow_touching=True), 10, 10, CLASSIC, rng=random.Random(seed)
            )
            self.assertLessEqual(shots, 100)

    def test_packed_fleet(self):
        # every ship in the same corner block, all touching
        layout = [
            Ship("D", 2, Position(0, 0), Orientation.HORIZONTAL),
            Ship("S", 3, Position(1, 0), Orientation.HORIZONTAL),
            Ship("C", 3, Position(2, 0), Orientation.HORIZONTAL),
            Ship("B", 4, Position(3, 0), Orientation.HORIZONTAL),
            Ship("A", 5, Position(4, 0), Orientation.HORIZONTAL),
        ]
        for seed in range(4):
            engine = TargetingEngine()
            shots = simulate_offense_game(engine, layout, 10, 10, CLASSIC, rng=random.Random(seed))
            self.assertLessEqual(shots, 100)
            self.assertTrue(engine.assume_adjacent)

    def test_history_carries_between_games(self):
        profile = OpponentProfile.fresh("sim", 10, 10)
        layout = _layout(5, allow_touching=False)
        for seed in range(3):
            simulate_offense_game(TargetingEngine(), layout, 10, 10, CLASSIC, rng=random.Random(seed), profile=profile)
        cell = layout[0].start
        self.assertEqual(profile.outgoing_hits[cell.row][cell.column], 3)
        self.assertEqual(sum(sum(row) for row in profile.outgoing_hits), 3 * 17)

    def test_random_offense_baseline(self):
        shots = simulate_offense_game(RandomOffense(), _layout(1, False), 10, 10, CLASSIC, rng=random.Random(1))
        self.assertLessEqual(shots, 100)

    def test_repeated_shot_is_reported(self):
        class Stubborn:
            def initialize(self, ctx):
                pass

            def fire(self, ctx):
                return Position(9, 9)

            def hit(self, ctx):
                pass

            def miss(self, ctx):
                pass

            def sink(self, ctx, code):
                pass

            def register_enemy_positions(self, ctx, ships):
                pass

            def cleanup(self, ctx, result):
                pass

        with self.assertRaises(RuntimeError):
            simulate_offense_game(Stubborn(), [Ship("D", 2, Position(0, 0))], 10, 10, (ShipSpec("D", 2),))


if __name__ == "__main__":
    unittest.main()

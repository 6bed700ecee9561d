import copy
import random
import unittest

from adaptive_battleship.domain.context import GameContext
from adaptive_battleship.domain.geometry import possibility_matrix
from adaptive_battleship.domain.types import GameResult, Position, ShipSpec
from adaptive_battleship.persistence.profile import OpponentProfile
from adaptive_battleship.strategies.placement import PlacementEngine, PlacementError, sample_layout

CLASSIC = (
    ShipSpec("D", 2),
    ShipSpec("S", 3),
    ShipSpec("C", 3),
    ShipSpec("B", 4),
    ShipSpec("A", 5),
)


def _ctx(width=10, height=10, roster=CLASSIC, seed=0, profile=None):
    if profile is None:
        profile = OpponentProfile.fresh("tester", width, height)
    return GameContext("tester", width, height, tuple(roster), profile, random.Random(seed))


class PlacementTests(unittest.TestCase):
    def test_classic_layout_is_valid(self):
        for seed in range(5):
            ctx = _ctx(seed=seed)
            engine = PlacementEngine(samples=50)
            engine.initialize(ctx)
            ships = engine.place_ships(ctx)

            self.assertEqual(sorted(s.code for s in ships), ["A", "B", "C", "D", "S"])
            cells = [p for s in ships for p in s.cells()]
            self.assertEqual(len(cells), 17)
            self.assertEqual(len(set(cells)), 17)
            for p in cells:
                self.assertTrue(0 <= p.row < 10 and 0 <= p.column < 10)
            if not engine.allow_touching:
                for i, a in enumerate(ships):
                    for b in ships[i + 1:]:
                        self.assertFalse(a.intersects_or_adjacent(b))

    def test_non_touching_samples_keep_their_distance(self):
        for seed in range(20):
            ctx = _ctx(seed=seed)
            layout = sample_layout(ctx, allow_touching=False)
            if layout is None:
                continue
            for i, a in enumerate(layout):
                for b in layout[i + 1:]:
                    self.assertFalse(a.intersects_or_adjacent(b))

    def test_fresh_profile_seeds_heat(self):
        ctx = _ctx()
        engine = PlacementEngine(samples=1)
        engine.initialize(ctx)
        self.assertEqual(ctx.profile.incoming_shots, possibility_matrix(10, 10, [2, 3, 3, 4, 5]))

    def test_chosen_cells_are_inflated(self):
        ctx = _ctx(seed=4)
        engine = PlacementEngine(samples=20)
        engine.initialize(ctx)
        before = copy.deepcopy(ctx.profile.incoming_shots)
        ships = engine.place_ships(ctx)
        after = ctx.profile.incoming_shots

        expected = [[0] * 10 for _ in range(10)]
        for ship in ships:
            for p in ship.cells():
                expected[p.row][p.column] = int(ship.size / 17 * 1000)
        for r in range(10):
            for c in range(10):
                self.assertEqual(after[r][c] - before[r][c], expected[r][c])

    def test_prefers_cold_cells(self):
        profile = OpponentProfile.fresh("tester", 4, 4)
        profile.wins = 1
        # everything but the bottom row is hot
        for r in range(3):
            profile.incoming_shots[r] = [100, 100, 100, 100]
        ctx = _ctx(4, 4, (ShipSpec("D", 2),), profile=profile)
        engine = PlacementEngine(samples=200)
        engine.initialize(ctx)
        ships = engine.place_ships(ctx)
        self.assertTrue(all(p.row == 3 for p in ships[0].cells()))
        self.assertEqual(engine.last_score, 0.0)

    def test_falls_back_to_touching(self):
        roster = (ShipSpec("X", 1), ShipSpec("Y", 1))
        ctx = _ctx(2, 1, roster)
        engine = PlacementEngine(samples=5, attempts=20)
        engine.initialize(ctx)
        ships = engine.place_ships(ctx)
        self.assertTrue(engine.allow_touching)
        self.assertEqual({p for s in ships for p in s.cells()}, {Position(0, 0), Position(0, 1)})

    def test_impossible_roster_raises(self):
        roster = (ShipSpec("X", 1), ShipSpec("Y", 1), ShipSpec("Z", 1))
        ctx = _ctx(2, 1, roster)
        engine = PlacementEngine(samples=3, attempts=5)
        engine.initialize(ctx)
        with self.assertRaises(PlacementError):
            engine.place_ships(ctx)


class IncomingShotTests(unittest.TestCase):
    def test_early_shots_weigh_more(self):
        profile = OpponentProfile.fresh("tester", 10, 10)
        profile.wins = 1
        ctx = _ctx(profile=profile)
        engine = PlacementEngine(samples=1)
        engine.initialize(ctx)

        engine.incoming_shot(ctx, Position(0, 0))
        ctx.next_turn()
        engine.incoming_shot(ctx, Position(1, 1))
        ctx.next_turn()
        engine.cleanup(ctx, GameResult.WIN)

        self.assertEqual(profile.incoming_shots[0][0], 1000)
        self.assertEqual(profile.incoming_shots[1][1], 666)
        self.assertEqual(sum(sum(row) for row in profile.incoming_shots), 1666)

    def test_off_board_shot_is_ignored(self):
        profile = OpponentProfile.fresh("tester", 10, 10)
        profile.wins = 1
        ctx = _ctx(profile=profile)
        engine = PlacementEngine(samples=1)
        engine.initialize(ctx)
        engine.incoming_shot(ctx, Position(12, 0))
        ctx.next_turn()
        engine.cleanup(ctx, GameResult.WIN)
        self.assertEqual(sum(sum(row) for row in profile.incoming_shots), 0)


if __name__ == "__main__":
    unittest.main()

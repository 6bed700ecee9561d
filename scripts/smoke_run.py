import random

from adaptive_battleship.domain.types import Orientation, Position, Ship, ShipSpec
from adaptive_battleship.sim.attack_sim import simulate_offense_game
from adaptive_battleship.strategies.targeting import TargetingEngine


def main() -> None:
    roster = (ShipSpec("s1", 2), ShipSpec("s2", 2))
    layout = [
        Ship("s1", 2, Position(0, 0), Orientation.HORIZONTAL),
        Ship("s2", 2, Position(2, 3), Orientation.VERTICAL),
    ]

    shots = simulate_offense_game(
        TargetingEngine(),
        layout,
        4,
        4,
        roster,
        rng=random.Random(0),
    )
    print(f"Smoke OK: shots={shots}")


if __name__ == "__main__":
    main()

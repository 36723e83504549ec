#!/usr/bin/env python3
"""
Example usage of the gameoflife package.
"""

from pathlib import Path

from gameoflife import GameOfLife, initialize
from gameoflife.core.seed import RLEFileSeed


def main():
    """Load the glider, center it on a small grid and watch it move."""
    grid = initialize(12, 12, RLEFileSeed(Path(__file__).parent / "patterns" / "glider.rle"))
    game = GameOfLife(grid)

    print("Initial state:")
    print(grid)
    print(f"Live cells: {grid.live_cells()}")
    print()

    for _ in range(8):
        game.step()
        print(f"Generation {game.generation}:")
        print(grid)
        print()

    final_generation, reason = game.run(max_generations=100)
    print(f"Stopped at generation {final_generation}: {reason}")
    for key, value in game.get_statistics().items():
        print(f"  {key}: {value}")


if __name__ == "__main__":
    main()

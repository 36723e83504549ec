"""Command-line interface for Conway's Game of Life."""

import argparse
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, TextIO

from ..core.errors import GameOfLifeError
from ..core.game import GameOfLife
from ..core.grid import Grid
from ..core.patterns import Pattern
from ..core.rle import encode_rle
from ..core.seed import SeedConfig, initialize

DEFAULT_ROWS = 40
DEFAULT_COLS = 80
DEFAULT_DENSITY = 0.5
DEFAULT_RATE_MS = 250

ALIVE_GLYPH = "●"
DEAD_GLYPH = " "
CLEAR_SCREEN = "\x1b[2J\x1b[H"


@dataclass
class RunConfig:
    """Resolved settings for one run."""

    rows: Optional[int] = DEFAULT_ROWS
    cols: Optional[int] = DEFAULT_COLS
    density: Optional[float] = None
    pattern_file: Optional[Path] = None
    rate_ms: int = DEFAULT_RATE_MS
    toroidal: bool = False
    max_generations: Optional[int] = None
    seed: Optional[int] = None

    def seed_config(self) -> SeedConfig:
        """Seed configuration, falling back to the default density."""
        density = self.density
        if density is None and self.pattern_file is None:
            density = DEFAULT_DENSITY
        return SeedConfig.from_options(density=density, path=self.pattern_file)

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "RunConfig":
        """Build a config from parsed arguments."""
        return cls(
            rows=None if args.fit else args.rows,
            cols=None if args.fit else args.cols,
            density=args.density,
            pattern_file=args.file,
            rate_ms=args.rate,
            toroidal=args.toroidal,
            max_generations=args.max_generations,
            seed=args.seed,
        )


def render_frame(grid: Grid) -> str:
    """Draw the grid inside a box border, one character per cell."""
    live = set(grid.live_cells())
    lines = ["┌" + "─" * grid.cols + "┐"]
    for r in range(grid.rows):
        row = "".join(ALIVE_GLYPH if (r, c) in live else DEAD_GLYPH for c in range(grid.cols))
        lines.append("│" + row + "│")
    lines.append("└" + "─" * grid.cols + "┘")
    return "\n".join(lines)


def format_status(game: GameOfLife) -> str:
    """One-line status shown under each frame."""
    return f"Generation {game.generation} | Population {game.population} | {game.grid.rows}x{game.grid.cols}"


def run_loop(
    game: GameOfLife,
    rate_ms: int,
    max_generations: Optional[int] = None,
    out: Optional[TextIO] = None,
) -> str:
    """Render and step the game until it dies out or hits the generation limit.

    Args:
        game: Game to run
        rate_ms: Delay between frames in milliseconds
        max_generations: Optional generation limit
        out: Stream to draw on

    Returns:
        'extinction' or 'max_generations'
    """
    out = out or sys.stdout
    while True:
        with game.grid.lock:
            frame = render_frame(game.grid)
        out.write(CLEAR_SCREEN + frame + "\n" + format_status(game) + "\n")
        out.flush()

        if game.is_extinct:
            return "extinction"
        if max_generations is not None and game.generation >= max_generations:
            return "max_generations"

        time.sleep(rate_ms / 1000.0)
        game.step()


def create_parser() -> argparse.ArgumentParser:
    """Create command-line argument parser.

    Returns:
        Configured ArgumentParser
    """
    parser = argparse.ArgumentParser(
        prog="gameoflife",
        description="An implementation of Conway's Game of Life.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Random 40x80 grid, half the cells alive
  gameoflife -p 0.5

  # Glider gun from an RLE file, centered in a 60x100 grid
  gameoflife -f patterns/gosper_glider_gun.rle -r 60 -c 100

  # JSON pattern on a grid sized exactly to the pattern, wrapping edges
  gameoflife -f board.json --fit --toroidal

  # Print the seeded grid as RLE and exit
  gameoflife -p 0.3 -r 10 -c 10 --seed 1 --dump-rle
        """,
    )

    parser.add_argument(
        "-r", "--rows", type=int, default=DEFAULT_ROWS, help=f"Number of rows in the grid (default: {DEFAULT_ROWS})"
    )

    parser.add_argument(
        "-c", "--cols", type=int, default=DEFAULT_COLS, help=f"Number of columns in the grid (default: {DEFAULT_COLS})"
    )

    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "-p",
        "--density",
        type=float,
        help=f"Probability that a cell starts alive, 0.0-1.0 (default: {DEFAULT_DENSITY})",
    )
    source.add_argument(
        "-f",
        "--file",
        type=Path,
        help="Pattern file to load (.json for the JSON format, otherwise RLE)",
    )

    parser.add_argument(
        "--fit",
        action="store_true",
        help="Size the grid to the pattern instead of using --rows/--cols",
    )

    parser.add_argument(
        "--rate",
        type=int,
        default=DEFAULT_RATE_MS,
        help=f"Refresh interval in milliseconds (default: {DEFAULT_RATE_MS})",
    )

    parser.add_argument(
        "-t",
        "--toroidal",
        action="store_true",
        help="Wrap edges around instead of treating off-grid cells as dead",
    )

    parser.add_argument(
        "-m",
        "--max-generations",
        type=int,
        help="Stop after this many generations",
    )

    parser.add_argument(
        "--seed",
        type=int,
        help="Random seed for reproducible random grids",
    )

    output = parser.add_mutually_exclusive_group()
    output.add_argument(
        "--once",
        action="store_true",
        help="Draw the initial grid and exit",
    )
    output.add_argument(
        "--dump-rle",
        action="store_true",
        help="Print the initial grid as RLE and exit",
    )

    return parser


def validate_args(args: argparse.Namespace) -> bool:
    """Validate command-line arguments.

    Args:
        args: Parsed arguments

    Returns:
        True if arguments are valid
    """
    errors = []

    if args.rows <= 0:
        errors.append("Rows must be positive")

    if args.cols <= 0:
        errors.append("Cols must be positive")

    if args.density is not None and not 0.0 <= args.density <= 1.0:
        errors.append("Density must be between 0.0 and 1.0")

    if args.fit and args.file is None:
        errors.append("--fit requires a pattern file")

    if args.rate < 0:
        errors.append("Rate must be non-negative")

    if args.max_generations is not None and args.max_generations < 0:
        errors.append("Max generations must be non-negative")

    if errors:
        print("Error: Invalid arguments:", file=sys.stderr)
        for error in errors:
            print(f"  - {error}", file=sys.stderr)
        return False

    return True


def main(argv: Optional[list] = None) -> int:
    """Main entry point for CLI interface.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if not validate_args(args):
        return 1

    config = RunConfig.from_args(args)

    try:
        grid = initialize(
            config.rows,
            config.cols,
            config.seed_config().to_mode(),
            rng=config.seed,
            wrap_edges=config.toroidal,
        )
    except GameOfLifeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.dump_rle:
        print(encode_rle(Pattern.from_grid(grid)), end="")
        return 0

    if args.once:
        print(render_frame(grid))
        return 0

    game = GameOfLife(grid)
    try:
        reason = run_loop(game, config.rate_ms, config.max_generations)
    except KeyboardInterrupt:
        print(f"\nInterrupted at generation {game.generation}")
        return 0

    if reason == "extinction":
        print(f"All cells died after {game.generation} generations")
    return 0


if __name__ == "__main__":
    sys.exit(main())

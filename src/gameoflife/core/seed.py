"""Seeding strategies that build an initial grid.

Three modes are supported: random density, an RLE pattern file and a JSON
pattern file. ``initialize`` turns any of them into a fully populated
``Grid``; on failure no grid is returned.
"""

import numbers
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Tuple, Union
import numpy as np

from .errors import (
    ConflictingSeedModes,
    FileReadError,
    InvalidDimensions,
    InvalidProbability,
    MissingDimensions,
    PatternTooLarge,
)
from .grid import Grid
from .json_pattern import decode_json
from .patterns import Pattern
from .rle import decode_rle

RandomSource = Optional[Union[np.random.Generator, int]]


@dataclass(frozen=True)
class RandomSeed:
    """Each cell alive independently with probability ``density``."""

    density: float


@dataclass(frozen=True)
class RLEFileSeed:
    """Pattern loaded from an RLE file."""

    path: Path


@dataclass(frozen=True)
class JSONFileSeed:
    """Pattern loaded from a JSON pattern file."""

    path: Path


SeedMode = Union[RandomSeed, RLEFileSeed, JSONFileSeed]


def mode_for_path(path: Union[str, Path]) -> SeedMode:
    """Pick the file seed mode from the file extension.

    ``.json`` files are JSON patterns, anything else is read as RLE.
    """
    path = Path(path)
    if path.suffix.lower() == ".json":
        return JSONFileSeed(path)
    return RLEFileSeed(path)


@dataclass
class SeedConfig:
    """Resolved seed configuration; exactly one source may be set."""

    density: Optional[float] = None
    rle_path: Optional[Path] = None
    json_path: Optional[Path] = None

    def __post_init__(self) -> None:
        active = [
            name
            for name, value in (
                ("density", self.density),
                ("rle_path", self.rle_path),
                ("json_path", self.json_path),
            )
            if value is not None
        ]
        if len(active) != 1:
            raise ConflictingSeedModes(
                f"Exactly one seed source is required, got {len(active)}"
                + (f" ({', '.join(active)})" if active else "")
            )

    @classmethod
    def from_options(cls, density: Optional[float] = None, path: Optional[Union[str, Path]] = None) -> "SeedConfig":
        """Build a config from a density and/or a pattern path, dispatching on extension."""
        if path is None:
            return cls(density=density)
        mode = mode_for_path(path)
        if isinstance(mode, JSONFileSeed):
            return cls(density=density, json_path=mode.path)
        return cls(density=density, rle_path=mode.path)

    def to_mode(self) -> SeedMode:
        """Get the active seed mode."""
        if self.density is not None:
            return RandomSeed(self.density)
        if self.rle_path is not None:
            return RLEFileSeed(Path(self.rle_path))
        return JSONFileSeed(Path(self.json_path))


def _read_pattern(path: Path, decoder: Callable[[str], Pattern]) -> Pattern:
    try:
        text = Path(path).read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        raise FileReadError(f"Could not read pattern file {path}: {e}") from e
    return decoder(text)


def resolve_dimensions(
    pattern: Pattern, requested_rows: Optional[int], requested_cols: Optional[int]
) -> Tuple[int, int]:
    """Grid size for a pattern: the larger of requested and pattern size per axis."""
    p_rows, p_cols = pattern.size
    rows = p_rows if requested_rows is None else max(requested_rows, p_rows)
    cols = p_cols if requested_cols is None else max(requested_cols, p_cols)
    return rows, cols


def _random_grid(
    rows: Optional[int], cols: Optional[int], density: float, rng: RandomSource, wrap_edges: bool
) -> Grid:
    if rows is None or cols is None:
        raise MissingDimensions("Random seeding needs both rows and cols")
    if isinstance(density, bool) or not isinstance(density, numbers.Real) or not 0.0 <= density <= 1.0:
        raise InvalidProbability(f"Density must be within [0, 1], got {density!r}")

    grid = Grid(rows, cols, wrap_edges=wrap_edges)
    grid.randomize(density, rng)
    return grid


def _pattern_grid(
    pattern: Pattern, rows: Optional[int], cols: Optional[int], wrap_edges: bool
) -> Grid:
    for name, value in (("rows", rows), ("cols", cols)):
        if value is not None and value <= 0:
            raise InvalidDimensions(f"Requested {name} must be positive, got {value}")

    grid_rows, grid_cols = resolve_dimensions(pattern, rows, cols)

    if any(r >= grid_rows or c >= grid_cols for r, c in pattern.cells):
        raise PatternTooLarge(
            f"Pattern cells extend beyond the resolved {grid_rows}x{grid_cols} grid"
        )

    grid = Grid(grid_rows, grid_cols, wrap_edges=wrap_edges)
    pattern.apply_to_grid(grid, pattern.centering_offset(grid_rows, grid_cols))
    return grid


def initialize(
    requested_rows: Optional[int],
    requested_cols: Optional[int],
    mode: SeedMode,
    rng: RandomSource = None,
    wrap_edges: bool = False,
) -> Grid:
    """Build and populate the initial grid for a seed mode.

    Args:
        requested_rows: Requested number of rows, if any
        requested_cols: Requested number of columns, if any
        mode: One of RandomSeed, RLEFileSeed or JSONFileSeed
        rng: numpy Generator or integer seed for random seeding
        wrap_edges: Whether the grid should be toroidal

    Returns:
        A fully populated Grid

    Raises:
        MissingDimensions, InvalidProbability: For bad random seeding arguments
        FileReadError: If a pattern file cannot be read
        MalformedHeader, MalformedBody, MalformedJSON, InvalidCoordinate: On decode failures
        PatternTooLarge: If the pattern does not fit the resolved grid
        InvalidDimensions: If requested dimensions are not positive
    """
    if isinstance(mode, RandomSeed):
        return _random_grid(requested_rows, requested_cols, mode.density, rng, wrap_edges)
    if isinstance(mode, RLEFileSeed):
        return _pattern_grid(_read_pattern(mode.path, decode_rle), requested_rows, requested_cols, wrap_edges)
    if isinstance(mode, JSONFileSeed):
        return _pattern_grid(_read_pattern(mode.path, decode_json), requested_rows, requested_cols, wrap_edges)
    raise ConflictingSeedModes(f"Unknown seed mode {mode!r}")

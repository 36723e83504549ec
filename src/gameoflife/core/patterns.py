"""Decoded Game of Life patterns and their placement onto grids."""

from typing import Any, Dict, List, Optional, Tuple

from .errors import OutOfBounds, PatternTooLarge
from .grid import Coordinate, Grid


class Pattern:
    """A set of live cells relative to a (0, 0) origin.

    ``width`` and ``height`` are the dimensions declared by the source file,
    if it declared any. ``size`` falls back to the extent of the live cells.
    """

    def __init__(
        self,
        cells: List[Coordinate],
        width: Optional[int] = None,
        height: Optional[int] = None,
        rule: Optional[str] = None,
        name: str = "",
        description: str = "",
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Initialize a pattern.

        Args:
            cells: List of (row, col) coordinates for living cells
            width: Declared number of columns, if known
            height: Declared number of rows, if known
            rule: Declared rule string (informational only)
            name: Pattern name
            description: Optional description
            metadata: Optional metadata dictionary
        """
        self.cells = cells
        self.width = width
        self.height = height
        self.rule = rule
        self.name = name
        self.description = description
        self.metadata = metadata or {}

    @property
    def size(self) -> Tuple[int, int]:
        """Pattern size as (rows, cols).

        Declared dimensions win; a missing one is derived from the largest
        live coordinate plus one.
        """
        max_row = max((r for r, _ in self.cells), default=-1)
        max_col = max((c for _, c in self.cells), default=-1)
        rows = self.height if self.height is not None else max_row + 1
        cols = self.width if self.width is not None else max_col + 1
        return (max(rows, 1), max(cols, 1))

    @property
    def population(self) -> int:
        """Number of live cells."""
        return len(self.cells)

    def get_bounding_box(self) -> Tuple[int, int, int, int]:
        """Get bounding box of the live cells.

        Returns:
            Tuple of (min_row, min_col, max_row, max_col)
        """
        if not self.cells:
            return (0, 0, 0, 0)

        rows, cols = zip(*self.cells)
        return (min(rows), min(cols), max(rows), max(cols))

    def centering_offset(self, rows: int, cols: int) -> Coordinate:
        """Offset that centers this pattern in a rows x cols grid.

        Uses floor division, and (0, 0) when the grid is exactly pattern-sized.
        """
        p_rows, p_cols = self.size
        return ((rows - p_rows) // 2, (cols - p_cols) // 2)

    def apply_to_grid(self, grid: Grid, offset: Optional[Coordinate] = None) -> None:
        """Place this pattern onto a grid.

        Args:
            grid: Target grid
            offset: (row, col) shift; defaults to centering the pattern

        Raises:
            PatternTooLarge: If any shifted cell falls outside the grid
        """
        if offset is None:
            offset = self.centering_offset(grid.rows, grid.cols)
        try:
            grid.populate(self.cells, offset)
        except OutOfBounds as e:
            raise PatternTooLarge(
                f"Pattern of size {self.size[0]}x{self.size[1]} does not fit "
                f"in {grid.rows}x{grid.cols} grid at offset {offset}"
            ) from e

    @classmethod
    def from_grid(cls, grid: Grid, name: str = "", description: str = "") -> "Pattern":
        """Create a pattern from the current grid state."""
        return cls(
            grid.live_cells(),
            width=grid.cols,
            height=grid.rows,
            name=name,
            description=description,
            metadata={"population": grid.population},
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Pattern):
            return False
        return sorted(self.cells) == sorted(other.cells) and self.size == other.size

    def __repr__(self) -> str:
        rows, cols = self.size
        return f"Pattern(name={self.name!r}, size={rows}x{cols}, population={self.population})"

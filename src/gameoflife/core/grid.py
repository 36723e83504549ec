"""Grid data structure for Conway's Game of Life."""

from typing import Iterable, List, Optional, Tuple, Union
import threading
import numpy as np
import torch
import torch.nn.functional as F

from .errors import InvalidDimensions, OutOfBounds

Coordinate = Tuple[int, int]


class Grid:
    """A fixed-size 2D grid of dead/alive cells.

    Cells are stored in a numpy array of shape ``(rows, cols)`` and
    addressed as ``(row, col)``. Edges are clipped by default: positions
    outside the grid count as permanently dead. With ``wrap_edges=True``
    opposite edges are neighbors (toroidal topology).
    """

    def __init__(self, rows: int, cols: int, wrap_edges: bool = False) -> None:
        """Initialize a new grid with every cell dead.

        Args:
            rows: Number of rows
            cols: Number of columns
            wrap_edges: Whether edges wrap around when counting neighbors

        Raises:
            InvalidDimensions: If either dimension is not a positive integer
        """
        for name, value in (("rows", rows), ("cols", cols)):
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)) or value <= 0:
                raise InvalidDimensions(f"{name} must be a positive integer, got {value!r}")

        self.rows = int(rows)
        self.cols = int(cols)
        self.wrap_edges = wrap_edges
        self._cells = np.zeros((self.rows, self.cols), dtype=np.int8)
        self.lock = threading.RLock()

        torch.set_num_threads(1)

        self._torch_input = torch.zeros(1, 1, self.rows, self.cols, dtype=torch.float32)
        self._torch_kernel = (
            torch.tensor([[1, 1, 1], [1, 0, 1], [1, 1, 1]], dtype=torch.float32).unsqueeze(0).unsqueeze(0)
        )

    @property
    def cells(self) -> np.ndarray:
        """Get a read-only view of the current cell array (rows x cols).

        The view follows edits made through set_cell and friends, but not
        step(), which installs a new array. Copy it to keep a snapshot.
        """
        view = self._cells.view()
        view.flags.writeable = False
        return view

    @property
    def shape(self) -> Tuple[int, int]:
        """Get grid dimensions as (rows, cols)."""
        return (self.rows, self.cols)

    def _check_bounds(self, row: int, col: int) -> None:
        if not (0 <= row < self.rows and 0 <= col < self.cols):
            raise OutOfBounds(f"Coordinate ({row}, {col}) outside {self.rows}x{self.cols} grid")

    def is_alive(self, coord: Coordinate) -> bool:
        """Get the state of a cell.

        Args:
            coord: (row, col) pair

        Returns:
            True if the cell is alive

        Raises:
            OutOfBounds: If the coordinate lies outside the grid
        """
        row, col = coord
        self._check_bounds(row, col)
        return bool(self._cells[row, col])

    def set_alive(self, coord: Coordinate) -> None:
        """Mark a cell alive. Setting an already live cell is a no-op.

        Raises:
            OutOfBounds: If the coordinate lies outside the grid
        """
        row, col = coord
        self.set_cell(row, col, True)

    def set_cell(self, row: int, col: int, alive: bool) -> None:
        """Set the state of a cell.

        Raises:
            OutOfBounds: If the coordinate lies outside the grid
        """
        self._check_bounds(row, col)
        self._cells[row, col] = 1 if alive else 0

    def toggle_cell(self, row: int, col: int) -> bool:
        """Toggle the state of a cell and return the new state."""
        new_state = not self.is_alive((row, col))
        self.set_cell(row, col, new_state)
        return new_state

    def populate(self, coords: Iterable[Coordinate], offset: Coordinate = (0, 0)) -> None:
        """Mark every coordinate alive, shifted by ``offset``.

        All coordinates are bounds-checked before any cell is touched, so a
        failure leaves the grid unchanged.

        Raises:
            OutOfBounds: If any shifted coordinate lies outside the grid
        """
        d_row, d_col = offset
        shifted = [(row + d_row, col + d_col) for row, col in coords]
        for row, col in shifted:
            self._check_bounds(row, col)
        with self.lock:
            for row, col in shifted:
                self._cells[row, col] = 1

    def clear(self) -> None:
        """Clear all cells (set all to dead)."""
        with self.lock:
            self._cells.fill(0)

    def randomize(
        self, probability: float, rng: Optional[Union[np.random.Generator, int]] = None
    ) -> None:
        """Randomly populate the grid.

        Each cell is alive independently with the given probability, so
        0.0 gives an empty grid and 1.0 a full one.

        Args:
            probability: Chance each cell will be alive (0.0 to 1.0)
            rng: numpy Generator or integer seed (fresh entropy if None)
        """
        generator = np.random.default_rng(rng)
        mask = generator.random((self.rows, self.cols)) < probability
        with self.lock:
            self._cells[mask] = 1
            self._cells[~mask] = 0

    @property
    def population(self) -> int:
        """Get the number of living cells."""
        with self.lock:
            return int(np.count_nonzero(self._cells))

    def count_neighbors(self, row: int, col: int) -> int:
        """Count living Moore neighbors of a single cell.

        Returns:
            Number of living neighbors (0-8)
        """
        self._check_bounds(row, col)
        count = 0
        for d_row in (-1, 0, 1):
            for d_col in (-1, 0, 1):
                if d_row == 0 and d_col == 0:
                    continue

                n_row, n_col = row + d_row, col + d_col

                if self.wrap_edges:
                    count += int(self._cells[n_row % self.rows, n_col % self.cols])
                elif 0 <= n_row < self.rows and 0 <= n_col < self.cols:
                    count += int(self._cells[n_row, n_col])

        return count

    def count_all_neighbors(self) -> np.ndarray:
        """Count neighbors for all cells using a torch convolution.

        Returns:
            int8 array of shape (rows, cols) with neighbor counts
        """
        self._torch_input[0, 0] = torch.from_numpy(self._cells.astype(np.float32))

        if self.wrap_edges:
            padded = F.pad(self._torch_input, (1, 1, 1, 1), mode="circular")
            neighbors = F.conv2d(padded, self._torch_kernel)
        else:
            # Zero padding: off-grid neighbors are dead
            neighbors = F.conv2d(self._torch_input, self._torch_kernel, padding=1)

        return neighbors[0, 0].numpy().astype(np.int8)

    def step(self) -> None:
        """Advance the grid by one generation using the B3/S23 rule.

        Neighbor counts come from the current generation only; the result is
        built in a new array that replaces the old one, so arrays handed out
        before the step are left untouched.
        """
        with self.lock:
            neighbor_counts = self.count_all_neighbors()
            alive = self._cells > 0

            survive = alive & ((neighbor_counts == 2) | (neighbor_counts == 3))
            birth = ~alive & (neighbor_counts == 3)

            self._cells = (survive | birth).astype(np.int8)

    def live_cells(self) -> List[Coordinate]:
        """Get coordinates of all living cells in row-major order."""
        with self.lock:
            rows, cols = np.nonzero(self._cells)
            return [(int(r), int(c)) for r, c in zip(rows, cols)]

    def get_bounding_box(self) -> Optional[Tuple[int, int, int, int]]:
        """Get bounding box of living cells.

        Returns:
            Tuple of (min_row, min_col, max_row, max_col) or None if empty
        """
        with self.lock:
            rows, cols = np.nonzero(self._cells)
        if len(rows) == 0:
            return None

        return (int(rows.min()), int(cols.min()), int(rows.max()), int(cols.max()))

    def to_list(self) -> list:
        """Convert grid to a nested list of 0/1 rows."""
        with self.lock:
            return self._cells.tolist()

    def __eq__(self, other: object) -> bool:
        """Check if two grids are equal."""
        if not isinstance(other, Grid):
            return False
        with self.lock:
            cells = self._cells.copy()
        with other.lock:
            other_cells = other._cells.copy()
        return (
            self.shape == other.shape
            and self.wrap_edges == other.wrap_edges
            and np.array_equal(cells, other_cells)
        )

    def __str__(self) -> str:
        """String representation showing living cells as '*' and dead as '.'."""
        with self.lock:
            cells = self._cells.copy()
        return "\n".join("".join("*" if cell else "." for cell in row) for row in cells)

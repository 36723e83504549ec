"""Tests for the Grid class."""

import threading

import numpy as np
import pytest

from gameoflife.core.errors import InvalidDimensions, OutOfBounds
from gameoflife.core.grid import Grid


def reference_step(grid: Grid) -> set:
    """Next generation computed cell by cell from the scalar neighbor count."""
    alive = set()
    for r in range(grid.rows):
        for c in range(grid.cols):
            n = grid.count_neighbors(r, c)
            if grid.is_alive((r, c)) and n in (2, 3):
                alive.add((r, c))
            elif not grid.is_alive((r, c)) and n == 3:
                alive.add((r, c))
    return alive


class TestGrid:
    """Test cases for the Grid class."""

    def test_initialization(self):
        """Test grid initialization."""
        grid = Grid(10, 20)
        assert grid.rows == 10
        assert grid.cols == 20
        assert grid.shape == (10, 20)
        assert grid.cells.shape == (10, 20)
        assert grid.wrap_edges is False
        assert grid.population == 0
        assert grid.live_cells() == []

    def test_initialization_torus(self):
        """Test grid initialization with wrapping edges."""
        grid = Grid(5, 5, wrap_edges=True)
        assert grid.wrap_edges is True

    @pytest.mark.parametrize("rows,cols", [(0, 5), (5, 0), (-1, 3), (0, 0)])
    def test_invalid_dimensions(self, rows, cols):
        """Test that non-positive dimensions are rejected."""
        with pytest.raises(InvalidDimensions):
            Grid(rows, cols)

    def test_non_integer_dimensions(self):
        """Test that floats and bools are not dimensions."""
        with pytest.raises(InvalidDimensions):
            Grid(2.5, 3)
        with pytest.raises(InvalidDimensions):
            Grid(True, 3)

    def test_cell_operations(self):
        """Test basic cell get/set operations."""
        grid = Grid(5, 5)

        assert not grid.is_alive((0, 0))

        grid.set_alive((1, 1))
        grid.set_alive((2, 3))

        assert grid.is_alive((1, 1))
        assert grid.is_alive((2, 3))
        assert not grid.is_alive((3, 2))

        grid.set_cell(1, 1, False)
        assert not grid.is_alive((1, 1))

    def test_set_alive_idempotent(self):
        """Test that setting a live cell alive again changes nothing."""
        grid = Grid(3, 3)
        grid.set_alive((1, 1))
        grid.set_alive((1, 1))
        assert grid.population == 1

    def test_toggle_cell(self):
        """Test cell toggling."""
        grid = Grid(5, 5)

        assert grid.toggle_cell(2, 2) is True
        assert grid.is_alive((2, 2)) is True

        assert grid.toggle_cell(2, 2) is False
        assert grid.is_alive((2, 2)) is False

    @pytest.mark.parametrize("coord", [(-1, 0), (0, -1), (3, 0), (0, 4), (10, 10)])
    def test_out_of_bounds(self, coord):
        """Test that coordinates outside the grid are rejected."""
        grid = Grid(3, 4)

        with pytest.raises(OutOfBounds):
            grid.set_alive(coord)

        with pytest.raises(OutOfBounds):
            grid.is_alive(coord)

    def test_out_of_bounds_on_torus(self):
        """Test that wrapping applies to neighbors only, not addressing."""
        grid = Grid(3, 3, wrap_edges=True)
        with pytest.raises(OutOfBounds):
            grid.set_alive((3, 0))

    def test_out_of_bounds_is_index_error(self):
        """Test that OutOfBounds can be caught as IndexError."""
        grid = Grid(2, 2)
        with pytest.raises(IndexError):
            grid.is_alive((2, 2))

    def test_populate_all_or_nothing(self):
        """Test that a failing populate leaves the grid untouched."""
        grid = Grid(3, 3)
        with pytest.raises(OutOfBounds):
            grid.populate([(0, 0), (1, 1), (5, 5)])
        assert grid.population == 0

    def test_populate_with_offset(self):
        """Test populating with an offset."""
        grid = Grid(5, 5)
        grid.populate([(0, 0), (0, 1)], offset=(2, 3))
        assert grid.live_cells() == [(2, 3), (2, 4)]

    def test_clear(self):
        """Test grid clearing."""
        grid = Grid(5, 5)
        grid.populate([(1, 1), (2, 2), (3, 3)])
        assert grid.population == 3

        grid.clear()
        assert grid.population == 0

    def test_randomize_extremes(self):
        """Test random population with probability 0 and 1."""
        grid = Grid(10, 7)

        grid.randomize(0.0, rng=1)
        assert grid.population == 0

        grid.randomize(1.0, rng=1)
        assert grid.population == 70

    def test_randomize_is_deterministic_with_seed(self):
        """Test that the same seed gives the same grid."""
        a = Grid(20, 20)
        b = Grid(20, 20)
        a.randomize(0.5, rng=42)
        b.randomize(0.5, rng=np.random.default_rng(42))
        assert a == b
        assert 100 <= a.population <= 300

    def test_live_cells_row_major(self):
        """Test that live cells are reported in row-major order."""
        grid = Grid(4, 4)
        grid.populate([(3, 0), (0, 3), (1, 1), (0, 0)])
        assert grid.live_cells() == [(0, 0), (0, 3), (1, 1), (3, 0)]

    def test_bounding_box(self):
        """Test bounding box calculation."""
        grid = Grid(10, 10)
        assert grid.get_bounding_box() is None

        grid.populate([(2, 3), (5, 1), (4, 7)])
        assert grid.get_bounding_box() == (2, 1, 5, 7)

    def test_equality(self):
        """Test grid equality."""
        a = Grid(3, 3)
        b = Grid(3, 3)
        assert a == b

        a.set_alive((1, 1))
        assert a != b

        b.set_alive((1, 1))
        assert a == b

        assert a != Grid(3, 3, wrap_edges=True)
        assert a != "grid"

    def test_str(self):
        """Test string rendering."""
        grid = Grid(2, 3)
        grid.set_alive((0, 1))
        grid.set_alive((1, 2))
        assert str(grid) == ".*.\n..*"

    def test_to_list(self):
        """Test nested list conversion."""
        grid = Grid(2, 2)
        grid.set_alive((1, 0))
        assert grid.to_list() == [[0, 0], [1, 0]]


class TestNeighbors:
    """Test cases for neighbor counting."""

    def test_count_center(self):
        """Test counting around a center cell."""
        grid = Grid(3, 3)
        grid.populate([(r, c) for r in range(3) for c in range(3)])
        assert grid.count_neighbors(1, 1) == 8

    def test_clipped_corner_counts(self):
        """Test that off-grid positions never count as alive."""
        grid = Grid(3, 3)
        grid.populate([(r, c) for r in range(3) for c in range(3)])

        assert grid.count_neighbors(0, 0) == 3
        assert grid.count_neighbors(0, 1) == 5
        assert grid.count_all_neighbors()[0, 0] == 3
        assert grid.count_all_neighbors()[2, 2] == 3

    def test_torus_corner_counts(self):
        """Test that wrapping edges count the far side of the grid."""
        grid = Grid(4, 4, wrap_edges=True)
        grid.set_alive((3, 3))

        assert grid.count_neighbors(0, 0) == 1
        assert grid.count_all_neighbors()[0, 0] == 1
        assert grid.count_all_neighbors()[3, 0] == 1

    @pytest.mark.parametrize("wrap_edges", [False, True])
    def test_vectorised_matches_scalar(self, wrap_edges):
        """Test that convolution counts agree with the per-cell count."""
        grid = Grid(9, 13, wrap_edges=wrap_edges)
        grid.randomize(0.4, rng=7)

        counts = grid.count_all_neighbors()
        for r in range(grid.rows):
            for c in range(grid.cols):
                assert counts[r, c] == grid.count_neighbors(r, c)


class TestStep:
    """Test cases for advancing a generation."""

    def test_empty_grid_stays_empty(self):
        """Test that nothing is born on an empty grid."""
        for wrap_edges in (False, True):
            grid = Grid(6, 8, wrap_edges=wrap_edges)
            grid.step()
            assert grid.population == 0

    @pytest.mark.parametrize("neighbors,survives", [(0, False), (1, False), (2, True), (3, True), (4, False), (8, False)])
    def test_survival(self, neighbors, survives):
        """Test that a live cell survives with exactly 2 or 3 neighbors."""
        ring = [(0, 0), (0, 1), (0, 2), (1, 0), (1, 2), (2, 0), (2, 1), (2, 2)]
        grid = Grid(3, 3)
        grid.set_alive((1, 1))
        grid.populate(ring[:neighbors])

        grid.step()
        assert grid.is_alive((1, 1)) is survives

    @pytest.mark.parametrize("neighbors,born", [(0, False), (2, False), (3, True), (4, False), (6, False)])
    def test_birth(self, neighbors, born):
        """Test that a dead cell is born with exactly 3 neighbors."""
        ring = [(0, 0), (0, 1), (0, 2), (1, 0), (1, 2), (2, 0), (2, 1), (2, 2)]
        grid = Grid(3, 3)
        grid.populate(ring[:neighbors])

        grid.step()
        assert grid.is_alive((1, 1)) is born

    def test_blinker_uses_previous_generation(self):
        """Test that updated cells do not feed into neighbors in the same step.

        Updating in place, row by row, kills the top of a vertical blinker
        before the middle row is evaluated and the blinker does not rotate.
        """
        grid = Grid(5, 5)
        grid.populate([(1, 2), (2, 2), (3, 2)])

        grid.step()
        assert grid.live_cells() == [(2, 1), (2, 2), (2, 3)]

        grid.step()
        assert grid.live_cells() == [(1, 2), (2, 2), (3, 2)]

    def test_block_is_still(self):
        """Test that a block never changes."""
        grid = Grid(4, 4)
        grid.populate([(1, 1), (1, 2), (2, 1), (2, 2)])
        before = grid.live_cells()
        for _ in range(3):
            grid.step()
        assert grid.live_cells() == before

    def test_clipped_edge_blinker(self):
        """Test a blinker lying on the bottom edge of a clipped grid."""
        grid = Grid(3, 3)
        grid.populate([(2, 0), (2, 1), (2, 2)])

        grid.step()
        assert grid.live_cells() == [(1, 1), (2, 1)]

    def test_torus_edge_blinker(self):
        """Test the same row on a 3x3 torus fills the grid."""
        grid = Grid(3, 3, wrap_edges=True)
        grid.populate([(2, 0), (2, 1), (2, 2)])

        grid.step()
        assert grid.population == 9

    @pytest.mark.parametrize("wrap_edges", [False, True])
    def test_matches_reference(self, wrap_edges):
        """Test a random grid against a cell-by-cell reference."""
        grid = Grid(12, 15, wrap_edges=wrap_edges)
        grid.randomize(0.35, rng=3)

        for _ in range(5):
            expected = reference_step(grid)
            grid.step()
            assert set(grid.live_cells()) == expected

    def test_glider_wraps_on_torus(self):
        """Test that a glider comes back after crossing a torus."""
        grid = Grid(8, 8, wrap_edges=True)
        glider = [(0, 1), (1, 2), (2, 0), (2, 1), (2, 2)]
        grid.populate(glider)

        # 4 generations per diagonal cell, 8 cells around
        for _ in range(32):
            grid.step()
        assert sorted(grid.live_cells()) == sorted(glider)

    def test_glider_translates(self):
        """Test that a glider moves one cell down and right every 4 generations."""
        grid = Grid(10, 10)
        glider = [(0, 1), (1, 2), (2, 0), (2, 1), (2, 2)]
        grid.populate(glider)

        for shift in (1, 2):
            for _ in range(4):
                grid.step()
            assert grid.live_cells() == sorted((r + shift, c + shift) for r, c in glider)

    def test_step_holds_lock(self):
        """Test that step waits for a reader holding the grid lock."""
        grid = Grid(5, 5)
        grid.populate([(1, 2), (2, 2), (3, 2)])
        done = threading.Event()

        def run_step():
            grid.step()
            done.set()

        with grid.lock:
            worker = threading.Thread(target=run_step)
            worker.start()
            assert not done.wait(0.05)
            assert grid.live_cells() == [(1, 2), (2, 2), (3, 2)]

        worker.join(timeout=5)
        assert done.is_set()
        assert grid.live_cells() == [(2, 1), (2, 2), (2, 3)]

    def test_readers_wait_for_lock(self):
        """Test that population and to_list wait for a writer holding the lock."""
        grid = Grid(3, 3)
        results = {}
        done = threading.Event()

        def read():
            results["population"] = grid.population
            results["rows"] = grid.to_list()
            results["box"] = grid.get_bounding_box()
            done.set()

        with grid.lock:
            worker = threading.Thread(target=read)
            worker.start()
            assert not done.wait(0.05)
            grid.populate([(0, 0), (2, 2)])

        worker.join(timeout=5)
        assert results["population"] == 2
        assert results["rows"] == [[1, 0, 0], [0, 0, 0], [0, 0, 1]]
        assert results["box"] == (0, 0, 2, 2)


class TestCellsView:
    """Test cases for the cells array exposed by the grid."""

    def test_cells_is_read_only(self):
        """Test that the exposed array cannot be written to."""
        grid = Grid(3, 3)

        with pytest.raises(ValueError):
            grid.cells[1, 1] = 1
        assert grid.population == 0

    def test_earlier_array_survives_steps(self):
        """Test that an array taken before stepping keeps its generation."""
        grid = Grid(5, 5)
        grid.populate([(1, 2), (2, 2), (3, 2)])
        before = grid.cells

        grid.step()
        grid.step()

        assert np.nonzero(before)[0].tolist() == [1, 2, 3]
        assert np.nonzero(before)[1].tolist() == [2, 2, 2]
        grid.step()
        assert grid.cells[2, 1] == 1
        assert before[2, 1] == 0

    def test_copy_is_snapshot(self):
        """Test that a copy does not follow later cell edits."""
        grid = Grid(2, 2)
        snapshot = grid.cells.copy()

        grid.set_cell(0, 0, True)

        assert snapshot[0, 0] == 0
        assert grid.cells[0, 0] == 1

"""Generation tracking around a Game of Life grid."""

from typing import Deque, Dict, Tuple
from collections import deque

from .grid import Grid


class GameOfLife:
    """Drives a grid through successive generations.

    The rules themselves live in ``Grid.step``; this class counts
    generations, keeps a short population history and detects when the
    grid dies out or revisits an earlier state.
    """

    def __init__(self, grid: Grid, history_size: int = 100, max_tracked_states: int = 1000) -> None:
        """Initialize the game with a grid.

        Args:
            grid: The grid to simulate
            history_size: Number of population samples to keep
            max_tracked_states: Number of past states remembered for cycle detection
        """
        self.grid = grid
        self._generation = 0
        self._population_history: Deque[int] = deque(maxlen=history_size)
        self._state_history: Deque[bytes] = deque(maxlen=max_tracked_states)
        self._seen_states: Dict[bytes, int] = {}
        self._cycle_detected = False
        self._cycle_length = 0
        self._cycle_start_generation = 0

        self._population_history.append(self.population)

    @property
    def generation(self) -> int:
        """Current generation number."""
        return self._generation

    @property
    def population(self) -> int:
        """Current number of living cells."""
        return self.grid.population

    @property
    def population_history(self) -> list:
        """Recent population counts, oldest first."""
        return list(self._population_history)

    @property
    def is_extinct(self) -> bool:
        """Whether every cell is dead."""
        return self.population == 0

    @property
    def cycle_detected(self) -> bool:
        """Whether the grid has returned to an earlier state."""
        return self._cycle_detected

    @property
    def cycle_length(self) -> int:
        """Length of detected cycle (0 if no cycle)."""
        return self._cycle_length

    @property
    def cycle_start_generation(self) -> int:
        """Generation where the cycle started (0 if no cycle)."""
        return self._cycle_start_generation

    def step(self) -> None:
        """Advance the simulation by one generation."""
        self._record_state()
        self.grid.step()
        self._generation += 1
        self._population_history.append(self.population)

        # A state reached after the step may already be known
        if not self._cycle_detected:
            self._match_state(self.grid.cells.tobytes())

    def _record_state(self) -> None:
        if self._cycle_detected:
            return

        state = self.grid.cells.tobytes()
        if state in self._seen_states:
            return

        if len(self._state_history) == self._state_history.maxlen:
            oldest = self._state_history[0]
            self._seen_states.pop(oldest, None)
        self._state_history.append(state)
        self._seen_states[state] = self._generation

    def _match_state(self, state: bytes) -> None:
        first_seen = self._seen_states.get(state)
        if first_seen is None:
            return
        self._cycle_detected = True
        self._cycle_length = self._generation - first_seen
        self._cycle_start_generation = first_seen

    def run(self, max_generations: int = 10000) -> Tuple[int, str]:
        """Step until extinction, a cycle, or the generation limit.

        Args:
            max_generations: Maximum generations to run

        Returns:
            Tuple of (final_generation, reason) where reason is one of
            'extinction', 'cycle' or 'max_generations'
        """
        if self.is_extinct:
            return self._generation, "extinction"

        for _ in range(max_generations):
            self.step()

            if self.is_extinct:
                return self._generation, "extinction"

            if self._cycle_detected:
                return self._generation, "cycle"

        return self._generation, "max_generations"

    def reset(self, clear_grid: bool = True) -> None:
        """Reset counters and cycle tracking.

        Args:
            clear_grid: Whether to clear the grid as well
        """
        if clear_grid:
            self.grid.clear()

        self._generation = 0
        self._population_history.clear()
        self._state_history.clear()
        self._seen_states.clear()
        self._cycle_detected = False
        self._cycle_length = 0
        self._cycle_start_generation = 0

        self._population_history.append(self.population)

    def get_statistics(self) -> Dict:
        """Get a summary of the current simulation state."""
        bbox = self.grid.get_bounding_box()

        stats = {
            "generation": self._generation,
            "population": self.population,
            "population_history": list(self._population_history),
            "cycle_detected": self._cycle_detected,
            "cycle_length": self._cycle_length,
            "cycle_start_generation": self._cycle_start_generation,
            "grid_size": self.grid.shape,
            "population_density": self.population / (self.grid.rows * self.grid.cols),
            "bounding_box": bbox,
        }

        return stats

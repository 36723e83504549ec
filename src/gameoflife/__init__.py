"""Conway's Game of Life engine with RLE and JSON pattern loading."""

__version__ = "0.1.0"

from .core.grid import Grid
from .core.game import GameOfLife
from .core.patterns import Pattern
from .core.seed import initialize

__all__ = ["Grid", "GameOfLife", "Pattern", "initialize"]

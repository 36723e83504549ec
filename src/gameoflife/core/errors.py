"""Error kinds raised by the simulation engine.

Every error carries a ``kind`` attribute equal to its class name so callers
that only want to report a failure do not need to import each class.
"""


class GameOfLifeError(Exception):
    """Base class for all engine failures."""

    @property
    def kind(self) -> str:
        """Name of the error kind."""
        return type(self).__name__


class InvalidDimensions(GameOfLifeError, ValueError):
    """Grid was requested with a non-positive number of rows or columns."""


class OutOfBounds(GameOfLifeError, IndexError):
    """A coordinate lies outside the grid."""


class MalformedHeader(GameOfLifeError, ValueError):
    """RLE text has no usable ``x = W, y = H`` header."""


class MalformedBody(GameOfLifeError, ValueError):
    """RLE body contains an invalid token or overflows the declared size."""


class MalformedJSON(GameOfLifeError, ValueError):
    """JSON pattern text is not valid JSON or has the wrong shape."""


class InvalidCoordinate(GameOfLifeError, ValueError):
    """A decoded coordinate is negative, non-integer or out of declared range."""


class MissingDimensions(GameOfLifeError, ValueError):
    """Random seeding was requested without both grid dimensions."""


class InvalidProbability(GameOfLifeError, ValueError):
    """Random density is outside [0, 1]."""


class FileReadError(GameOfLifeError, OSError):
    """A pattern file could not be read; the OS error is chained as the cause."""


class PatternTooLarge(GameOfLifeError, ValueError):
    """Pattern cells do not fit in the resolved grid."""


class ConflictingSeedModes(GameOfLifeError, ValueError):
    """Zero or several seed sources were configured at once."""

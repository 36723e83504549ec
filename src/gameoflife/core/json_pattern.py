"""JSON pattern format.

The schema is::

    {
        "rows": 3,
        "cols": 3,
        "cells": [{"row": 0, "col": 1}, {"row": 1, "col": 2}]
    }

``rows`` and ``cols`` are optional, and the top level may also be a bare
list of cells. Each cell is either a ``{"row": r, "col": c}`` object or a
``[r, c]`` pair. Older files that store a full ``"board"`` matrix of 0/1
rows instead of ``"cells"`` are still read.
"""

from typing import Any, List, Optional
import json

from .errors import InvalidCoordinate, MalformedJSON
from .grid import Coordinate
from .patterns import Pattern

ROW_FIELD = "row"
COL_FIELD = "col"


def _as_index(value: Any, what: str) -> int:
    # bool is an int subclass; JSON true/false is not a coordinate
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidCoordinate(f"{what} must be an integer, got {value!r}")
    if value < 0:
        raise InvalidCoordinate(f"{what} must be non-negative, got {value}")
    return value


def _as_dimension(data: dict, field: str) -> Optional[int]:
    if field not in data or data[field] is None:
        return None
    value = data[field]
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidCoordinate(f"'{field}' must be a positive integer, got {value!r}")
    return value


def _parse_cell(entry: Any, index: int) -> Coordinate:
    if isinstance(entry, dict):
        if ROW_FIELD not in entry or COL_FIELD not in entry:
            raise MalformedJSON(f"Cell {index} must have '{ROW_FIELD}' and '{COL_FIELD}' fields")
        row, col = entry[ROW_FIELD], entry[COL_FIELD]
    elif isinstance(entry, list) and len(entry) == 2:
        row, col = entry
    else:
        raise MalformedJSON(f"Cell {index} must be an object or a [row, col] pair, got {entry!r}")

    return (_as_index(row, f"Cell {index} row"), _as_index(col, f"Cell {index} col"))


def _parse_board(board: Any) -> List[Coordinate]:
    if not isinstance(board, list) or not all(isinstance(line, list) for line in board):
        raise MalformedJSON("'board' must be a list of rows")
    return [(r, c) for r, line in enumerate(board) for c, value in enumerate(line) if value]


def decode_json(text: str) -> Pattern:
    """Parse JSON pattern text.

    Args:
        text: Full contents of a JSON pattern file

    Returns:
        Pattern with optional declared dimensions and its live cells

    Raises:
        MalformedJSON: On syntax errors or an unexpected document shape
        InvalidCoordinate: On negative, non-integer or out-of-range values
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedJSON(f"Invalid JSON: {e}") from e

    rows = cols = None
    name = description = ""
    if isinstance(data, list):
        cells = [_parse_cell(entry, i) for i, entry in enumerate(data)]
    elif isinstance(data, dict):
        rows = _as_dimension(data, "rows")
        cols = _as_dimension(data, "cols")
        name = str(data.get("name", ""))
        description = str(data.get("description", ""))
        if "cells" in data:
            if not isinstance(data["cells"], list):
                raise MalformedJSON("'cells' must be a list")
            cells = [_parse_cell(entry, i) for i, entry in enumerate(data["cells"])]
        elif "board" in data:
            cells = _parse_board(data["board"])
        else:
            raise MalformedJSON("Pattern object needs a 'cells' or 'board' field")
    else:
        raise MalformedJSON(f"Expected a list or object at top level, got {type(data).__name__}")

    for row, col in cells:
        if (rows is not None and row >= rows) or (cols is not None and col >= cols):
            raise InvalidCoordinate(f"Cell ({row}, {col}) outside declared {rows}x{cols} size")

    return Pattern(cells, width=cols, height=rows, name=name, description=description)


def encode_json(pattern: Pattern) -> str:
    """Encode a pattern in the JSON schema read by ``decode_json``."""
    rows, cols = pattern.size
    data = {
        "rows": rows,
        "cols": cols,
        "cells": [{ROW_FIELD: r, COL_FIELD: c} for r, c in pattern.cells],
    }
    if pattern.name:
        data["name"] = pattern.name
    if pattern.description:
        data["description"] = pattern.description
    return json.dumps(data, indent=2)

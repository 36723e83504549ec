"""Run Length Encoded (RLE) pattern decoding and encoding.

The format is described at https://conwaylife.com/wiki/Run_Length_Encoded.
A file looks like::

    #N Glider
    #C The smallest spaceship.
    x = 3, y = 3, rule = B3/S23
    bo$2bo$3o!

Only the basic two-state encoding is supported: ``b`` dead, ``o`` alive,
``$`` end of row, ``!`` end of pattern. The declared rule is kept on the
decoded pattern but the engine always simulates B3/S23.
"""

from itertools import groupby
from typing import List, Optional
import re

from .errors import MalformedBody, MalformedHeader
from .grid import Coordinate
from .patterns import Pattern

CONWAY_RULE = "B3/S23"

_HEADER_RE = re.compile(
    r"x\s*=\s*(?P<width>\d+)\s*,\s*y\s*=\s*(?P<height>\d+)"
    r"(?:\s*,\s*(?:rule|type)\s*=\s*(?P<rule>\S.*?))?\s*,?\s*$",
    re.IGNORECASE,
)
_TOKEN_RE = re.compile(r"(\d*)(\D)")
_WHITESPACE_RE = re.compile(r"\s+")

DEAD_CELL = "b"
ALIVE_CELL = "o"
END_OF_ROW = "$"
END_OF_PATTERN = "!"

MAX_LINE_LENGTH = 70


def _read_comment(line: str, pattern: Pattern, description: List[str]) -> None:
    """Handle a ``#`` line; unknown comment types are skipped."""
    tag, text = line[1:2], line[2:].strip()
    if tag == "N":
        pattern.name = text
    elif tag in ("C", "c"):
        description.append(text)
    elif tag == "O":
        pattern.metadata["author"] = text


def _decode_body(body: str, width: int, height: int) -> List[Coordinate]:
    """Decode run tokens into live coordinates, validating against the header size."""
    cells: List[Coordinate] = []
    row = col = 0
    pos = 0

    while pos < len(body):
        match = _TOKEN_RE.match(body, pos)
        if match is None:
            raise MalformedBody(f"Run count {body[pos:]!r} at end of body has no tag")
        pos = match.end()

        digits, tag = match.groups()
        if tag == END_OF_PATTERN:
            break

        count = int(digits) if digits else 1
        if count == 0:
            raise MalformedBody(f"Zero run count before {tag!r}")

        if tag == ALIVE_CELL:
            if row >= height or col + count > width:
                raise MalformedBody(
                    f"Live run at row {row}, columns {col}-{col + count - 1} "
                    f"exceeds declared size x = {width}, y = {height}"
                )
            cells.extend((row, c) for c in range(col, col + count))
            col += count
        elif tag == DEAD_CELL:
            col += count
        elif tag == END_OF_ROW:
            row += count
            col = 0
        else:
            raise MalformedBody(f"Unrecognized tag {tag!r} in RLE body")

    return cells


def decode_rle(text: str) -> Pattern:
    """Parse RLE text into a pattern.

    Args:
        text: Full contents of an RLE file

    Returns:
        Pattern with declared width/height and live cells in encounter order

    Raises:
        MalformedHeader: If the ``x = W, y = H`` line is missing or unparsable
        MalformedBody: On unknown tags, bad counts or cells outside the declared size
    """
    pattern = Pattern([])
    description: List[str] = []
    header = None
    body_lines: List[str] = []

    for raw_line in text.lstrip("\ufeff").splitlines():
        line = raw_line.strip()
        if not line:
            continue
        if line.startswith("#"):
            _read_comment(line, pattern, description)
            continue

        if header is None:
            header = _HEADER_RE.match(line)
            if header is None:
                raise MalformedHeader(f"Expected 'x = <int>, y = <int>' header, got {line!r}")
            continue

        body_lines.append(line)
        if END_OF_PATTERN in line:
            break

    if header is None:
        raise MalformedHeader("RLE text has no 'x = <int>, y = <int>' header")

    pattern.width = int(header.group("width"))
    pattern.height = int(header.group("height"))
    pattern.rule = header.group("rule")
    pattern.description = "\n".join(description)

    # Tags are case-insensitive
    body = _WHITESPACE_RE.sub("", "".join(body_lines)).lower()
    pattern.cells = _decode_body(body, pattern.width, pattern.height)
    return pattern


def _encode_row(alive: List[bool]) -> List[str]:
    """Encode one row as run tokens, dropping trailing dead cells."""
    while alive and not alive[-1]:
        alive.pop()

    tokens = []
    for state, run in groupby(alive):
        count = len(list(run))
        tag = ALIVE_CELL if state else DEAD_CELL
        tokens.append(f"{count}{tag}" if count > 1 else tag)
    return tokens


def encode_rle(pattern: Pattern, rule: Optional[str] = None) -> str:
    """Encode a pattern as RLE text.

    Args:
        pattern: Pattern to encode
        rule: Rule string for the header (defaults to the pattern's or B3/S23)

    Returns:
        RLE text with body lines no longer than 70 characters
    """
    rows, cols = pattern.size
    live = set(pattern.cells)

    lines = []
    if pattern.name:
        lines.append(f"#N {pattern.name}")
    for comment in pattern.description.splitlines():
        lines.append(f"#C {comment}")
    if "author" in pattern.metadata:
        lines.append(f"#O {pattern.metadata['author']}")
    lines.append(f"x = {cols}, y = {rows}, rule = {rule or pattern.rule or CONWAY_RULE}")

    tokens: List[str] = []
    pending_rows = 0
    for r in range(rows):
        row_tokens = _encode_row([(r, c) in live for c in range(cols)])
        if row_tokens:
            if pending_rows:
                tokens.append(f"{pending_rows}{END_OF_ROW}" if pending_rows > 1 else END_OF_ROW)
            tokens.extend(row_tokens)
            pending_rows = 0
        pending_rows += 1
    tokens.append(END_OF_PATTERN)

    current = ""
    for token in tokens:
        if len(current) + len(token) > MAX_LINE_LENGTH:
            lines.append(current)
            current = ""
        current += token
    lines.append(current)

    return "\n".join(lines) + "\n"

"""Core simulation engine."""

from .errors import (
    ConflictingSeedModes,
    FileReadError,
    GameOfLifeError,
    InvalidCoordinate,
    InvalidDimensions,
    InvalidProbability,
    MalformedBody,
    MalformedHeader,
    MalformedJSON,
    MissingDimensions,
    OutOfBounds,
    PatternTooLarge,
)
from .grid import Grid
from .game import GameOfLife
from .patterns import Pattern
from .rle import decode_rle, encode_rle
from .json_pattern import decode_json, encode_json
from .seed import JSONFileSeed, RandomSeed, RLEFileSeed, SeedConfig, initialize, mode_for_path

__all__ = [
    "Grid",
    "GameOfLife",
    "Pattern",
    "decode_rle",
    "encode_rle",
    "decode_json",
    "encode_json",
    "RandomSeed",
    "RLEFileSeed",
    "JSONFileSeed",
    "SeedConfig",
    "initialize",
    "mode_for_path",
    "GameOfLifeError",
    "InvalidDimensions",
    "OutOfBounds",
    "MalformedHeader",
    "MalformedBody",
    "MalformedJSON",
    "InvalidCoordinate",
    "MissingDimensions",
    "InvalidProbability",
    "FileReadError",
    "PatternTooLarge",
    "ConflictingSeedModes",
]

import json
import logging
import string
from pathlib import Path

import numpy as np

logger = logging.getLogger("boggle")

LETTERS = string.ascii_uppercase


class InvalidGridError(ValueError):
    """Raised when a board is empty, ragged, or holds anything but single letters."""


def validate_grid(board) -> list[list[str]]:
    """Check that *board* is a non-empty rectangle of single letters.

    Returns a new board with every cell folded to uppercase.
    """
    if not isinstance(board, (list, tuple)) or not board:
        raise InvalidGridError("Grid must have at least one row")

    cols = None
    result = []
    for r, row in enumerate(board):
        if not isinstance(row, (list, tuple)):
            raise InvalidGridError(f"Row {r} must be a list of letters, got {type(row).__name__}")
        if not row:
            raise InvalidGridError(f"Row {r} is empty")
        if cols is None:
            cols = len(row)
        elif len(row) != cols:
            raise InvalidGridError(f"Row {r} has {len(row)} cells, expected {cols}")

        out_row = []
        for c, cell in enumerate(row):
            if not isinstance(cell, str):
                raise InvalidGridError(f"Cell ({r},{c}) is not a string: {cell!r}")
            letter = cell.strip().upper()
            if len(letter) != 1 or letter not in LETTERS:
                raise InvalidGridError(f"Cell ({r},{c}) must be a single letter A-Z, got {cell!r}")
            out_row.append(letter)
        result.append(out_row)

    return result


def load_grid(path) -> list[list[str]]:
    """Read a JSON matrix of letters, e.g. [["C", "A"], ["T", "S"]]."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    board = validate_grid(data)
    logger.info("Loaded %dx%d grid from %s", len(board), len(board[0]), Path(path).name)
    return board


def random_grid(rows: int = 4, cols: int = 4, seed: int | None = None) -> list[list[str]]:
    """Generate a rows x cols grid of uniformly drawn letters A-Z."""
    if rows < 1 or cols < 1:
        raise ValueError(f"Grid dimensions must be positive, got {rows}x{cols}")
    rng = np.random.default_rng(seed)
    codes = rng.integers(0, len(LETTERS), size=(rows, cols))
    return [[LETTERS[i] for i in row] for row in codes.tolist()]


def format_grid(board: list[list[str]]) -> str:
    return "\n".join(" ".join(row) for row in board)

"""
Text grid parser for hand-authored mazes.

Grid Format:
    X = Wall (impassable)
    . = Floor (can also be space)

Rows are separated by newlines and must all have the same length. Surrounding
blank lines are ignored.
"""

from pathlib import Path
from typing import Optional

from .maze_grid import FLOOR_CHAR, WALL_CHAR, MazeGrid


class MazeParseError(Exception):
    """Exception raised when grid text cannot be parsed."""

    pass


class MazeValidationError(Exception):
    """Exception raised when parsed grid text does not form a valid grid."""

    pass


VALID_CHARS = {WALL_CHAR, FLOOR_CHAR, " "}


def parse_grid_text(grid_text: str, cell_size: float = 200.0) -> MazeGrid:
    """
    Parse grid text into a MazeGrid.

    Args:
        grid_text: Multi-line string of X (wall) and . (floor) characters.
        cell_size: World units per cell.

    Returns:
        MazeGrid with no seed or algorithm metadata.

    Raises:
        MazeParseError: If the text is empty or contains unknown characters.
        MazeValidationError: If rows have different lengths.
    """
    if not grid_text or not grid_text.strip():
        raise MazeParseError("Grid text is empty")

    if not cell_size > 0:
        raise MazeValidationError(f"Cell size must be positive, got {cell_size}")

    # Only strip newlines; leading spaces are floor
    lines = grid_text.strip("\r\n").splitlines()

    rows: list[list[bool]] = []
    for y, line in enumerate(lines):
        row = []
        for x, char in enumerate(line):
            if char not in VALID_CHARS:
                raise MazeParseError(
                    f"Invalid character '{char}' at position ({x}, {y}). "
                    f"Valid characters: {', '.join(sorted(VALID_CHARS))}"
                )
            row.append(char != WALL_CHAR)
        rows.append(row)

    width = len(rows[0])
    if width == 0:
        raise MazeParseError("Grid has no columns")

    for y, row in enumerate(rows):
        if len(row) != width:
            raise MazeValidationError(
                f"Row {y} has length {len(row)}, expected {width}"
            )

    return MazeGrid.from_floor_rows(rows, cell_size=cell_size)


def load_grid_file(file_path: Path | str, cell_size: float = 200.0) -> MazeGrid:
    """
    Load and parse a grid file from the filesystem.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        MazeParseError: If the grid cannot be parsed.
        MazeValidationError: If the grid is invalid.
    """
    file_path = Path(file_path)

    if not file_path.exists():
        raise FileNotFoundError(f"Grid file not found: {file_path}")

    if not file_path.is_file():
        raise MazeParseError(f"Path is not a file: {file_path}")

    return parse_grid_text(file_path.read_text(encoding="utf-8"), cell_size=cell_size)


def validate_grid_text(grid_text: str) -> tuple[bool, Optional[str]]:
    """
    Validate grid text without raising exceptions.

    Returns:
        Tuple of (is_valid, error_message).
        error_message is None if valid.
    """
    try:
        parse_grid_text(grid_text)
        return True, None
    except (MazeParseError, MazeValidationError) as e:
        return False, str(e)

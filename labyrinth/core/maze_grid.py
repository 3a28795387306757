"""
Floor/wall grid produced by the maze generator.

A MazeGrid is a flat, row-major tuple of immutable MazeCells plus the
metadata needed to reproduce it (seed, algorithm) and to place it in world
space (cell size, wall height).
"""

from dataclasses import dataclass, field
from typing import Iterable, Iterator, Optional

from .maze_types import GenerationAlgorithm, GridPosition, WorldPosition


WALL_CHAR = "X"
FLOOR_CHAR = "."
PATH_CHAR = "*"


@dataclass(frozen=True)
class MazeCell:
    """A single grid cell. Walkable iff is_floor."""
    position: GridPosition
    world_position: WorldPosition
    is_floor: bool

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "position": self.position.to_dict(),
            "world_position": self.world_position.to_dict(),
            "is_floor": self.is_floor,
        }


def cell_center(position: GridPosition, cell_size: float) -> WorldPosition:
    """World-space centre of a grid cell."""
    half = cell_size * 0.5
    return WorldPosition(position.x * cell_size + half, position.y * cell_size + half, 0.0)


@dataclass(frozen=True)
class MazeGrid:
    """
    Rectangular maze grid stored row by row.

    The grid is only usable when ``len(cells) == width * height``. It is never
    repaired silently; call ``is_valid()`` before trusting indices.
    """
    width: int
    height: int
    cell_size: float
    cells: tuple[MazeCell, ...]
    seed: Optional[int] = None
    algorithm: Optional[GenerationAlgorithm] = None
    wall_height: float = 300.0
    _floor_count: int = field(default=0, init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "cells", tuple(self.cells))
        object.__setattr__(self, "_floor_count", sum(1 for c in self.cells if c.is_floor))

    @classmethod
    def from_floor_rows(
        cls,
        rows: list[list[bool]],
        cell_size: float,
        seed: Optional[int] = None,
        algorithm: Optional[GenerationAlgorithm] = None,
        wall_height: float = 300.0,
    ) -> "MazeGrid":
        """Build a grid from a row-major matrix of floor flags."""
        height = len(rows)
        width = len(rows[0]) if rows else 0
        cells = []
        for y, row in enumerate(rows):
            for x, is_floor in enumerate(row):
                pos = GridPosition(x, y)
                cells.append(MazeCell(pos, cell_center(pos, cell_size), bool(is_floor)))
        return cls(
            width=width,
            height=height,
            cell_size=cell_size,
            cells=tuple(cells),
            seed=seed,
            algorithm=algorithm,
            wall_height=wall_height,
        )

    def is_valid(self) -> bool:
        return self.width > 0 and self.height > 0 and len(self.cells) == self.width * self.height

    def in_bounds(self, position: GridPosition) -> bool:
        return 0 <= position.x < self.width and 0 <= position.y < self.height

    def index_of(self, position: GridPosition) -> int:
        return position.y * self.width + position.x

    def cell_at(self, position: GridPosition) -> Optional[MazeCell]:
        """Get the cell at a position, or None if out of bounds or missing."""
        if not self.in_bounds(position):
            return None
        index = self.index_of(position)
        if index >= len(self.cells):
            return None
        return self.cells[index]

    def is_floor(self, position: GridPosition) -> bool:
        cell = self.cell_at(position)
        return cell is not None and cell.is_floor

    def floor_count(self) -> int:
        return self._floor_count

    def wall_count(self) -> int:
        return len(self.cells) - self._floor_count

    def floor_positions(self) -> Iterator[GridPosition]:
        for cell in self.cells:
            if cell.is_floor:
                yield cell.position

    def rows(self) -> list[str]:
        """Grid as text rows (X = wall, . = floor)."""
        return self.render().split("\n") if self.is_valid() else []

    def render(
        self,
        path: Iterable[GridPosition] = (),
        markers: Optional[dict[GridPosition, str]] = None,
    ) -> str:
        """
        Generate ASCII visualization of the grid.

        Args:
            path: Cells drawn as '*'.
            markers: Single-character overrides per cell (e.g. '@', 'E', 'K').
                Markers win over path cells.

        Returns:
            ASCII string representation, one line per row.
        """
        path_cells = set(path)
        markers = markers or {}

        lines = []
        for y in range(self.height):
            line = ""
            for x in range(self.width):
                pos = GridPosition(x, y)
                if pos in markers:
                    line += markers[pos]
                elif pos in path_cells:
                    line += PATH_CHAR
                elif self.is_floor(pos):
                    line += FLOOR_CHAR
                else:
                    line += WALL_CHAR
            lines.append(line)

        return "\n".join(lines)

    def to_dict(self) -> dict:
        """Get grid metadata and layout."""
        return {
            "width": self.width,
            "height": self.height,
            "cell_size": self.cell_size,
            "wall_height": self.wall_height,
            "seed": self.seed,
            "algorithm": self.algorithm.value if self.algorithm else None,
            "floor_count": self.floor_count(),
            "wall_count": self.wall_count(),
            "rows": self.rows(),
        }

"""
Breadth-first pathfinding over a generated maze grid.

The maze graph is unweighted and 4-connected, so BFS returns a shortest path
by hop count. Neighbours are always expanded East, West, South, North; when
several shortest paths exist this fixed order decides which one is returned.

Failures are reported through PathResult.error rather than exceptions:
    NOT_INITIALIZED - no valid grid has been supplied
    INVALID_CELL    - start or end is out of bounds or a wall
    NO_PATH_FOUND   - the search exhausted without reaching the end
"""

import logging
import math
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .maze_grid import MazeCell, MazeGrid
from .maze_types import (
    INVALID_POSITION,
    Direction,
    GridPosition,
    WorldLike,
    WorldPosition,
    as_world_position,
)

logger = logging.getLogger(__name__)

NEIGHBOR_ORDER = (Direction.EAST, Direction.WEST, Direction.SOUTH, Direction.NORTH)


class PathError(Enum):
    """Why a path query failed."""
    NOT_INITIALIZED = "not_initialized"
    INVALID_CELL = "invalid_cell"
    NO_PATH_FOUND = "no_path_found"


@dataclass
class PathResult:
    """Result of a path query."""
    success: bool = False
    grid_coordinates: list[GridPosition] = field(default_factory=list)
    world_positions: list[WorldPosition] = field(default_factory=list)
    length: int = 0
    error: Optional[PathError] = None

    @classmethod
    def failure(cls, error: PathError) -> "PathResult":
        return cls(success=False, error=error)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        result = {
            "success": self.success,
            "grid_coordinates": [p.to_dict() for p in self.grid_coordinates],
            "world_positions": [p.to_dict() for p in self.world_positions],
            "length": self.length,
        }
        if self.error:
            result["error"] = self.error.value
        return result


class MazePathfinder:
    """
    Shortest-path queries against a read-only maze grid.

    Example usage:
        pathfinder = MazePathfinder()
        pathfinder.initialize(grid)

        result = pathfinder.find_path(GridPosition(0, 0), GridPosition(4, 4))
        if result.success:
            waypoints = result.world_positions
    """

    def __init__(self, grid: Optional[MazeGrid] = None):
        self._cells: tuple[MazeCell, ...] = ()
        self.width: int = 0
        self.height: int = 0
        self.cell_size: float = 200.0
        self._ready: bool = False

        if grid is not None:
            self.initialize(grid)

    @property
    def is_ready(self) -> bool:
        return self._ready

    def initialize(self, grid: MazeGrid) -> bool:
        """
        Load a grid for querying.

        Args:
            grid: Generated (or parsed) maze grid.

        Returns:
            True if the grid is valid and queries can run.
        """
        self._cells = grid.cells
        self.width = grid.width
        self.height = grid.height
        self.cell_size = grid.cell_size
        self._ready = grid.is_valid() and grid.cell_size > 0

        if not self._ready:
            logger.error(
                f"Pathfinder: cell count ({len(grid.cells)}) doesn't match size "
                f"({grid.width} x {grid.height} = {grid.width * grid.height})"
            )
        return self._ready

    def find_path(self, start: GridPosition, end: GridPosition) -> PathResult:
        """
        Find the shortest walkable path between two cells.

        Args:
            start: Start cell (must be floor).
            end: End cell (must be floor).

        Returns:
            PathResult with start..end inclusive on success.
        """
        if not self._ready:
            logger.warning("Pathfinder: not initialized")
            return PathResult.failure(PathError.NOT_INITIALIZED)

        if not self.is_valid_cell(start):
            logger.warning(f"Pathfinder: start ({start.x}, {start.y}) is not walkable")
            return PathResult.failure(PathError.INVALID_CELL)

        if not self.is_valid_cell(end):
            logger.warning(f"Pathfinder: end ({end.x}, {end.y}) is not walkable")
            return PathResult.failure(PathError.INVALID_CELL)

        if start == end:
            return self._build_result([start])

        # Start has no parent
        parents: dict[GridPosition, Optional[GridPosition]] = {start: None}
        queue = deque([start])
        found = False

        while queue:
            current = queue.popleft()
            if current == end:
                found = True
                break

            for neighbor in self.walkable_neighbors(current):
                if neighbor not in parents:
                    parents[neighbor] = current
                    queue.append(neighbor)

        if not found:
            logger.warning(
                f"Pathfinder: no path from ({start.x}, {start.y}) to ({end.x}, {end.y})"
            )
            return PathResult.failure(PathError.NO_PATH_FOUND)

        path = []
        step: Optional[GridPosition] = end
        while step is not None:
            path.append(step)
            step = parents[step]
        path.reverse()

        return self._build_result(path)

    def find_path_from_world(self, world_start: WorldLike, grid_end: GridPosition) -> PathResult:
        """
        Find a path from a world-space point to a grid cell.

        A start point that lands on a wall is moved to the nearest walkable cell.
        """
        if not self._ready:
            logger.warning("Pathfinder: not initialized")
            return PathResult.failure(PathError.NOT_INITIALIZED)

        if not as_world_position(world_start).is_finite():
            logger.warning("Pathfinder: world start is not a finite point")
            return PathResult.failure(PathError.INVALID_CELL)

        start = self.world_to_grid(world_start)
        if not self.is_valid_cell(start):
            start = self.find_nearest_walkable_cell(start)
            if start == INVALID_POSITION:
                return PathResult.failure(PathError.INVALID_CELL)

        return self.find_path(start, grid_end)

    def world_to_grid(self, world_position: WorldLike) -> GridPosition:
        """Quantize a world point to the cell containing it; INVALID_POSITION for inf/nan."""
        point = as_world_position(world_position)
        if not point.is_finite():
            return INVALID_POSITION
        return GridPosition(
            math.floor(point.x / self.cell_size),
            math.floor(point.y / self.cell_size),
        )

    def grid_to_world(self, position: GridPosition) -> WorldPosition:
        """World-space centre of a cell."""
        half = self.cell_size * 0.5
        return WorldPosition(
            position.x * self.cell_size + half,
            position.y * self.cell_size + half,
            0.0,
        )

    def is_valid_cell(self, position: GridPosition) -> bool:
        """Check that a cell is in bounds and walkable."""
        if not self._ready:
            return False
        if not (0 <= position.x < self.width and 0 <= position.y < self.height):
            return False
        return self._cells[position.y * self.width + position.x].is_floor

    def find_nearest_walkable_cell(self, origin: GridPosition) -> GridPosition:
        """
        Expanding-ring search for the closest walkable cell.

        Each radius walks the full (2r+1) x (2r+1) square but tests only the
        cells on its border, so every cell is tested once.

        Returns:
            The first walkable cell found, or INVALID_POSITION.
        """
        if not self._ready:
            return INVALID_POSITION

        max_radius = max(self.width, self.height)
        for radius in range(max_radius + 1):
            for dx in range(-radius, radius + 1):
                for dy in range(-radius, radius + 1):
                    if abs(dx) != radius and abs(dy) != radius:
                        continue
                    candidate = GridPosition(origin.x + dx, origin.y + dy)
                    if self.is_valid_cell(candidate):
                        return candidate

        return INVALID_POSITION

    def walkable_neighbors(self, position: GridPosition) -> list[GridPosition]:
        """Cardinal neighbours that are floor, in expansion order."""
        neighbors = []
        for direction in NEIGHBOR_ORDER:
            candidate = position.offset(direction)
            if self.is_valid_cell(candidate):
                neighbors.append(candidate)
        return neighbors

    def _build_result(self, path: list[GridPosition]) -> PathResult:
        return PathResult(
            success=True,
            grid_coordinates=path,
            world_positions=[self.grid_to_world(p) for p in path],
            length=len(path),
        )

"""
Shared maze value types.

Grid coordinates, world-space points, the direction bit flags used while
carving, the generation algorithm selector and the pathfinding target.

Coordinate conventions:
    x grows East, y grows South (North is y - 1).
    Grid cells are stored row-major: index = y * width + x.
"""

import math
from dataclasses import dataclass
from enum import Enum, IntFlag
from typing import Union


class Direction(IntFlag):
    """Passage directions, stored as independent bits on a room."""
    EAST = 1
    NORTH = 2
    SOUTH = 4
    WEST = 8

    @property
    def opposite(self) -> "Direction":
        """Get the direction pointing back the way we came."""
        opposites = {
            Direction.EAST: Direction.WEST,
            Direction.WEST: Direction.EAST,
            Direction.NORTH: Direction.SOUTH,
            Direction.SOUTH: Direction.NORTH,
        }
        return opposites[self]

    @property
    def dx(self) -> int:
        if self == Direction.EAST:
            return 1
        if self == Direction.WEST:
            return -1
        return 0

    @property
    def dy(self) -> int:
        if self == Direction.SOUTH:
            return 1
        if self == Direction.NORTH:
            return -1
        return 0


CARDINAL_DIRECTIONS = (Direction.EAST, Direction.NORTH, Direction.SOUTH, Direction.WEST)


class GenerationAlgorithm(Enum):
    """Maze carving strategies."""
    RECURSIVE_BACKTRACKER = "recursive_backtracker"
    PRIMS = "prims"
    KRUSKALS = "kruskals"


class PathTarget(Enum):
    """What the player is currently being guided towards."""
    EXIT = "exit"
    KEY = "key"
    NONE = "none"


@dataclass(frozen=True)
class GridPosition:
    """Integer cell coordinate in the maze grid."""
    x: int
    y: int

    def offset(self, direction: Direction) -> "GridPosition":
        """Return the neighbouring position in a direction."""
        return GridPosition(self.x + direction.dx, self.y + direction.dy)

    def manhattan_distance(self, other: "GridPosition") -> int:
        return abs(self.x - other.x) + abs(self.y - other.y)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {"x": self.x, "y": self.y}


# Returned when a search finds nothing.
INVALID_POSITION = GridPosition(-1, -1)


@dataclass(frozen=True)
class WorldPosition:
    """Continuous position in world space (cell centres sit at z = 0)."""
    x: float
    y: float
    z: float = 0.0

    def is_finite(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {"x": self.x, "y": self.y, "z": self.z}


WorldLike = Union[WorldPosition, tuple]


def as_world_position(value: WorldLike) -> WorldPosition:
    """Accept a WorldPosition or an (x, y[, z]) tuple."""
    if isinstance(value, WorldPosition):
        return value
    if len(value) == 2:
        return WorldPosition(float(value[0]), float(value[1]))
    return WorldPosition(float(value[0]), float(value[1]), float(value[2]))

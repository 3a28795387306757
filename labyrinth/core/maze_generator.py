"""
Seeded maze generation.

Generation runs in two phases:

1. Carve a spanning tree over a coarse "directions grid" of rooms. Each room
   stores the Direction bits of the passages that leave it. Three strategies
   are available:
       - Recursive backtracker (depth-first): long corridors, many dead ends.
       - Prim's (random frontier growth): organic, radially grown layouts.
       - Kruskal's (union-find over shuffled edges): evenly balanced layouts.
2. Expand the directions grid into the final floor/wall grid. Room (rx, ry)
   becomes floor cell (2rx, 2ry); each open passage becomes the single floor
   cell between two rooms. Everything else stays wall, which yields a
   1-cell-thick wall lattice.

Every random choice comes from a random.Random seeded with config.seed, so
the same config always produces the same grid.
"""

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Union

from .maze_grid import MazeGrid
from .maze_types import Direction, GenerationAlgorithm, GridPosition

logger = logging.getLogger(__name__)

MIN_MAZE_SIZE = 5

# Room value type: OR-ed Direction bits, 0 = no passages yet.
DirectionsGrid = list[list[int]]


class ConfigurationError(ValueError):
    """Exception raised when a generation config is invalid."""

    pass


@dataclass
class GenerationConfig:
    """Parameters that fully determine a generated maze."""

    seed: int = 12345
    width: int = 21
    height: int = 21
    algorithm: Union[GenerationAlgorithm, str] = GenerationAlgorithm.RECURSIVE_BACKTRACKER
    cell_size: float = 200.0
    wall_height: float = 300.0

    def validate(self) -> None:
        """
        Check the config and normalize the algorithm field.

        Raises:
            ConfigurationError: If any parameter is out of range.
        """
        if isinstance(self.seed, bool) or not isinstance(self.seed, int):
            raise ConfigurationError(f"Seed must be an integer, got {self.seed!r}")

        for name in ("width", "height"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigurationError(f"Maze {name} must be an integer, got {value!r}")
            if value < MIN_MAZE_SIZE:
                raise ConfigurationError(
                    f"Maze {name} must be at least {MIN_MAZE_SIZE}, got {value}"
                )

        if not self.cell_size > 0:
            raise ConfigurationError(f"Cell size must be positive, got {self.cell_size}")
        if not self.wall_height > 0:
            raise ConfigurationError(f"Wall height must be positive, got {self.wall_height}")

        if not isinstance(self.algorithm, GenerationAlgorithm):
            try:
                self.algorithm = GenerationAlgorithm(self.algorithm)
            except ValueError as e:
                valid = ", ".join(a.value for a in GenerationAlgorithm)
                raise ConfigurationError(
                    f"Unknown algorithm '{self.algorithm}'. Must be one of: {valid}"
                ) from e

    @property
    def rooms_size(self) -> tuple[int, int]:
        """Size of the directions grid (rooms wide, rooms high)."""
        return (self.width + 1) // 2, (self.height + 1) // 2

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        algorithm = self.algorithm
        return {
            "seed": self.seed,
            "width": self.width,
            "height": self.height,
            "algorithm": algorithm.value if isinstance(algorithm, GenerationAlgorithm) else algorithm,
            "cell_size": self.cell_size,
            "wall_height": self.wall_height,
        }


def create_directions_grid(rooms_w: int, rooms_h: int) -> DirectionsGrid:
    """All rooms closed."""
    return [[0] * rooms_w for _ in range(rooms_h)]


def _open_passage(grid: DirectionsGrid, x: int, y: int, direction: Direction) -> None:
    """Open a passage from (x, y) and the matching one back from the neighbour."""
    grid[y][x] |= direction
    grid[y + direction.dy][x + direction.dx] |= direction.opposite


# Recursive backtracker

BACKTRACKER_DIRECTIONS = (Direction.EAST, Direction.WEST, Direction.NORTH, Direction.SOUTH)


def _shuffled_directions(rng: random.Random) -> list[Direction]:
    directions = list(BACKTRACKER_DIRECTIONS)
    rng.shuffle(directions)
    return directions


def carve_recursive_backtracker(rooms_w: int, rooms_h: int, rng: random.Random) -> DirectionsGrid:
    """
    Depth-first carving from room (0, 0).

    Each room shuffles its four directions when first entered, then tries them
    in order, descending into every unvisited neighbour before moving on to the
    next direction. Uses an explicit stack instead of recursion; the carve
    order matches the recursive form.
    """
    grid = create_directions_grid(rooms_w, rooms_h)
    stack = [(0, 0, iter(_shuffled_directions(rng)))]

    while stack:
        x, y, directions = stack[-1]
        for direction in directions:
            nx, ny = x + direction.dx, y + direction.dy
            # Unvisited means no direction bits yet
            if 0 <= nx < rooms_w and 0 <= ny < rooms_h and grid[ny][nx] == 0:
                _open_passage(grid, x, y, direction)
                stack.append((nx, ny, iter(_shuffled_directions(rng))))
                break
        else:
            stack.pop()

    return grid


# Prim's

class RoomState(Enum):
    """Traversal state of a room during Prim's growth."""
    OUT = 0
    FRONTIER = 1
    IN = 2


def carve_prims(rooms_w: int, rooms_h: int, rng: random.Random) -> DirectionsGrid:
    """
    Grow the maze outward from a random room.

    Room traversal state lives in its own matrix so it never mixes with the
    direction bits.
    """
    grid = create_directions_grid(rooms_w, rooms_h)
    state = [[RoomState.OUT] * rooms_w for _ in range(rooms_h)]
    frontier: list[tuple[int, int]] = []

    def add_frontier(x: int, y: int) -> None:
        if 0 <= x < rooms_w and 0 <= y < rooms_h and state[y][x] is RoomState.OUT:
            state[y][x] = RoomState.FRONTIER
            frontier.append((x, y))

    def mark_in(x: int, y: int) -> None:
        state[y][x] = RoomState.IN
        add_frontier(x - 1, y)
        add_frontier(x + 1, y)
        add_frontier(x, y - 1)
        add_frontier(x, y + 1)

    def in_neighbors(x: int, y: int) -> list[Direction]:
        found = []
        for direction in (Direction.WEST, Direction.EAST, Direction.NORTH, Direction.SOUTH):
            nx, ny = x + direction.dx, y + direction.dy
            if 0 <= nx < rooms_w and 0 <= ny < rooms_h and state[ny][nx] is RoomState.IN:
                found.append(direction)
        return found

    mark_in(rng.randint(0, rooms_w - 1), rng.randint(0, rooms_h - 1))

    while frontier:
        x, y = frontier.pop(rng.randint(0, len(frontier) - 1))
        # Frontier rooms always border at least one IN room
        candidates = in_neighbors(x, y)
        _open_passage(grid, x, y, candidates[rng.randint(0, len(candidates) - 1)])
        mark_in(x, y)

    return grid


# Kruskal's

class DisjointSet:
    """
    Union-find over integer elements.

    Roots are found by chasing parent links. There is no path compression.
    """

    def __init__(self, size: int):
        self._parent: list[int] = list(range(size))

    def find(self, element: int) -> int:
        while self._parent[element] != element:
            element = self._parent[element]
        return element

    def connected(self, a: int, b: int) -> bool:
        return self.find(a) == self.find(b)

    def union(self, a: int, b: int) -> bool:
        """
        Attach b's root under a's root.

        Returns:
            False if a and b were already in the same set.
        """
        root_a = self.find(a)
        root_b = self.find(b)
        if root_a == root_b:
            return False
        self._parent[root_b] = root_a
        return True


def carve_kruskals(rooms_w: int, rooms_h: int, rng: random.Random) -> DirectionsGrid:
    """Join rooms across shuffled edges, skipping any edge that would close a loop."""
    grid = create_directions_grid(rooms_w, rooms_h)
    sets = DisjointSet(rooms_w * rooms_h)

    # Each edge is listed once, from the room to its west or north neighbour
    edges: list[tuple[int, int, Direction]] = []
    for y in range(rooms_h):
        for x in range(rooms_w):
            if x > 0:
                edges.append((x, y, Direction.WEST))
            if y > 0:
                edges.append((x, y, Direction.NORTH))

    rng.shuffle(edges)

    for x, y, direction in edges:
        nx, ny = x + direction.dx, y + direction.dy
        if sets.union(y * rooms_w + x, ny * rooms_w + nx):
            _open_passage(grid, x, y, direction)

    return grid


CARVERS: dict[GenerationAlgorithm, Callable[[int, int, random.Random], DirectionsGrid]] = {
    GenerationAlgorithm.RECURSIVE_BACKTRACKER: carve_recursive_backtracker,
    GenerationAlgorithm.PRIMS: carve_prims,
    GenerationAlgorithm.KRUSKALS: carve_kruskals,
}


# Expansion and entry point

def room_to_grid(rx: int, ry: int) -> GridPosition:
    """Final-grid position of a directions-grid room."""
    return GridPosition(rx * 2, ry * 2)


def directions_to_floor_wall_grid(directions: DirectionsGrid, width: int, height: int) -> list[list[bool]]:
    """
    Expand a directions grid into a width x height floor matrix.

    Rooms map to even coordinates. Passages map to the cell between two rooms.
    Every write is bounds-checked because even final sizes do not cover the
    last column/row of passages.
    """
    floor = [[False] * width for _ in range(height)]

    for ry, row in enumerate(directions):
        for rx, bits in enumerate(row):
            room = room_to_grid(rx, ry)
            fx, fy = room.x, room.y
            if fx >= width or fy >= height:
                continue

            floor[fy][fx] = True

            if bits & Direction.EAST and fx + 1 < width:
                floor[fy][fx + 1] = True
            if bits & Direction.NORTH and fy - 1 >= 0:
                floor[fy - 1][fx] = True
            if bits & Direction.SOUTH and fy + 1 < height:
                floor[fy + 1][fx] = True
            if bits & Direction.WEST and fx - 1 >= 0:
                floor[fy][fx - 1] = True

    return floor


def count_passages(directions: DirectionsGrid) -> int:
    """Number of undirected passages (each counted once via its East/South end)."""
    total = 0
    for row in directions:
        for bits in row:
            if bits & Direction.EAST:
                total += 1
            if bits & Direction.SOUTH:
                total += 1
    return total


def carve_directions(config: GenerationConfig) -> DirectionsGrid:
    """Run only the carving phase for a validated config."""
    config.validate()
    rooms_w, rooms_h = config.rooms_size
    rng = random.Random(config.seed)
    return CARVERS[config.algorithm](rooms_w, rooms_h, rng)


def generate(config: GenerationConfig) -> MazeGrid:
    """
    Generate a maze grid.

    Args:
        config: Generation parameters. Same config, same grid.

    Returns:
        A valid MazeGrid of config.width x config.height cells.

    Raises:
        ConfigurationError: If the config is invalid. No partial grid is built.
    """
    directions = carve_directions(config)
    floor = directions_to_floor_wall_grid(directions, config.width, config.height)

    grid = MazeGrid.from_floor_rows(
        floor,
        cell_size=config.cell_size,
        seed=config.seed,
        algorithm=config.algorithm,
        wall_height=config.wall_height,
    )

    logger.info(
        f"Maze generated ({config.algorithm.value}, seed={config.seed}): "
        f"{grid.floor_count()} floors, {grid.wall_count()} walls "
        f"(total {len(grid.cells)})"
    )
    return grid

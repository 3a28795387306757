"""In-memory registry of generated mazes."""

import logging
import uuid
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from labyrinth.config import get_settings
from labyrinth.core.maze_generator import GenerationConfig, generate
from labyrinth.core.maze_grid import MazeGrid
from labyrinth.core.maze_types import GridPosition, WorldLike
from labyrinth.core.pathfinder import MazePathfinder, PathResult

logger = logging.getLogger(__name__)


class MazeNotFoundError(LookupError):
    """Exception raised when a maze id is not in the registry."""

    pass


@dataclass
class StoredMaze:
    """A generated maze with its ready pathfinder."""

    id: uuid.UUID
    config: GenerationConfig
    grid: MazeGrid
    pathfinder: MazePathfinder
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class MazeService:
    """
    Generates mazes and keeps the most recent ones in memory.

    Once more than ``max_stored`` mazes exist, the oldest is evicted.
    """

    def __init__(self, max_stored: int = 100):
        self.max_stored = max_stored
        self._mazes: OrderedDict[uuid.UUID, StoredMaze] = OrderedDict()

    def generate(self, config: GenerationConfig) -> StoredMaze:
        """
        Generate and store a maze.

        Raises:
            ConfigurationError: If the config is invalid.
        """
        grid = generate(config)
        maze = StoredMaze(
            id=uuid.uuid4(),
            config=config,
            grid=grid,
            pathfinder=MazePathfinder(grid),
        )
        self._mazes[maze.id] = maze

        while len(self._mazes) > self.max_stored:
            evicted_id, _ = self._mazes.popitem(last=False)
            logger.info(f"Evicted maze {evicted_id} (limit {self.max_stored})")

        return maze

    def get(self, maze_id: uuid.UUID) -> StoredMaze:
        maze = self._mazes.get(maze_id)
        if maze is None:
            raise MazeNotFoundError(f"Maze not found: {maze_id}")
        return maze

    def list_mazes(self) -> list[StoredMaze]:
        """Stored mazes, oldest first."""
        return list(self._mazes.values())

    def find_path(self, maze_id: uuid.UUID, start: GridPosition, end: GridPosition) -> PathResult:
        return self.get(maze_id).pathfinder.find_path(start, end)

    def find_path_from_world(
        self, maze_id: uuid.UUID, world_start: WorldLike, end: GridPosition
    ) -> PathResult:
        return self.get(maze_id).pathfinder.find_path_from_world(world_start, end)

    def find_nearest_walkable_cell(self, maze_id: uuid.UUID, origin: GridPosition) -> GridPosition:
        return self.get(maze_id).pathfinder.find_nearest_walkable_cell(origin)


# Global maze service instance
_maze_service: Optional[MazeService] = None


def get_maze_service() -> MazeService:
    """Get the global maze service instance."""
    global _maze_service
    if _maze_service is None:
        _maze_service = MazeService(max_stored=get_settings().max_stored_mazes)
    return _maze_service

"""In-memory registry of maze runs."""

import logging
import uuid
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from labyrinth.config import get_settings
from labyrinth.core.maze_run import MazeRun
from labyrinth.core.maze_types import INVALID_POSITION, GridPosition
from labyrinth.services.maze_service import MazeService, get_maze_service

logger = logging.getLogger(__name__)


class RunNotFoundError(LookupError):
    """Exception raised when a run id is not in the registry."""

    pass


class InvalidTargetError(ValueError):
    """Exception raised when a target cannot be placed on a walkable cell."""

    pass


@dataclass
class StoredRun:
    """A run bound to the maze it was started on."""

    id: uuid.UUID
    maze_id: uuid.UUID
    run: MazeRun
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class RunService:
    """
    Starts runs on stored mazes and looks them up by id.

    Once more than ``max_stored`` runs exist, the oldest is evicted.
    """

    def __init__(self, maze_service: MazeService, max_stored: int = 1000):
        self.maze_service = maze_service
        self.max_stored = max_stored
        self._runs: OrderedDict[uuid.UUID, StoredRun] = OrderedDict()

    def create(
        self,
        maze_id: uuid.UUID,
        exit_position: Optional[GridPosition] = None,
        key_position: Optional[GridPosition] = None,
    ) -> StoredRun:
        """
        Start a run with exit and key placed on the maze.

        Raises:
            MazeNotFoundError: If the maze does not exist.
            InvalidTargetError: If a supplied target has no walkable cell nearby.
        """
        maze = self.maze_service.get(maze_id)
        run = MazeRun(maze.grid, exit_position=exit_position, key_position=key_position)

        for name, requested, resolved in (
            ("exit", exit_position, run.exit_position),
            ("key", key_position, run.key_position),
        ):
            if requested is not None and resolved == INVALID_POSITION:
                raise InvalidTargetError(
                    f"No walkable cell near {name} position ({requested.x}, {requested.y})"
                )

        stored = StoredRun(id=uuid.uuid4(), maze_id=maze_id, run=run)
        self._runs[stored.id] = stored
        logger.info(f"Run {stored.id} started on maze {maze_id}")

        while len(self._runs) > self.max_stored:
            evicted_id, _ = self._runs.popitem(last=False)
            logger.info(f"Evicted run {evicted_id} (limit {self.max_stored})")

        return stored

    def get(self, run_id: uuid.UUID) -> StoredRun:
        stored = self._runs.get(run_id)
        if stored is None:
            raise RunNotFoundError(f"Run not found: {run_id}")
        return stored


# Global run service instance
_run_service: Optional[RunService] = None


def get_run_service() -> RunService:
    """Get the global run service instance."""
    global _run_service
    if _run_service is None:
        _run_service = RunService(get_maze_service(), max_stored=get_settings().max_stored_runs)
    return _run_service

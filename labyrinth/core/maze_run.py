"""
One play-through of a generated maze.

Combines a pathfinder over the grid with the discovery state machine and the
known exit/key cells, so the caller only reports where the player is and what
they found. Drawing to the screen is left to the caller; this class tracks
the current path, whether it is meant to be visible, and offers an ASCII view.
"""

import logging
from typing import Optional

from .discovery import DiscoveryNotification, DiscoveryStateMachine
from .maze_grid import MazeGrid
from .maze_types import INVALID_POSITION, GridPosition, PathTarget, WorldLike, as_world_position
from .pathfinder import MazePathfinder, PathError, PathResult

logger = logging.getLogger(__name__)


class MazeRun:
    """
    Guide state for a single run through a maze.

    Example usage:
        run = MazeRun(grid, exit_position=GridPosition(20, 20), key_position=GridPosition(0, 20))
        run.show_path(player_world_position)     # path to the exit
        run.notify_exit_discovered()             # target switches to the key
    """

    def __init__(
        self,
        grid: MazeGrid,
        exit_position: Optional[GridPosition] = None,
        key_position: Optional[GridPosition] = None,
    ):
        self.grid = grid
        self.pathfinder = MazePathfinder(grid)
        self.discovery = DiscoveryStateMachine()
        self.exit_position = self.resolve_target_position(exit_position)
        self.key_position = self.resolve_target_position(key_position)
        self.current_path = PathResult()
        self.path_visible = False

    def resolve_target_position(self, position: Optional[GridPosition]) -> GridPosition:
        """Snap a target onto the nearest walkable cell; INVALID_POSITION if impossible."""
        if position is None or not self.pathfinder.is_ready:
            return INVALID_POSITION
        if self.pathfinder.is_valid_cell(position):
            return position
        return self.pathfinder.find_nearest_walkable_cell(position)

    def resolve_world_target(self, world_position: WorldLike) -> GridPosition:
        """Convert an object's world location to a walkable grid cell."""
        if not self.pathfinder.is_ready or not as_world_position(world_position).is_finite():
            return INVALID_POSITION
        return self.resolve_target_position(self.pathfinder.world_to_grid(world_position))

    @property
    def current_target(self) -> PathTarget:
        return self.discovery.current_target

    def current_target_position(self) -> GridPosition:
        """Grid position of whatever the guide currently points at."""
        if self.current_target == PathTarget.EXIT:
            return self.exit_position
        if self.current_target == PathTarget.KEY:
            return self.key_position
        return INVALID_POSITION

    def recalculate_path(self, from_world: WorldLike) -> PathResult:
        """Recompute the path from a world position to the current target."""
        target = self.current_target_position()
        if target == INVALID_POSITION:
            logger.warning(f"MazeRun: no grid position for target {self.current_target.value}")
            self.current_path = PathResult.failure(PathError.INVALID_CELL)
            return self.current_path

        self.current_path = self.pathfinder.find_path_from_world(from_world, target)
        return self.current_path

    def show_path(self, from_world: WorldLike) -> PathResult:
        """Recalculate the path and mark it visible."""
        result = self.recalculate_path(from_world)
        self.path_visible = True
        logger.info(
            f"MazeRun: showing path to {self.current_target.value} ({result.length} cells)"
        )
        return result

    def hide_path(self) -> None:
        self.path_visible = False

    def toggle_path(self, from_world: WorldLike) -> PathResult:
        """Hide the path if visible, otherwise show a fresh one."""
        if self.path_visible:
            self.hide_path()
            return self.current_path
        return self.show_path(from_world)

    def notify_exit_discovered(self) -> list[DiscoveryNotification]:
        return self.discovery.notify_exit_discovered()

    def notify_key_collected(self) -> list[DiscoveryNotification]:
        return self.discovery.notify_key_collected()

    def can_finish(self) -> bool:
        return self.discovery.can_finish()

    def ability_available(self) -> bool:
        return self.discovery.ability_available()

    def render(self, player: Optional[GridPosition] = None) -> str:
        """ASCII view with exit (E), key (K), player (@) and the current path."""
        markers = {}
        if self.exit_position != INVALID_POSITION:
            markers[self.exit_position] = "E"
        if self.key_position != INVALID_POSITION:
            markers[self.key_position] = "K"
        if player is not None:
            markers[player] = "@"
        path = self.current_path.grid_coordinates if self.path_visible else ()
        return self.grid.render(path=path, markers=markers)

    def snapshot(self) -> dict:
        """Current run state as a dictionary."""
        return {
            "discovery": self.discovery.state.to_dict(),
            "exit_position": self.exit_position.to_dict(),
            "key_position": self.key_position.to_dict(),
            "target_position": self.current_target_position().to_dict(),
            "path_visible": self.path_visible,
            "current_path": self.current_path.to_dict(),
        }

"""Tests for a single guided run through a maze."""

import math

from labyrinth.core.discovery import AbilityUnlocked, TargetChanged
from labyrinth.core.maze_generator import GenerationConfig, generate
from labyrinth.core.maze_run import MazeRun
from labyrinth.core.maze_types import INVALID_POSITION, GridPosition, PathTarget, WorldPosition
from labyrinth.core.pathfinder import PathError


# Player standing in cell (0, 0) of the 100-unit loop grid
PLAYER = WorldPosition(50.0, 50.0)


class TestTargets:
    """Tests for exit and key placement."""

    def test_floor_targets_kept(self, loop_grid):
        """Test that targets already on floor are used as given."""
        run = MazeRun(loop_grid, GridPosition(4, 2), GridPosition(0, 2))
        assert run.exit_position == GridPosition(4, 2)
        assert run.key_position == GridPosition(0, 2)

    def test_wall_target_snapped(self, loop_grid):
        """Test that a target inside a wall moves to the nearest floor."""
        run = MazeRun(loop_grid, exit_position=GridPosition(2, 1))
        assert run.exit_position == GridPosition(1, 0)

    def test_missing_target(self, loop_grid):
        """Test that an unknown target is the invalid position."""
        run = MazeRun(loop_grid)
        assert run.exit_position == INVALID_POSITION
        assert run.current_target_position() == INVALID_POSITION

    def test_resolve_world_target(self, loop_grid):
        """Test that a world location resolves to a walkable cell."""
        run = MazeRun(loop_grid)
        assert run.resolve_world_target(WorldPosition(450.0, 250.0)) == GridPosition(4, 2)
        assert run.resolve_world_target(WorldPosition(250.0, 150.0)) == GridPosition(1, 0)

    def test_resolve_non_finite_world_target(self, loop_grid):
        """Test that inf and nan locations are not snapped onto the grid."""
        run = MazeRun(loop_grid)
        assert run.resolve_world_target(WorldPosition(math.inf, 50.0)) == INVALID_POSITION
        assert run.resolve_world_target(WorldPosition(math.nan, math.nan)) == INVALID_POSITION

    def test_target_follows_discoveries(self, loop_grid):
        """Test that the target position tracks the state machine."""
        run = MazeRun(loop_grid, GridPosition(4, 2), GridPosition(0, 2))
        assert run.current_target is PathTarget.EXIT
        assert run.current_target_position() == GridPosition(4, 2)

        notifications = run.notify_exit_discovered()
        assert notifications == [AbilityUnlocked(), TargetChanged(PathTarget.EXIT, PathTarget.KEY)]
        assert run.current_target_position() == GridPosition(0, 2)
        assert run.ability_available()

        run.notify_key_collected()
        assert run.current_target_position() == GridPosition(4, 2)
        assert run.can_finish()


class TestPathVisibility:
    """Tests for showing, hiding and toggling the guide path."""

    def test_show_path_to_exit(self, loop_grid):
        """Test that the path runs from the player to the exit."""
        run = MazeRun(loop_grid, GridPosition(4, 2), GridPosition(0, 2))
        result = run.show_path(PLAYER)

        assert run.path_visible
        assert result.success
        assert result.length == 7
        assert result.grid_coordinates[0] == GridPosition(0, 0)
        assert result.grid_coordinates[-1] == GridPosition(4, 2)
        assert run.current_path is result

    def test_recalculate_after_exit_found(self, loop_grid):
        """Test that the path switches to the key once the exit is seen."""
        run = MazeRun(loop_grid, GridPosition(4, 2), GridPosition(0, 2))
        run.notify_exit_discovered()
        result = run.recalculate_path(PLAYER)
        assert result.grid_coordinates == [
            GridPosition(0, 0),
            GridPosition(0, 1),
            GridPosition(0, 2),
        ]

    def test_hide_path(self, loop_grid):
        """Test that hiding keeps the last path but clears visibility."""
        run = MazeRun(loop_grid, GridPosition(4, 2))
        run.show_path(PLAYER)
        run.hide_path()
        assert not run.path_visible
        assert run.current_path.success

    def test_toggle_path(self, loop_grid):
        """Test that toggle alternates between shown and hidden."""
        run = MazeRun(loop_grid, GridPosition(4, 2))
        shown = run.toggle_path(PLAYER)
        assert run.path_visible
        assert shown.success

        run.toggle_path(PLAYER)
        assert not run.path_visible

    def test_path_without_target(self, loop_grid):
        """Test that a run without an exit reports an invalid target cell."""
        run = MazeRun(loop_grid)
        result = run.show_path(PLAYER)
        assert not result.success
        assert result.error is PathError.INVALID_CELL
        assert result.grid_coordinates == []
        assert run.current_path.error is PathError.INVALID_CELL

    def test_player_inside_wall(self, loop_grid):
        """Test that a player standing in a wall starts from the nearest floor."""
        run = MazeRun(loop_grid, GridPosition(4, 0))
        result = run.recalculate_path(WorldPosition(250.0, 150.0))
        assert result.success
        assert result.grid_coordinates[0] == GridPosition(1, 0)


class TestSnapshot:
    """Tests for run serialization and rendering."""

    def test_snapshot(self, loop_grid):
        """Test the snapshot dictionary."""
        run = MazeRun(loop_grid, GridPosition(4, 2), GridPosition(0, 2))
        run.show_path(PLAYER)
        data = run.snapshot()

        assert data["discovery"]["current_target"] == "exit"
        assert data["exit_position"] == {"x": 4, "y": 2}
        assert data["target_position"] == {"x": 4, "y": 2}
        assert data["path_visible"] is True
        assert data["current_path"]["length"] == 7

    def test_render_markers(self, loop_grid):
        """Test that the run view marks the exit, key and player."""
        run = MazeRun(loop_grid, GridPosition(4, 2), GridPosition(0, 2))
        lines = run.render(player=GridPosition(0, 0)).split("\n")
        assert lines[0] == "@...."
        assert lines[1] == ".XXX."
        assert lines[2] == "K...E"

    def test_render_visible_path(self, loop_grid):
        """Test that only a visible path is drawn."""
        run = MazeRun(loop_grid, key_position=GridPosition(0, 2))
        run.notify_exit_discovered()
        run.show_path(PLAYER)
        assert run.render().split("\n")[1] == "*XXX."
        run.hide_path()
        assert "*" not in run.render()

    def test_generated_maze_run(self):
        """Test a full run on a generated maze."""
        grid = generate(GenerationConfig(seed=3, width=11, height=11))
        run = MazeRun(grid, GridPosition(10, 10), GridPosition(10, 0))
        player = run.pathfinder.grid_to_world(GridPosition(0, 0))

        to_exit = run.show_path(player)
        assert to_exit.success
        assert to_exit.grid_coordinates[-1] == GridPosition(10, 10)

        run.notify_exit_discovered()
        to_key = run.recalculate_path(player)
        assert to_key.success
        assert to_key.grid_coordinates[-1] == GridPosition(10, 0)

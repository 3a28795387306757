"""Run routes for discovery events and the guide path."""

import uuid

from fastapi import APIRouter, HTTPException, status

from labyrinth.api.deps import RunServiceDep
from labyrinth.core.discovery import DiscoveryNotification
from labyrinth.core.maze_types import INVALID_POSITION, GridPosition
from labyrinth.schemas.maze import MazePosition, PathResponse
from labyrinth.schemas.run import (
    DiscoveryResponse,
    DiscoveryStateSchema,
    NotificationSchema,
    PathToggleRequest,
    RunCreateRequest,
    RunState,
    RunView,
    RunViewRequest,
)
from labyrinth.services.maze_service import MazeNotFoundError
from labyrinth.services.run_service import (
    InvalidTargetError,
    RunNotFoundError,
    RunService,
    StoredRun,
)

router = APIRouter(prefix="/run", tags=["Runs"])


def _position_or_none(position: GridPosition):
    if position == INVALID_POSITION:
        return None
    return MazePosition.from_grid(position)


def _run_state(stored: StoredRun) -> RunState:
    run = stored.run
    return RunState(
        id=stored.id,
        maze_id=stored.maze_id,
        discovery=DiscoveryStateSchema(**run.discovery.state.to_dict()),
        exit_position=_position_or_none(run.exit_position),
        key_position=_position_or_none(run.key_position),
        target_position=_position_or_none(run.current_target_position()),
        path_visible=run.path_visible,
        current_path=PathResponse.from_result(run.current_path),
        created_at=stored.created_at,
    )


def _discovery_response(
    stored: StoredRun, notifications: list[DiscoveryNotification]
) -> DiscoveryResponse:
    return DiscoveryResponse(
        state=DiscoveryStateSchema(**stored.run.discovery.state.to_dict()),
        notifications=[NotificationSchema.from_notification(n) for n in notifications],
    )


def _get_run_or_404(runs: RunService, run_id: uuid.UUID) -> StoredRun:
    try:
        return runs.get(run_id)
    except RunNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Run not found: {run_id}",
        )


@router.post(
    "",
    response_model=RunState,
    status_code=status.HTTP_201_CREATED,
)
async def create_run(body: RunCreateRequest, runs: RunServiceDep) -> RunState:
    """Start a run on a stored maze.

    Exit and key positions that land on a wall are moved to the nearest
    walkable cell.
    """
    try:
        stored = runs.create(
            body.maze_id,
            exit_position=body.exit.to_grid() if body.exit else None,
            key_position=body.key.to_grid() if body.key else None,
        )
    except MazeNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Maze not found: {body.maze_id}",
        )
    except InvalidTargetError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        )

    return _run_state(stored)


@router.get(
    "/{run_id}",
    response_model=RunState,
)
async def get_run(run_id: uuid.UUID, runs: RunServiceDep) -> RunState:
    """Get the current state of a run."""
    return _run_state(_get_run_or_404(runs, run_id))


@router.post(
    "/{run_id}/exit-discovered",
    response_model=DiscoveryResponse,
)
async def exit_discovered(run_id: uuid.UUID, runs: RunServiceDep) -> DiscoveryResponse:
    """Report that the player has seen the exit. Repeats are ignored."""
    stored = _get_run_or_404(runs, run_id)
    notifications = stored.run.notify_exit_discovered()
    return _discovery_response(stored, notifications)


@router.post(
    "/{run_id}/key-collected",
    response_model=DiscoveryResponse,
)
async def key_collected(run_id: uuid.UUID, runs: RunServiceDep) -> DiscoveryResponse:
    """Report that the player picked up the key. Repeats are ignored."""
    stored = _get_run_or_404(runs, run_id)
    notifications = stored.run.notify_key_collected()
    return _discovery_response(stored, notifications)


@router.post(
    "/{run_id}/path/show",
    response_model=RunState,
)
async def show_path(run_id: uuid.UUID, body: PathToggleRequest, runs: RunServiceDep) -> RunState:
    """Recalculate the guide path from the player and make it visible."""
    stored = _get_run_or_404(runs, run_id)
    stored.run.show_path(body.world_position.to_world())
    return _run_state(stored)


@router.post(
    "/{run_id}/path/toggle",
    response_model=RunState,
)
async def toggle_path(run_id: uuid.UUID, body: PathToggleRequest, runs: RunServiceDep) -> RunState:
    """Hide the guide path if visible, otherwise show a fresh one."""
    stored = _get_run_or_404(runs, run_id)
    stored.run.toggle_path(body.world_position.to_world())
    return _run_state(stored)


@router.post(
    "/{run_id}/path/hide",
    response_model=RunState,
)
async def hide_path(run_id: uuid.UUID, runs: RunServiceDep) -> RunState:
    """Hide the guide path."""
    stored = _get_run_or_404(runs, run_id)
    stored.run.hide_path()
    return _run_state(stored)


@router.post(
    "/{run_id}/view",
    response_model=RunView,
)
async def view_run(run_id: uuid.UUID, body: RunViewRequest, runs: RunServiceDep) -> RunView:
    """ASCII view of the maze with exit, key, player and the visible path."""
    stored = _get_run_or_404(runs, run_id)
    run = stored.run

    player = None
    if body.world_position is not None:
        player = _position_or_none(run.resolve_world_target(body.world_position.to_world()))

    view = run.render(player.to_grid() if player is not None else None)
    return RunView(rows=view.split("\n"), player_position=player)

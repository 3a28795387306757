"""Maze routes for generating mazes and querying paths."""

import uuid

from fastapi import APIRouter, HTTPException, Request, status

from labyrinth.api.deps import MazeServiceDep
from labyrinth.api.rate_limit import limiter
from labyrinth.config import get_settings
from labyrinth.core.maze_generator import ConfigurationError, GenerationConfig
from labyrinth.core.maze_types import INVALID_POSITION
from labyrinth.schemas.maze import (
    MazeConfigSchema,
    MazeDetail,
    MazeGenerateRequest,
    MazeListItem,
    MazeListResponse,
    MazePosition,
    NearestRequest,
    NearestResponse,
    PathRequest,
    PathResponse,
    WorldPathRequest,
)
from labyrinth.services.maze_service import MazeNotFoundError, MazeService, StoredMaze

router = APIRouter(prefix="/maze", tags=["Mazes"])

settings = get_settings()


def _list_item(maze: StoredMaze) -> MazeListItem:
    return MazeListItem(
        id=maze.id,
        config=MazeConfigSchema(**maze.config.to_dict()),
        floor_count=maze.grid.floor_count(),
        wall_count=maze.grid.wall_count(),
        created_at=maze.created_at,
    )


def _detail(maze: StoredMaze) -> MazeDetail:
    return MazeDetail(**_list_item(maze).model_dump(), rows=maze.grid.rows())


def _maze_not_found(maze_id: uuid.UUID) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Maze not found: {maze_id}",
    )


def _get_maze_or_404(mazes: MazeService, maze_id: uuid.UUID) -> StoredMaze:
    try:
        return mazes.get(maze_id)
    except MazeNotFoundError:
        raise _maze_not_found(maze_id)


@router.post(
    "",
    response_model=MazeDetail,
    status_code=status.HTTP_201_CREATED,
)
@limiter.limit(settings.rate_limit_generation_rule)
async def generate_maze(
    request: Request,
    body: MazeGenerateRequest,
    mazes: MazeServiceDep,
) -> MazeDetail:
    """Generate a new maze.

    The same parameters always produce the same layout.
    """
    config = GenerationConfig(
        seed=body.seed if body.seed is not None else settings.default_seed,
        width=body.width or settings.default_width,
        height=body.height or settings.default_height,
        algorithm=body.algorithm or settings.default_algorithm,
        cell_size=body.cell_size or settings.default_cell_size,
        wall_height=body.wall_height or settings.default_wall_height,
    )

    try:
        maze = mazes.generate(config)
    except ConfigurationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        )

    return _detail(maze)


@router.get(
    "",
    response_model=MazeListResponse,
)
async def list_mazes(mazes: MazeServiceDep) -> MazeListResponse:
    """List stored mazes without their grid rows."""
    items = [_list_item(maze) for maze in mazes.list_mazes()]
    return MazeListResponse(mazes=items, total=len(items))


@router.get(
    "/{maze_id}",
    response_model=MazeDetail,
)
async def get_maze(maze_id: uuid.UUID, mazes: MazeServiceDep) -> MazeDetail:
    """Get a stored maze including its grid rows."""
    return _detail(_get_maze_or_404(mazes, maze_id))


@router.post(
    "/{maze_id}/path",
    response_model=PathResponse,
)
async def find_path(maze_id: uuid.UUID, body: PathRequest, mazes: MazeServiceDep) -> PathResponse:
    """Shortest path between two grid cells.

    An unreachable or invalid query is still a 200 with success=false.
    """
    try:
        result = mazes.find_path(maze_id, body.start.to_grid(), body.end.to_grid())
    except MazeNotFoundError:
        raise _maze_not_found(maze_id)
    return PathResponse.from_result(result)


@router.post(
    "/{maze_id}/path/world",
    response_model=PathResponse,
)
async def find_path_from_world(
    maze_id: uuid.UUID,
    body: WorldPathRequest,
    mazes: MazeServiceDep,
) -> PathResponse:
    """Shortest path from a world-space point to a grid cell."""
    try:
        result = mazes.find_path_from_world(
            maze_id, body.world_start.to_world(), body.end.to_grid()
        )
    except MazeNotFoundError:
        raise _maze_not_found(maze_id)
    return PathResponse.from_result(result)


@router.post(
    "/{maze_id}/nearest",
    response_model=NearestResponse,
)
async def find_nearest(
    maze_id: uuid.UUID,
    body: NearestRequest,
    mazes: MazeServiceDep,
) -> NearestResponse:
    """Nearest walkable cell to a grid position."""
    try:
        nearest = mazes.find_nearest_walkable_cell(maze_id, body.position.to_grid())
    except MazeNotFoundError:
        raise _maze_not_found(maze_id)
    return NearestResponse(
        found=nearest != INVALID_POSITION,
        position=MazePosition.from_grid(nearest),
    )

"""API dependencies for dependency injection."""

from typing import Annotated

from fastapi import Depends

from labyrinth.services.maze_service import MazeService, get_maze_service
from labyrinth.services.run_service import RunService, get_run_service

# Type aliases for cleaner route signatures
MazeServiceDep = Annotated[MazeService, Depends(get_maze_service)]
RunServiceDep = Annotated[RunService, Depends(get_run_service)]

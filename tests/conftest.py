"""Pytest configuration and fixtures."""

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from labyrinth.main import app
from labyrinth.api.rate_limit import limiter
from labyrinth.config import get_settings
from labyrinth.core.maze_grid import MazeGrid
from labyrinth.core.maze_parser import parse_grid_text
from labyrinth.services.maze_service import MazeService, get_maze_service
from labyrinth.services.run_service import RunService, get_run_service

settings = get_settings()


# Two corridors joined at both ends, so there are two equally short routes
# between opposite corners.
LOOP_GRID = """.....
.XXX.
....."""

# Floor ring around a solid 3x3 block of wall.
WALLED_CENTER_GRID = """.....
.XXX.
.XXX.
.XXX.
....."""


@pytest.fixture
def loop_grid() -> MazeGrid:
    """Small hand-made grid containing a cycle."""
    return parse_grid_text(LOOP_GRID, cell_size=100.0)


@pytest.fixture
def walled_center_grid() -> MazeGrid:
    """Grid whose centre is two rings away from the nearest floor."""
    return parse_grid_text(WALLED_CENTER_GRID, cell_size=100.0)


@pytest.fixture
def maze_service() -> MazeService:
    """Fresh maze registry per test."""
    return MazeService(max_stored=settings.max_stored_mazes)


@pytest.fixture
def run_service(maze_service: MazeService) -> RunService:
    """Fresh run registry bound to the test maze registry."""
    return RunService(maze_service, max_stored=settings.max_stored_runs)


@pytest_asyncio.fixture(scope="function")
async def client(maze_service, run_service) -> AsyncGenerator[AsyncClient, None]:
    """Create a test HTTP client."""
    app.dependency_overrides[get_maze_service] = lambda: maze_service
    app.dependency_overrides[get_run_service] = lambda: run_service
    limiter.enabled = False

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()
    limiter.enabled = settings.rate_limit_enabled


@pytest.fixture
def generate_payload() -> dict:
    """Sample generation request."""
    return {
        "seed": 42,
        "width": 11,
        "height": 9,
        "algorithm": "prims",
    }

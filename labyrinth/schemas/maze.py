"""Maze schemas for request/response validation."""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from labyrinth.config import get_settings
from labyrinth.core.maze_generator import MIN_MAZE_SIZE
from labyrinth.core.maze_types import GenerationAlgorithm, GridPosition, WorldPosition
from labyrinth.core.pathfinder import PathResult


class MazePosition(BaseModel):
    """Schema for a grid position in the maze."""

    x: int
    y: int

    def to_grid(self) -> GridPosition:
        return GridPosition(self.x, self.y)

    @classmethod
    def from_grid(cls, position: GridPosition) -> "MazePosition":
        return cls(x=position.x, y=position.y)


class WorldPoint(BaseModel):
    """Schema for a world-space point."""

    x: float = Field(allow_inf_nan=False)
    y: float = Field(allow_inf_nan=False)
    z: float = Field(default=0.0, allow_inf_nan=False)

    def to_world(self) -> WorldPosition:
        return WorldPosition(self.x, self.y, self.z)


class MazeGenerateRequest(BaseModel):
    """Schema for generating a maze. Omitted fields use the configured defaults."""

    seed: Optional[int] = None
    width: Optional[int] = Field(None, ge=MIN_MAZE_SIZE)
    height: Optional[int] = Field(None, ge=MIN_MAZE_SIZE)
    algorithm: Optional[GenerationAlgorithm] = None
    cell_size: Optional[float] = Field(None, gt=0)
    wall_height: Optional[float] = Field(None, gt=0)

    @field_validator("width", "height")
    @classmethod
    def validate_max_size(cls, v: Optional[int]) -> Optional[int]:
        """Bound dimensions by the configured maximum."""
        max_size = get_settings().max_maze_size
        if v is not None and v > max_size:
            raise ValueError(f"must be at most {max_size}")
        return v


class MazeConfigSchema(BaseModel):
    """Schema for the parameters a maze was generated with."""

    seed: int
    width: int
    height: int
    algorithm: GenerationAlgorithm
    cell_size: float
    wall_height: float


class MazeListItem(BaseModel):
    """Schema for maze list item (without grid rows)."""

    id: uuid.UUID
    config: MazeConfigSchema
    floor_count: int
    wall_count: int
    created_at: datetime


class MazeDetail(MazeListItem):
    """Schema for detailed maze response with grid rows."""

    rows: list[str]


class MazeListResponse(BaseModel):
    """Schema for maze list response."""

    mazes: list[MazeListItem]
    total: int


class PathRequest(BaseModel):
    """Schema for a grid-to-grid path query."""

    start: MazePosition
    end: MazePosition


class WorldPathRequest(BaseModel):
    """Schema for a world-to-grid path query."""

    world_start: WorldPoint
    end: MazePosition


class PathResponse(BaseModel):
    """Schema for a path query result."""

    success: bool
    grid_coordinates: list[MazePosition]
    world_positions: list[WorldPoint]
    length: int
    error: Optional[str] = None

    @classmethod
    def from_result(cls, result: PathResult) -> "PathResponse":
        return cls(
            success=result.success,
            grid_coordinates=[MazePosition.from_grid(p) for p in result.grid_coordinates],
            world_positions=[WorldPoint(x=p.x, y=p.y, z=p.z) for p in result.world_positions],
            length=result.length,
            error=result.error.value if result.error else None,
        )


class NearestRequest(BaseModel):
    """Schema for a nearest-walkable-cell query."""

    position: MazePosition


class NearestResponse(BaseModel):
    """Schema for a nearest-walkable-cell result."""

    found: bool
    position: MazePosition

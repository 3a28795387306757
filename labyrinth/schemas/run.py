"""Run schemas for request/response validation."""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from labyrinth.core.discovery import DiscoveryNotification
from labyrinth.core.maze_types import PathTarget
from labyrinth.schemas.maze import MazePosition, PathResponse, WorldPoint


class RunCreateRequest(BaseModel):
    """Schema for starting a run. Targets on walls are moved to the nearest floor."""

    maze_id: uuid.UUID
    exit: Optional[MazePosition] = None
    key: Optional[MazePosition] = None


class DiscoveryStateSchema(BaseModel):
    """Schema for the discovery flags and derived values of a run."""

    exit_discovered: bool
    key_collected: bool
    current_target: PathTarget
    ability_unlocked: bool
    ability_permanently_locked: bool
    ability_available: bool
    can_finish: bool


class RunState(BaseModel):
    """Schema for run state."""

    id: uuid.UUID
    maze_id: uuid.UUID
    discovery: DiscoveryStateSchema
    exit_position: Optional[MazePosition] = None
    key_position: Optional[MazePosition] = None
    target_position: Optional[MazePosition] = None
    path_visible: bool
    current_path: PathResponse
    created_at: datetime


class NotificationSchema(BaseModel):
    """Schema for a notification fired by a discovery event."""

    type: str
    previous: Optional[PathTarget] = None
    target: Optional[PathTarget] = None

    @classmethod
    def from_notification(cls, notification: DiscoveryNotification) -> "NotificationSchema":
        return cls(**notification.to_dict())


class DiscoveryResponse(BaseModel):
    """Schema for the result of a discovery event."""

    state: DiscoveryStateSchema
    notifications: list[NotificationSchema]


class PathToggleRequest(BaseModel):
    """Schema for showing or toggling the guide path from the player's position."""

    world_position: WorldPoint


class RunViewRequest(BaseModel):
    """Schema for drawing a run. The player is placed on the walkable cell nearest their position."""

    world_position: Optional[WorldPoint] = None


class RunView(BaseModel):
    """Schema for an ASCII view of a run (E exit, K key, @ player, * visible path)."""

    rows: list[str]
    player_position: Optional[MazePosition] = None

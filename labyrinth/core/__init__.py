# Core module
from .maze_types import (
    Direction,
    GenerationAlgorithm,
    GridPosition,
    PathTarget,
    WorldPosition,
    INVALID_POSITION,
)
from .maze_grid import MazeCell, MazeGrid
from .maze_generator import ConfigurationError, GenerationConfig, generate
from .pathfinder import MazePathfinder, PathError, PathResult
from .discovery import (
    AbilityUnlocked,
    DiscoveryEvent,
    DiscoveryState,
    DiscoveryStateMachine,
    TargetChanged,
    transition,
)
from .maze_run import MazeRun
from .maze_parser import (
    MazeParseError,
    MazeValidationError,
    parse_grid_text,
    load_grid_file,
    validate_grid_text,
)

__all__ = [
    "Direction",
    "GenerationAlgorithm",
    "GridPosition",
    "PathTarget",
    "WorldPosition",
    "INVALID_POSITION",
    "MazeCell",
    "MazeGrid",
    "ConfigurationError",
    "GenerationConfig",
    "generate",
    "MazePathfinder",
    "PathError",
    "PathResult",
    "AbilityUnlocked",
    "DiscoveryEvent",
    "DiscoveryState",
    "DiscoveryStateMachine",
    "TargetChanged",
    "transition",
    "MazeRun",
    "MazeParseError",
    "MazeValidationError",
    "parse_grid_text",
    "load_grid_file",
    "validate_grid_text",
]

"""Application configuration using Pydantic settings."""

import os
from functools import lru_cache
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from labyrinth.core.maze_generator import MIN_MAZE_SIZE
from labyrinth.core.maze_types import GenerationAlgorithm

# Project root directory
BASE_DIR = Path(__file__).resolve().parent.parent

LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=os.path.join(BASE_DIR, ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    app_name: str = "Labyrinth"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # CORS - comma-separated list of allowed origins
    cors_origins: str = "http://localhost:3000,http://localhost:8080,http://127.0.0.1:5500"

    # Rate limiting
    rate_limit_enabled: bool = True
    rate_limit_generations: int = 30  # maze generations per minute

    # Generation defaults
    default_seed: int = 12345
    default_width: int = 21
    default_height: int = 21
    default_algorithm: GenerationAlgorithm = GenerationAlgorithm.RECURSIVE_BACKTRACKER
    default_cell_size: float = 200.0
    default_wall_height: float = 300.0

    # Limits
    max_maze_size: int = 101
    max_stored_mazes: int = 100
    max_stored_runs: int = 1000

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Accept standard logging level names only."""
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level '{v}'")
        return level

    @field_validator("max_maze_size")
    @classmethod
    def validate_max_maze_size(cls, v: int) -> int:
        if v < MIN_MAZE_SIZE:
            raise ValueError(f"MAX_MAZE_SIZE must be at least {MIN_MAZE_SIZE}")
        return v

    @property
    def cors_origins_list(self) -> list[str]:
        """Get CORS origins as a list."""
        if self.debug:
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def rate_limit_generation_rule(self) -> str:
        """slowapi limit string for maze generation."""
        return f"{self.rate_limit_generations}/minute"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

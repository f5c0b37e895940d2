"""Configuration management for the facility calendar."""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="FACILITY_CALENDAR_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # API Settings
    api_host: str = Field(default="0.0.0.0")
    api_port: int = Field(default=8080)
    api_key: str = Field(
        default="",
        description="API key for authenticating requests",
    )

    # CORS
    cors_origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:8080"],
        description="Allowed CORS origins",
    )

    # Seed data for the in-memory board served by the API
    board_seed_path: Path = Field(
        default=Path(__file__).parent / "data" / "sample_board.json",
        description="JSON file with facilities, groups and appointments",
    )

    # Observability
    observability_enabled: bool = Field(
        default=True,
        description="Write interaction and layout events as JSON Lines",
    )
    observability_log_dir: Path = Field(
        default=Path("./data/logs"),
        description="Directory for observability event logs",
    )

    # Facility grouping
    on_call_suffix_pattern: str = Field(
        default=r" - OnCall$",
        description="Regex stripped from facility names to find their base facility",
    )

    # Layout engine
    slot_count: int = Field(default=24, description="Hour slots on the day axis")
    min_width_percent: float = Field(
        default=2.0,
        description="Smallest rendered width of an appointment segment, in percent of a day",
    )
    min_malformed_minutes: int = Field(
        default=5,
        description="Duration assumed when packing appointments whose end is not after their start",
    )

    # Day view metrics (pixels)
    day_min_row_height: int = Field(default=120)
    day_lane_height: int = Field(default=55)
    day_item_pitch: int = Field(default=50)
    day_item_offset: int = Field(default=10)
    day_item_height: int = Field(default=40)

    # Week view metrics (pixels)
    week_min_cell_height: int = Field(default=180)
    week_lane_height: int = Field(default=60)
    week_item_pitch: int = Field(default=55)
    week_item_offset: int = Field(default=10)
    week_item_height: int = Field(default=45)
    drag_preview_offset_x: int = Field(default=100, description="Preview drawn this far left of the pointer")
    drag_preview_offset_y: int = Field(default=20, description="Preview drawn this far above the pointer")

    # Month view
    month_max_type_badges: int = Field(default=3)
    month_max_summaries: int = Field(default=2)

    # Debug
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode (exposes error details in responses)",
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO")

    @property
    def has_api_key(self) -> bool:
        """Check if API key authentication is configured."""
        return bool(self.api_key)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

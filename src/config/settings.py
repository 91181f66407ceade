"""
Configuration management for the deck tools.

Uses Pydantic for type-safe, validated configuration with environment variable support.
"""

from pathlib import Path
from typing import Annotated, List, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode


class DeckToolSettings(BaseSettings):
    """Main configuration for the deck tools.

    Settings can be overridden via:
    1. Environment variables (prefixed with DT_)
    2. .env file in project root
    3. Programmatic overrides

    Example:
        export DT_CARD_DATA_MAX_AGE_DAYS=0
        export DT_LOG_LEVEL=DEBUG
    """

    # === Card data cache ===
    cache_dir: Path = Field(
        default=Path(".cache"),
        description="Directory for cached card database snapshots",
    )
    card_data_max_age_days: float = Field(
        default=7.0,
        ge=0,
        le=365,
        description="Maximum cache age before re-downloading (0 always refreshes)",
    )

    # === Remote sources ===
    marvel_base_url: str = Field(
        default="https://marvelcdb.com", description="MarvelCDB base URL"
    )
    swu_api_url: str = Field(
        default="https://api.swu-db.com", description="swu-db API base URL"
    )
    swu_sets: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: ["SOR", "SHD", "TWI", "JTL", "LOF"],
        description="Star Wars: Unlimited set codes to download",
    )

    # === HTTP ===
    http_timeout: int = Field(
        default=30, ge=5, le=300, description="HTTP request timeout in seconds"
    )
    user_agent: str = Field(
        default="deck-tools/1.0", description="User-Agent header for downloads"
    )

    # === Resolution ===
    default_face: Literal["a", "b"] = Field(
        default="a", description="Face applied to bare numeric Marvel codes"
    )
    match_all_display_limit: int = Field(
        default=10,
        ge=1,
        le=200,
        description="Candidates listed when an [All] entry matches several cards",
    )
    warn_on_missing_include: bool = Field(
        default=True, description="Warn when an [include:...] target cannot be read"
    )

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )
    log_rotation: str = Field(default="10 MB", description="Log file rotation size")
    log_retention: str = Field(
        default="10 days", description="Log file retention period"
    )
    log_to_file: bool = Field(default=False, description="Enable file logging")
    logs_dir: Path = Field(default=Path("logs"), description="Log files directory")

    @field_validator("swu_sets", mode="before")
    @classmethod
    def split_set_list(cls, v):
        """Accept a comma-separated string as well as a list."""
        if isinstance(v, str):
            v = v.split(",")
        return [str(part).strip().upper() for part in v if str(part).strip()]

    model_config = {
        "env_prefix": "DT_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


# Global settings instance
settings = DeckToolSettings()


def reload_settings() -> DeckToolSettings:
    """Reload settings from environment and .env file.

    Useful for testing or runtime configuration changes.
    """
    global settings
    settings = DeckToolSettings()
    return settings

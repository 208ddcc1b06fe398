"""Configuration management for gridcalc.

Settings are loaded with pydantic-settings. Every option can be set through
an environment variable with the GRIDCALC_ prefix, or in a .env file.

Environment Variables:
    GRIDCALC_DEFAULT_ROWS: Rows in a fresh sheet (default: 100)
    GRIDCALC_DEFAULT_COLUMNS: Columns in a fresh sheet (default: 100)
    GRIDCALC_DEFAULT_COLUMN_WIDTH: Width in px for new columns (default: 100)
    GRIDCALC_DEFAULT_ROW_HEIGHT: Height in px for new rows (default: 24)
    GRIDCALC_HISTORY_LIMIT: Maximum undo depth, unset for unbounded
"""

from functools import lru_cache
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Sheet defaults and history settings.

    Example .env file:
        GRIDCALC_DEFAULT_ROWS=500
        GRIDCALC_HISTORY_LIMIT=200
    """

    model_config = SettingsConfigDict(
        env_prefix="GRIDCALC_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # =========================================================================
    # Sheet Defaults
    # =========================================================================

    default_rows: int = 100
    """Number of rows in a freshly created sheet."""

    default_columns: int = 100
    """Number of columns in a freshly created sheet."""

    default_column_width: int = 100
    """Width in pixels given to columns that have no explicit width."""

    default_row_height: int = 24
    """Height in pixels given to rows opened by an insert."""

    # =========================================================================
    # History Settings
    # =========================================================================

    history_limit: Optional[int] = None
    """Maximum number of undo entries kept. None keeps every entry."""

    # =========================================================================
    # Validators
    # =========================================================================

    @field_validator(
        "default_rows", "default_columns", "default_column_width", "default_row_height"
    )
    @classmethod
    def validate_positive(cls, v: int) -> int:
        """Validate sizes and dimensions are positive."""
        if v < 1:
            raise ValueError(f"Value must be a positive integer, got {v}")
        return v

    @field_validator("history_limit")
    @classmethod
    def validate_history_limit(cls, v: Optional[int]) -> Optional[int]:
        """Validate the history limit is positive when set."""
        if v is not None and v < 1:
            raise ValueError(f"history_limit must be at least 1, got {v}")
        return v


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()

"""Configuration management for stylematrix using pydantic-settings.

Settings can be provided through environment variables (``STYLEMATRIX_``
prefix) or a ``.env`` file, with type validation.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class CaptureSettings(BaseSettings):
    """Settings for state capture, subtree sampling and logging."""

    model_config = SettingsConfigDict(
        env_prefix="STYLEMATRIX_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Subtree sampling
    max_subtree_nodes: int = Field(
        6, ge=0, description="Maximum number of descendant nodes sampled per capture"
    )
    include_subtree: bool = Field(
        True, description="Fold sampled descendant styles into live captures"
    )
    include_pseudo_elements: bool = Field(
        True, description="Probe ::before/::after of the captured element"
    )

    # Local interaction simulation
    interaction_settle_ms: int = Field(
        100, ge=0, description="Wait after a simulated interaction before capturing"
    )
    interaction_timeout_ms: int = Field(
        2000, gt=0, description="Upper bound for a single simulated interaction"
    )

    # Logging
    debug_mode: bool = Field(False, description="Enable debug logging")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        "INFO", description="Root log level"
    )
    structured_logging: bool = Field(
        True, description="Render log events as JSON instead of console text"
    )

    @property
    def interaction_settle_seconds(self) -> float:
        return self.interaction_settle_ms / 1000.0

    @property
    def interaction_timeout_seconds(self) -> float:
        return self.interaction_timeout_ms / 1000.0


# Singleton instance
_settings: CaptureSettings | None = None


def get_settings() -> CaptureSettings:
    """Get the singleton settings instance.

    Returns:
        CaptureSettings instance
    """
    global _settings

    if _settings is None:
        _settings = CaptureSettings()

    return _settings


def reset_settings() -> None:
    """Reset the settings singleton (mainly for testing)."""
    global _settings
    _settings = None

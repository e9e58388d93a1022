"""
Configuration management for planemesh.

Handles loading, validation, and access to mesh and logging settings.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, ValidationError

from planemesh.core.exceptions import ConfigurationError


class MeshSettings(BaseModel):
    """Behaviour switches of a Triangulation."""

    kernel: Literal["exact", "float"] = "exact"
    transactional_add_edge: bool = True
    max_locate_steps: int | None = Field(default=None, ge=1)


class LoggingSettings(BaseModel):
    """Logging configuration model."""

    level: str = "INFO"
    json_output: bool = False
    log_file: str | None = None


class Settings(BaseModel):
    """Top-level settings document."""

    mesh: MeshSettings = Field(default_factory=MeshSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


@dataclass
class ConfigManager:
    """
    Central configuration manager for planemesh.

    Loads and validates settings from a single YAML file. Sections that are
    missing from the file fall back to their defaults.

    Example:
        >>> config = ConfigManager(config_file=Path("planemesh.yaml"))
        >>> config.mesh.kernel
        'exact'
    """

    config_file: Path
    _settings: Settings | None = field(default=None, init=False)

    def __post_init__(self) -> None:
        """Initialize configuration manager."""
        self.config_file = Path(self.config_file)
        if not self.config_file.exists():
            raise ConfigurationError(
                f"Configuration file not found: {self.config_file}"
            )

    def load(self) -> Settings:
        """Load settings from disk."""
        try:
            with open(self.config_file) as f:
                data = yaml.safe_load(f)
            self._settings = Settings(**(data or {}))
        except (yaml.YAMLError, ValidationError, TypeError) as e:
            raise ConfigurationError(
                f"Failed to load settings: {self.config_file}",
                details={"error": str(e)},
            ) from e
        return self._settings

    @property
    def settings(self) -> Settings:
        """Loaded settings (loaded on first access)."""
        if self._settings is None:
            return self.load()
        return self._settings

    @property
    def mesh(self) -> MeshSettings:
        """Mesh section of the settings."""
        return self.settings.mesh

    @property
    def logging(self) -> LoggingSettings:
        """Logging section of the settings."""
        return self.settings.logging

"""
Configuration management for fnbuild.

Two layers live here:

- `BuildConfig`: the per-run build configuration, read from the manifest's
  `custom.go` section and laid over hardcoded defaults.
- `FnBuildSettings`: process settings (logging, concurrency) read from
  `FNBUILD_*` environment variables or a `.env` file.
"""

import logging
import os
from typing import Any, Dict, FrozenSet, List, Optional

from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings

from .constants import (
    ARM64_ARCHITECTURE,
    ARM64_CMD,
    DEFAULT_BASE_DIR,
    DEFAULT_BIN_DIR,
    DEFAULT_CMD,
    DEFAULT_CUSTOM_KEY,
    DEFAULT_MANIFEST,
    GO_RUNTIME,
)
from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class BuildConfig(BaseModel):
    """Build configuration resolved once per orchestration run."""

    base_dir: str = Field(DEFAULT_BASE_DIR, alias="baseDir")
    bin_dir: str = Field(DEFAULT_BIN_DIR, alias="binDir")
    cgo: int = Field(0, ge=0, le=1)
    cmd: str = DEFAULT_CMD
    monorepo: bool = False
    supported_runtimes: List[str] = Field(default_factory=lambda: [GO_RUNTIME], alias="supportedRuntimes")
    build_provided_runtime_as_bootstrap: bool = Field(False, alias="buildProvidedRuntimeAsBootstrap")

    class Config:
        populate_by_name = True
        extra = "ignore"

    @property
    def supported_runtime_set(self) -> FrozenSet[str]:
        return frozenset(self.supported_runtimes)

    @classmethod
    def defaults(cls, architecture: Optional[str] = None) -> "BuildConfig":
        """Hardcoded defaults. ARM targets get a GOARCH-aware build command."""
        cmd = ARM64_CMD if architecture == ARM64_ARCHITECTURE else DEFAULT_CMD
        return cls(cmd=cmd)

    @classmethod
    def resolve(cls, custom: Optional[Dict[str, Any]] = None,
                architecture: Optional[str] = None) -> "BuildConfig":
        """
        Lay the user override over the defaults.

        Every field the user sets replaces the default value outright. Lists
        such as `supportedRuntimes` are replaced, never concatenated.

        Args:
            custom: The mapping found under the custom settings key, if any
            architecture: Provider architecture hint used to pick the default command

        Raises:
            ConfigurationError: If the override is not a mapping or fails validation
        """
        config = cls.defaults(architecture)
        if not custom:
            return config

        if not isinstance(custom, dict):
            raise ConfigurationError(f"Build configuration must be a mapping, got {type(custom).__name__}")

        try:
            override = cls.model_validate(custom)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid build configuration: {e}") from e

        updates = {field: getattr(override, field) for field in override.model_fields_set}
        logger.debug(f"Build configuration overrides: {sorted(updates)}")
        return config.model_copy(update=updates)


class FnBuildSettings(BaseSettings):
    """Process settings for fnbuild."""

    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # Parallel build ceiling, defaults to the host CPU count
    CONCURRENCY: Optional[int] = None

    CUSTOM_KEY: str = DEFAULT_CUSTOM_KEY
    MANIFEST: str = DEFAULT_MANIFEST

    class Config:
        env_prefix = "FNBUILD_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @property
    def max_concurrency(self) -> int:
        if self.CONCURRENCY and self.CONCURRENCY > 0:
            return self.CONCURRENCY
        return os.cpu_count() or 1


def configure_logging(settings: Optional[FnBuildSettings] = None) -> None:
    """Configure root logging from settings."""
    settings = settings or FnBuildSettings()
    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    logging.basicConfig(level=level, format=settings.LOG_FORMAT)

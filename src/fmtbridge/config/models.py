# Copyright (c) 2025 PantherianCodeX. All Rights Reserved.

"""Configuration models and validation for fmtbridge.

Settings described here govern the dispatcher itself: which module serves as
the default formatting engine and where project-local engines are looked up.
Formatter options (print width, quotes, ...) are computed by the host and are
never read from these files.

Raw TOML data is validated with a Pydantic model and converted into a frozen
dataclass for runtime use.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar, Final

from pydantic import BaseModel, ConfigDict, Field, field_validator

from fmtbridge.core.type_aliases import EngineName
from fmtbridge.exceptions import FmtbridgeValidationError

if TYPE_CHECKING:
    from pathlib import Path

DEFAULT_ENGINE: Final[EngineName] = EngineName("fmtbridge.engines.prettier")
DEFAULT_MANIFEST: Final[str] = "pyproject.toml"
DEFAULT_ENVIRONMENT_DIRS: Final[tuple[str, ...]] = (".venv", "venv")

_MODULE_NAME_RE: Final = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)*$")


class ConfigValidationError(FmtbridgeValidationError):
    """Raised when configuration data contains invalid values."""


class ConfigReadError(ConfigValidationError):
    """Raised when a configuration file cannot be read from disk."""

    def __init__(self, path: Path, error: Exception) -> None:
        self.path = path
        self.error = error
        super().__init__(f"Unable to read {path}: {error}")


class InvalidConfigFileError(ConfigValidationError):
    """Raised when a configuration file fails validation."""

    def __init__(self, path: Path, error: Exception) -> None:
        """Initialize the exception with configuration file path and validation error.

        Args:
            path: The path to the configuration file that failed validation.
            error: The underlying validation exception.
        """
        self.path = path
        self.error = error
        super().__init__(f"Invalid fmtbridge configuration in {path}: {error}")


def _default_environment_dirs() -> tuple[str, ...]:
    return DEFAULT_ENVIRONMENT_DIRS


@dataclass(slots=True, frozen=True)
class DispatcherConfig:
    """Runtime settings for engine resolution.

    Attributes:
        engine: Importable module name of the default formatting engine. The same
            name is looked up inside project environments for local engines.
        manifest: File name that marks a directory as a project root able to
            carry its own engine installation.
        environment_dirs: Directories, relative to a project root, searched for
            installed site-packages.
        local_engines: When ``False`` every workspace uses the default engine.
    """

    engine: EngineName = DEFAULT_ENGINE
    manifest: str = DEFAULT_MANIFEST
    environment_dirs: tuple[str, ...] = field(default_factory=_default_environment_dirs)
    local_engines: bool = True


class DispatcherConfigModel(BaseModel):
    """Pydantic model for validating dispatcher settings loaded from TOML."""

    model_config: ClassVar[ConfigDict] = ConfigDict(extra="forbid", populate_by_name=True)

    engine: str = DEFAULT_ENGINE
    manifest: str = DEFAULT_MANIFEST
    environment_dirs: list[str] = Field(default_factory=lambda: list(DEFAULT_ENVIRONMENT_DIRS))
    local_engines: bool = True

    @field_validator("engine", mode="before")
    @classmethod
    def _validate_engine(cls, value: object) -> str:
        if not isinstance(value, str):
            msg = "engine must be a string"
            raise ConfigValidationError(msg)
        token = value.strip()
        if not _MODULE_NAME_RE.match(token):
            msg = f"engine must be an importable module name, got '{value}'"
            raise ConfigValidationError(msg)
        return token

    @field_validator("manifest", mode="before")
    @classmethod
    def _validate_manifest(cls, value: object) -> str:
        if not isinstance(value, str) or not value.strip():
            msg = "manifest must be a non-empty file name"
            raise ConfigValidationError(msg)
        token = value.strip()
        if "/" in token or "\\" in token:
            msg = "manifest must be a bare file name"
            raise ConfigValidationError(msg)
        return token

    @field_validator("environment_dirs", mode="before")
    @classmethod
    def _coerce_environment_dirs(cls, value: object) -> list[str]:
        if isinstance(value, str):
            value = [value]
        if not isinstance(value, (list, tuple)):
            msg = "environment_dirs must be a list of directory names"
            raise ConfigValidationError(msg)
        seen: dict[str, None] = {}
        for item in value:
            token = str(item).strip()
            if token:
                seen.setdefault(token, None)
        return list(seen)


def config_from_model(model: DispatcherConfigModel) -> DispatcherConfig:
    """Convert a validated model into the runtime dataclass."""
    return DispatcherConfig(
        engine=EngineName(model.engine),
        manifest=model.manifest,
        environment_dirs=tuple(model.environment_dirs),
        local_engines=model.local_engines,
    )


__all__ = [
    "DEFAULT_ENGINE",
    "DEFAULT_ENVIRONMENT_DIRS",
    "DEFAULT_MANIFEST",
    "ConfigReadError",
    "ConfigValidationError",
    "DispatcherConfig",
    "DispatcherConfigModel",
    "InvalidConfigFileError",
    "config_from_model",
]

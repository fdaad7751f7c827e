# Copyright (c) 2025 PantherianCodeX. All Rights Reserved.

"""Configuration management for fmtbridge.

This package loads and validates the dispatcher's own settings: the default
engine module and the rules for discovering project-local engines.
"""

from __future__ import annotations

from .loader import CONFIG_FILENAMES, ENGINE_ENV, load_config
from .models import (
    DEFAULT_ENGINE,
    DEFAULT_ENVIRONMENT_DIRS,
    DEFAULT_MANIFEST,
    ConfigReadError,
    ConfigValidationError,
    DispatcherConfig,
    DispatcherConfigModel,
    InvalidConfigFileError,
    config_from_model,
)

__all__ = [
    "CONFIG_FILENAMES",
    "DEFAULT_ENGINE",
    "DEFAULT_ENVIRONMENT_DIRS",
    "DEFAULT_MANIFEST",
    "ENGINE_ENV",
    "ConfigReadError",
    "ConfigValidationError",
    "DispatcherConfig",
    "DispatcherConfigModel",
    "InvalidConfigFileError",
    "config_from_model",
    "load_config",
]

# Copyright (c) 2025 PantherianCodeX. All Rights Reserved.

"""Configuration loading for fmtbridge.

Settings are read from ``fmtbridge.toml``/``.fmtbridge.toml`` or from the
``[tool.fmtbridge]`` table of ``pyproject.toml``. Without a configuration file
the built-in defaults apply.
"""

from __future__ import annotations

import logging
import os
import tomllib as toml
from pathlib import Path
from typing import Final, cast

from pydantic import ValidationError

from fmtbridge.core.model_types import LogComponent
from fmtbridge.logging import structured_extra

from .models import (
    ConfigReadError,
    DispatcherConfig,
    DispatcherConfigModel,
    InvalidConfigFileError,
    config_from_model,
)

logger: logging.Logger = logging.getLogger("fmtbridge.config")

CONFIG_FILENAMES: Final[tuple[str, ...]] = ("fmtbridge.toml", ".fmtbridge.toml")
PYPROJECT_FILENAME: Final[str] = "pyproject.toml"
ENGINE_ENV: Final[str] = "FMTBRIDGE_ENGINE"


def _read_toml(path: Path) -> dict[str, object]:
    try:
        return toml.loads(path.read_text(encoding="utf-8"))
    except (OSError, toml.TOMLDecodeError) as exc:
        raise ConfigReadError(path, exc) from exc


def _tool_section(raw_map: dict[str, object]) -> dict[str, object] | None:
    tool_obj = raw_map.get("tool")
    if not isinstance(tool_obj, dict):
        return None
    section = cast("dict[str, object]", tool_obj).get("fmtbridge")
    if not isinstance(section, dict):
        return None
    return cast("dict[str, object]", section)


def _candidate_sections(
    explicit_path: Path | None,
    base_dir: Path,
) -> tuple[Path, dict[str, object]] | None:
    if explicit_path is not None:
        raw_map = _read_toml(explicit_path)
        section = _tool_section(raw_map)
        return explicit_path, section if section is not None else raw_map
    for name in CONFIG_FILENAMES:
        candidate = base_dir / name
        if candidate.is_file():
            return candidate, _read_toml(candidate)
    pyproject = base_dir / PYPROJECT_FILENAME
    if pyproject.is_file():
        section = _tool_section(_read_toml(pyproject))
        if section is not None:
            return pyproject, section
    return None


def load_config(
    explicit_path: Path | None = None,
    *,
    base_dir: Path | None = None,
) -> DispatcherConfig:
    """Load dispatcher settings from a TOML file or fall back to defaults.

    The search order is:

    1. ``explicit_path`` when provided (either a dedicated file or a
       ``pyproject.toml`` carrying ``[tool.fmtbridge]``)
    2. ``fmtbridge.toml`` then ``.fmtbridge.toml`` in ``base_dir``
    3. ``[tool.fmtbridge]`` in ``base_dir/pyproject.toml``

    ``FMTBRIDGE_ENGINE`` overrides the ``engine`` setting from any source.

    Args:
        explicit_path: Optional configuration file to read instead of searching.
        base_dir: Directory searched for configuration files. Defaults to the
            current working directory.

    Returns:
        The validated ``DispatcherConfig``.

    Raises:
        ConfigReadError: If a configuration file cannot be read or decoded.
        InvalidConfigFileError: If a configuration file fails validation.
    """
    root = base_dir if base_dir is not None else Path.cwd()
    found = _candidate_sections(explicit_path, root)
    source: Path | None = None
    raw: dict[str, object] = {}
    if found is not None:
        source, raw = found
        raw = dict(raw)
    env_engine = os.getenv(ENGINE_ENV)
    if env_engine:
        raw["engine"] = env_engine
    try:
        model = DispatcherConfigModel.model_validate(raw)
    except ValidationError as exc:
        raise InvalidConfigFileError(source or Path(ENGINE_ENV), exc) from exc
    config = config_from_model(model)
    logger.debug(
        "Loaded dispatcher configuration from %s",
        source or "defaults",
        extra=structured_extra(
            component=LogComponent.CONFIG,
            engine=config.engine,
            path=source,
        ),
    )
    return config


__all__ = ["CONFIG_FILENAMES", "ENGINE_ENV", "load_config"]

# Copyright (c) 2025 PantherianCodeX. All Rights Reserved.

"""Default and project-local formatting engine resolution.

The loader owns the process-default engine slot: the configured engine module
is imported once, on first use, and the same instance is returned for the
lifetime of the loader. Concurrent first callers share a single in-flight
import.

Project roots may carry their own engine installation. A root qualifies when it
contains the configured manifest file (``pyproject.toml`` by default) and the
engine module is installed in one of the root's environment directories
(``.venv``/``venv``). Such an engine is executed from the project's
site-packages into a private module object, so the process-default import in
``sys.modules`` is never replaced. Any failure along the way falls back to the
default engine; the fallback is reported through ``EngineResolution`` rather
than raised.
"""

from __future__ import annotations

import asyncio
import importlib
import importlib.util
import logging
import os
import time
from dataclasses import dataclass
from importlib.machinery import ModuleSpec, PathFinder
from pathlib import Path
from typing import TYPE_CHECKING

from fmtbridge.config import DispatcherConfig
from fmtbridge.core.model_types import EngineSource, LogComponent
from fmtbridge.logging import structured_extra

from .base import (
    EngineLoadError,
    EngineResolutionError,
    FormattingEngine,
    instantiate_engine,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence
    from types import ModuleType

    from fmtbridge.core.type_aliases import EngineName

logger: logging.Logger = logging.getLogger("fmtbridge.engine.loader")


@dataclass(slots=True, frozen=True)
class EngineResolution:
    """Outcome of resolving the engine for a project root.

    Attributes:
        engine: Engine that will serve the root.
        source: ``LOCAL`` when the project's own installation was loaded,
            ``DEFAULT`` when the process-default engine is used instead.
        origin: File the local engine was loaded from, ``None`` for the default.
        error: Why local resolution failed, when it was attempted and failed.
    """

    engine: FormattingEngine
    source: EngineSource
    origin: str | None = None
    error: EngineResolutionError | None = None

    @property
    def is_local(self) -> bool:
        return self.source is EngineSource.LOCAL


def environment_site_packages(root: Path, environment_dirs: Iterable[str]) -> list[Path]:
    """Return the site-packages directories of a project's local environments.

    Both the POSIX (``lib/pythonX.Y/site-packages``) and Windows
    (``Lib/site-packages``) virtual environment layouts are recognised.
    """
    found: dict[Path, None] = {}
    for env_name in environment_dirs:
        env_dir = root / env_name
        if not env_dir.is_dir():
            continue
        for candidate in sorted(env_dir.glob("lib/python*/site-packages")):
            if candidate.is_dir():
                found.setdefault(candidate, None)
        windows = env_dir / "Lib" / "site-packages"
        if windows.is_dir():
            found.setdefault(windows, None)
    return list(found)


def find_module_spec(name: str, search_path: Sequence[Path]) -> ModuleSpec | None:
    """Locate ``name`` inside ``search_path`` only, walking dotted names package by package."""
    parts = name.split(".")
    locations: list[str] | None = [os.fspath(path) for path in search_path]
    spec: ModuleSpec | None = None
    for index in range(len(parts)):
        if not locations:
            return None
        spec = PathFinder.find_spec(".".join(parts[: index + 1]), locations)
        if spec is None:
            return None
        submodules = spec.submodule_search_locations
        locations = list(submodules) if submodules is not None else None
    return spec


def _exec_private_module(spec: ModuleSpec) -> ModuleType:
    module = importlib.util.module_from_spec(spec)
    loader = spec.loader
    if loader is None:  # pragma: no cover - filtered by the caller
        msg = f"Module spec for '{spec.name}' has no loader"
        raise ImportError(msg)
    loader.exec_module(module)
    return module


class EngineLoader:
    """Resolve, import and cache formatting engines.

    Args:
        config: Dispatcher settings naming the engine module and the local
            lookup rules. Defaults to ``DispatcherConfig()``.
        importer: Callable used to import the default engine module by name.
    """

    def __init__(
        self,
        config: DispatcherConfig | None = None,
        *,
        importer: Callable[[str], object] = importlib.import_module,
    ) -> None:
        super().__init__()
        self._config = config if config is not None else DispatcherConfig()
        self._importer = importer
        self._default: FormattingEngine | None = None
        self._pending: asyncio.Task[FormattingEngine] | None = None

    @property
    def config(self) -> DispatcherConfig:
        return self._config

    @property
    def engine_name(self) -> EngineName:
        return self._config.engine

    @property
    def default_engine(self) -> FormattingEngine | None:
        """The cached default engine, or ``None`` before the first successful load."""
        return self._default

    async def load_default_engine(self) -> FormattingEngine:
        """Return the process-default engine, importing it on first use.

        Raises:
            EngineLoadError: If the engine module cannot be imported or does not
                provide the engine capability.
        """
        if self._default is not None:
            return self._default
        task = self._pending
        if task is None:
            task = asyncio.get_running_loop().create_task(self._populate_default())
            self._pending = task
        return await asyncio.shield(task)

    async def _populate_default(self) -> FormattingEngine:
        name = self._config.engine
        start = time.perf_counter()
        try:
            module = await asyncio.to_thread(self._importer, name)
            engine = instantiate_engine(module, source=name)
        except Exception as exc:
            logger.error(
                "Failed to load default formatting engine '%s': %s",
                name,
                exc,
                extra=structured_extra(component=LogComponent.ENGINE, engine=name),
            )
            raise EngineLoadError(name, exc) from exc
        finally:
            self._pending = None
        self._default = engine
        logger.debug(
            "Loaded default formatting engine '%s'",
            name,
            extra=structured_extra(
                component=LogComponent.ENGINE,
                engine=name,
                source=EngineSource.DEFAULT,
                duration_ms=(time.perf_counter() - start) * 1000,
            ),
        )
        return engine

    def _load_local(self, root: Path) -> tuple[FormattingEngine, str]:
        name = self._config.engine
        manifest = root / self._config.manifest
        if not manifest.is_file():
            raise EngineResolutionError(name, root, f"no {self._config.manifest} found")
        search_path = environment_site_packages(root, self._config.environment_dirs)
        if not search_path:
            raise EngineResolutionError(name, root, "no project environment found")
        spec = find_module_spec(name, search_path)
        if spec is None or spec.loader is None:
            raise EngineResolutionError(name, root, "engine is not installed in the project")
        origin = spec.origin or spec.name
        module = _exec_private_module(spec)
        return instantiate_engine(module, source=origin), origin

    async def resolve_engine_for_root(self, root: str | os.PathLike[str]) -> EngineResolution:
        """Resolve the engine serving ``root``, reporting which branch was taken.

        Local resolution failures of any kind are recorded on the returned
        ``EngineResolution`` and never raised. Only a failure to load the
        default engine itself propagates.
        """
        root_path = Path(root)
        name = self._config.engine
        if not self._config.local_engines:
            return EngineResolution(
                engine=await self.load_default_engine(),
                source=EngineSource.DEFAULT,
            )
        start = time.perf_counter()
        try:
            engine, origin = await asyncio.to_thread(self._load_local, root_path)
        except Exception as exc:
            error = (
                exc
                if isinstance(exc, EngineResolutionError)
                else EngineResolutionError(name, root_path, f"{type(exc).__name__}: {exc}")
            )
            logger.debug(
                "Using default engine for %s: %s",
                root_path,
                error.reason,
                extra=structured_extra(
                    component=LogComponent.ENGINE,
                    engine=name,
                    source=EngineSource.DEFAULT,
                    path=root_path,
                ),
            )
            return EngineResolution(
                engine=await self.load_default_engine(),
                source=EngineSource.DEFAULT,
                error=error,
            )
        logger.info(
            "Loaded project-local engine '%s' from %s",
            name,
            origin,
            extra=structured_extra(
                component=LogComponent.ENGINE,
                engine=name,
                source=EngineSource.LOCAL,
                path=root_path,
                duration_ms=(time.perf_counter() - start) * 1000,
            ),
        )
        return EngineResolution(engine=engine, source=EngineSource.LOCAL, origin=origin)

    async def load_engine_for_root(self, root: str | os.PathLike[str]) -> FormattingEngine:
        """Return the engine serving ``root``, falling back to the default engine silently."""
        resolution = await self.resolve_engine_for_root(root)
        return resolution.engine


__all__ = [
    "EngineLoader",
    "EngineResolution",
    "environment_site_packages",
    "find_module_spec",
]

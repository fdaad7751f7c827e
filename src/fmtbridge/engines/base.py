# Copyright (c) 2025 PantherianCodeX. All Rights Reserved.

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Protocol, cast, runtime_checkable

from fmtbridge.exceptions import FmtbridgeError, FmtbridgeTypeError

if TYPE_CHECKING:
    from pathlib import Path

    from fmtbridge.core.type_aliases import FormatOptions

ENGINE_FACTORY_ATTR = "create_engine"


@runtime_checkable
class FormattingEngine(Protocol):
    """Capability every formatting backend provides.

    ``format`` may be a coroutine function or a plain function; the dispatcher
    awaits the result when it is awaitable. Engines are treated as stateless and
    reentrant, so one instance may serve any number of in-flight calls.
    """

    def format(self, code: str, options: FormatOptions, /) -> str | Awaitable[str]: ...


class InvalidEngineError(FmtbridgeTypeError):
    """Raised when an imported object does not provide the engine capability."""

    def __init__(self, source: str) -> None:
        self.source = source
        super().__init__(f"'{source}' does not provide a callable format(code, options)")


class EngineLoadError(FmtbridgeError):
    """Raised when the default engine cannot be imported. There is no further fallback."""

    def __init__(self, engine: str, error: BaseException) -> None:
        self.engine = engine
        self.error = error
        super().__init__(f"Unable to load formatting engine '{engine}': {error}")


class EngineResolutionError(FmtbridgeError):
    """Raised internally when a project-local engine cannot be resolved for a root."""

    def __init__(self, engine: str, root: Path, reason: str) -> None:
        self.engine = engine
        self.root = root
        self.reason = reason
        super().__init__(f"No local engine '{engine}' for {root}: {reason}")


def is_engine_like(value: object) -> bool:
    """Check whether ``value`` exposes a callable ``format`` attribute."""
    if value is None:
        return False
    return callable(getattr(value, "format", None))


def instantiate_engine(obj: object, *, source: str) -> FormattingEngine:
    """Turn an imported module or factory into a validated engine.

    Modules that expose ``format`` directly are used as-is. Modules without it
    may provide a zero-argument ``create_engine`` factory returning the engine.

    Raises:
        InvalidEngineError: If no engine capability can be found.
    """
    candidate = obj
    if not is_engine_like(candidate):
        factory = getattr(candidate, ENGINE_FACTORY_ATTR, None)
        if callable(factory):
            candidate = cast("Callable[[], object]", factory)()
    if not is_engine_like(candidate):
        raise InvalidEngineError(source)
    return cast("FormattingEngine", candidate)


async def call_engine(engine: FormattingEngine, code: str, options: FormatOptions) -> str:
    """Invoke ``engine.format`` and await the result when the engine is asynchronous."""
    result = engine.format(code, options)
    if inspect.isawaitable(result):
        result = await result
    return cast("str", result)


def engine_label(engine: object) -> str:
    """Return a human-readable identifier for an engine (module or class name)."""
    name = getattr(engine, "__name__", None)
    if isinstance(name, str):
        return name
    cls = type(engine)
    return f"{cls.__module__}.{cls.__qualname__}"


__all__ = [
    "ENGINE_FACTORY_ATTR",
    "EngineLoadError",
    "EngineResolutionError",
    "FormattingEngine",
    "InvalidEngineError",
    "call_engine",
    "engine_label",
    "instantiate_engine",
    "is_engine_like",
]

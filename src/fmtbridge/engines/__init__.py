# Copyright (c) 2025 PantherianCodeX. All Rights Reserved.

"""Formatting engine abstraction and resolution for fmtbridge.

An engine is any object (typically a module) exposing a ``format(code,
options)`` callable. ``EngineLoader`` imports the process-default engine once
and resolves project-local engines per workspace root, falling back to the
default when a project carries no engine of its own.
"""

from .base import (
    EngineLoadError,
    EngineResolutionError,
    FormattingEngine,
    InvalidEngineError,
    call_engine,
    instantiate_engine,
)
from .loader import EngineLoader, EngineResolution

__all__ = [
    "EngineLoadError",
    "EngineLoader",
    "EngineResolution",
    "EngineResolutionError",
    "FormattingEngine",
    "InvalidEngineError",
    "call_engine",
    "instantiate_engine",
]

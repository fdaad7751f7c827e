# Copyright (c) 2025 PantherianCodeX. All Rights Reserved.

"""fmtbridge - workspace-aware formatting dispatcher.

Routes formatting requests to the formatting engine installed for each project
root, falling back to a process-default engine, and formats code fragments
embedded in host documents without ever failing the surrounding document.
"""

from __future__ import annotations

__version__ = "0.1.0"

from fmtbridge._internal.exceptions import (
    FmtbridgeError,
    FmtbridgeTypeError,
    FmtbridgeValidationError,
)

from .bridge import BridgeCallError, FormatterBridge
from .config import DispatcherConfig, load_config
from .dispatch import (
    TAG_TO_PARSER,
    DispatcherClosedError,
    FormatDispatcher,
    FormatEmbeddedRequest,
    FormatFileRequest,
)
from .engines import (
    EngineLoader,
    EngineLoadError,
    EngineResolution,
    EngineResolutionError,
    FormattingEngine,
)
from .workspaces import Workspace, WorkspaceDirectoryError, WorkspaceRegistry

__all__ = [
    "TAG_TO_PARSER",
    "BridgeCallError",
    "DispatcherClosedError",
    "DispatcherConfig",
    "EngineLoadError",
    "EngineLoader",
    "EngineResolution",
    "EngineResolutionError",
    "FmtbridgeError",
    "FmtbridgeTypeError",
    "FmtbridgeValidationError",
    "FormatDispatcher",
    "FormatEmbeddedRequest",
    "FormatFileRequest",
    "FormatterBridge",
    "FormattingEngine",
    "Workspace",
    "WorkspaceDirectoryError",
    "WorkspaceRegistry",
    "__version__",
    "load_config",
]

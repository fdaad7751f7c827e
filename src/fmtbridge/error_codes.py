# Copyright (c) 2025 PantherianCodeX. All Rights Reserved.

"""Stable error codes for structured fmtbridge exceptions."""

from __future__ import annotations

from collections.abc import Mapping
from typing import NewType

from fmtbridge._internal.exceptions import (
    FmtbridgeError,
    FmtbridgeTypeError,
    FmtbridgeValidationError,
)
from fmtbridge.bridge import BridgeCallError
from fmtbridge.config import ConfigReadError, ConfigValidationError, InvalidConfigFileError
from fmtbridge.dispatch import DispatcherClosedError
from fmtbridge.engines.base import EngineLoadError, EngineResolutionError, InvalidEngineError
from fmtbridge.engines.prettier import PrettierFormatError, PrettierNotFoundError
from fmtbridge.workspaces import WorkspaceDirectoryError

ErrorCode = NewType("ErrorCode", str)

_ERROR_CODES: dict[type[BaseException], ErrorCode] = {
    FmtbridgeError: ErrorCode("FB000"),
    FmtbridgeValidationError: ErrorCode("FB100"),
    FmtbridgeTypeError: ErrorCode("FB101"),
    WorkspaceDirectoryError: ErrorCode("FB110"),
    ConfigValidationError: ErrorCode("FB120"),
    InvalidConfigFileError: ErrorCode("FB121"),
    ConfigReadError: ErrorCode("FB122"),
    EngineLoadError: ErrorCode("FB200"),
    EngineResolutionError: ErrorCode("FB201"),
    InvalidEngineError: ErrorCode("FB202"),
    PrettierNotFoundError: ErrorCode("FB210"),
    PrettierFormatError: ErrorCode("FB211"),
    DispatcherClosedError: ErrorCode("FB300"),
    BridgeCallError: ErrorCode("FB400"),
}


def error_code_for(exc: BaseException) -> ErrorCode:
    """Return a stable error code for a structured fmtbridge exception."""

    for cls in type(exc).__mro__:
        code = _ERROR_CODES.get(cls)
        if code:
            return code
    return ErrorCode("FB000")


def error_code_catalog() -> Mapping[str, ErrorCode]:
    """Return a stable mapping of fully-qualified exception names to error codes.

    Intended for diagnostics, tests, and documentation generation - avoids
    exposing the private mapping while keeping a single source of truth.
    """

    result: dict[str, ErrorCode] = {}
    for exc_type, code in _ERROR_CODES.items():
        key = f"{exc_type.__module__}.{exc_type.__name__}"
        result[key] = code
    return result


__all__ = ["ErrorCode", "error_code_catalog", "error_code_for"]

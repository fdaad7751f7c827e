# Copyright (c) 2025 PantherianCodeX. All Rights Reserved.

"""Public exception types re-exported from the internal package."""

from __future__ import annotations

from fmtbridge._internal.exceptions import (
    FmtbridgeError,
    FmtbridgeTypeError,
    FmtbridgeValidationError,
)

__all__ = ["FmtbridgeError", "FmtbridgeTypeError", "FmtbridgeValidationError"]

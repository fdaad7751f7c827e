# Copyright (c) 2025 PantherianCodeX. All Rights Reserved.

"""Common exception hierarchy for fmtbridge."""

from __future__ import annotations

__all__ = ["FmtbridgeError", "FmtbridgeTypeError", "FmtbridgeValidationError"]


class FmtbridgeError(Exception):
    """Base error for all fmtbridge exceptions."""


class FmtbridgeValidationError(FmtbridgeError, ValueError):
    """Raised when input data fails validation checks."""


class FmtbridgeTypeError(FmtbridgeError, TypeError):
    """Raised when input data has an unexpected type."""

# Copyright (c) 2025 PantherianCodeX. All Rights Reserved.

"""Core enumerations and type aliases shared across fmtbridge."""

from __future__ import annotations

from . import model_types, type_aliases

__all__ = ["model_types", "type_aliases"]

# Copyright (c) 2025 PantherianCodeX. All Rights Reserved.

"""Command-line interface for fmtbridge."""

from __future__ import annotations

from .app import main

__all__ = ["main"]

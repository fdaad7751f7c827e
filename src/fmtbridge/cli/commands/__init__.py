# Copyright (c) 2025 PantherianCodeX. All Rights Reserved.

"""Subcommand implementations for the fmtbridge CLI."""

from __future__ import annotations

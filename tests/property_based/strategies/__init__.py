# Copyright (c) 2025 PantherianCodeX. All Rights Reserved.

"""Common Hypothesis strategies."""

from __future__ import annotations

from .common import formatter_options, project_roots, unknown_tags, workspace_ids

__all__ = [
    "formatter_options",
    "project_roots",
    "unknown_tags",
    "workspace_ids",
]

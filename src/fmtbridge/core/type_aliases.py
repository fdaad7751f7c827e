# Copyright (c) 2025 PantherianCodeX. All Rights Reserved.

"""Typed aliases used across fmtbridge internals."""

from __future__ import annotations

from collections.abc import Mapping
from typing import NewType, TypeAlias

WorkspaceId = NewType("WorkspaceId", int)
EngineName = NewType("EngineName", str)
ParserName = NewType("ParserName", str)
TagName = NewType("TagName", str)

FormatOptions: TypeAlias = Mapping[str, object]
Command: TypeAlias = list[str]

DEFAULT_WORKSPACE_ID: WorkspaceId = WorkspaceId(0)

__all__ = [
    "DEFAULT_WORKSPACE_ID",
    "Command",
    "EngineName",
    "FormatOptions",
    "ParserName",
    "TagName",
    "WorkspaceId",
]

# Copyright (c) 2025 PantherianCodeX. All Rights Reserved.

"""Workspace registry: which formatting engine serves which project root.

The host creates a workspace when it discovers a project root and deletes it
when the root is discarded. Each workspace pins the engine resolved for its
root at creation time. Lookups with an unknown, stale or absent id quietly
resolve to a synthetic record backed by the default engine.

The registry is not thread-safe. All mutations must happen on the event loop
that owns it.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING, TypeGuard

from fmtbridge.core.model_types import EngineSource, LogComponent
from fmtbridge.core.type_aliases import DEFAULT_WORKSPACE_ID, WorkspaceId
from fmtbridge.engines.base import engine_label
from fmtbridge.exceptions import FmtbridgeValidationError
from fmtbridge.logging import structured_extra

if TYPE_CHECKING:
    from fmtbridge.engines import EngineLoader, FormattingEngine

logger: logging.Logger = logging.getLogger("fmtbridge.workspace")


class WorkspaceDirectoryError(FmtbridgeValidationError):
    """Raised when a workspace is requested for an empty or missing directory."""

    def __init__(self, directory: object) -> None:
        self.directory = directory
        super().__init__(f"`directory` must be a non-empty path, got {directory!r}")


def _is_workspace_id(value: object) -> TypeGuard[int]:
    """Only positive ints name workspaces; ``bool`` and ``float`` would alias id 1."""
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


@dataclass(slots=True, frozen=True)
class Workspace:
    """A project root paired with the engine that formats files under it.

    ``id == 0`` and an empty ``root`` denote the synthetic default record that
    is never stored in the registry.
    """

    id: WorkspaceId
    root: str
    engine: FormattingEngine
    source: EngineSource = EngineSource.DEFAULT

    @property
    def is_default(self) -> bool:
        return self.id == DEFAULT_WORKSPACE_ID


class WorkspaceRegistry:
    """Own the mapping from workspace id to ``Workspace`` record."""

    def __init__(self, loader: EngineLoader) -> None:
        super().__init__()
        self._loader = loader
        self._workspaces: dict[WorkspaceId, Workspace] = {}
        self._next_id = 1

    @property
    def loader(self) -> EngineLoader:
        return self._loader

    def __len__(self) -> int:
        return len(self._workspaces)

    def __contains__(self, workspace_id: object) -> bool:
        return workspace_id in self._workspaces

    def __iter__(self) -> Iterator[Workspace]:
        return iter(list(self._workspaces.values()))

    def get(self, workspace_id: int | None) -> Workspace | None:
        if workspace_id is None:
            return None
        return self._workspaces.get(WorkspaceId(workspace_id))

    async def create_workspace(self, directory: str | os.PathLike[str] | None) -> WorkspaceId:
        """Register ``directory`` as a workspace and return its new id.

        Resolving the engine touches the filesystem and may import a module, so
        hosts should create at most one workspace per root.

        Raises:
            WorkspaceDirectoryError: If ``directory`` is empty or ``None``.
            EngineLoadError: If the default engine is needed and cannot be loaded.
        """
        if directory is None:
            raise WorkspaceDirectoryError(directory)
        root = os.fspath(directory)
        if not root:
            raise WorkspaceDirectoryError(directory)
        resolution = await self._loader.resolve_engine_for_root(root)
        workspace_id = WorkspaceId(self._next_id)
        self._next_id += 1
        self._workspaces[workspace_id] = Workspace(
            id=workspace_id,
            root=root,
            engine=resolution.engine,
            source=resolution.source,
        )
        logger.info(
            "Created workspace %s for %s",
            workspace_id,
            root,
            extra=structured_extra(
                component=LogComponent.WORKSPACE,
                workspace_id=workspace_id,
                engine=engine_label(resolution.engine),
                source=resolution.source,
                path=root,
            ),
        )
        return workspace_id

    async def delete_workspace(self, workspace_id: int) -> None:
        """Forget a workspace. Unknown ids are ignored."""
        removed = self._workspaces.pop(WorkspaceId(workspace_id), None)
        if removed is None:
            return
        logger.info(
            "Deleted workspace %s",
            workspace_id,
            extra=structured_extra(
                component=LogComponent.WORKSPACE,
                workspace_id=workspace_id,
                path=removed.root,
            ),
        )

    async def resolve_workspace(self, workspace_id: int | None = None) -> Workspace:
        """Return the workspace for ``workspace_id`` or the default-engine record."""
        if _is_workspace_id(workspace_id):
            workspace = self._workspaces.get(WorkspaceId(workspace_id))
            if workspace is not None:
                return workspace
            logger.debug(
                "Unknown workspace %s, using the default engine",
                workspace_id,
                extra=structured_extra(component=LogComponent.WORKSPACE, workspace_id=workspace_id),
            )
        return Workspace(
            id=DEFAULT_WORKSPACE_ID,
            root="",
            engine=await self._loader.load_default_engine(),
            source=EngineSource.DEFAULT,
        )

    def clear(self) -> None:
        """Drop every workspace record."""
        self._workspaces.clear()


__all__ = ["Workspace", "WorkspaceDirectoryError", "WorkspaceRegistry"]

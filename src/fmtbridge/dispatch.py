# Copyright (c) 2025 PantherianCodeX. All Rights Reserved.

"""Format dispatcher: route formatting requests to the right engine.

Two entry points are provided:

- ``FormatDispatcher.format_file`` formats a whole document with the engine of
  the requesting workspace. Engine errors propagate unchanged because the user
  explicitly asked for this document to be formatted.
- ``FormatDispatcher.format_embedded_code`` formats a fragment embedded in a
  host document (for example CSS inside a ``styled`` template literal) with the
  default engine. It never raises: unknown tags and any failure return the
  fragment untouched, so a half-typed snippet cannot break the surrounding
  document.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType, TracebackType
from typing import TYPE_CHECKING, Final, Self

from fmtbridge.config import DispatcherConfig
from fmtbridge.core.model_types import LogComponent
from fmtbridge.core.type_aliases import ParserName, TagName, WorkspaceId
from fmtbridge.engines import EngineLoader, call_engine
from fmtbridge.exceptions import FmtbridgeError
from fmtbridge.logging import structured_extra
from fmtbridge.workspaces import Workspace, WorkspaceRegistry

if TYPE_CHECKING:
    import os

    from fmtbridge.core.type_aliases import FormatOptions
    from fmtbridge.engines import FormattingEngine

logger: logging.Logger = logging.getLogger("fmtbridge.dispatch")

TAG_TO_PARSER: Final[Mapping[TagName, ParserName]] = MappingProxyType({
    # CSS
    TagName("css"): ParserName("css"),
    TagName("styled"): ParserName("css"),
    # GraphQL
    TagName("gql"): ParserName("graphql"),
    TagName("graphql"): ParserName("graphql"),
    # HTML
    TagName("html"): ParserName("html"),
    # Markdown
    TagName("md"): ParserName("markdown"),
    TagName("markdown"): ParserName("markdown"),
})


def parser_for_tag(tag_name: str) -> ParserName | None:
    """Return the parser for an embedded-code tag, or ``None`` when unsupported."""
    return TAG_TO_PARSER.get(TagName(tag_name))


def _empty_options() -> dict[str, object]:
    return {}


@dataclass(slots=True, frozen=True)
class FormatFileRequest:
    """A whole-document formatting request.

    Attributes:
        code: Document text.
        parser_name: Parser the engine must use (skips parser inference).
        file_name: Path of the document; some engine plugins key off it.
        workspace_id: Workspace that owns the document. ``None`` or ``0``
            selects the default engine.
        options: Formatter options computed by the host.
    """

    code: str
    parser_name: str
    file_name: str
    workspace_id: int | None = None
    options: FormatOptions = field(default_factory=_empty_options)


@dataclass(slots=True, frozen=True)
class FormatEmbeddedRequest:
    code: str
    tag_name: str
    options: FormatOptions = field(default_factory=_empty_options)


@dataclass(slots=True, frozen=True)
class Formatted:
    text: str

    @property
    def ok(self) -> bool:
        return True

    def unwrap_or(self, fallback: str) -> str:
        return self.text


@dataclass(slots=True, frozen=True)
class Failed:
    error: BaseException

    @property
    def ok(self) -> bool:
        return False

    def unwrap_or(self, fallback: str) -> str:
        return fallback


type FormatResult = Formatted | Failed


def with_overrides(options: FormatOptions, **overrides: object) -> dict[str, object]:
    """Return a copy of ``options`` with ``overrides`` applied on top."""
    merged = dict(options)
    merged.update(overrides)
    return merged


async def attempt_format(
    engine: FormattingEngine,
    code: str,
    options: FormatOptions,
) -> FormatResult:
    """Run the engine and capture any failure as a ``Failed`` result."""
    try:
        text = await call_engine(engine, code, options)
    except Exception as exc:
        return Failed(exc)
    return Formatted(text)


class DispatcherClosedError(FmtbridgeError):
    """Raised when a closed dispatcher is asked to do work."""

    def __init__(self) -> None:
        super().__init__("The format dispatcher has been closed")


class FormatDispatcher:
    """Process-scoped service routing formatting requests to engines.

    The dispatcher owns the engine loader (and with it the default-engine slot)
    and the workspace registry. Hosts construct one dispatcher at start-up,
    pass it to whatever needs to format, and close it on shutdown::

        async with FormatDispatcher(load_config()) as dispatcher:
            workspace_id = await dispatcher.create_workspace(project_root)
            text = await dispatcher.format_file(
                FormatFileRequest(code, "css", "site.css", workspace_id, options),
            )
    """

    def __init__(
        self,
        config: DispatcherConfig | None = None,
        *,
        loader: EngineLoader | None = None,
    ) -> None:
        super().__init__()
        self._loader = loader if loader is not None else EngineLoader(config)
        self._registry = WorkspaceRegistry(self._loader)
        self._closed = False

    @property
    def loader(self) -> EngineLoader:
        return self._loader

    @property
    def workspaces(self) -> WorkspaceRegistry:
        return self._registry

    @property
    def closed(self) -> bool:
        return self._closed

    def _ensure_open(self) -> None:
        if self._closed:
            raise DispatcherClosedError

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Discard every workspace. Safe to call more than once."""
        if self._closed:
            return
        count = len(self._registry)
        self._registry.clear()
        self._closed = True
        logger.debug(
            "Closed dispatcher",
            extra=structured_extra(component=LogComponent.DISPATCH, details={"workspaces": count}),
        )

    async def initialize(self) -> list[str]:
        """Host start-up hook. Returns the languages contributed by plugins."""
        self._ensure_open()
        return await self.resolve_plugins()

    async def resolve_plugins(self) -> list[str]:
        # TODO: load the configured engine plugins and map their `languages`
        # (extensions and file names) to parsers.
        return []

    async def create_workspace(self, directory: str | os.PathLike[str] | None) -> WorkspaceId:
        self._ensure_open()
        return await self._registry.create_workspace(directory)

    async def delete_workspace(self, workspace_id: int) -> None:
        self._ensure_open()
        await self._registry.delete_workspace(workspace_id)

    async def resolve_workspace(self, workspace_id: int | None = None) -> Workspace:
        self._ensure_open()
        return await self._registry.resolve_workspace(workspace_id)

    async def format_file(self, request: FormatFileRequest) -> str:
        """Format a whole document with its workspace's engine.

        ``parser`` and ``filepath`` are always taken from the request, overriding
        whatever the host put in ``options``. The host's mapping is not modified.
        Errors raised by the engine propagate unchanged.
        """
        self._ensure_open()
        workspace = await self._registry.resolve_workspace(request.workspace_id)
        options = with_overrides(
            request.options,
            parser=request.parser_name,
            filepath=request.file_name,
        )
        start = time.perf_counter()
        text = await call_engine(workspace.engine, request.code, options)
        logger.debug(
            "Formatted %s",
            request.file_name,
            extra=structured_extra(
                component=LogComponent.DISPATCH,
                workspace_id=workspace.id,
                source=workspace.source,
                parser=request.parser_name,
                path=request.file_name,
                duration_ms=(time.perf_counter() - start) * 1000,
            ),
        )
        return text

    async def format_embedded_code(self, request: FormatEmbeddedRequest) -> str:
        """Format an embedded fragment, returning it unchanged on any failure."""
        self._ensure_open()
        parser_name = parser_for_tag(request.tag_name)
        if parser_name is None:
            return request.code
        result = await self._format_fragment(request, parser_name)
        if isinstance(result, Failed):
            logger.debug(
                "Embedded %s fragment left unformatted: %s",
                request.tag_name,
                result.error,
                extra=structured_extra(
                    component=LogComponent.DISPATCH,
                    tag=request.tag_name,
                    parser=parser_name,
                ),
            )
        return result.unwrap_or(request.code)

    async def _format_fragment(
        self,
        request: FormatEmbeddedRequest,
        parser_name: ParserName,
    ) -> FormatResult:
        try:
            engine = await self._loader.load_default_engine()
        except Exception as exc:
            return Failed(exc)
        options = with_overrides(request.options, parser=parser_name)
        result = await attempt_format(engine, request.code, options)
        if isinstance(result, Formatted):
            return Formatted(result.text.rstrip())
        return result


__all__ = [
    "TAG_TO_PARSER",
    "DispatcherClosedError",
    "Failed",
    "FormatDispatcher",
    "FormatEmbeddedRequest",
    "FormatFileRequest",
    "FormatResult",
    "Formatted",
    "attempt_format",
    "parser_for_tag",
    "with_overrides",
]

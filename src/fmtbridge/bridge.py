# Copyright (c) 2025 PantherianCodeX. All Rights Reserved.

"""Blocking facade over ``FormatDispatcher`` for thread-based hosts.

Hosts that format from worker threads (language servers, CLI worker pools)
cannot await the dispatcher directly. ``FormatterBridge`` runs the dispatcher on
a private event loop in a daemon thread and exposes blocking methods that
submit work to that loop. The dispatcher and its registry are only ever touched
from the loop thread.

Do not call bridge methods from the bridge's own loop; they would wait on
themselves.
"""

from __future__ import annotations

import asyncio
import logging
import os
import threading
from types import TracebackType
from typing import TYPE_CHECKING, Self, TypeVar

from fmtbridge.core.model_types import LogComponent
from fmtbridge.dispatch import (
    DispatcherClosedError,
    FormatDispatcher,
    FormatEmbeddedRequest,
    FormatFileRequest,
)
from fmtbridge.exceptions import FmtbridgeError
from fmtbridge.logging import structured_extra

if TYPE_CHECKING:
    from collections.abc import Coroutine

    from fmtbridge.config import DispatcherConfig
    from fmtbridge.core.type_aliases import FormatOptions, WorkspaceId

T = TypeVar("T")

logger: logging.Logger = logging.getLogger("fmtbridge.bridge")


class BridgeCallError(FmtbridgeError):
    """Raised when a bridged dispatcher call fails. The original error is ``__cause__``."""

    def __init__(self, operation: str, detail: str, error: BaseException) -> None:
        self.operation = operation
        self.error = error
        super().__init__(f"{operation} failed for {detail}: {error}")


class FormatterBridge:
    """Run a ``FormatDispatcher`` on a background event loop.

    Args:
        dispatcher: Dispatcher to drive. A new one is built from ``config``
            when omitted.
        config: Settings used when constructing the dispatcher.
        timeout: Default number of seconds to wait for each call. ``None``
            waits indefinitely.
    """

    def __init__(
        self,
        dispatcher: FormatDispatcher | None = None,
        *,
        config: DispatcherConfig | None = None,
        timeout: float | None = None,
    ) -> None:
        super().__init__()
        self._dispatcher = dispatcher if dispatcher is not None else FormatDispatcher(config)
        self._timeout = timeout
        self._closed = False
        self._close_lock = threading.Lock()
        self._loop = asyncio.new_event_loop()
        self._thread = threading.Thread(target=self._run_loop, name="fmtbridge-loop", daemon=True)
        self._thread.start()

    def _run_loop(self) -> None:
        asyncio.set_event_loop(self._loop)
        self._loop.run_forever()

    @property
    def dispatcher(self) -> FormatDispatcher:
        return self._dispatcher

    @property
    def closed(self) -> bool:
        return self._closed

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()

    def _submit(self, coro: Coroutine[object, object, T], timeout: float | None) -> T:
        with self._close_lock:
            if self._closed:
                coro.close()
                raise DispatcherClosedError
            try:
                future = asyncio.run_coroutine_threadsafe(coro, self._loop)
            except RuntimeError as exc:
                coro.close()
                raise DispatcherClosedError from exc
        wait = timeout if timeout is not None else self._timeout
        try:
            return future.result(timeout=wait)
        except TimeoutError:
            _ = future.cancel()
            raise

    def _call(
        self,
        operation: str,
        detail: str,
        coro: Coroutine[object, object, T],
        timeout: float | None,
    ) -> T:
        try:
            return self._submit(coro, timeout)
        except DispatcherClosedError:
            raise
        except Exception as exc:
            logger.debug(
                "%s failed for %s: %s",
                operation,
                detail,
                exc,
                extra=structured_extra(component=LogComponent.BRIDGE),
            )
            raise BridgeCallError(operation, detail, exc) from exc

    def initialize(self, *, timeout: float | None = None) -> list[str]:
        """Initialize the dispatcher and return plugin-provided languages."""
        return self._call("initialize", "dispatcher", self._dispatcher.initialize(), timeout)

    def create_workspace(
        self,
        directory: str | os.PathLike[str],
        *,
        timeout: float | None = None,
    ) -> WorkspaceId:
        return self._call(
            "create_workspace",
            f"directory: '{directory}'",
            self._dispatcher.create_workspace(directory),
            timeout,
        )

    def delete_workspace(self, workspace_id: int, *, timeout: float | None = None) -> None:
        self._call(
            "delete_workspace",
            f"workspace {workspace_id}",
            self._dispatcher.delete_workspace(workspace_id),
            timeout,
        )

    def format_file(
        self,
        workspace_id: int | None,
        options: FormatOptions,
        parser_name: str,
        file_name: str,
        code: str,
        *,
        timeout: float | None = None,
    ) -> str:
        """Format a document, blocking until the engine returns."""
        request = FormatFileRequest(
            code=code,
            parser_name=parser_name,
            file_name=file_name,
            workspace_id=workspace_id,
            options=options,
        )
        return self._call(
            "format_file",
            f"file: '{file_name}', parser: '{parser_name}'",
            self._dispatcher.format_file(request),
            timeout,
        )

    def format_embedded_code(
        self,
        options: FormatOptions,
        tag_name: str,
        code: str,
        *,
        timeout: float | None = None,
    ) -> str:
        """Format an embedded fragment. Returns ``code`` unchanged on timeout."""
        request = FormatEmbeddedRequest(code=code, tag_name=tag_name, options=options)
        try:
            return self._submit(self._dispatcher.format_embedded_code(request), timeout)
        except TimeoutError:
            logger.debug(
                "Embedded %s fragment timed out",
                tag_name,
                extra=structured_extra(component=LogComponent.BRIDGE, tag=tag_name),
            )
            return code

    async def _shutdown(self) -> None:
        await self._dispatcher.aclose()
        current = asyncio.current_task()
        pending = [task for task in asyncio.all_tasks() if task is not current]
        for task in pending:
            # Tasks already cancelled by a timed-out caller finish their own cleanup.
            if not task.cancelling():
                _ = task.cancel()
        _ = await asyncio.gather(*pending, return_exceptions=True)

    def close(self) -> None:
        """Close the dispatcher, cancel in-flight calls and stop the loop. Idempotent."""
        with self._close_lock:
            if self._closed:
                return
            try:
                asyncio.run_coroutine_threadsafe(self._shutdown(), self._loop).result()
            finally:
                self._closed = True
                self._loop.call_soon_threadsafe(self._loop.stop)
                self._thread.join()
                self._loop.close()


__all__ = ["BridgeCallError", "FormatterBridge"]

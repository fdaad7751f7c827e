# Copyright (c) 2025 PantherianCodeX. All Rights Reserved.

"""Builtin formatting engine backed by the ``prettier`` command-line program.

This module is the default engine: it exposes the engine capability as a
module-level coroutine ``format(code, options)``. Code is piped to the CLI on
stdin and the formatted text is read back from stdout. Options are translated
one-to-one into CLI flags; no option is interpreted here.
"""

from __future__ import annotations

import asyncio
import logging
import os
import re
import shutil
import time
from collections.abc import Mapping
from typing import TYPE_CHECKING, Final

from fmtbridge.core.model_types import LogComponent
from fmtbridge.exceptions import FmtbridgeError
from fmtbridge.logging import structured_extra

if TYPE_CHECKING:
    from fmtbridge.core.type_aliases import Command, FormatOptions

logger: logging.Logger = logging.getLogger("fmtbridge.engine.prettier")

PRETTIER_ENV: Final[str] = "FMTBRIDGE_PRETTIER"
PRETTIER_EXECUTABLE: Final[str] = "prettier"

_CAMEL_BOUNDARY: Final = re.compile(r"(?<!^)(?=[A-Z])")
_REPEATED_OPTIONS: Final[Mapping[str, str]] = {"plugins": "--plugin"}


class PrettierNotFoundError(FmtbridgeError):
    """Raised when no ``prettier`` executable can be located."""

    def __init__(self) -> None:
        super().__init__(
            f"prettier executable not found on PATH; set {PRETTIER_ENV} to its location",
        )


class PrettierFormatError(FmtbridgeError):
    """Raised when the ``prettier`` CLI exits with a non-zero status."""

    def __init__(self, exit_code: int, stderr: str) -> None:
        self.exit_code = exit_code
        self.stderr = stderr
        detail = stderr.strip() or "no diagnostic output"
        super().__init__(f"prettier exited with status {exit_code}: {detail}")


def prettier_executable() -> str:
    configured = os.getenv(PRETTIER_ENV)
    if configured:
        return configured
    found = shutil.which(PRETTIER_EXECUTABLE)
    if found is None:
        raise PrettierNotFoundError
    return found


def option_flag(key: str) -> str:
    """Convert an option key (``printWidth``) to its CLI flag (``--print-width``)."""
    return "--" + _CAMEL_BOUNDARY.sub("-", key).lower()


def _option_arguments(key: str, value: object) -> list[str]:
    if value is None:
        return []
    repeated = _REPEATED_OPTIONS.get(key)
    if repeated is not None:
        items = value if isinstance(value, (list, tuple)) else [value]
        return [f"{repeated}={item}" for item in items]
    flag = option_flag(key)
    if isinstance(value, bool):
        return [flag] if value else ["--no-" + flag.removeprefix("--")]
    if isinstance(value, (list, tuple)):
        return [f"{flag}={','.join(str(item) for item in value)}"]
    return [f"{flag}={value}"]


def build_command(executable: str, options: FormatOptions) -> Command:
    """Build the argument vector for formatting stdin with ``options``.

    ``filepath`` becomes ``--stdin-filepath``; every other key is mapped with
    ``option_flag`` in sorted order so the command line is deterministic.
    """
    argv: Command = [executable]
    filepath = options.get("filepath")
    if filepath:
        argv.extend(("--stdin-filepath", str(filepath)))
    for key in sorted(options):
        if key == "filepath":
            continue
        argv.extend(_option_arguments(key, options[key]))
    return argv


async def format(code: str, options: FormatOptions) -> str:  # noqa: A001 - engine capability name
    """Format ``code`` by piping it through the ``prettier`` CLI.

    The child process is killed and reaped when the call is cancelled.

    Raises:
        PrettierNotFoundError: If the executable cannot be located.
        PrettierFormatError: If prettier rejects the input or the options.
    """
    argv = build_command(prettier_executable(), options)
    start = time.perf_counter()
    process = await asyncio.create_subprocess_exec(
        *argv,
        stdin=asyncio.subprocess.PIPE,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    try:
        stdout, stderr = await process.communicate(code.encode("utf-8"))
    except BaseException:
        # Cancelled or timed out: the child must not outlive the call.
        if process.returncode is None:
            process.kill()
            _ = await process.wait()
        raise
    exit_code = process.returncode if process.returncode is not None else -1
    duration_ms = (time.perf_counter() - start) * 1000
    if exit_code != 0:
        logger.debug(
            "prettier failed (exit=%s): %s",
            exit_code,
            " ".join(argv),
            extra=structured_extra(
                component=LogComponent.ENGINE,
                engine=PRETTIER_EXECUTABLE,
                parser=str(options.get("parser", "")),
                duration_ms=duration_ms,
            ),
        )
        raise PrettierFormatError(exit_code, stderr.decode("utf-8", errors="replace"))
    logger.debug(
        "prettier formatted %d characters",
        len(code),
        extra=structured_extra(
            component=LogComponent.ENGINE,
            engine=PRETTIER_EXECUTABLE,
            parser=str(options.get("parser", "")),
            duration_ms=duration_ms,
        ),
    )
    return stdout.decode("utf-8")


__all__ = [
    "PRETTIER_ENV",
    "PrettierFormatError",
    "PrettierNotFoundError",
    "build_command",
    "format",
    "option_flag",
    "prettier_executable",
]

# Copyright (c) 2025 PantherianCodeX. All Rights Reserved.

"""CLI entry point and orchestration for fmtbridge commands."""

from __future__ import annotations

import argparse
import logging
import pathlib
from collections.abc import Callable, Sequence
from typing import Final

from fmtbridge import __version__
from fmtbridge.cli.commands import engines as engines_command
from fmtbridge.cli.commands import format as format_command
from fmtbridge.cli.commands import tags as tags_command
from fmtbridge.cli.helpers import echo, register_argument
from fmtbridge.core.model_types import LogComponent
from fmtbridge.error_codes import error_code_for
from fmtbridge.exceptions import FmtbridgeError
from fmtbridge.logging import LOG_FORMATS, LOG_LEVELS, configure_logging, structured_extra

logger: logging.Logger = logging.getLogger("fmtbridge.cli")

FMTBRIDGE_VERSION: Final[str] = __version__

CommandHandler = Callable[[argparse.Namespace], int]


def main(argv: Sequence[str] | None = None) -> int:
    """Main CLI entry point for the fmtbridge command-line interface.

    Parses command-line arguments, configures logging, and dispatches to the
    appropriate command handler.

    Args:
        argv: Command-line arguments to parse. If None, uses sys.argv.

    Returns:
        int: ``0`` on success, ``1`` when formatting or engine loading failed.
    """
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    if args.version:
        echo(f"fmtbridge {FMTBRIDGE_VERSION}")
        return 0
    if args.command is None:
        parser.error("No command provided.")
    _ = configure_logging(args.log_format, log_level=args.log_level)
    handler = _command_handlers().get(args.command)
    if handler is None:
        parser.error(f"Unknown command {args.command}")
    try:
        return handler(args)
    except FmtbridgeError as exc:
        _report_failure(args.command, exc)
        return 1
    except Exception as exc:
        # Engines are third-party code and may raise anything.
        _report_failure(args.command, exc)
        logger.debug(
            "Unhandled engine failure",
            exc_info=True,
            extra=structured_extra(component=LogComponent.CLI),
        )
        return 1


def _report_failure(command: str, exc: BaseException) -> None:
    echo(f"[fmtbridge] {command} failed ({error_code_for(exc)}): {exc}", err=True)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fmtbridge",
        description="Format files and embedded code with per-project formatting engines.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    register_argument(
        parser,
        "--log-format",
        choices=LOG_FORMATS,
        default="text",
        help="Select logging output format (human-readable text or structured JSON).",
    )
    register_argument(
        parser,
        "--log-level",
        choices=LOG_LEVELS,
        default="warning",
        help="Set verbosity of logged events.",
    )
    register_argument(
        parser,
        "--config",
        type=pathlib.Path,
        default=None,
        help="Explicit fmtbridge configuration file (fmtbridge.toml or pyproject.toml).",
    )
    register_argument(
        parser,
        "--version",
        action="store_true",
        help="Print the fmtbridge version and exit.",
    )
    subparsers = parser.add_subparsers(dest="command")

    format_command.register_format_command(subparsers)
    format_command.register_embed_command(subparsers)
    engines_command.register_engines_command(subparsers)
    tags_command.register_tags_command(subparsers)
    return parser


def _command_handlers() -> dict[str, CommandHandler]:
    return {
        "format": format_command.execute_format,
        "embed": format_command.execute_embed,
        "engines": engines_command.execute_engines,
        "tags": tags_command.execute_tags,
    }


__all__ = ["main"]

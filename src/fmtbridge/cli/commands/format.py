# Copyright (c) 2025 PantherianCodeX. All Rights Reserved.

"""``fmtbridge format`` and ``fmtbridge embed`` commands."""

from __future__ import annotations

import argparse
import asyncio
import logging
import pathlib
import sys
from dataclasses import replace
from typing import TYPE_CHECKING

from fmtbridge.cli.helpers import (
    collect_options,
    echo,
    register_argument,
    register_option_arguments,
)
from fmtbridge.config import load_config
from fmtbridge.core.model_types import LogComponent
from fmtbridge.dispatch import FormatDispatcher, FormatEmbeddedRequest, FormatFileRequest
from fmtbridge.logging import structured_extra

if TYPE_CHECKING:
    from fmtbridge.cli.helpers import SubparserCollection
    from fmtbridge.config import DispatcherConfig

logger: logging.Logger = logging.getLogger("fmtbridge.cli")


def register_format_command(subparsers: SubparserCollection) -> None:
    """Attach the ``fmtbridge format`` command to the CLI."""
    fmt = subparsers.add_parser(
        "format",
        help="Format a file with its project's engine",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    register_argument(fmt, "path", type=pathlib.Path, help="File to format.")
    register_argument(
        fmt,
        "--parser",
        required=True,
        help="Parser the engine should use (for example css, markdown, babel).",
    )
    register_argument(
        fmt,
        "--workspace",
        type=pathlib.Path,
        default=None,
        help="Project root whose engine formats the file (default: the default engine).",
    )
    register_argument(
        fmt,
        "--write",
        action="store_true",
        help="Rewrite the file in place instead of printing the result.",
    )
    register_option_arguments(fmt)


def register_embed_command(subparsers: SubparserCollection) -> None:
    """Attach the ``fmtbridge embed`` command to the CLI."""
    embed = subparsers.add_parser(
        "embed",
        help="Format an embedded code fragment read from stdin",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    register_argument(
        embed,
        "--tag",
        required=True,
        help="Tag naming the embedded language (css, styled, gql, graphql, html, md, markdown).",
    )
    register_option_arguments(embed)


async def _format_file(
    config: DispatcherConfig,
    request: FormatFileRequest,
    workspace: pathlib.Path | None,
) -> str:
    async with FormatDispatcher(config) as dispatcher:
        if workspace is not None:
            workspace_id = await dispatcher.create_workspace(workspace)
            request = replace(request, workspace_id=workspace_id)
        return await dispatcher.format_file(request)


async def _format_embedded(config: DispatcherConfig, request: FormatEmbeddedRequest) -> str:
    async with FormatDispatcher(config) as dispatcher:
        return await dispatcher.format_embedded_code(request)


def execute_format(args: argparse.Namespace) -> int:
    """Format a single file and print or write the result.

    Returns:
        ``0`` when the file was formatted.
    """
    config = load_config(args.config)
    path: pathlib.Path = args.path
    code = path.read_text(encoding="utf-8")
    request = FormatFileRequest(
        code=code,
        parser_name=args.parser,
        file_name=str(path),
        options=collect_options(args.options_json, args.option_entries),
    )
    formatted = asyncio.run(_format_file(config, request, args.workspace))
    if args.write:
        if formatted != code:
            _ = path.write_text(formatted, encoding="utf-8")
        logger.info(
            "Formatted %s",
            path,
            extra=structured_extra(component=LogComponent.CLI, parser=args.parser, path=path),
        )
        return 0
    echo(formatted, newline=False)
    return 0


def execute_embed(args: argparse.Namespace) -> int:
    """Format stdin as an embedded fragment. Unsupported tags echo the input unchanged."""
    config = load_config(args.config)
    request = FormatEmbeddedRequest(
        code=sys.stdin.read(),
        tag_name=args.tag,
        options=collect_options(args.options_json, args.option_entries),
    )
    echo(asyncio.run(_format_embedded(config, request)))
    return 0


__all__ = [
    "execute_embed",
    "execute_format",
    "register_embed_command",
    "register_format_command",
]

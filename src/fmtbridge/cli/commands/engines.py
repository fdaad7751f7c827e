# Copyright (c) 2025 PantherianCodeX. All Rights Reserved.

"""Engine resolution helpers for the fmtbridge CLI."""

from __future__ import annotations

import argparse
import asyncio
import pathlib
from typing import TYPE_CHECKING

from fmtbridge.cli.helpers import echo, register_argument, render_data
from fmtbridge.config import load_config
from fmtbridge.core.model_types import DataFormat
from fmtbridge.engines import EngineLoader
from fmtbridge.engines.base import engine_label

if TYPE_CHECKING:
    from fmtbridge.cli.helpers import SubparserCollection
    from fmtbridge.engines import EngineResolution


def register_engines_command(subparsers: SubparserCollection) -> None:
    """Attach the ``fmtbridge engines`` command to the CLI."""
    engines = subparsers.add_parser(
        "engines",
        help="Inspect formatting engine resolution",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    engines_sub = engines.add_subparsers(dest="engines_action", required=True)

    resolve_cmd = engines_sub.add_parser(
        "resolve",
        help="Show which engine a project root resolves to",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    register_argument(
        resolve_cmd,
        "roots",
        nargs="+",
        type=pathlib.Path,
        help="Project roots to resolve.",
    )
    register_argument(
        resolve_cmd,
        "--format",
        choices=[fmt.value for fmt in DataFormat],
        default=DataFormat.TABLE.value,
        help="Output format for the resolution report.",
    )


def _resolution_row(root: pathlib.Path, resolution: EngineResolution) -> dict[str, object]:
    return {
        "root": str(root),
        "source": resolution.source,
        "engine": engine_label(resolution.engine),
        "origin": resolution.origin,
        "reason": resolution.error.reason if resolution.error is not None else None,
    }


async def _resolve_all(loader: EngineLoader, roots: list[pathlib.Path]) -> list[dict[str, object]]:
    rows: list[dict[str, object]] = []
    for root in roots:
        resolution = await loader.resolve_engine_for_root(root)
        rows.append(_resolution_row(root, resolution))
    return rows


def _handle_resolve(args: argparse.Namespace) -> int:
    loader = EngineLoader(load_config(args.config))
    rows = asyncio.run(_resolve_all(loader, list(args.roots)))
    fmt = DataFormat.from_str(getattr(args, "format", DataFormat.TABLE.value))
    for line in render_data(rows, fmt):
        echo(line)
    return 0


def execute_engines(args: argparse.Namespace) -> int:
    """Execute the engines subcommand.

    Args:
        args: Parsed CLI namespace.

    Returns:
        ``0`` if the action completes successfully.

    Raises:
        SystemExit: If the requested action is unknown.
    """
    action_value = getattr(args, "engines_action", None)
    if action_value == "resolve":
        return _handle_resolve(args)
    msg = f"Unknown engines action '{action_value}'"
    raise SystemExit(msg)


__all__ = ["execute_engines", "register_engines_command"]

# Copyright (c) 2025 PantherianCodeX. All Rights Reserved.

"""``fmtbridge tags``: list the embedded-code tags and their parsers."""

from __future__ import annotations

import argparse
from typing import TYPE_CHECKING

from fmtbridge.cli.helpers import echo, register_argument, render_data
from fmtbridge.core.model_types import DataFormat
from fmtbridge.dispatch import TAG_TO_PARSER

if TYPE_CHECKING:
    from fmtbridge.cli.helpers import SubparserCollection


def register_tags_command(subparsers: SubparserCollection) -> None:
    tags = subparsers.add_parser(
        "tags",
        help="List supported embedded-code tags",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    register_argument(
        tags,
        "--format",
        choices=[fmt.value for fmt in DataFormat],
        default=DataFormat.TABLE.value,
        help="Output format for the tag listing.",
    )


def execute_tags(args: argparse.Namespace) -> int:
    rows = [{"tag": tag, "parser": parser} for tag, parser in sorted(TAG_TO_PARSER.items())]
    for line in render_data(rows, DataFormat.from_str(args.format)):
        echo(line)
    return 0


__all__ = ["execute_tags", "register_tags_command"]

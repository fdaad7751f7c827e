# Copyright (c) 2025 PantherianCodeX. All Rights Reserved.

"""Argument parsing and output helpers shared by CLI commands."""

from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Protocol, cast

from fmtbridge.core.model_types import DataFormat
from fmtbridge.json import JSONValue, coerce_scalar, normalise_enums_for_json, require_json


class SubparserCollection(Protocol):
    """Protocol describing the subset of ``argparse._SubParsersAction`` we rely on."""

    def add_parser(
        self,
        name: str,
        **kwargs: Any,  # noqa: ANN401 - mirrors argparse's signature
    ) -> argparse.ArgumentParser: ...


class ArgumentRegistrar(Protocol):
    def add_argument(self, *args: Any, **kwargs: Any) -> argparse.Action: ...  # noqa: ANN401


def register_argument(
    registrar: ArgumentRegistrar,
    *args: Any,  # noqa: ANN401
    **kwargs: Any,  # noqa: ANN401
) -> None:
    """Register an argument on a parser/argument group, discarding the action handle."""
    _ = registrar.add_argument(*args, **kwargs)


def echo(message: str, *, newline: bool = True, err: bool = False) -> None:
    """Write a message to stdout/stderr."""
    stream = sys.stderr if err else sys.stdout
    _ = stream.write(message)
    if newline:
        _ = stream.write("\n")


def parse_key_value_entries(entries: Sequence[str], *, argument: str) -> list[tuple[str, str]]:
    """Parse KEY=VALUE strings supplied via CLI flags."""
    pairs: list[tuple[str, str]] = []
    for raw in entries:
        if "=" not in raw:
            raise SystemExit(f"{argument} expects KEY=VALUE syntax")
        key, value = raw.split("=", 1)
        key_clean = key.strip()
        if not key_clean:
            raise SystemExit(f"{argument} expects a non-empty KEY")
        pairs.append((key_clean, value.strip()))
    return pairs


def collect_options(options_json: str | None, entries: Sequence[str]) -> dict[str, object]:
    """Merge ``--options-json`` with ``--option KEY=VALUE`` flags (flags win)."""
    options: dict[str, object] = {}
    if options_json:
        try:
            options.update(require_json(options_json))
        except ValueError as exc:
            raise SystemExit(f"--options-json: {exc}") from exc
    for key, value in parse_key_value_entries(entries, argument="--option"):
        options[key] = coerce_scalar(value)
    return options


def register_option_arguments(parser: argparse.ArgumentParser) -> None:
    register_argument(
        parser,
        "--option",
        dest="option_entries",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Formatter option passed through to the engine (repeatable).",
    )
    register_argument(
        parser,
        "--options-json",
        default=None,
        metavar="JSON",
        help="Formatter options as a JSON object; --option flags take precedence.",
    )


@dataclass(slots=True)
class Table:
    headers: list[str]
    rows: list[Mapping[str, JSONValue]]

    def render(self) -> list[str]:
        if not self.headers or not self.rows:
            return ["<empty>"]
        widths: dict[str, int] = {}
        for header in self.headers:
            cells = (len(stringify(row.get(header))) for row in self.rows)
            widths[header] = max(len(header), *cells)
        header_line = " | ".join(header.ljust(widths[header]) for header in self.headers)
        separator = "-+-".join("-" * widths[header] for header in self.headers)
        lines = [header_line, separator]
        lines.extend(
            " | ".join(stringify(row.get(header)).ljust(widths[header]) for header in self.headers)
            for row in self.rows
        )
        return lines


def stringify(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str | int | float):
        return str(value)
    return json.dumps(normalise_enums_for_json(value), ensure_ascii=False)


def render_data(rows: Sequence[Mapping[str, object]], fmt: DataFormat) -> list[str]:
    """Render a list of records as JSON or as an aligned text table."""
    normalised = cast("list[Mapping[str, JSONValue]]", normalise_enums_for_json(list(rows)))
    if fmt is DataFormat.JSON:
        return [json.dumps(normalised, indent=2, ensure_ascii=False)]
    headers: list[str] = []
    for row in normalised:
        headers.extend(key for key in row if key not in headers)
    return Table(headers=headers, rows=normalised).render()


__all__ = [
    "SubparserCollection",
    "Table",
    "collect_options",
    "echo",
    "parse_key_value_entries",
    "register_argument",
    "register_option_arguments",
    "render_data",
    "stringify",
]

# Copyright (c) 2025 PantherianCodeX. All Rights Reserved.

from __future__ import annotations

import io
import json
import sys
from collections.abc import Generator
from pathlib import Path
from textwrap import dedent

import pytest

from fmtbridge import __version__
from fmtbridge.cli import main
from tests.fixtures.engines import make_project

pytestmark = [pytest.mark.cli, pytest.mark.integration]

CLI_ENGINE = "fmtbridge_cli_test_engine"

CLI_ENGINE_SOURCE = dedent(
    """\
    def format(code, options):
        return f"{options['parser']}:{options.get('tabWidth')}:{code.upper()}"
    """,
)


@pytest.fixture
def cli_engine(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[str, None, None]:
    engines_dir = tmp_path / "engines"
    engines_dir.mkdir()
    _ = (engines_dir / f"{CLI_ENGINE}.py").write_text(CLI_ENGINE_SOURCE, encoding="utf-8")
    monkeypatch.syspath_prepend(str(engines_dir))
    monkeypatch.setenv("FMTBRIDGE_ENGINE", CLI_ENGINE)
    monkeypatch.chdir(tmp_path)
    yield CLI_ENGINE
    _ = sys.modules.pop(CLI_ENGINE, None)


def test_version_flag(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--version"]) == 0
    assert capsys.readouterr().out.strip() == f"fmtbridge {__version__}"


def test_missing_command_is_a_usage_error() -> None:
    with pytest.raises(SystemExit) as excinfo:
        _ = main([])
    assert excinfo.value.code == 2


def test_tags_json(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["tags", "--format", "json"]) == 0
    rows = json.loads(capsys.readouterr().out)
    assert {"tag": "styled", "parser": "css"} in rows
    assert [row["tag"] for row in rows] == sorted(row["tag"] for row in rows)


def test_format_prints_result(
    cli_engine: str,
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    target = tmp_path / "site.css"
    _ = target.write_text("a{}", encoding="utf-8")

    exit_code = main(["format", str(target), "--parser", "css", "--option", "tabWidth=4"])

    assert exit_code == 0
    assert capsys.readouterr().out == "css:4:A{}"
    assert target.read_text(encoding="utf-8") == "a{}"


def test_format_write_rewrites_file(
    cli_engine: str,
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    target = tmp_path / "notes.md"
    _ = target.write_text("# hi", encoding="utf-8")

    assert main(["format", str(target), "--parser", "markdown", "--write"]) == 0
    assert capsys.readouterr().out == ""
    assert target.read_text(encoding="utf-8") == "markdown:None:# HI"


def test_format_with_workspace_uses_local_engine(
    cli_engine: str,
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    root = make_project(tmp_path / "project", engine_name=cli_engine)
    target = root / "a.css"
    _ = target.write_text("b{}", encoding="utf-8")

    assert main(["format", str(target), "--parser", "css", "--workspace", str(root)]) == 0
    assert capsys.readouterr().out == "local[css]:b{}"


def test_embed_formats_stdin(
    cli_engine: str,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO("a { }  "))
    assert main(["embed", "--tag", "styled", "--options-json", '{"tabWidth": 2}']) == 0
    assert capsys.readouterr().out == "css:2:A { }\n"


def test_embed_unknown_tag_echoes_input(
    cli_engine: str,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO("select  1"))
    assert main(["embed", "--tag", "sql"]) == 0
    assert capsys.readouterr().out == "select  1\n"


def test_format_failure_reports_error_code(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("FMTBRIDGE_ENGINE", "fmtbridge_missing_engine")
    target = tmp_path / "a.css"
    _ = target.write_text("a{}", encoding="utf-8")

    assert main(["format", str(target), "--parser", "css"]) == 1
    err = capsys.readouterr().err
    assert "[fmtbridge] format failed (FB200)" in err
    assert "fmtbridge_missing_engine" in err


def test_invalid_config_reports_error_code(
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    config = tmp_path / "fmtbridge.toml"
    _ = config.write_text('engine = "not valid"\n', encoding="utf-8")
    target = tmp_path / "a.css"
    _ = target.write_text("a{}", encoding="utf-8")

    assert main(["--config", str(config), "format", str(target), "--parser", "css"]) == 1
    assert "(FB121)" in capsys.readouterr().err


def test_engines_resolve_json(
    cli_engine: str,
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    project = make_project(tmp_path / "project", engine_name=cli_engine)
    empty = tmp_path / "empty"
    empty.mkdir()

    assert main(["engines", "resolve", str(project), str(empty), "--format", "json"]) == 0

    local, default = json.loads(capsys.readouterr().out)
    assert local["source"] == "local"
    assert local["origin"].endswith(f"{cli_engine}.py")
    assert local["reason"] is None
    assert default["source"] == "default"
    assert default["engine"] == cli_engine
    assert default["reason"] == "no pyproject.toml found"

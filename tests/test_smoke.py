# Copyright (c) 2025 PantherianCodeX. All Rights Reserved.

from __future__ import annotations

import json
import os
import subprocess
import sys
from pathlib import Path

import pytest

import fmtbridge

pytestmark = pytest.mark.integration


def run(cmd: list[str], cwd: Path) -> subprocess.CompletedProcess[str]:
    env = os.environ.copy()
    src_path = Path(__file__).resolve().parents[1] / "src"
    env["PYTHONPATH"] = f"{src_path}{os.pathsep}{env.get('PYTHONPATH', '')}".strip(os.pathsep)
    env.pop("FMTBRIDGE_ENGINE", None)
    result = subprocess.run(cmd, cwd=cwd, capture_output=True, text=True, env=env, check=False)
    if result.returncode != 0:
        msg = f"Command failed: {' '.join(cmd)}\nSTDOUT:\n{result.stdout}\nSTDERR:\n{result.stderr}"
        raise AssertionError(msg)
    return result


def test_module_entry_point_lists_tags(tmp_path: Path) -> None:
    result = run([sys.executable, "-m", "fmtbridge", "tags", "--format", "json"], cwd=tmp_path)
    tags = {row["tag"] for row in json.loads(result.stdout)}
    assert tags == set(fmtbridge.TAG_TO_PARSER)


def test_module_entry_point_passes_unknown_tags_through(tmp_path: Path) -> None:
    result = subprocess.run(
        [sys.executable, "-m", "fmtbridge", "embed", "--tag", "sql"],
        cwd=tmp_path,
        input="select 1",
        capture_output=True,
        text=True,
        env={**os.environ, "PYTHONPATH": str(Path(__file__).resolve().parents[1] / "src")},
        check=False,
    )
    assert result.returncode == 0
    assert result.stdout == "select 1\n"


def test_public_api_exports() -> None:
    assert fmtbridge.__version__ == "0.1.0"
    for name in fmtbridge.__all__:
        assert hasattr(fmtbridge, name)

from __future__ import annotations

import io
from pathlib import Path
from typing import Callable

import pytest
from rich.console import Console


@pytest.fixture()
def artifact_dir(tmp_path: Path) -> Path:
    path = tmp_path / "artifacts"
    path.mkdir()
    return path


@pytest.fixture()
def script_factory(tmp_path: Path) -> Callable[[str], Path]:
    def _write(text: str) -> Path:
        path = tmp_path / "demo.script"
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture()
def string_console() -> Console:
    return Console(
        file=io.StringIO(),
        width=80,
        height=20,
        force_terminal=True,
        color_system="standard",
        highlight=False,
    )

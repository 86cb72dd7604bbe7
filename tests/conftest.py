"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

CAVE = """\
@bookmark{intro}Welcome to the @style{b}@{cave}.
@choice{left}Take the left tunnel.
@choice{right}Take the right tunnel.
@bookmark{left}It is dark.
@choice{intro}Go back.
@bookmark{right}You found the exit!"""


@pytest.fixture(autouse=True)
def clean_choco_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep environment overrides from leaking into tests."""
    for name in ("CHOCO_STYLE_FALLBACK", "CHOCO_EXPORT_FORMAT", "CHOCO_CONFIG"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def cave_source() -> str:
    """A small three-bookmark story with a loop and one styled word."""
    return CAVE


@pytest.fixture
def cave_file(tmp_path: Path, cave_source: str) -> Path:
    """The cave story written to a temporary file."""
    path = tmp_path / "cave.txt"
    path.write_text(cave_source, encoding="utf-8")
    return path

"""Some common fixtures for use in tests."""

from __future__ import annotations

from textwrap import dedent
from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

__all__ = ["book_dir", "write_document"]


@pytest.fixture
def book_dir(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """A `chapters/` directory next to `workflows/`, used as working directory."""
    chapters = tmp_path / "chapters"
    chapters.mkdir()
    (tmp_path / "workflows").mkdir()
    monkeypatch.chdir(chapters)
    return chapters


@pytest.fixture
def write_document(book_dir: Path) -> Callable[..., Path]:
    """Write a (dedented) document relative to :func:`book_dir`."""

    def write_document(name: str, text: str) -> Path:
        path = book_dir / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(dedent(text).lstrip("\n"), encoding="utf-8")
        return path

    return write_document

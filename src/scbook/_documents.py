"""Locating the tutorial document a chapter depends on."""

from __future__ import annotations

import re
from pathlib import Path
from typing import TYPE_CHECKING

from . import logging as logg
from ._settings import settings

if TYPE_CHECKING:
    from collections.abc import Callable


class DocumentNotFoundError(FileNotFoundError):
    """No document matches a prefix."""


def _locate_exact(prefix: str) -> Path | None:
    """`<prefix><suffix>` relative to the working directory."""
    path = Path(f"{prefix}{settings.document_suffix}")
    return path if path.is_file() else None


def _locate_in_workflows(prefix: str) -> Path | None:
    """`<prefix><suffix>` in :attr:`~scbook.settings.workflows_dir`.

    Used when a chapter of the book depends on one of the workflows.
    """
    path = settings.workflows_dir / f"{prefix}{settings.document_suffix}"
    return path if path.is_file() else None


def _locate_chapter(prefix: str) -> Path | None:
    """A chapter of the compiled book, named like `P1_W03.<prefix><suffix>`."""
    pattern = re.compile(
        rf"P[0-9]+_W[0-9]+\.{re.escape(prefix)}{re.escape(settings.document_suffix)}$"
    )
    candidates = sorted(
        path.name
        for path in Path().iterdir()
        if pattern.search(path.name) and path.is_file()
    )
    return Path(candidates[0]) if candidates else None


LOCATORS: tuple[Callable[[str], Path | None], ...] = (
    _locate_exact,
    _locate_in_workflows,
    _locate_chapter,
)
"""Strategies tried in order by :func:`find_document` when searching flexibly."""


def find_document(prefix: str, *, flexible: bool = True) -> Path:
    """Find the document with the given prefix.

    Parameters
    ----------
    prefix
        Name of the document without suffix,
        relative to the working directory.
    flexible
        Also look in :attr:`~scbook.settings.workflows_dir` and for book chapters
        ending in `.<prefix><suffix>` if there is no exact match.

    Returns
    -------
    Path to the document.
    """
    locators = LOCATORS if flexible else LOCATORS[:1]
    for locate in locators:
        if (path := locate(prefix)) is not None:
            logg.debug(f"found document {path} via {locate.__name__}")
            return path
    msg = f"could not find {prefix}{settings.document_suffix}"
    if flexible:
        msg += (
            f" in the working directory, in {settings.workflows_dir}/"
            " or as a book chapter"
        )
    raise DocumentNotFoundError(msg)

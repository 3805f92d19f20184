"""A private pytest plugin."""

from __future__ import annotations

import sys
from types import MappingProxyType
from typing import TYPE_CHECKING

import pytest

from .fixtures import *  # noqa: F403

if TYPE_CHECKING:
    from collections.abc import Generator, Mapping

_original_settings: Mapping[str, object] | None = None


# Defining it here because it’s autouse.
@pytest.fixture(autouse=True)
def original_settings() -> Generator[Mapping[str, object], None, None]:
    """Reset settings before every test and make logs visible."""
    import scbook

    global _original_settings  # noqa: PLW0603
    if _original_settings is None:
        _original_settings = MappingProxyType(scbook.settings.__dict__.copy())

    for key in ("_document_suffix", "_workflows_dir", "_cache_format"):
        setattr(scbook.settings, key, _original_settings[key])
    scbook.settings.cache_compression = _original_settings["_cache_compression"]
    scbook.settings.autoshow = _original_settings["_autoshow"]
    scbook.settings.logfile = sys.stderr
    scbook.settings.verbosity = "hint"

    yield _original_settings


assert "scbook" not in sys.modules, (
    "scbook is already imported, this will mess up test coverage"
)

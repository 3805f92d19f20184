"""Reusing cached results across the chapters of a single-cell analysis book."""

from __future__ import annotations

# start with settings as everything else is using it
from ._settings import Verbosity, settings

from . import logging
from ._cache import CacheMissError, ChunkCache, chunk_hash
from ._chunks import (
    UNREF_PREFIX,
    Chunk,
    ChunkNotFoundError,
    ChunkParseError,
    UnterminatedChunkError,
    assigns,
    find_assigning_chunk,
    parse_chunks,
    read_chunks,
    resolve_chunk,
)
from ._documents import DocumentNotFoundError, find_document
from ._extract import ObjectNotFoundError, extract_cached, iter_cached, load_cached
from ._transcript import render_transcript
from ._version import __version__

__all__ = [
    "UNREF_PREFIX",
    "CacheMissError",
    "Chunk",
    "ChunkCache",
    "ChunkNotFoundError",
    "ChunkParseError",
    "DocumentNotFoundError",
    "ObjectNotFoundError",
    "UnterminatedChunkError",
    "Verbosity",
    "__version__",
    "assigns",
    "chunk_hash",
    "extract_cached",
    "find_assigning_chunk",
    "find_document",
    "iter_cached",
    "load_cached",
    "logging",
    "parse_chunks",
    "read_chunks",
    "render_transcript",
    "resolve_chunk",
    "settings",
]

"""Reusing cached results of another chapter."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

from . import logging as logg
from ._cache import ChunkCache
from ._chunks import find_assigning_chunk, read_chunks, resolve_chunk
from ._documents import find_document
from ._settings import settings
from ._transcript import render_transcript

if TYPE_CHECKING:
    from collections.abc import Generator, Iterable, Mapping, MutableMapping
    from typing import Any

    from ._chunks import Chunk


class ObjectNotFoundError(LookupError):
    """No chunk assigns a requested object."""


def iter_cached(
    chunks: Mapping[str, Chunk], objects: Iterable[str], cache: ChunkCache
) -> Generator[tuple[str, Any], None, None]:
    """Load `objects` in their state at the end of the last chunk in `chunks`.

    For each object, the most recent chunk assigning to it is authoritative.
    If its cache entry is missing, :class:`~scbook.CacheMissError` is raised
    instead of falling back to an earlier assignment.

    Yields
    ------
    Pairs of object name and cached value, in the order of `objects`.
    """
    for name in objects:
        chunk = find_assigning_chunk(chunks, name)
        if chunk is None:
            msg = f"could not find {name!r}"
            raise ObjectNotFoundError(msg)
        logg.debug(f"{name!r} was last assigned in chunk {chunk.name!r}")
        yield name, cache.load(chunk.name, name)


def _prepare(
    prefix: str, chunk: str, *, flexible: bool
) -> tuple[dict[str, Chunk], ChunkCache]:
    document = find_document(prefix, flexible=flexible)
    chunks = resolve_chunk(read_chunks(document), chunk)
    return chunks, ChunkCache.for_document(document)


def _as_names(objects: str | Iterable[str]) -> list[str]:
    names = [objects] if isinstance(objects, str) else list(objects)
    for name in names:
        if not isinstance(name, str) or not name.isidentifier():
            msg = f"{name!r} is not a valid variable name"
            raise ValueError(msg)
    return names


def load_cached(
    prefix: str,
    chunk: str,
    objects: str | Iterable[str],
    *,
    flexible: bool = True,
) -> dict[str, Any]:
    """Load cached objects of a rendered document without binding them.

    See :func:`extract_cached` for the parameters.

    Returns
    -------
    The loaded objects by name.
    """
    names = _as_names(objects)
    chunks, cache = _prepare(prefix, chunk, flexible=flexible)
    return dict(iter_cached(chunks, names, cache))


def extract_cached(
    prefix: str,
    chunk: str,
    objects: str | Iterable[str],
    *,
    flexible: bool = True,
    envir: MutableMapping[str, Any] | None = None,
    show: bool | None = None,
) -> str | None:
    """Extract objects from the execution cache of a previously rendered document.

    Each object is extracted in its state at the end of `chunk`.
    It does not have to be created or even used in `chunk` itself,
    as long as one of the chunks before it assigns to it.

    The document has to follow a few conventions for this to work:

    - All chunks that might be referenced are named.
    - All named chunks are executed and the document was rendered with caching.
    - All relevant code is in fenced chunks starting at the beginning of a line.
    - Objects are created or modified with an assignment (`=`, `+=`, `x[…] =`, …).

    Unnamed chunks and chunks named `unref-…` can not be referenced
    and should not modify objects used by the named chunks.

    Parameters
    ----------
    prefix
        Name of the document without its suffix (see :func:`find_document`).
    chunk
        Name of the chunk at whose end the objects are extracted.
    objects
        Names of one or more objects to extract.
    flexible
        Search for the document in the workflows directory and among
        the book chapters if `<prefix><suffix>` does not exist.
    envir
        Namespace to bind the objects in.
        By default, the interactive namespace (that of `__main__`).
        Objects are bound as soon as they are loaded,
        so a failure leaves the previous ones bound.
    show
        Print the code of all chunks up to `chunk`
        as a collapsible markdown block (default :attr:`~scbook.settings.autoshow`).

    Returns
    -------
    The history of chunks as markdown if `show` is `False`, else `None`.
    """
    if envir is None:
        envir = sys.modules["__main__"].__dict__
    if show is None:
        show = settings.autoshow

    names = _as_names(objects)
    start = logg.info(f"extracting {', '.join(names)} from {prefix!r} at {chunk!r}")
    chunks, cache = _prepare(prefix, chunk, flexible=flexible)
    for name, value in iter_cached(chunks, names, cache):
        envir[name] = value
    logg.info("    finished", time=start)

    transcript = render_transcript(chunks)
    if not show:
        return transcript
    print(transcript, end="")
    return None

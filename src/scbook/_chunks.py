"""Named code chunks of a tutorial document."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from . import logging as logg

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping


UNREF_PREFIX = "unref-"
"""Chunks whose name starts with this prefix are treated like unnamed chunks."""

_OPEN = re.compile(r"^```\{python ([^,]+?)\s*(?:,(.*))?\}")
_CLOSE = re.compile(r"^```\s*$")
_NEWLINE = re.compile(r"\r\n|\r|\n")


class ChunkParseError(ValueError):
    """The fencing of a document’s code chunks is malformed."""


class UnterminatedChunkError(ChunkParseError):
    """A named chunk has no closing fence before the next named chunk."""


class ChunkNotFoundError(LookupError):
    """A requested chunk is not among the referenceable chunks of a document."""


@dataclass(frozen=True)
class Chunk:
    """A named, referenceable code chunk.

    Attributes
    ----------
    name
        The chunk label.
    body
        Lines of code between the opening and the closing fence.
    position
        Index of the opening fence among all named chunks of the document.
    line
        1-based line number of the opening fence.
    options
        Raw chunk options following the label, e.g. `'fig.width=5'`.
    """

    name: str
    body: tuple[str, ...]
    position: int
    line: int
    options: str = ""

    @property
    def code(self) -> str:
        return "\n".join(self.body)


def parse_chunks(text: str | Iterable[str]) -> dict[str, Chunk]:
    """Split a document into its named code chunks.

    Every line opening a fenced block of the form ```` ```{python name, ...} ````
    starts a candidate chunk that extends up to the next such line.
    The chunk body ends at the first closing fence inside that region,
    so anything following it (prose, unnamed chunks) is skipped.
    Unnamed chunks and chunks named with :data:`UNREF_PREFIX` can not be referenced
    and are left out of the result.

    Parameters
    ----------
    text
        Full document text, or its lines.

    Returns
    -------
    Referenceable chunks by name, in document order.
    """
    if isinstance(text, str):
        # only \n, \r\n and \r end a line, unlike str.splitlines
        lines = _NEWLINE.split(text)
        if lines[-1] == "":
            lines.pop()
    else:
        lines = [line.rstrip("\r\n") for line in text]
    opens = [(i, m) for i, line in enumerate(lines) if (m := _OPEN.match(line))]

    chunks: dict[str, Chunk] = {}
    for position, (start, match) in enumerate(opens):
        stop = opens[position + 1][0] if position + 1 < len(opens) else len(lines)
        name = match[1].strip()
        region = lines[start + 1 : stop]
        end = next((i for i, line in enumerate(region) if _CLOSE.match(line)), None)
        if end is None:
            msg = f"unterminated chunk {name!r} starting on line {start + 1}"
            raise UnterminatedChunkError(msg)
        if name.startswith(UNREF_PREFIX):
            logg.debug(f"skipping unreferenceable chunk {name!r}")
            continue
        if name in chunks:
            msg = (
                f"duplicate chunk label {name!r} on lines "
                f"{chunks[name].line} and {start + 1}"
            )
            raise ChunkParseError(msg)
        chunks[name] = Chunk(
            name=name,
            body=tuple(region[:end]),
            position=position,
            line=start + 1,
            options=(match[2] or "").strip(),
        )
    return chunks


def read_chunks(path: Path | str) -> dict[str, Chunk]:
    """Parse the named code chunks of the document at `path`."""
    path = Path(path)
    logg.debug(f"reading chunks from {path}")
    with path.open(encoding="utf-8", newline="") as f:
        return parse_chunks(f.read())


def resolve_chunk(chunks: Mapping[str, Chunk], chunk: str) -> dict[str, Chunk]:
    """Return all chunks up to and including `chunk`, in document order."""
    if chunk not in chunks:
        msg = f"could not find chunk {chunk!r}"
        raise ChunkNotFoundError(msg)
    names = list(chunks)
    return {name: chunks[name] for name in names[: names.index(chunk) + 1]}


def _assignment_pattern(name: str) -> re.Pattern[str]:
    # the name, later followed by a `=` that is not part of `==`, `<=`, `>=` or `!=`
    return re.compile(rf"(?<![\w.]){re.escape(name)}(?!\w).*(?<![=!<>])=(?!=)")


def assigns(chunk: Chunk, name: str) -> bool:
    """Check whether `chunk` looks like it assigns to or modifies `name`.

    This is a purely textual heuristic and does not parse the code:
    a line counts if `name` occurs on it and is followed by an assignment
    operator (`=`, `+=`, `:=`, …), which also covers attribute and item
    assignment like `adata.obs["x"] = …`.
    Assignments hidden in loops headers, imports, `with` statements or
    helper functions are not detected.
    """
    pattern = _assignment_pattern(name)
    return any(pattern.search(line) for line in chunk.body)


def find_assigning_chunk(chunks: Mapping[str, Chunk], name: str) -> Chunk | None:
    """Find the last chunk that :func:`assigns` `name`."""
    for chunk in reversed(chunks.values()):
        if assigns(chunk, name):
            return chunk
    return None

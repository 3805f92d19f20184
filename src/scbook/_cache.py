"""Reading (and writing) the execution cache of a rendered document."""

from __future__ import annotations

import hashlib
import re
import shutil
from pathlib import Path
from typing import TYPE_CHECKING

import anndata
import joblib
from anndata import AnnData
from packaging.version import Version

if Version(anndata.__version__) >= Version("0.11.0rc2"):
    from anndata.io import read_h5ad
else:
    from anndata import read_h5ad

from . import logging as logg
from ._settings import settings

if TYPE_CHECKING:
    from collections.abc import Mapping
    from typing import Any

    from ._chunks import Chunk


class CacheMissError(LookupError):
    """The cache holds no value for a chunk and object."""


def chunk_hash(chunk: Chunk) -> str:
    """MD5 hex digest of a chunk’s code, which identifies its cache entry."""
    return hashlib.md5(chunk.code.encode()).hexdigest()  # noqa: S324


class ChunkCache:
    """Execution cache of one document.

    Every executed chunk has an entry directory `<label>_<hash>`
    holding one file per object it created or modified:
    `<object>.h5ad` for :class:`~anndata.AnnData` objects
    and `<object>.joblib` for anything else.

    Parameters
    ----------
    path
        The cache directory, usually obtained via :meth:`for_document`.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)

    @classmethod
    def for_document(cls, document: Path | str) -> ChunkCache:
        """Cache for `document`, i.e. `<stem>_cache/<cache_format>/` next to it."""
        document = Path(document)
        return cls(document.with_name(f"{document.stem}_cache") / settings.cache_format)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self.path)!r})"

    def _entries(self, label: str) -> list[Path]:
        if not self.path.is_dir():
            return []
        pattern = re.compile(rf"{re.escape(label)}_[0-9a-f]{{32}}")
        return [
            p for p in self.path.iterdir() if p.is_dir() and pattern.fullmatch(p.name)
        ]

    def labels(self) -> list[str]:
        """Labels of all chunks that have a cache entry."""
        if not self.path.is_dir():
            return []
        return sorted({
            m[1]
            for p in self.path.iterdir()
            if p.is_dir() and (m := re.fullmatch(r"(.+)_[0-9a-f]{32}", p.name))
        })

    def entry(self, label: str) -> Path:
        """Entry directory of the chunk `label`."""
        entries = self._entries(label)
        if not entries:
            msg = f"no cache entry for chunk {label!r} in {self.path}"
            raise CacheMissError(msg)
        if len(entries) > 1:
            entries.sort(key=lambda p: p.stat().st_mtime)
            logg.warning(
                f"found {len(entries)} cache entries for chunk {label!r}, "
                f"using the most recent one: {entries[-1].name}"
            )
        return entries[-1]

    def load(self, label: str, name: str) -> Any:
        """Load the object `name` as cached for chunk `label`."""
        entry = self.entry(label)
        if (path := entry / f"{name}.h5ad").is_file():
            logg.debug(f"reading {name!r} from {path}")
            return read_h5ad(path)
        if (path := entry / f"{name}.joblib").is_file():
            logg.debug(f"reading {name!r} from {path}")
            return joblib.load(path)
        msg = f"chunk {label!r} has no cached value for {name!r} in {entry}"
        raise CacheMissError(msg)

    def write(self, chunk: Chunk, objects: Mapping[str, Any]) -> Path:
        """Store the objects a chunk created or modified.

        Older entries of the same chunk are removed.

        Parameters
        ----------
        chunk
            The executed chunk.
        objects
            Objects by variable name.

        Returns
        -------
        The new entry directory.
        """
        for name in objects:
            if not name.isidentifier():
                msg = f"{name!r} is not a valid variable name"
                raise ValueError(msg)
        for stale in self._entries(chunk.name):
            logg.debug(f"removing stale cache entry {stale}")
            shutil.rmtree(stale)
        entry = self.path / f"{chunk.name}_{chunk_hash(chunk)}"
        entry.mkdir(parents=True)
        for name, value in objects.items():
            if isinstance(value, AnnData):
                value.write_h5ad(
                    entry / f"{name}.h5ad", compression=settings.cache_compression
                )
            else:
                joblib.dump(value, entry / f"{name}.joblib")
        logg.info(f"cached {', '.join(objects) or 'nothing'} for chunk {chunk.name!r}")
        return entry

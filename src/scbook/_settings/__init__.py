from __future__ import annotations

import inspect
import sys
from functools import wraps
from pathlib import Path
from typing import TYPE_CHECKING, Literal, get_args

from .. import logging
from ..logging import _RootLogger, _set_log_file, _set_log_level
from .verbosity import Verbosity

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import UnionType
    from typing import ClassVar, Self, TextIO


CacheCompression = Literal["lzf", "gzip", None]


def _accepts(types: type | UnionType) -> Callable[[Callable], Callable]:
    """Make a setter raise a :class:`TypeError` for values not of `types`."""

    def decorator(setter: Callable) -> Callable:
        @wraps(setter)
        def checked(cls, value) -> None:
            __tracebackhide__ = True
            if not isinstance(value, types):
                names = " or ".join(t.__name__ for t in get_args(types) or [types])
                msg = f"{setter.__name__} must be of type {names}, not {type(value).__name__}"
                raise TypeError(msg)
            setter(cls, value)

        return checked

    return decorator


class SettingsMeta(type):
    _root_logger: _RootLogger
    _logfile: TextIO
    _logpath: Path | None
    _verbosity: Verbosity
    _document_suffix: str
    _workflows_dir: Path
    _cache_format: str
    _cache_compression: CacheCompression
    _autoshow: bool

    @property
    def verbosity(cls) -> Verbosity:
        """Verbosity level (default :attr:`Verbosity.warning`)."""
        return cls._verbosity

    @verbosity.setter
    def verbosity(cls, verbosity: Verbosity | str | int) -> None:
        cls._verbosity = Verbosity.parse(verbosity)
        _set_log_level(cls, cls._verbosity.level)

    @property
    def document_suffix(cls) -> str:
        """File suffix of the tutorial documents (default `'.qmd'`)."""
        return cls._document_suffix

    @document_suffix.setter
    @_accepts(str)
    def document_suffix(cls, document_suffix: str) -> None:
        if not document_suffix.startswith("."):
            msg = f"document_suffix must start with '.', not {document_suffix!r}"
            raise ValueError(msg)
        cls._document_suffix = document_suffix

    @property
    def workflows_dir(cls) -> Path:
        """Directory searched for documents that other chapters depend on.

        Relative paths are resolved against the working directory
        (default `'../workflows'`, i.e. a sibling of the chapter directory).
        """
        return cls._workflows_dir

    @workflows_dir.setter
    @_accepts(Path | str)
    def workflows_dir(cls, workflows_dir: Path | str) -> None:
        cls._workflows_dir = Path(workflows_dir)

    @property
    def cache_format(cls) -> str:
        """Output format subdirectory of a document’s cache (default `'html'`)."""
        return cls._cache_format

    @cache_format.setter
    @_accepts(str)
    def cache_format(cls, cache_format: str) -> None:
        if not cache_format or "/" in cache_format:
            msg = f"Cannot set cache_format to {cache_format!r}."
            raise ValueError(msg)
        cls._cache_format = cache_format

    @property
    def cache_compression(cls) -> CacheCompression:
        """Compression for cached :class:`~anndata.AnnData` objects (default `'lzf'`)."""
        return cls._cache_compression

    @cache_compression.setter
    def cache_compression(cls, cache_compression: CacheCompression) -> None:
        if cache_compression not in get_args(CacheCompression):
            msg = (
                f"`cache_compression` ({cache_compression}) "
                "must be in {'lzf', 'gzip', None}"
            )
            raise ValueError(msg)
        cls._cache_compression = cache_compression

    @property
    def autoshow(cls) -> bool:
        """Print the chunk history when extracting cached objects (default `True`)."""
        return cls._autoshow

    @autoshow.setter
    @_accepts(bool)
    def autoshow(cls, autoshow: bool) -> None:
        cls._autoshow = autoshow

    @property
    def logpath(cls) -> Path | None:
        """The file path `logfile` was set to."""
        return cls._logpath

    @logpath.setter
    def logpath(cls, logpath: Path | str | None) -> None:
        if logpath is None:
            cls.logfile = None
            return
        cls._logpath = Path(logpath)
        cls._logfile = cls._logpath.open("a")  # noqa: SIM115
        _set_log_file(cls)

    @property
    def logfile(cls) -> TextIO:
        """The open file to write logs to.

        Set it to a :class:`~pathlib.Path` or :class:`str` to log to that file instead.
        The default `None` corresponds to :obj:`sys.stdout` in jupyter notebooks
        and to :obj:`sys.stderr` otherwise.
        """
        return cls._logfile

    @logfile.setter
    def logfile(cls, logfile: Path | str | TextIO | None) -> None:
        if isinstance(logfile, Path | str) and logfile:
            cls.logpath = logfile
            return
        cls._logfile = logfile or cls._default_logfile()
        cls._logpath = None
        _set_log_file(cls)

    @staticmethod
    def _default_logfile() -> TextIO:
        import builtins

        # jupyter shows stdout inline
        return sys.stdout if getattr(builtins, "__IPYTHON__", False) else sys.stderr

    def __dir__(cls) -> list[str]:
        # properties live on the metaclass
        return sorted(set(super().__dir__()) | set(dir(type(cls))) - {"mro"})

    def __str__(cls) -> str:
        return "\n".join(
            f"{k} = {v!r}"
            for k, v in inspect.getmembers(cls)
            if not k.startswith("_")
        )


class settings(metaclass=SettingsMeta):
    """Settings for scbook."""

    def __new__(cls) -> type[Self]:
        return cls

    _root_logger: ClassVar = _RootLogger(logging.WARNING)
    _logfile: ClassVar = SettingsMeta._default_logfile()
    _logpath: ClassVar = None
    _verbosity: ClassVar = Verbosity.warning
    _document_suffix: ClassVar = ".qmd"
    _workflows_dir: ClassVar = Path("../workflows")
    _cache_format: ClassVar = "html"
    _cache_compression: ClassVar = "lzf"
    _autoshow: ClassVar = True


_set_log_level(settings, settings.verbosity.level)
_set_log_file(settings)

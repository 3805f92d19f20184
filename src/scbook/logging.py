"""Logging of document and cache lookups."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from logging import DEBUG, ERROR, INFO, WARNING
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ._settings import SettingsMeta


HINT = (INFO + DEBUG) // 2
logging.addLevelName(HINT, "HINT")

_PREFIXES = {INFO: "", HINT: "--> ", DEBUG: "    "}


class _RootLogger(logging.RootLogger):
    """Logger detached from the stdlib hierarchy, configured via `settings`."""

    def __init__(self, level: int):
        super().__init__(level)
        self.propagate = False
        _RootLogger.manager = logging.Manager(self)

    def log(
        self,
        level: int,
        msg: str,
        *,
        time: datetime | None = None,
        deep: str | None = None,
    ) -> datetime:
        from ._settings import settings

        now = datetime.now(timezone.utc)
        extra = {
            "deep": deep if settings.verbosity.level < level else None,
            "time_passed": None if time is None else now - time,
        }
        super().log(level, msg, extra=extra)
        return now


def _set_log_file(settings: SettingsMeta) -> None:
    root = settings._root_logger
    if settings.logpath is None:
        handler = logging.StreamHandler(settings.logfile)
    else:
        handler = logging.FileHandler(settings.logpath)
    handler.setFormatter(_LogFormatter())
    handler.setLevel(root.level)
    for old in list(root.handlers):
        root.removeHandler(old)
    root.addHandler(handler)


def _set_log_level(settings: SettingsMeta, level: int) -> None:
    root = settings._root_logger
    root.setLevel(level)
    for handler in root.handlers:
        handler.setLevel(level)


class _LogFormatter(logging.Formatter):
    """`ERROR: msg`, `WARNING: msg`, `msg`, `--> msg` or `    msg`.

    Elapsed time is appended as ` (H:MM:SS)` or replaces `{time_passed}`,
    details passed as `deep` are appended after a colon.
    """

    def format(self, record: logging.LogRecord) -> str:
        msg = record.getMessage()
        if (passed := record.time_passed) is not None:
            passed = timedelta(seconds=int(passed.total_seconds()))
            if "{time_passed}" in msg:
                msg = msg.replace("{time_passed}", str(passed))
            else:
                msg = f"{msg} ({passed})"
        if record.deep:
            msg = f"{msg}: {record.deep}"
        prefix = _PREFIXES.get(record.levelno, f"{record.levelname}: ")
        return f"{prefix}{msg}"


def _log(level: int, msg: str, *, time=None, deep=None) -> datetime:
    from ._settings import settings

    return settings._root_logger.log(level, msg, time=time, deep=deep)


def error(
    msg: str, *, time: datetime | None = None, deep: str | None = None
) -> datetime:
    """Log message with specific level and return current time.

    Parameters
    ----------
    msg
        Message to display.
    time
        A time in the past. If this is passed, the time difference from then
        to now is appended to `msg` as ` (H:MM:SS)`.
        If `msg` contains `{time_passed}`, the time difference is instead
        inserted at that position.
    deep
        Details only shown if the current verbosity is higher
        than the level of the message.
    """
    return _log(ERROR, msg, time=time, deep=deep)


def warning(msg: str, *, time=None, deep=None) -> datetime:
    return _log(WARNING, msg, time=time, deep=deep)


def info(msg: str, *, time=None, deep=None) -> datetime:
    return _log(INFO, msg, time=time, deep=deep)


def hint(msg: str, *, time=None, deep=None) -> datetime:
    return _log(HINT, msg, time=time, deep=deep)


def debug(msg: str, *, time=None, deep=None) -> datetime:
    return _log(DEBUG, msg, time=time, deep=deep)

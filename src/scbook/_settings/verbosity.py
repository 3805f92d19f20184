from __future__ import annotations

from enum import IntEnum
from logging import DEBUG, ERROR, INFO, WARNING

from ..logging import HINT


class Verbosity(IntEnum):
    """Logging verbosity levels for :attr:`scbook.settings.verbosity`.

    >>> import scbook
    >>> scbook.settings.verbosity = "info"
    >>> scbook.settings.verbosity
    <Verbosity.info: 2>
    """

    error = 0
    warning = 1
    info = 2
    hint = 3
    debug = 4

    @classmethod
    def parse(cls, verbosity: Verbosity | str | int) -> Verbosity:
        """Look up a verbosity by name or number."""
        try:
            return cls[verbosity.lower()] if isinstance(verbosity, str) else cls(verbosity)
        except (KeyError, ValueError):
            msg = (
                f"Cannot set verbosity to {verbosity}. "
                f"Accepted string values are: {', '.join(cls.__members__)}"
            )
            raise ValueError(msg) from None

    @property
    def level(self) -> int:
        """The :ref:`logging level <levels>` corresponding to this verbosity level."""
        return (ERROR, WARNING, INFO, HINT, DEBUG)[self.value]

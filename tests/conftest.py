from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:  # So editors understand that we’re using those fixtures
    from collections.abc import Generator

    from testing.scbook._pytest.fixtures import *  # noqa: F403


@pytest.fixture(scope="session", autouse=True)
def _manage_log_handlers() -> Generator[None, None, None]:
    """Remove handlers from all loggers on session teardown.

    See <https://github.com/pytest-dev/pytest/issues/5502>.
    """
    import logging

    import scbook

    yield

    loggers = [
        scbook.settings._root_logger,
        logging.getLogger(),
        *logging.Logger.manager.loggerDict.values(),
    ]
    for logger in loggers:
        if not isinstance(logger, logging.Logger):
            continue  # loggerDict can contain `logging.Placeholder`s
        for handler in logger.handlers[:]:
            if isinstance(handler, logging.StreamHandler):
                logger.removeHandler(handler)


@pytest.fixture(autouse=True)
def _caplog_adapter(caplog: pytest.LogCaptureFixture) -> Generator[None, None, None]:
    """Allow use of scbook’s logger with caplog."""
    import scbook

    scbook.settings._root_logger.addHandler(caplog.handler)
    yield
    scbook.settings._root_logger.removeHandler(caplog.handler)

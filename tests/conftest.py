from __future__ import annotations

import os
import logging
from typing import Generator

import pytest

import mvnkeeper.utils.console as console_module
import mvnkeeper.utils.logger as logger_module


@pytest.fixture(autouse=True)
def reset_mvnkeeper_logging() -> Generator[None, None, None]:
    """Undo CLI side effects between tests.

    ``setup_logging`` turns off propagation on the ``mvnkeeper`` logger,
    which would hide records from ``caplog`` in later tests, and the CLI
    group writes ``NO_COLOR`` into the environment.
    """
    no_color = os.environ.get("NO_COLOR")
    yield
    root_logger = logging.getLogger(logger_module.ROOT_LOGGER_NAME)
    root_logger.handlers.clear()
    root_logger.setLevel(logging.NOTSET)
    root_logger.propagate = True
    logger_module._logging_configured = False

    if no_color is None:
        os.environ.pop("NO_COLOR", None)
    else:
        os.environ["NO_COLOR"] = no_color
    console_module.reconfigure_console()

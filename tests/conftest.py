import logging
from typing import Iterator

import pytest
import structlog

from llsd.conf.settings import LLSDSettings

# route structlog through stdlib logging so nothing reaches stdout, where doctests compare output
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.render_to_log_kwargs,
    ],
    logger_factory=structlog.stdlib.LoggerFactory(),
    wrapper_class=structlog.stdlib.BoundLogger,
)


@pytest.fixture
def settings() -> LLSDSettings:
    return LLSDSettings()


@pytest.fixture
def shallow_settings() -> LLSDSettings:
    return LLSDSettings(MAX_NESTING_DEPTH=4)


@pytest.fixture
def restore_logging() -> Iterator[None]:
    """Undo whatever logging setup a test performs."""
    config = structlog.get_config()
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    structlog.configure(**config)
    root.handlers[:] = handlers
    root.setLevel(level)

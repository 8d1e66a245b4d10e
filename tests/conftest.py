import os

import pytest
from loguru import logger

from biolens.config import ENV_OVERRIDES


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    # main.setup_logging binds sinks to the captured stderr of the test
    logger.remove()


@pytest.fixture
def clean_env():
    saved = {name: os.environ.pop(name) for name in list(ENV_OVERRIDES) if name in os.environ}
    yield
    for name in ENV_OVERRIDES:
        os.environ.pop(name, None)
    os.environ.update(saved)

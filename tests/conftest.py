import logging

import pytest


@pytest.fixture(autouse=True)
def _reset_package_logger():
    """Undo the CLI's logging setup so caplog sees package records again."""

    yield
    logger = logging.getLogger("unigramlm")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True

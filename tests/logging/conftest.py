import logging

import pytest


@pytest.fixture(autouse=True)
def _caplog_all_levels(caplog):
    caplog.set_level(0)


@pytest.fixture(autouse=True)
def _restore_root_logger():
    logger = logging.getLogger()
    asyncio_logger = logging.getLogger('asyncio')
    level, handlers = logger.level, logger.handlers[:]
    asyncio_handlers, asyncio_propagate = asyncio_logger.handlers[:], asyncio_logger.propagate
    yield
    logger.setLevel(level)
    logger.handlers[:] = handlers
    asyncio_logger.handlers[:] = asyncio_handlers
    asyncio_logger.propagate = asyncio_propagate

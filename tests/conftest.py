"""Shared fixtures for prefixbus tests."""

import pytest
import pytest_asyncio
from loguru import logger

from prefixbus.bus import MessageBus, reset_global_bus


@pytest_asyncio.fixture
async def bus():
    """Create a started MessageBus."""
    message_bus = MessageBus()
    await message_bus.start()
    return message_bus


@pytest.fixture
def log_records():
    """Capture loguru records emitted during a test."""
    records = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    logger.remove(handler_id)


@pytest.fixture(autouse=True)
def _clean_global_bus():
    yield
    reset_global_bus()

"""Pytest configuration and fixtures."""

import logging
from unittest.mock import AsyncMock, MagicMock

import pytest

from couchcache.backends.session.memory import MemoryCacheSession
from couchcache.facade import BoundedCacheFacade


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop handlers installed by configure_logging() during a test."""
    yield
    logger = logging.getLogger("couchcache")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def sample_config_dict():
    """Sample configuration dictionary for testing."""
    return {
        "backend": {
            "backend": "memory",
            "host": "cache.example.internal",
            "port": 6380,
            "bucket": "sessions",
            "password": "s3cret",
        },
        "logging": {"level": "DEBUG", "format": "text"},
    }


@pytest.fixture
def memory_session():
    """Create a memory cache session."""
    return MemoryCacheSession()


@pytest.fixture
def cache(memory_session):
    """Facade over a memory session."""
    return BoundedCacheFacade(memory_session)


@pytest.fixture
def mock_session():
    """A session whose calls can be inspected and made to fail."""
    session = MagicMock()
    session.get = AsyncMock(return_value=b"value")
    session.upsert = AsyncMock()
    session.remove = AsyncMock()
    session.append = AsyncMock()
    session.close = AsyncMock()
    return session

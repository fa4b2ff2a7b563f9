"""Root test fixtures shared across all test types.

Database fixtures live in tests/integration/conftest.py.
"""

import os

# Settings require a database URL; integration fixtures build their own engines
os.environ.setdefault("APP_ENV", "testing")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

# ruff: noqa: E402 - Imports must be after env var setup
from collections.abc import Generator

import pytest
from structlog.contextvars import clear_contextvars

from src.capstone.core.config import get_settings

# Clear settings cache to ensure test environment variables are picked up
get_settings.cache_clear()


@pytest.fixture(autouse=True)
def _clear_log_context() -> Generator[None]:
    """Keep structlog context from leaking between tests."""
    clear_contextvars()
    yield
    clear_contextvars()

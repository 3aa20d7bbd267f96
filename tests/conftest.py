"""Pytest configuration shared by all test suites.

Sets the testing environment before any settings are loaded and provides
fixtures for the in-memory download store and a recording logger.
"""

import os

os.environ.setdefault("ENVIRONMENT", "testing")

from unittest.mock import MagicMock  # noqa: E402

import pytest  # noqa: E402

from src.application.services.download_audit_logger import (  # noqa: E402
    DownloadAuditLogger,
)
from tests.utils.fakes import InMemoryDownloadStore  # noqa: E402


@pytest.fixture
def store() -> InMemoryDownloadStore:
    """Empty in-memory token and attempt store."""
    return InMemoryDownloadStore()


@pytest.fixture
def mock_logger() -> MagicMock:
    """Logger double; assert on its calls."""
    return MagicMock()


@pytest.fixture
def audit_logger(store: InMemoryDownloadStore, mock_logger: MagicMock):
    """Attempt logger writing into the in-memory store."""
    return DownloadAuditLogger(audit=store, logger=mock_logger)

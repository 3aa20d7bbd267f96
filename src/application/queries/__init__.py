"""Queries - Read operations that fetch data.

Queries represent a request for information. They are immutable dataclasses
with question-like names (GetDownloadStatistics, ListDownloadAttempts).

Each query has a corresponding handler that fetches and returns the requested
data. Queries NEVER change state.
"""

from src.application.queries.download_queries import (
    GetDownloadStatistics,
    GetDownloadToken,
    ListDownloadAttempts,
)

__all__ = [
    "GetDownloadStatistics",
    "GetDownloadToken",
    "ListDownloadAttempts",
]

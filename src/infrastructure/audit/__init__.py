"""Audit infrastructure implementations.

This module contains concrete implementations of the download attempt
trail protocol.
"""

from src.infrastructure.audit.postgres_adapter import PostgresDownloadAuditAdapter

__all__ = ["PostgresDownloadAuditAdapter"]

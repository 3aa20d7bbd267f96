"""Download attempt audit protocol (port).

This protocol defines the contract for the download attempt trail.
Infrastructure adapters implement it (PostgreSQL in production, an
in-memory list in tests).

Immutability:
    Attempts are append-only. The PostgreSQL schema blocks UPDATE and
    DELETE on download_attempts with rules.

Usage:
    from src.domain.protocols import DownloadAuditProtocol

    result = await audit.record(
        token_id=token.id,
        attempted_email="buyer@x.com",
        success=False,
        failure_reason="email_mismatch",
        ip_address="203.0.113.7",
    )
"""

from datetime import datetime
from typing import Protocol
from uuid import UUID

from src.core.result import Result
from src.domain.entities.download_attempt import DownloadAttempt
from src.domain.errors import AuditError


class DownloadAuditProtocol(Protocol):
    """Protocol for the download attempt trail.

    Implementations:
        - PostgresDownloadAuditAdapter: src/infrastructure/audit/postgres_adapter.py
        - InMemoryDownloadStore: tests/utils/fakes.py

    Error Handling:
        All methods return Result types (Success or Failure).
        NEVER raise exceptions - wrap in Failure(AuditError(...)) instead.
    """

    async def record(
        self,
        *,
        attempted_email: str,
        success: bool,
        token_id: UUID | None = None,
        failure_reason: str | None = None,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> Result[None, AuditError]:
        """Append one download attempt.

        Args:
            attempted_email: Normalized email supplied by the requester.
            success: Whether the download was allowed.
            token_id: Resolved token (None when the token was not found).
            failure_reason: Why it was refused (None on success).
            ip_address: Client IP address, when known.
            user_agent: Client user agent, when known.

        Returns:
            Result[None, AuditError]:
                - Success(None) if the attempt was recorded
                - Failure(AuditError) if recording failed
        """
        ...

    async def query(
        self,
        *,
        token_id: UUID | None = None,
        attempted_email: str | None = None,
        success: bool | None = None,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> Result[list[DownloadAttempt], AuditError]:
        """Query the attempt trail (read-only), newest first.

        Args:
            token_id: Filter by token.
            attempted_email: Filter by normalized email.
            success: Filter by outcome.
            start_date: From date (inclusive).
            end_date: To date (inclusive).
            limit: Maximum results (capped at 1000).
            offset: Pagination offset.

        Returns:
            Result[list[DownloadAttempt], AuditError]:
                - Success(attempts) if query succeeded (list may be empty)
                - Failure(AuditError) if query failed
        """
        ...

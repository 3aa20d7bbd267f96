"""DownloadTokenRepository protocol (port) for domain layer.

This protocol defines the interface for download token persistence that the
domain layer needs. Infrastructure provides concrete implementations.

Following hexagonal architecture:
- Domain defines what it needs (protocol/port)
- Infrastructure provides implementation (adapter)
- Domain has no knowledge of how tokens are stored

Concurrency:
    The download counter is shared by every request holding the same link.
    try_consume_download MUST be a single conditional write performed by the
    datastore; a read followed by a write lets two requests both pass the
    quota check and both increment.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol
from uuid import UUID

from src.domain.entities.download_token import DownloadToken


@dataclass(frozen=True, slots=True, kw_only=True)
class DownloadStatisticsData:
    """Aggregated token and attempt counts.

    Used by protocol methods to return statistics without exposing
    infrastructure query details to the application layer.
    """

    total_tokens: int = 0
    active_tokens: int = 0
    expired_tokens: int = 0
    total_attempts: int = 0
    successful_downloads: int = 0
    failed_attempts: int = 0


class DownloadTokenRepository(Protocol):
    """Protocol for download token persistence operations.

    Token Lifecycle:
        1. Created by link generation (active, download_count=0)
        2. Looked up by token string during verification
        3. download_count incremented once per successful download
        4. Deactivated lazily on expiry, by revocation, or by cleanup

    Error Handling:
        Methods raise on datastore failure; callers own the policy
        (skip the document, degrade to False/0, or report system_error).

    Implementations:
        - DownloadTokenRepository (SQLAlchemy): src/infrastructure/persistence/repositories/
        - InMemoryDownloadStore: tests/utils/fakes.py
    """

    async def save(
        self,
        *,
        token: str,
        document_id: UUID,
        recipient_email: str,
        order_id: str,
        expires_at: datetime,
        max_downloads: int,
    ) -> DownloadToken:
        """Create a new active download token.

        Args:
            token: Token string (unique, at least 32 characters).
            document_id: Document the token unlocks.
            recipient_email: Normalized recipient email.
            order_id: Purchase the token belongs to.
            expires_at: Absolute expiry timestamp.
            max_downloads: Successful downloads allowed.

        Returns:
            Created DownloadToken (download_count=0, is_active=True).
        """
        ...

    async def find_active_by_token(self, token: str) -> DownloadToken | None:
        """Find an active token by exact token string.

        The token's document is joined in; token.document is None when the
        document no longer exists. Does NOT check expiration.

        Args:
            token: Token string from the download link.

        Returns:
            DownloadToken if an active token matches, None otherwise.
        """
        ...

    async def find_by_id(self, token_id: UUID) -> DownloadToken | None:
        """Find a token by id regardless of state.

        Args:
            token_id: Token record identifier.

        Returns:
            DownloadToken if found, None otherwise.
        """
        ...

    async def try_consume_download(self, token_id: UUID) -> bool:
        """Atomically use one download of the quota.

        Increments download_count only if the token is active and
        download_count < max_downloads at the moment of the write.

        Args:
            token_id: Token record identifier.

        Returns:
            True if the counter was incremented, False if the guard failed.
        """
        ...

    async def deactivate(self, token_id: UUID) -> bool:
        """Set is_active to False.

        Idempotent: deactivating an inactive token still matches the row.
        Never changes download_count.

        Args:
            token_id: Token record identifier.

        Returns:
            True if the token exists, False otherwise.
        """
        ...

    async def deactivate_expired(self, now: datetime) -> int:
        """Deactivate every active token whose expires_at is before now.

        Args:
            now: Reference time.

        Returns:
            Number of tokens deactivated.
        """
        ...

    async def count_statistics(
        self, order_id: str | None = None
    ) -> DownloadStatisticsData:
        """Count tokens and attempts, optionally for one order.

        A token counts as active when is_active is set and it has not expired;
        every other token counts as expired. With an order id, attempts are
        those referencing that order's tokens.

        Args:
            order_id: Restrict counts to one purchase (None for all).

        Returns:
            DownloadStatisticsData with all six counts.
        """
        ...

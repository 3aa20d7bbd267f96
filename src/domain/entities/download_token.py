"""DownloadToken domain entity.

Pure business logic, no framework dependencies.

A download token grants one recipient a bounded number of downloads of a
single document within a time window. The token string, recipient email,
expiry and quota are fixed at creation; only download_count and is_active
change afterwards.

Reference:
    - src/application/commands/handlers/verify_download_token_handler.py
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID

from src.domain.entities.project_document import ProjectDocument
from src.domain.validators import normalize_email


@dataclass(slots=True, kw_only=True)
class DownloadToken:
    """Download token domain entity.

    Business Rules:
        - 0 <= download_count <= max_downloads at all times
        - download_count only grows, one step per successful download
        - A token stays usable while active, unexpired and under quota
        - Once deactivated (expiry, revocation, cleanup) it never reactivates

    Attributes:
        id: Unique token record identifier.
        token: Unguessable token string (at least 32 characters).
        document_id: Document this token unlocks.
        recipient_email: Normalized email the token is bound to.
        order_id: Purchase the token was issued for.
        expires_at: Absolute expiry timestamp.
        max_downloads: Successful downloads allowed.
        download_count: Successful downloads so far.
        is_active: False after lazy expiry, revocation or cleanup.
        created_at: When the token was issued.
        updated_at: Last modification time.
        document: Joined document metadata (None if missing or not loaded).

    Example:
        >>> token = DownloadToken(
        ...     id=uuid7(),
        ...     token="x" * 32,
        ...     document_id=uuid7(),
        ...     recipient_email="buyer@x.com",
        ...     order_id="order-1",
        ...     expires_at=datetime.now(UTC) + timedelta(hours=72),
        ...     max_downloads=2,
        ... )
        >>> token.remaining_downloads
        2
    """

    id: UUID
    token: str
    document_id: UUID
    recipient_email: str
    order_id: str
    expires_at: datetime
    max_downloads: int
    download_count: int = 0
    is_active: bool = True
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime | None = None
    document: ProjectDocument | None = None

    def is_expired(self, now: datetime | None = None) -> bool:
        """Check whether the token is past its expiry.

        Args:
            now: Reference time (defaults to current UTC time).

        Returns:
            True if now is strictly after expires_at.
        """
        return (now or datetime.now(UTC)) > self.expires_at

    def has_remaining_downloads(self) -> bool:
        """Check whether another download fits in the quota."""
        return self.download_count < self.max_downloads

    @property
    def remaining_downloads(self) -> int:
        """Downloads left before the quota is exhausted."""
        return max(self.max_downloads - self.download_count, 0)

    def matches_email(self, email: str) -> bool:
        """Check a claimed email against the bound recipient.

        Both sides are normalized, so case and surrounding whitespace are
        ignored.

        Args:
            email: Email claimed by the requester.

        Returns:
            True if the normalized emails are equal.
        """
        return normalize_email(email) == normalize_email(self.recipient_email)

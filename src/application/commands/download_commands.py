"""Secure download commands (CQRS write operations).

Commands represent intent to change system state.
All commands are immutable (frozen=True) and use keyword-only arguments (kw_only=True).

Pattern:
- Commands are data containers (no logic)
- Handlers execute business logic
- Commands don't return values (handlers return Result types)

Response DTOs (SecureDownloadLink, VerifiedDownload) live here as well,
next to the commands that produce them.
"""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from src.core.constants import DEFAULT_EXPIRATION_HOURS, DEFAULT_MAX_DOWNLOADS
from src.domain.entities import DownloadToken, ProjectDocument


@dataclass(frozen=True, kw_only=True)
class DocumentRef:
    """Document to issue a link for.

    Attributes:
        id: Document identifier.
        name: Display name (echoed back in the generated link).
        url: Storage location (not embedded in the link).
    """

    id: UUID
    name: str
    url: str | None = None


@dataclass(frozen=True, kw_only=True)
class DownloadLinkConfig:
    """Per-batch link settings.

    Attributes:
        expiration_hours: Hours until the links expire.
        max_downloads: Successful downloads allowed per link.
        require_email_verification: Recorded for callers; enforced only
            when links are verified.
    """

    expiration_hours: int = DEFAULT_EXPIRATION_HOURS
    max_downloads: int = DEFAULT_MAX_DOWNLOADS
    require_email_verification: bool = True


@dataclass(frozen=True, kw_only=True)
class GenerateDownloadTokens:
    """Issue one download link per document for a purchase.

    Attributes:
        documents: Documents purchased.
        recipient_email: Email the links are bound to (normalized on store).
        order_id: Purchase identifier shared by all links.
        config: Optional overrides (defaults: 72 hours, 5 downloads).

    Example:
        >>> command = GenerateDownloadTokens(
        ...     documents=[DocumentRef(id=doc_id, name="Plans.pdf")],
        ...     recipient_email="buyer@x.com",
        ...     order_id="order-42",
        ... )
        >>> result = await handler.handle(command)
        >>> # Success([SecureDownloadLink, ...]) - only the stored links
    """

    documents: list[DocumentRef]
    recipient_email: str
    order_id: str
    config: DownloadLinkConfig = field(default_factory=DownloadLinkConfig)


@dataclass(frozen=True, kw_only=True)
class SecureDownloadLink:
    """Response DTO for one generated link.

    Attributes:
        document_id: Document the link unlocks.
        document_name: Document display name.
        token: Token string.
        recipient_email: Normalized email the link is bound to.
        secure_url: Shareable URL.
        expires_at: When the link stops working.
    """

    document_id: UUID
    document_name: str
    token: str
    recipient_email: str
    secure_url: str
    expires_at: datetime


@dataclass(frozen=True, kw_only=True)
class VerifyDownloadToken:
    """Check whether a download may proceed and consume one download.

    Request context given here wins over the FastAPI request passed to the
    handler.

    Attributes:
        token: Token string from the link path.
        email: Email claimed by the requester.
        ip_address: Client IP address (optional).
        user_agent: Client user agent (optional).

    Example:
        >>> command = VerifyDownloadToken(token=token, email="buyer@x.com")
        >>> result = await handler.handle(command, request)
    """

    token: str
    email: str
    ip_address: str | None = None
    user_agent: str | None = None


@dataclass(frozen=True, kw_only=True)
class VerifiedDownload:
    """Response DTO for an allowed download.

    Attributes:
        document: Document metadata to stream.
        token: Token as read before this download was counted.
    """

    document: ProjectDocument
    token: DownloadToken


@dataclass(frozen=True, kw_only=True)
class RevokeDownloadToken:
    """Deactivate a download link. Idempotent.

    Attributes:
        token_id: Token record identifier.
    """

    token_id: UUID


@dataclass(frozen=True, kw_only=True)
class CleanupExpiredTokens:
    """Deactivate every link past its expiry (scheduled job)."""


@dataclass(frozen=True, kw_only=True)
class RequestNewDownloadLinks:
    """Record that a buyer asked for fresh links.

    Does not issue tokens; leaves a trail entry for support to act on.

    Attributes:
        order_id: Purchase the buyer refers to.
        email: Email of the buyer.
    """

    order_id: str
    email: str

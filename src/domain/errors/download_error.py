"""Secure download error types.

Errors returned (never raised) by token generation and verification.

Usage:
    from src.domain.errors import DownloadVerificationError
    from src.domain.enums import VerificationFailureReason

    return Failure(error=DownloadVerificationError(
        code=ErrorCode.TOKEN_EXPIRED,
        message="Download link has expired on 2026-10-18 12:00 UTC.",
        reason=VerificationFailureReason.EXPIRED,
        token=token,
    ))
"""

from dataclasses import dataclass

from src.core.errors import DomainError
from src.domain.entities.download_token import DownloadToken
from src.domain.enums import VerificationFailureReason


@dataclass(frozen=True, slots=True, kw_only=True)
class DownloadVerificationError(DomainError):
    """Download verification refused.

    The message is safe to show to the requester. The reason is the value
    recorded in the attempt trail.

    Attributes:
        code: ErrorCode matching the reason.
        message: User-facing explanation.
        reason: Terminal failure reason.
        token: Token as observed when the check failed (None if unresolved).
        details: Additional context.
    """

    reason: VerificationFailureReason
    token: DownloadToken | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class TokenGenerationError(DomainError):
    """No acceptable token value could be produced.

    Attributes:
        code: ErrorCode enum (TOKEN_GENERATION_FAILED).
        message: Human-readable message.
        details: Additional context (source name, failure cause).
    """

    pass

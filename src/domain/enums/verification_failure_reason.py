"""Verification failure reasons.

Every failed download verification ends in exactly one of these reasons,
and the reason is what gets written to the download attempt trail.

Reasons are terminal and mutually exclusive; the first failing check in
the verification pipeline decides which one applies.

Usage:
    from src.domain.enums import VerificationFailureReason

    if token.download_count >= token.max_downloads:
        reason = VerificationFailureReason.QUOTA_EXCEEDED
"""

from enum import Enum


class VerificationFailureReason(str, Enum):
    """Why a download verification was refused.

    Values are persisted in download_attempts.failure_reason, so they are
    part of the audit record format. Add new values, never rename.
    """

    INVALID_OR_EXPIRED = "invalid_or_expired"
    """No active token with that value exists."""

    EXPIRED = "expired"
    """Token was active but past its expiry; it is deactivated on the spot."""

    EMAIL_MISMATCH = "email_mismatch"
    """Claimed email is not the email the token is bound to."""

    QUOTA_EXCEEDED = "quota_exceeded"
    """All allowed downloads have been used (possibly by a concurrent request)."""

    DOCUMENT_MISSING = "document_missing"
    """Token is valid but its document no longer exists."""

    SYSTEM_ERROR = "system_error"
    """Unexpected failure while verifying."""

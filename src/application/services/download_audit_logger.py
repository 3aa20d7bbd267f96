"""Download attempt logger service.

The only writer of download attempts. Wraps the audit adapter so callers
can record an outcome without ever being affected by the recording:
whatever happens inside, log_attempt returns and never raises.

Failures go to the diagnostics logger instead, so a lost attempt is still
observable.

Architecture:
    - Application service (uses the audit port, not an adapter)
    - Used by the verification and link request handlers

Usage:
    audit_logger = DownloadAuditLogger(audit=audit, logger=logger)

    await audit_logger.log_attempt(
        token_id=token.id,
        email=" Buyer@X.com ",  # stored as "buyer@x.com"
        success=False,
        failure_reason=VerificationFailureReason.EMAIL_MISMATCH,
    )
"""

from uuid import UUID

from src.core.constants import IP_ADDRESS_MAX_LENGTH, USER_AGENT_MAX_LENGTH
from src.core.result import Failure
from src.domain.enums import VerificationFailureReason
from src.domain.protocols import DownloadAuditProtocol, LoggerProtocol
from src.domain.validators import normalize_email


class DownloadAuditLogger:
    """Records download attempts, fire-and-forget."""

    def __init__(
        self,
        audit: DownloadAuditProtocol,
        logger: LoggerProtocol,
    ) -> None:
        """Initialize with dependencies.

        Args:
            audit: Attempt trail adapter.
            logger: Diagnostics logger for recording failures.
        """
        self._audit = audit
        self._logger = logger

    async def log_attempt(
        self,
        *,
        email: str,
        success: bool,
        token_id: UUID | None = None,
        failure_reason: VerificationFailureReason | str | None = None,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> bool:
        """Append one download attempt.

        The email is normalized. A successful attempt never carries a
        failure reason; a failed attempt without one is recorded as
        system_error.

        Args:
            email: Email supplied by the requester.
            success: Whether the download was allowed.
            token_id: Resolved token (None when not found).
            failure_reason: Why it was refused.
            ip_address: Client IP address (truncated to 45 characters).
            user_agent: Client user agent (truncated to 500 characters).

        Returns:
            True if the attempt was recorded, False otherwise. Callers do not
            need to act on it.
        """
        if success:
            reason = None
        elif failure_reason is None:
            reason = VerificationFailureReason.SYSTEM_ERROR.value
        elif isinstance(failure_reason, VerificationFailureReason):
            reason = failure_reason.value
        else:
            reason = failure_reason

        try:
            result = await self._audit.record(
                token_id=token_id,
                attempted_email=normalize_email(email),
                success=success,
                failure_reason=reason,
                ip_address=ip_address[:IP_ADDRESS_MAX_LENGTH] if ip_address else None,
                user_agent=user_agent[:USER_AGENT_MAX_LENGTH] if user_agent else None,
            )
        except Exception as e:
            self._logger.error(
                "download_attempt_not_recorded",
                error=e,
                token_id=str(token_id) if token_id else None,
                success=success,
                failure_reason=reason,
            )
            return False

        if isinstance(result, Failure):
            self._logger.error(
                "download_attempt_not_recorded",
                error_code=result.error.code.value,
                error_message=result.error.message,
                token_id=str(token_id) if token_id else None,
                success=success,
                failure_reason=reason,
            )
            return False

        return True

"""Verify download token handler.

Flow (ordered, first failing check wins):
1. Look up active token by token string (document joined in)
2. Check expiry (expired tokens are deactivated on the spot)
3. Check claimed email against the bound recipient
4. Check download quota
5. Check the document still exists
6. Consume one download with a conditional update, then record success

Every call records exactly one download attempt before returning, success
or failure. An unexpected exception is recorded as system_error and
returned as a generic failure.

Concurrency:
    Step 4 reads the counter, step 6 writes it. Two requests can both pass
    step 4, so step 6 is the datastore's conditional increment and a failed
    guard there is reported as quota_exceeded.

Architecture:
- Application layer ONLY imports from domain layer (entities, protocols)
- NO infrastructure imports (repositories are injected via protocols)
"""

import ipaddress
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from src.application.commands.download_commands import (
    VerifiedDownload,
    VerifyDownloadToken,
)
from src.application.services.download_audit_logger import DownloadAuditLogger
from src.core.constants import TOKEN_PREVIEW_LENGTH
from src.core.enums import ErrorCode
from src.core.result import Failure, Result, Success
from src.domain.entities import DownloadToken
from src.domain.enums import VerificationFailureReason
from src.domain.errors import DownloadVerificationError
from src.domain.protocols import (
    DownloadTokenRepository,
    LoggerProtocol,
)

if TYPE_CHECKING:
    from fastapi import Request


_ERROR_CODES: dict[VerificationFailureReason, ErrorCode] = {
    VerificationFailureReason.INVALID_OR_EXPIRED: ErrorCode.TOKEN_NOT_FOUND,
    VerificationFailureReason.EXPIRED: ErrorCode.TOKEN_EXPIRED,
    VerificationFailureReason.EMAIL_MISMATCH: ErrorCode.TOKEN_EMAIL_MISMATCH,
    VerificationFailureReason.QUOTA_EXCEEDED: ErrorCode.DOWNLOAD_LIMIT_EXCEEDED,
    VerificationFailureReason.DOCUMENT_MISSING: ErrorCode.DOCUMENT_NOT_FOUND,
    VerificationFailureReason.SYSTEM_ERROR: ErrorCode.DOWNLOAD_VERIFICATION_FAILED,
}


def failure_message(
    reason: VerificationFailureReason, token: DownloadToken | None = None
) -> str:
    """User-facing message for a refused download.

    Args:
        reason: Failure reason.
        token: Token as observed (adds expiry date, email, limit).

    Returns:
        Message safe to show to the requester.
    """
    match reason:
        case VerificationFailureReason.INVALID_OR_EXPIRED:
            return (
                "Invalid or expired download link. "
                "Please check your email for the correct link."
            )
        case VerificationFailureReason.EXPIRED if token is not None:
            return (
                f"Download link has expired on {token.expires_at:%Y-%m-%d %H:%M} UTC. "
                "Please contact support for new download links."
            )
        case VerificationFailureReason.EMAIL_MISMATCH if token is not None:
            return (
                f"This download link is authorized for {token.recipient_email} only. "
                "Please use the email address that was used for the purchase."
            )
        case VerificationFailureReason.QUOTA_EXCEEDED if token is not None:
            return (
                f"Download limit of {token.max_downloads} has been reached for this link. "
                "Please contact support if you need additional downloads."
            )
        case VerificationFailureReason.DOCUMENT_MISSING:
            return (
                "The requested document is no longer available. "
                "Please contact support."
            )
        case _:
            return (
                "A system error occurred. Please try again or contact support "
                "if the problem persists."
            )


def parse_ip(value: str | None) -> str | None:
    """Return value as a canonical IPv4/IPv6 address, or None if it is not one."""
    if not value:
        return None
    try:
        return str(ipaddress.ip_address(value.strip()))
    except ValueError:
        return None


def extract_request_context(
    request: "Request | None",
) -> tuple[str | None, str | None]:
    """Read client IP and user agent from a FastAPI request.

    The first X-Forwarded-For hop wins over the socket peer address. The
    header is client-controlled, so a hop that is not an IP address is
    ignored.

    Returns:
        (ip_address, user_agent), either may be None.
    """
    if request is None:
        return None, None

    ip_address: str | None = None
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        ip_address = parse_ip(forwarded.split(",")[0])
    if ip_address is None and request.client:
        ip_address = parse_ip(request.client.host)

    return ip_address, request.headers.get("user-agent")


class VerifyDownloadTokenHandler:
    """Handler for download verification command.

    Decides whether a download may proceed and consumes one download of
    the link's quota when it does.
    """

    def __init__(
        self,
        token_repo: DownloadTokenRepository,
        audit_logger: DownloadAuditLogger,
        logger: LoggerProtocol,
        require_email_verification: bool = True,
    ) -> None:
        """Initialize handler with dependencies.

        Args:
            token_repo: Download token repository.
            audit_logger: Download attempt recorder.
            logger: Structured logger.
            require_email_verification: Enforce the email match check.
        """
        self._token_repo = token_repo
        self._audit_logger = audit_logger
        self._logger = logger
        self._require_email_verification = require_email_verification

    async def handle(
        self, cmd: VerifyDownloadToken, request: "Request | None" = None
    ) -> Result[VerifiedDownload, DownloadVerificationError]:
        """Handle download verification command.

        Args:
            cmd: VerifyDownloadToken command.
            request: Optional FastAPI Request for IP/user agent tracking.

        Returns:
            Success(VerifiedDownload) when the download may proceed.
            Failure(DownloadVerificationError) with the terminal reason.

        Side Effects:
            - Records exactly one download attempt.
            - Increments download_count on success.
            - Deactivates the token when it is found expired.
        """
        token_preview = cmd.token[:TOKEN_PREVIEW_LENGTH]
        ip_address, user_agent = self._resolve_context(cmd, request)
        token: DownloadToken | None = None

        try:
            # Step 1: Look up active token
            token = await self._token_repo.find_active_by_token(cmd.token)
            if token is None:
                return await self._refuse(
                    VerificationFailureReason.INVALID_OR_EXPIRED,
                    cmd=cmd,
                    token=None,
                    ip_address=ip_address,
                    user_agent=user_agent,
                )

            # Step 2: Expiry (lazy deactivation)
            if token.is_expired(datetime.now(UTC)):
                await self._deactivate_expired(token)
                return await self._refuse(
                    VerificationFailureReason.EXPIRED,
                    cmd=cmd,
                    token=token,
                    ip_address=ip_address,
                    user_agent=user_agent,
                )

            # Step 3: Email gate
            if self._require_email_verification and not token.matches_email(
                cmd.email
            ):
                return await self._refuse(
                    VerificationFailureReason.EMAIL_MISMATCH,
                    cmd=cmd,
                    token=token,
                    ip_address=ip_address,
                    user_agent=user_agent,
                )

            # Step 4: Quota
            if not token.has_remaining_downloads():
                return await self._refuse(
                    VerificationFailureReason.QUOTA_EXCEEDED,
                    cmd=cmd,
                    token=token,
                    ip_address=ip_address,
                    user_agent=user_agent,
                )

            # Step 5: Document
            document = token.document
            if document is None:
                return await self._refuse(
                    VerificationFailureReason.DOCUMENT_MISSING,
                    cmd=cmd,
                    token=token,
                    ip_address=ip_address,
                    user_agent=user_agent,
                )

            # Step 6: Conditional increment, then record success
            consumed = await self._token_repo.try_consume_download(token.id)
            if not consumed:
                return await self._refuse(
                    VerificationFailureReason.QUOTA_EXCEEDED,
                    cmd=cmd,
                    token=token,
                    ip_address=ip_address,
                    user_agent=user_agent,
                )
        except Exception as e:
            self._logger.error(
                "download_verification_error",
                error=e,
                token_preview=token_preview,
                token_id=str(token.id) if token else None,
            )
            return await self._refuse(
                VerificationFailureReason.SYSTEM_ERROR,
                cmd=cmd,
                token=token,
                ip_address=ip_address,
                user_agent=user_agent,
            )

        await self._audit_logger.log_attempt(
            token_id=token.id,
            email=cmd.email,
            success=True,
            ip_address=ip_address,
            user_agent=user_agent,
        )
        self._logger.info(
            "download_verified",
            token_preview=token_preview,
            token_id=str(token.id),
            document_id=str(document.id),
            download_number=token.download_count + 1,
            max_downloads=token.max_downloads,
        )
        return Success(value=VerifiedDownload(document=document, token=token))

    @staticmethod
    def _resolve_context(
        cmd: VerifyDownloadToken, request: "Request | None"
    ) -> tuple[str | None, str | None]:
        """Pick IP and user agent: command first, then request.

        With neither, the address stays unset.
        """
        request_ip, request_agent = extract_request_context(request)
        ip_address = cmd.ip_address or request_ip
        user_agent = cmd.user_agent or request_agent
        return ip_address, user_agent

    async def _deactivate_expired(self, token: DownloadToken) -> None:
        """Deactivate an expired token; failure only delays the cleanup."""
        try:
            await self._token_repo.deactivate(token.id)
        except Exception as e:
            self._logger.warning(
                "expired_token_deactivation_failed",
                token_id=str(token.id),
                error_type=type(e).__name__,
                error_message=str(e),
            )

    async def _refuse(
        self,
        reason: VerificationFailureReason,
        *,
        cmd: VerifyDownloadToken,
        token: DownloadToken | None,
        ip_address: str | None,
        user_agent: str | None,
    ) -> Failure[DownloadVerificationError]:
        """Record the failed attempt and build the failure result."""
        await self._audit_logger.log_attempt(
            token_id=token.id if token else None,
            email=cmd.email,
            success=False,
            failure_reason=reason,
            ip_address=ip_address,
            user_agent=user_agent,
        )
        self._logger.warning(
            "download_verification_failed",
            reason=reason.value,
            token_preview=cmd.token[:TOKEN_PREVIEW_LENGTH],
            token_id=str(token.id) if token else None,
        )
        return Failure(
            error=DownloadVerificationError(
                code=_ERROR_CODES[reason],
                message=failure_message(reason, token),
                reason=reason,
                token=token,
            )
        )

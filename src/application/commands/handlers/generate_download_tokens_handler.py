"""Generate download tokens handler.

Flow:
1. Validate and normalize recipient email, validate link settings
2. Compute one expiry for the whole batch
3. For each document: generate token, store it, build the shareable URL
4. Return Success(links) for the tokens that were stored

Partial failure:
    A document whose token cannot be generated or stored is logged and
    skipped; the rest of the batch continues. The returned list may be
    shorter than the document list and callers must compare the two.

Architecture:
- Application layer ONLY imports from domain layer (entities, protocols)
- NO infrastructure imports (repositories are injected via protocols)
"""

from datetime import UTC, datetime, timedelta
from urllib.parse import quote

from src.application.commands.download_commands import (
    DocumentRef,
    GenerateDownloadTokens,
    SecureDownloadLink,
)
from src.core.constants import DOWNLOAD_PATH_PREFIX
from src.core.enums import ErrorCode
from src.core.errors import ValidationError
from src.core.result import Failure, Result, Success
from src.domain.protocols import (
    DownloadTokenRepository,
    DownloadTokenServiceProtocol,
    LoggerProtocol,
)
from src.domain.validators import validate_email


def build_secure_url(base_url: str, token: str, email: str) -> str:
    """Build the shareable download URL.

    Args:
        base_url: Site origin without trailing slash.
        token: Token string (URL-safe alphabet).
        email: Recipient email, percent-encoded into the query string.

    Returns:
        URL of the form {base}/secure-download/{token}?email={email}.

    Example:
        >>> build_secure_url("https://shop.example.com", "abc", "a+b@x.com")
        'https://shop.example.com/secure-download/abc?email=a%2Bb%40x.com'
    """
    return f"{base_url.rstrip('/')}{DOWNLOAD_PATH_PREFIX}/{token}?email={quote(email, safe='')}"


class GenerateDownloadTokensHandler:
    """Handler for download link generation.

    Issues one token per purchased document, all bound to the same email
    and order and expiring at the same instant.
    """

    def __init__(
        self,
        token_repo: DownloadTokenRepository,
        token_service: DownloadTokenServiceProtocol,
        logger: LoggerProtocol,
        base_url: str,
    ) -> None:
        """Initialize handler with dependencies.

        Args:
            token_repo: Download token repository.
            token_service: Token string generator.
            logger: Structured logger.
            base_url: Origin used in shareable URLs.
        """
        self._token_repo = token_repo
        self._token_service = token_service
        self._logger = logger
        self._base_url = base_url

    async def handle(
        self, cmd: GenerateDownloadTokens
    ) -> Result[list[SecureDownloadLink], ValidationError]:
        """Handle link generation command.

        Args:
            cmd: GenerateDownloadTokens command.

        Returns:
            Success(links) with one link per stored token (possibly empty).
            Failure(ValidationError) if the email or settings are invalid.
        """
        config = cmd.config

        try:
            email = validate_email(cmd.recipient_email)
        except ValueError:
            return Failure(
                error=ValidationError(
                    code=ErrorCode.INVALID_EMAIL,
                    message="Invalid recipient email format",
                    field="recipient_email",
                )
            )
        if config.expiration_hours < 1:
            return Failure(
                error=ValidationError(
                    code=ErrorCode.VALIDATION_FAILED,
                    message="expiration_hours must be at least 1",
                    field="expiration_hours",
                )
            )
        if config.max_downloads < 1:
            return Failure(
                error=ValidationError(
                    code=ErrorCode.VALIDATION_FAILED,
                    message="max_downloads must be at least 1",
                    field="max_downloads",
                )
            )

        expires_at = datetime.now(UTC) + timedelta(hours=config.expiration_hours)

        links: list[SecureDownloadLink] = []
        for document in cmd.documents:
            link = await self._issue_link(
                document=document,
                email=email,
                order_id=cmd.order_id,
                expires_at=expires_at,
                max_downloads=config.max_downloads,
            )
            if link is not None:
                links.append(link)

        if len(links) < len(cmd.documents):
            self._logger.warning(
                "download_links_partially_generated",
                order_id=cmd.order_id,
                requested=len(cmd.documents),
                generated=len(links),
            )

        self._logger.info(
            "download_links_generated",
            order_id=cmd.order_id,
            recipient_email=email,
            count=len(links),
            expires_at=expires_at.isoformat(),
        )
        return Success(value=links)

    async def _issue_link(
        self,
        *,
        document: DocumentRef,
        email: str,
        order_id: str,
        expires_at: datetime,
        max_downloads: int,
    ) -> SecureDownloadLink | None:
        """Generate and store one token.

        Returns:
            The link, or None if this document failed.
        """
        try:
            token_result = await self._token_service.generate_token()
            if isinstance(token_result, Failure):
                self._logger.error(
                    "download_token_generation_failed",
                    order_id=order_id,
                    document_id=str(document.id),
                    error_code=token_result.error.code.value,
                    error_message=token_result.error.message,
                )
                return None

            stored = await self._token_repo.save(
                token=token_result.value,
                document_id=document.id,
                recipient_email=email,
                order_id=order_id,
                expires_at=expires_at,
                max_downloads=max_downloads,
            )
        except Exception as e:
            self._logger.error(
                "download_token_store_failed",
                error=e,
                order_id=order_id,
                document_id=str(document.id),
            )
            return None

        return SecureDownloadLink(
            document_id=document.id,
            document_name=document.name,
            token=stored.token,
            recipient_email=stored.recipient_email,
            secure_url=build_secure_url(self._base_url, stored.token, email),
            expires_at=stored.expires_at,
        )

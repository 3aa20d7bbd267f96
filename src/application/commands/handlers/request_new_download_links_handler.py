"""Request new download links handler.

Records a buyer's request for fresh links as an informational download
attempt (no token, not a success) so support can follow up. No tokens
are issued here.
"""

from src.application.commands.download_commands import RequestNewDownloadLinks
from src.application.services.download_audit_logger import DownloadAuditLogger
from src.domain.protocols import LoggerProtocol


class RequestNewDownloadLinksHandler:
    """Handler for new link requests."""

    def __init__(
        self,
        audit_logger: DownloadAuditLogger,
        logger: LoggerProtocol,
    ) -> None:
        """Initialize handler with dependencies.

        Args:
            audit_logger: Download attempt recorder.
            logger: Structured logger.
        """
        self._audit_logger = audit_logger
        self._logger = logger

    async def handle(
        self,
        cmd: RequestNewDownloadLinks,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> bool:
        """Record the request.

        Args:
            cmd: RequestNewDownloadLinks command.
            ip_address: Client IP address (optional).
            user_agent: Client user agent (optional).

        Returns:
            True if the request was recorded, False otherwise. Never raises.
        """
        recorded = await self._audit_logger.log_attempt(
            token_id=None,
            email=cmd.email,
            success=False,
            failure_reason=f"New download links requested for order {cmd.order_id}",
            ip_address=ip_address,
            user_agent=user_agent,
        )

        self._logger.info(
            "new_download_links_requested",
            order_id=cmd.order_id,
            recorded=recorded,
        )
        return recorded

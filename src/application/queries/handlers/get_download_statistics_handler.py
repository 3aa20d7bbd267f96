"""Get download statistics query handler.

Reporting projection over tokens and attempts. Never fails: a datastore
error is logged and reported as all zeros.
"""

from dataclasses import dataclass

from src.application.queries.download_queries import GetDownloadStatistics
from src.domain.protocols import DownloadTokenRepository, LoggerProtocol


@dataclass(frozen=True, kw_only=True)
class DownloadStatistics:
    """Download statistics query result."""

    total_tokens: int = 0
    active_tokens: int = 0
    expired_tokens: int = 0
    total_attempts: int = 0
    successful_downloads: int = 0
    failed_attempts: int = 0


class GetDownloadStatisticsHandler:
    """Handler for download statistics."""

    def __init__(
        self,
        token_repo: DownloadTokenRepository,
        logger: LoggerProtocol,
    ) -> None:
        """Initialize handler with dependencies.

        Args:
            token_repo: Download token repository.
            logger: Structured logger.
        """
        self._token_repo = token_repo
        self._logger = logger

    async def handle(self, query: GetDownloadStatistics) -> DownloadStatistics:
        """Handle statistics query.

        Args:
            query: GetDownloadStatistics with optional order_id.

        Returns:
            DownloadStatistics (all zeros on failure).
        """
        try:
            data = await self._token_repo.count_statistics(query.order_id)
        except Exception as e:
            self._logger.error(
                "download_statistics_failed",
                error=e,
                order_id=query.order_id,
            )
            return DownloadStatistics()

        return DownloadStatistics(
            total_tokens=data.total_tokens,
            active_tokens=data.active_tokens,
            expired_tokens=data.expired_tokens,
            total_attempts=data.total_attempts,
            successful_downloads=data.successful_downloads,
            failed_attempts=data.failed_attempts,
        )

"""Cleanup expired tokens handler.

Scheduled job: deactivates every active token past its expiry in one
datastore statement. Tokens are deactivated, not deleted, so the attempt
trail keeps its references.
"""

from datetime import UTC, datetime

from src.application.commands.download_commands import CleanupExpiredTokens
from src.domain.protocols import DownloadTokenRepository, LoggerProtocol


class CleanupExpiredTokensHandler:
    """Handler for expired token cleanup."""

    def __init__(
        self,
        token_repo: DownloadTokenRepository,
        logger: LoggerProtocol,
    ) -> None:
        self._token_repo = token_repo
        self._logger = logger

    async def handle(self, cmd: CleanupExpiredTokens | None = None) -> int:
        """Deactivate expired tokens.

        Returns:
            Number of tokens deactivated, 0 on failure.
        """
        try:
            count = await self._token_repo.deactivate_expired(datetime.now(UTC))
        except Exception as e:
            self._logger.error("expired_token_cleanup_failed", error=e)
            return 0

        self._logger.info("expired_tokens_cleaned_up", count=count)
        return count

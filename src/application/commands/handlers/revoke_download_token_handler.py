"""Revoke download token handler.

Flow:
1. Deactivate token by ID (idempotent, download_count untouched)
2. Return whether the token exists

Failures never propagate: they are logged and reported as False.
"""

from src.application.commands.download_commands import RevokeDownloadToken
from src.domain.protocols import DownloadTokenRepository, LoggerProtocol


class RevokeDownloadTokenHandler:
    """Handler for link revocation (refunds, support requests)."""

    def __init__(
        self,
        token_repo: DownloadTokenRepository,
        logger: LoggerProtocol,
    ) -> None:
        """Initialize revoke handler with dependencies.

        Args:
            token_repo: Download token repository.
            logger: Structured logger.
        """
        self._token_repo = token_repo
        self._logger = logger

    async def handle(self, cmd: RevokeDownloadToken) -> bool:
        """Handle revoke command.

        Revoking an already revoked token succeeds again.

        Args:
            cmd: RevokeDownloadToken command.

        Returns:
            True if the token is (now) inactive, False if it does not exist
            or the update failed.
        """
        try:
            found = await self._token_repo.deactivate(cmd.token_id)
        except Exception as e:
            self._logger.error(
                "download_token_revoke_failed",
                error=e,
                token_id=str(cmd.token_id),
            )
            return False

        if not found:
            self._logger.warning(
                "download_token_revoke_not_found",
                token_id=str(cmd.token_id),
            )
            return False

        self._logger.info("download_token_revoked", token_id=str(cmd.token_id))
        return True

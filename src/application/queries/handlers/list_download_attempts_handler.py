"""List download attempts query handler.

Reads the attempt trail for support and investigations.
"""

from src.application.queries.download_queries import ListDownloadAttempts
from src.core.result import Result
from src.domain.entities import DownloadAttempt
from src.domain.errors import AuditError
from src.domain.protocols import DownloadAuditProtocol
from src.domain.validators import normalize_email


class ListDownloadAttemptsHandler:
    """Handler for listing download attempts."""

    def __init__(self, audit: DownloadAuditProtocol) -> None:
        """Initialize handler with dependencies.

        Args:
            audit: Attempt trail adapter.
        """
        self._audit = audit

    async def handle(
        self, query: ListDownloadAttempts
    ) -> Result[list[DownloadAttempt], AuditError]:
        """Handle list attempts query.

        Args:
            query: ListDownloadAttempts filters.

        Returns:
            Success(attempts) newest first, or Failure(AuditError).
        """
        return await self._audit.query(
            token_id=query.token_id,
            attempted_email=normalize_email(query.email) if query.email else None,
            success=query.success,
            start_date=query.start_date,
            end_date=query.end_date,
            limit=query.limit,
            offset=query.offset,
        )

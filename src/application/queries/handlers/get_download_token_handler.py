"""Get download token query handler.

Support lookup of a single token by id, active or not.
"""

from src.application.queries.download_queries import GetDownloadToken
from src.core.enums import ErrorCode
from src.core.errors import NotFoundError
from src.core.result import Failure, Result, Success
from src.domain.entities import DownloadToken
from src.domain.protocols import DownloadTokenRepository


class GetDownloadTokenHandler:
    """Handler for GetDownloadToken query."""

    def __init__(self, token_repo: DownloadTokenRepository) -> None:
        """Initialize handler with dependencies.

        Args:
            token_repo: Download token repository.
        """
        self._token_repo = token_repo

    async def handle(
        self, query: GetDownloadToken
    ) -> Result[DownloadToken, NotFoundError]:
        """Handle get token query.

        Args:
            query: GetDownloadToken with token_id.

        Returns:
            Success(DownloadToken) with the joined document, if any.
            Failure(NotFoundError) if no token has that id.
        """
        token = await self._token_repo.find_by_id(query.token_id)
        if token is None:
            return Failure(
                error=NotFoundError(
                    code=ErrorCode.TOKEN_NOT_FOUND,
                    message="Download token not found",
                    resource_type="download_token",
                    resource_id=str(query.token_id),
                )
            )
        return Success(value=token)

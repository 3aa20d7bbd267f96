"""Repository dependency factories.

Request-scoped repository instances. Each request gets a fresh
repository bound to the request's session.
"""

from typing import TYPE_CHECKING

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.container.infrastructure import get_db_session

if TYPE_CHECKING:
    from src.infrastructure.persistence.repositories import DownloadTokenRepository


# ============================================================================
# Repository Factories (Request-Scoped)
# ============================================================================


async def get_download_token_repository(
    session: AsyncSession = Depends(get_db_session),
) -> "DownloadTokenRepository":
    """Get download token repository (request-scoped).

    Args:
        session: Database session for request duration.
            Injected via Depends(get_db_session).

    Returns:
        DownloadTokenRepository instance.

    Usage:
        # Presentation Layer (FastAPI Depends)
        @router.post("/admin/tokens/{token_id}/revoke")
        async def revoke(
            token_repo: DownloadTokenRepository = Depends(get_download_token_repository),
        ):
            ...
    """
    from src.infrastructure.persistence.repositories import DownloadTokenRepository

    return DownloadTokenRepository(session=session)

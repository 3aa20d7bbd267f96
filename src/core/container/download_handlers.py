"""Secure download handler dependency factories.

Request-scoped handler instances for the download link lifecycle:
- Link generation (token service + repository)
- Verification (repository + attempt logger on the audit session)
- Revocation, cleanup, new link requests
- Statistics and the attempt trail
"""

from typing import TYPE_CHECKING

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.config import settings
from src.core.container.infrastructure import (
    get_audit_session,
    get_db_session,
    get_logger,
)

if TYPE_CHECKING:
    from src.application.commands.handlers.cleanup_expired_tokens_handler import (
        CleanupExpiredTokensHandler,
    )
    from src.application.commands.handlers.generate_download_tokens_handler import (
        GenerateDownloadTokensHandler,
    )
    from src.application.commands.handlers.request_new_download_links_handler import (
        RequestNewDownloadLinksHandler,
    )
    from src.application.commands.handlers.revoke_download_token_handler import (
        RevokeDownloadTokenHandler,
    )
    from src.application.commands.handlers.verify_download_token_handler import (
        VerifyDownloadTokenHandler,
    )
    from src.application.queries.handlers.get_download_statistics_handler import (
        GetDownloadStatisticsHandler,
    )
    from src.application.queries.handlers.get_download_token_handler import (
        GetDownloadTokenHandler,
    )
    from src.application.queries.handlers.list_download_attempts_handler import (
        ListDownloadAttemptsHandler,
    )
    from src.application.services.download_audit_logger import DownloadAuditLogger
    from src.domain.protocols import DownloadTokenServiceProtocol


def _build_audit_logger(audit_session: AsyncSession) -> "DownloadAuditLogger":
    """Attempt logger bound to the independent audit session."""
    from src.application.services.download_audit_logger import DownloadAuditLogger
    from src.infrastructure.audit.postgres_adapter import (
        PostgresDownloadAuditAdapter,
    )

    return DownloadAuditLogger(
        audit=PostgresDownloadAuditAdapter(session=audit_session),
        logger=get_logger(),
    )


async def get_download_token_service(
    session: AsyncSession = Depends(get_db_session),
) -> "DownloadTokenServiceProtocol":
    """Get download token service (request-scoped).

    Database function first, local CSPRNG as fallback when
    settings.token_fallback_enabled is set.

    Returns:
        SecureDownloadTokenService instance.
    """
    from src.infrastructure.security import (
        DatabaseTokenSource,
        LocalTokenSource,
        SecureDownloadTokenService,
    )

    return SecureDownloadTokenService(
        primary=DatabaseTokenSource(session=session),
        fallback=LocalTokenSource(),
        fallback_enabled=settings.token_fallback_enabled,
        logger=get_logger(),
    )


async def get_generate_download_tokens_handler(
    session: AsyncSession = Depends(get_db_session),
) -> "GenerateDownloadTokensHandler":
    """Get GenerateDownloadTokens command handler (request-scoped).

    Returns:
        GenerateDownloadTokensHandler instance.
    """
    from src.application.commands.handlers.generate_download_tokens_handler import (
        GenerateDownloadTokensHandler,
    )
    from src.infrastructure.persistence.repositories import DownloadTokenRepository

    return GenerateDownloadTokensHandler(
        token_repo=DownloadTokenRepository(session=session),
        token_service=await get_download_token_service(session=session),
        logger=get_logger(),
        base_url=settings.download_base_url,
    )


async def get_verify_download_token_handler(
    session: AsyncSession = Depends(get_db_session),
    audit_session: AsyncSession = Depends(get_audit_session),
) -> "VerifyDownloadTokenHandler":
    """Get VerifyDownloadToken command handler (request-scoped).

    Download attempts go through the separate audit session so they
    persist even if the request transaction rolls back.

    Returns:
        VerifyDownloadTokenHandler instance.
    """
    from src.application.commands.handlers.verify_download_token_handler import (
        VerifyDownloadTokenHandler,
    )
    from src.infrastructure.persistence.repositories import DownloadTokenRepository

    return VerifyDownloadTokenHandler(
        token_repo=DownloadTokenRepository(session=session),
        audit_logger=_build_audit_logger(audit_session),
        logger=get_logger(),
        require_email_verification=settings.require_email_verification,
    )


async def get_revoke_download_token_handler(
    session: AsyncSession = Depends(get_db_session),
) -> "RevokeDownloadTokenHandler":
    """Get RevokeDownloadToken command handler (request-scoped)."""
    from src.application.commands.handlers.revoke_download_token_handler import (
        RevokeDownloadTokenHandler,
    )
    from src.infrastructure.persistence.repositories import DownloadTokenRepository

    return RevokeDownloadTokenHandler(
        token_repo=DownloadTokenRepository(session=session),
        logger=get_logger(),
    )


async def get_cleanup_expired_tokens_handler(
    session: AsyncSession = Depends(get_db_session),
) -> "CleanupExpiredTokensHandler":
    """Get CleanupExpiredTokens command handler (request-scoped)."""
    from src.application.commands.handlers.cleanup_expired_tokens_handler import (
        CleanupExpiredTokensHandler,
    )
    from src.infrastructure.persistence.repositories import DownloadTokenRepository

    return CleanupExpiredTokensHandler(
        token_repo=DownloadTokenRepository(session=session),
        logger=get_logger(),
    )


async def get_request_new_download_links_handler(
    audit_session: AsyncSession = Depends(get_audit_session),
) -> "RequestNewDownloadLinksHandler":
    """Get RequestNewDownloadLinks command handler (request-scoped)."""
    from src.application.commands.handlers.request_new_download_links_handler import (
        RequestNewDownloadLinksHandler,
    )

    return RequestNewDownloadLinksHandler(
        audit_logger=_build_audit_logger(audit_session),
        logger=get_logger(),
    )


async def get_download_statistics_handler(
    session: AsyncSession = Depends(get_db_session),
) -> "GetDownloadStatisticsHandler":
    """Get GetDownloadStatistics query handler (request-scoped)."""
    from src.application.queries.handlers.get_download_statistics_handler import (
        GetDownloadStatisticsHandler,
    )
    from src.infrastructure.persistence.repositories import DownloadTokenRepository

    return GetDownloadStatisticsHandler(
        token_repo=DownloadTokenRepository(session=session),
        logger=get_logger(),
    )


async def get_list_download_attempts_handler(
    audit_session: AsyncSession = Depends(get_audit_session),
) -> "ListDownloadAttemptsHandler":
    """Get ListDownloadAttempts query handler (request-scoped)."""
    from src.application.queries.handlers.list_download_attempts_handler import (
        ListDownloadAttemptsHandler,
    )
    from src.infrastructure.audit.postgres_adapter import (
        PostgresDownloadAuditAdapter,
    )

    return ListDownloadAttemptsHandler(
        audit=PostgresDownloadAuditAdapter(session=audit_session),
    )


async def get_download_token_handler(
    session: AsyncSession = Depends(get_db_session),
) -> "GetDownloadTokenHandler":
    """Get GetDownloadToken query handler (request-scoped)."""
    from src.application.queries.handlers.get_download_token_handler import (
        GetDownloadTokenHandler,
    )
    from src.infrastructure.persistence.repositories import DownloadTokenRepository

    return GetDownloadTokenHandler(
        token_repo=DownloadTokenRepository(session=session),
    )

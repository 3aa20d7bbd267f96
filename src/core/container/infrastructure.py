"""Infrastructure dependency factories.

Application-scoped singletons for core infrastructure services:
- Database (PostgreSQL)
- Logging (structlog console/JSON)
- IP lookup (ipify, ipapi, httpbin with fallback)

Request-scoped factories:
- Database session
- Audit session (independent, commits immediately)
- Download attempt trail adapter
"""

from functools import lru_cache
from typing import TYPE_CHECKING, AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.config import settings
from src.core.enums import Environment
from src.infrastructure.persistence.database import Database

if TYPE_CHECKING:
    from src.domain.protocols.download_audit_protocol import DownloadAuditProtocol
    from src.domain.protocols.ip_lookup_protocol import IPLookupProtocol
    from src.domain.protocols.logger_protocol import LoggerProtocol


# ============================================================================
# Application-Scoped Dependencies (Singletons)
# ============================================================================


@lru_cache()
def get_database() -> Database:
    """Get database manager singleton (app-scoped).

    Use get_db_session() for per-request sessions.

    Returns:
        Database manager instance.
    """
    return Database(
        database_url=settings.database_url,
        echo=settings.db_echo,
    )


@lru_cache()
def get_logger() -> "LoggerProtocol":
    """Return the application-scoped logger singleton.

    Adapter selection is centralized here (composition root):
    - development: ConsoleAdapter (human-readable)
    - testing/ci/production: ConsoleAdapter (JSON)

    Returns:
        LoggerProtocol: Logger instance implementing the protocol.
    """
    from src.infrastructure.logging.console_adapter import ConsoleAdapter

    return ConsoleAdapter(
        use_json=settings.environment != Environment.DEVELOPMENT,
        level="DEBUG" if settings.debug else settings.log_level,
    )


@lru_cache()
def get_ip_lookup() -> "IPLookupProtocol":
    """Get IP lookup singleton (app-scoped).

    Providers are tried in order: ipify, ipapi, httpbin. The services
    report the public address of the calling host, so the result describes
    this deployment and is never recorded as a requester address.

    Returns:
        FallbackIPLookup over the three public services.
    """
    from src.infrastructure.ip_lookup import (
        FallbackIPLookup,
        HttpBinLookup,
        IpApiLookup,
        IpifyLookup,
    )

    timeout = settings.ip_lookup_timeout_seconds
    return FallbackIPLookup(
        providers=[
            IpifyLookup(timeout=timeout),
            IpApiLookup(timeout=timeout),
            HttpBinLookup(timeout=timeout),
        ],
        logger=get_logger(),
    )


# ============================================================================
# Request-Scoped Dependencies (Per-Request)
# ============================================================================


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Get database session (request-scoped).

    Commits on success, rolls back on exception, always closes.

    Yields:
        Database session for request duration.
    """
    db = get_database()
    async with db.get_session() as session:
        yield session


async def get_audit_session() -> AsyncGenerator[AsyncSession, None]:
    """Get audit session (request-scoped, independent lifecycle).

    Separate from get_db_session() so download attempts persist even when
    the request's business transaction rolls back.

    Yields:
        Database session for audit operations only.
    """
    db = get_database()
    async with db.get_session() as session:
        yield session


async def get_download_audit(
    audit_session: AsyncSession = Depends(get_audit_session),
) -> "DownloadAuditProtocol":
    """Get download attempt trail adapter (request-scoped, separate session).

    Args:
        audit_session: Independent database session for audit operations.

    Returns:
        Adapter implementing DownloadAuditProtocol.
    """
    from src.infrastructure.audit.postgres_adapter import (
        PostgresDownloadAuditAdapter,
    )

    return PostgresDownloadAuditAdapter(session=audit_session)

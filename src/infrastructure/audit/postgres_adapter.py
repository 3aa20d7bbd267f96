"""PostgreSQL implementation of DownloadAuditProtocol.

This adapter appends download attempts to the download_attempts table:
- Database RULES block UPDATE/DELETE operations (see migration)
- Async SQLAlchemy for database operations
- Result types for error handling (no exceptions)

Following hexagonal architecture:
- Infrastructure implements domain protocol (DownloadAuditProtocol)
- Domain doesn't know about PostgreSQL or SQLAlchemy

Usage:
    from src.infrastructure.audit.postgres_adapter import PostgresDownloadAuditAdapter

    # Inject via container (separate session, see get_audit_session)
    adapter = PostgresDownloadAuditAdapter(session)

    result = await adapter.record(
        token_id=token.id,
        attempted_email="buyer@x.com",
        success=True,
        ip_address="203.0.113.7",
    )
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.constants import AUDIT_QUERY_LIMIT_MAX
from src.core.enums import ErrorCode
from src.core.result import Failure, Result, Success
from src.domain.entities import DownloadAttempt
from src.domain.errors import AuditError
from src.infrastructure.persistence.models.download_attempt import (
    DownloadAttempt as DownloadAttemptModel,
)


def _to_entity(model: DownloadAttemptModel) -> DownloadAttempt:
    """Convert attempt model to domain entity."""
    return DownloadAttempt(
        id=model.id,
        token_id=model.token_id,
        attempted_email=model.attempted_email,
        success=model.success,
        failure_reason=model.failure_reason,
        ip_address=model.ip_address,
        user_agent=model.user_agent,
        attempted_at=model.created_at,
    )


class PostgresDownloadAuditAdapter:
    """PostgreSQL implementation of DownloadAuditProtocol.

    Uses its own session and commits every record immediately, so an
    attempt is durable even if the request's main transaction rolls back.

    Attributes:
        session: SQLAlchemy async session for database operations.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize adapter with database session.

        Args:
            session: SQLAlchemy async session (injected by container).
        """
        self.session = session

    async def record(
        self,
        *,
        attempted_email: str,
        success: bool,
        token_id: UUID | None = None,
        failure_reason: str | None = None,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> Result[None, AuditError]:
        """Append one download attempt.

        Returns:
            Result[None, AuditError]:
                - Success(None) if the attempt was recorded
                - Failure(AuditError) if the database operation failed
        """
        details = {
            "token_id": str(token_id) if token_id else "",
            "success": str(success),
        }
        try:
            attempt = DownloadAttemptModel(
                token_id=token_id,
                attempted_email=attempted_email,
                success=success,
                failure_reason=failure_reason,
                ip_address=ip_address,
                user_agent=user_agent,
            )

            # Insert is the only operation allowed on this table
            self.session.add(attempt)
            await self.session.commit()

            return Success(value=None)

        except SQLAlchemyError as e:
            await self.session.rollback()
            return Failure(
                error=AuditError(
                    message=f"Failed to record download attempt: {str(e)}",
                    code=ErrorCode.AUDIT_RECORD_FAILED,
                    details={**details, "error_type": type(e).__name__},
                )
            )
        except Exception as e:
            return Failure(
                error=AuditError(
                    message=f"Unexpected error recording download attempt: {str(e)}",
                    code=ErrorCode.AUDIT_RECORD_FAILED,
                    details={**details, "error_type": type(e).__name__},
                )
            )

    async def query(
        self,
        *,
        token_id: UUID | None = None,
        attempted_email: str | None = None,
        success: bool | None = None,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> Result[list[DownloadAttempt], AuditError]:
        """Query the attempt trail, newest first.

        Note:
            Limit capped at 1000.
        """
        try:
            limit = min(limit, AUDIT_QUERY_LIMIT_MAX)

            query = select(DownloadAttemptModel)

            if token_id is not None:
                query = query.where(DownloadAttemptModel.token_id == token_id)

            if attempted_email is not None:
                query = query.where(
                    DownloadAttemptModel.attempted_email == attempted_email
                )

            if success is not None:
                query = query.where(DownloadAttemptModel.success.is_(success))

            if start_date is not None:
                query = query.where(DownloadAttemptModel.created_at >= start_date)

            if end_date is not None:
                query = query.where(DownloadAttemptModel.created_at <= end_date)

            query = (
                query.order_by(DownloadAttemptModel.created_at.desc())
                .limit(limit)
                .offset(offset)
            )

            result = await self.session.execute(query)
            return Success(value=[_to_entity(m) for m in result.scalars().all()])

        except SQLAlchemyError as e:
            return Failure(
                error=AuditError(
                    message=f"Failed to query download attempts: {str(e)}",
                    code=ErrorCode.AUDIT_QUERY_FAILED,
                    details={"error_type": type(e).__name__},
                )
            )
        except Exception as e:
            return Failure(
                error=AuditError(
                    message=f"Unexpected error querying download attempts: {str(e)}",
                    code=ErrorCode.AUDIT_QUERY_FAILED,
                    details={"error_type": type(e).__name__},
                )
            )

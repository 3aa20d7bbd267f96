"""DownloadTokenRepository - SQLAlchemy implementation for download token persistence.

Handles token creation, lookup with the joined document, the conditional
download counter update, and deactivation.
"""

from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy import and_, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.entities import DownloadToken, ProjectDocument
from src.domain.protocols.download_token_repository import DownloadStatisticsData
from src.infrastructure.persistence.models.download_attempt import (
    DownloadAttempt as DownloadAttemptModel,
)
from src.infrastructure.persistence.models.project_document import (
    ProjectDocument as ProjectDocumentModel,
)
from src.infrastructure.persistence.models.secure_download_token import (
    SecureDownloadToken,
)


def _to_document(model: ProjectDocumentModel) -> ProjectDocument:
    """Convert document model to domain entity."""
    return ProjectDocument(
        id=model.id,
        name=model.name,
        url=model.url,
        type=model.type,
        size=model.size,
        document_category=model.document_category,
        review_stage=model.review_stage,
    )


def _to_entity(
    model: SecureDownloadToken, document: ProjectDocumentModel | None = None
) -> DownloadToken:
    """Convert token model (and joined document) to domain entity."""
    return DownloadToken(
        id=model.id,
        token=model.token,
        document_id=model.document_id,
        recipient_email=model.recipient_email,
        order_id=model.order_id,
        expires_at=model.expires_at,
        max_downloads=model.max_downloads,
        download_count=model.download_count,
        is_active=model.is_active,
        created_at=model.created_at,
        updated_at=model.updated_at,
        document=_to_document(document) if document is not None else None,
    )


def _with_document():
    """Token select with the non-deleted document outer-joined."""
    return select(SecureDownloadToken, ProjectDocumentModel).outerjoin(
        ProjectDocumentModel,
        and_(
            ProjectDocumentModel.id == SecureDownloadToken.document_id,
            ProjectDocumentModel.deleted_at.is_(None),
        ),
    )


class DownloadTokenRepository:
    """SQLAlchemy implementation for download token persistence.

    Every write commits immediately, so a failed insert for one document
    does not leave the session unusable for the next one.

    Attributes:
        session: SQLAlchemy async session for database operations.

    Example:
        >>> async with database.get_session() as session:
        ...     repo = DownloadTokenRepository(session)
        ...     token = await repo.find_active_by_token("Xq3...")
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def save(
        self,
        *,
        token: str,
        document_id: UUID,
        recipient_email: str,
        order_id: str,
        expires_at: datetime,
        max_downloads: int,
    ) -> DownloadToken:
        """Insert a new active token.

        Raises:
            SQLAlchemyError: On constraint violation or connection failure
                (the session is rolled back first).
        """
        model = SecureDownloadToken(
            token=token,
            document_id=document_id,
            recipient_email=recipient_email,
            order_id=order_id,
            expires_at=expires_at,
            max_downloads=max_downloads,
            download_count=0,
            is_active=True,
        )
        self.session.add(model)
        try:
            await self.session.commit()
        except SQLAlchemyError:
            await self.session.rollback()
            raise
        await self.session.refresh(model)
        return _to_entity(model)

    async def find_active_by_token(self, token: str) -> DownloadToken | None:
        """Find an active token by token string, document joined in."""
        stmt = _with_document().where(
            SecureDownloadToken.token == token,
            SecureDownloadToken.is_active.is_(True),
        )
        result = await self.session.execute(stmt)
        row = result.first()
        if row is None:
            return None
        model, document = row
        return _to_entity(model, document)

    async def find_by_id(self, token_id: UUID) -> DownloadToken | None:
        """Find a token by id regardless of state."""
        stmt = _with_document().where(SecureDownloadToken.id == token_id)
        result = await self.session.execute(stmt)
        row = result.first()
        if row is None:
            return None
        model, document = row
        return _to_entity(model, document)

    async def try_consume_download(self, token_id: UUID) -> bool:
        """Increment download_count if the quota still allows it.

        One UPDATE with the quota in its WHERE clause; PostgreSQL row locking
        serializes concurrent increments of the same token.

        Returns:
            True if exactly one row was updated.
        """
        stmt = (
            update(SecureDownloadToken)
            .where(
                SecureDownloadToken.id == token_id,
                SecureDownloadToken.is_active.is_(True),
                SecureDownloadToken.download_count < SecureDownloadToken.max_downloads,
            )
            .values(download_count=SecureDownloadToken.download_count + 1)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.commit()
        return result.rowcount == 1

    async def deactivate(self, token_id: UUID) -> bool:
        """Clear is_active. Matches inactive tokens too (idempotent).

        Returns:
            True if the token exists.
        """
        stmt = (
            update(SecureDownloadToken)
            .where(SecureDownloadToken.id == token_id)
            .values(is_active=False)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.commit()
        return result.rowcount == 1

    async def deactivate_expired(self, now: datetime) -> int:
        """Deactivate all active tokens that expired before now.

        Returns:
            Number of tokens deactivated.
        """
        stmt = (
            update(SecureDownloadToken)
            .where(
                SecureDownloadToken.is_active.is_(True),
                SecureDownloadToken.expires_at < now,
            )
            .values(is_active=False)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.commit()
        return result.rowcount

    async def count_statistics(
        self, order_id: str | None = None
    ) -> DownloadStatisticsData:
        """Count tokens and attempts, optionally for one order."""
        now = datetime.now(UTC)
        active = and_(
            SecureDownloadToken.is_active.is_(True),
            SecureDownloadToken.expires_at > now,
        )

        token_stmt = select(
            func.count(SecureDownloadToken.id),
            func.count(SecureDownloadToken.id).filter(active),
        )
        attempt_stmt = select(
            func.count(DownloadAttemptModel.id),
            func.count(DownloadAttemptModel.id).filter(
                DownloadAttemptModel.success.is_(True)
            ),
        )
        if order_id is not None:
            token_stmt = token_stmt.where(SecureDownloadToken.order_id == order_id)
            attempt_stmt = attempt_stmt.where(
                DownloadAttemptModel.token_id.in_(
                    select(SecureDownloadToken.id).where(
                        SecureDownloadToken.order_id == order_id
                    )
                )
            )

        total_tokens, active_tokens = (await self.session.execute(token_stmt)).one()
        total_attempts, successful = (await self.session.execute(attempt_stmt)).one()

        return DownloadStatisticsData(
            total_tokens=total_tokens,
            active_tokens=active_tokens,
            expired_tokens=total_tokens - active_tokens,
            total_attempts=total_attempts,
            successful_downloads=successful,
            failed_attempts=total_attempts - successful,
        )

"""Download attempt database model.

CRITICAL: This table is APPEND-ONLY. Records cannot be modified or deleted.
Immutability is enforced by PostgreSQL RULES in the migration.
"""

from uuid import UUID

from sqlalchemy import Boolean, CheckConstraint, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.persistence.base import BaseModel


class DownloadAttempt(BaseModel):
    """Download attempt model - IMMUTABLE (cannot be updated or deleted).

    One row per verification outcome, plus informational rows such as
    requests for new links (token_id NULL).

    Fields:
        id: UUID primary key (from BaseModel)
        created_at: When the attempt was recorded (from BaseModel)
        token_id: Resolved token (NULL when not found)
        attempted_email: Normalized email supplied by the requester
        ip_address: Client IP address
        user_agent: Client user agent
        success: Whether the download was allowed
        failure_reason: Reason for refusal (NULL iff success)

    Indexes:
        - idx_download_attempts_token: (token_id) for per-token history
        - idx_download_attempts_email: (attempted_email)
    """

    __tablename__ = "download_attempts"

    token_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("secure_download_tokens.id", ondelete="RESTRICT"),
        nullable=True,
        comment="Resolved token (NULL when the token was not found)",
    )

    attempted_email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Normalized email supplied by the requester",
    )

    ip_address: Mapped[str | None] = mapped_column(
        String(45),  # IPv6 max length
        nullable=True,
    )

    user_agent: Mapped[str | None] = mapped_column(
        String(500),
        nullable=True,
    )

    success: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
    )

    failure_reason: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        comment="Failure taxonomy value or informational note",
    )

    __table_args__ = (
        CheckConstraint(
            "(success AND failure_reason IS NULL) OR "
            "(NOT success AND failure_reason IS NOT NULL)",
            name="ck_failure_reason_iff_failed",
        ),
        Index("idx_download_attempts_token", "token_id"),
        Index("idx_download_attempts_email", "attempted_email"),
        Index("idx_download_attempts_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"<DownloadAttempt(id={self.id}, token_id={self.token_id}, "
            f"success={self.success}, failure_reason={self.failure_reason})>"
        )

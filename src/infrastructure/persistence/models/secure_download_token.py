"""Secure download token database model.

Security:
    - token: At least 32 characters from a secure random source, unique
    - expires_at / max_downloads: fixed at creation
    - download_count: only moved by the conditional increment in the
      repository; CHECK constraints reject any write past max_downloads
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.persistence.base import BaseMutableModel


class SecureDownloadToken(BaseMutableModel):
    """Download token model.

    Token Lifecycle:
        1. Inserted active with download_count=0 when links are generated
        2. Looked up by token string on every download request
        3. download_count incremented once per successful download
        4. is_active cleared on expiry, revocation or cleanup

    Fields:
        id: UUID primary key (from BaseModel)
        created_at / updated_at: Timestamps (from BaseMutableModel)
        token: Token string (unique, indexed)
        document_id: Document the token unlocks
        recipient_email: Normalized email the token is bound to
        order_id: Purchase identifier
        expires_at: Expiry timestamp
        max_downloads: Allowed successful downloads
        download_count: Successful downloads so far
        is_active: Whether the token can still be used

    Indexes:
        - token: unique, for lookup
        - idx_download_tokens_order: (order_id) for statistics
        - idx_download_tokens_cleanup: (is_active, expires_at) for cleanup
    """

    __tablename__ = "secure_download_tokens"

    token: Mapped[str] = mapped_column(
        String(128),
        nullable=False,
        unique=True,
        index=True,
        comment="Unguessable token string (at least 32 characters)",
    )

    document_id: Mapped[UUID] = mapped_column(
        ForeignKey("project_documents.id", ondelete="RESTRICT"),
        nullable=False,
        comment="Document this token unlocks",
    )

    recipient_email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Normalized (lower-cased, trimmed) recipient email",
    )

    order_id: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Purchase the token was issued for",
    )

    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        comment="Timestamp when the link stops working",
    )

    max_downloads: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Successful downloads allowed",
    )

    download_count: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default=text("0"),
        comment="Successful downloads so far",
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        server_default=text("true"),
        comment="False after expiry, revocation or cleanup",
    )

    __table_args__ = (
        CheckConstraint("download_count >= 0", name="ck_download_count_non_negative"),
        CheckConstraint("max_downloads > 0", name="ck_max_downloads_positive"),
        CheckConstraint(
            "download_count <= max_downloads", name="ck_download_count_within_quota"
        ),
        CheckConstraint("char_length(token) >= 32", name="ck_token_min_length"),
        Index("idx_download_tokens_order", "order_id"),
        Index("idx_download_tokens_cleanup", "is_active", "expires_at"),
    )

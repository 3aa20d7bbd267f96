"""Project document database model.

Documents are managed by the catalogue side of the shop; the secure
downloads service only reads them. Deletion is soft (deleted_at) so links
to a removed document resolve to document_missing instead of failing the
foreign key.
"""

from datetime import datetime

from sqlalchemy import BigInteger, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.persistence.base import BaseMutableModel


class ProjectDocument(BaseMutableModel):
    """Purchasable document metadata.

    Fields:
        id: UUID primary key (from BaseModel)
        created_at / updated_at: Timestamps (from BaseMutableModel)
        name: Display name
        url: Storage location
        type: MIME type or extension
        size: Size in bytes
        document_category: Category label
        review_stage: Review stage label
        deleted_at: Soft delete marker (NULL while available)
    """

    __tablename__ = "project_documents"

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Document display name",
    )

    url: Mapped[str] = mapped_column(
        String(2048),
        nullable=False,
        comment="Storage location of the document",
    )

    type: Mapped[str | None] = mapped_column(
        String(100),
        nullable=True,
        comment="MIME type or file extension",
    )

    size: Mapped[int | None] = mapped_column(
        BigInteger,
        nullable=True,
        comment="Size in bytes",
    )

    document_category: Mapped[str | None] = mapped_column(
        String(100),
        nullable=True,
    )

    review_stage: Mapped[str | None] = mapped_column(
        String(100),
        nullable=True,
    )

    deleted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        default=None,
        comment="Soft delete timestamp (NULL while the document is available)",
    )

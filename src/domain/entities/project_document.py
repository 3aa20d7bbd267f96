"""ProjectDocument domain entity.

A purchasable document that download tokens point at. The secure downloads
core never writes documents; it only reads them through the token lookup.
"""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True, slots=True, kw_only=True)
class ProjectDocument:
    """Document metadata returned with a verified download.

    Attributes:
        id: Document identifier.
        name: Display name (also used as the download file name).
        url: Storage location the caller streams or redirects to.
        type: MIME type or file extension, when known.
        size: Size in bytes, when known.
        document_category: Free-form category label.
        review_stage: Review stage label of the document.
    """

    id: UUID
    name: str
    url: str
    type: str | None = None
    size: int | None = None
    document_category: str | None = None
    review_stage: str | None = None

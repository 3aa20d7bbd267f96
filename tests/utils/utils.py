"""Utility functions for testing.

Provides helpers for generating random test data and building download
tokens and documents.
"""

import random
import string
from datetime import UTC, datetime, timedelta
from uuid import UUID

from uuid_extensions import uuid7

from src.domain.entities import DownloadToken, ProjectDocument


def random_lower_string(length: int = 32) -> str:
    """Generate a random lowercase string.

    Args:
        length: Length of the string to generate

    Returns:
        Random lowercase string
    """
    return "".join(random.choices(string.ascii_lowercase, k=length))


def random_email() -> str:
    """Generate a random email address for testing.

    Returns:
        Random email in format: random@example.com
    """
    return f"{random_lower_string(10)}@example.com"


def random_token(length: int = 32) -> str:
    """Generate a random alphanumeric token string."""
    return "".join(random.choices(string.ascii_letters + string.digits, k=length))


def make_document(
    document_id: UUID | None = None,
    name: str = "floor-plan.pdf",
) -> ProjectDocument:
    """Build a ProjectDocument with sensible defaults."""
    return ProjectDocument(
        id=document_id or uuid7(),
        name=name,
        url=f"https://files.example.com/{name}",
        type="application/pdf",
        size=1024,
    )


def make_token(
    *,
    token: str | None = None,
    recipient_email: str = "buyer@x.com",
    order_id: str = "order-1",
    expires_in: timedelta = timedelta(hours=72),
    max_downloads: int = 5,
    download_count: int = 0,
    is_active: bool = True,
    document: ProjectDocument | None = None,
) -> DownloadToken:
    """Build a DownloadToken (expiry relative to now)."""
    document = document or make_document()
    return DownloadToken(
        id=uuid7(),
        token=token or random_token(),
        document_id=document.id,
        recipient_email=recipient_email,
        order_id=order_id,
        expires_at=datetime.now(UTC) + expires_in,
        max_downloads=max_downloads,
        download_count=download_count,
        is_active=is_active,
        document=document,
    )

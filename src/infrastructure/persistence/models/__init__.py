"""Database models for persistence layer.

This package contains SQLAlchemy database models that map to database
tables. These are infrastructure concerns and should not be imported by the
domain layer.

Models Organization:
    - project_document.py: Purchasable documents (read-only here)
    - secure_download_token.py: Download tokens
    - download_attempt.py: Download attempt trail (append-only)

Note:
    Domain entities (dataclasses) live in src/domain/entities/
    Database models live here and are mapped via the repository layer.
"""

from src.infrastructure.persistence.models.download_attempt import DownloadAttempt
from src.infrastructure.persistence.models.project_document import ProjectDocument
from src.infrastructure.persistence.models.secure_download_token import (
    SecureDownloadToken,
)

__all__ = [
    "DownloadAttempt",
    "ProjectDocument",
    "SecureDownloadToken",
]

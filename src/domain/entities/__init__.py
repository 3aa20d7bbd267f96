"""Domain entities.

Entities have identity and (for tokens) a controlled lifecycle.

Usage:
    from src.domain.entities import DownloadToken, DownloadAttempt, ProjectDocument
"""

from src.domain.entities.download_attempt import DownloadAttempt
from src.domain.entities.download_token import DownloadToken
from src.domain.entities.project_document import ProjectDocument

__all__ = [
    "DownloadAttempt",
    "DownloadToken",
    "ProjectDocument",
]

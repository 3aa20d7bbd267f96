"""Domain errors package.

Exports all domain-level error classes for convenient importing.

Usage:
    from src.domain.errors import AuditError, DownloadVerificationError
"""

from src.domain.errors.audit_error import AuditError
from src.domain.errors.download_error import (
    DownloadVerificationError,
    TokenGenerationError,
)

__all__ = [
    "AuditError",
    "DownloadVerificationError",
    "TokenGenerationError",
]

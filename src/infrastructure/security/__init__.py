"""Security infrastructure adapters.

This package contains download token generation:
- Token sources (database function, local CSPRNG)
- SecureDownloadTokenService choosing between them
"""

from src.infrastructure.security.secure_download_token_service import (
    SecureDownloadTokenService,
)
from src.infrastructure.security.token_sources import (
    DatabaseTokenSource,
    LocalTokenSource,
)

__all__ = [
    "DatabaseTokenSource",
    "LocalTokenSource",
    "SecureDownloadTokenService",
]

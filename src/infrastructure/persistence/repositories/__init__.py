"""Repository implementations (adapters for hexagonal architecture).

This package contains concrete implementations of repository protocols
defined in the domain layer.
"""

from src.infrastructure.persistence.repositories.download_token_repository import (
    DownloadTokenRepository,
)

__all__ = [
    "DownloadTokenRepository",
]

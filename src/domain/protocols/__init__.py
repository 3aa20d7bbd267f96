"""Domain protocols (ports) package.

This package contains protocol definitions that the domain layer needs.
Infrastructure adapters implement these protocols without inheritance.

IMPORTANT: Re-exports are ONLY for protocols defined in this package.

Usage:
    from src.domain.protocols import DownloadTokenRepository, DownloadAuditProtocol
"""

# Service protocols
from src.domain.protocols.download_audit_protocol import DownloadAuditProtocol
from src.domain.protocols.ip_lookup_protocol import IPLookupProtocol
from src.domain.protocols.logger_protocol import LoggerProtocol
from src.domain.protocols.token_source_protocol import (
    DownloadTokenServiceProtocol,
    SecureTokenSource,
)

# Repository protocols
from src.domain.protocols.download_token_repository import (
    DownloadStatisticsData,
    DownloadTokenRepository,
)

__all__ = [
    # Service protocols
    "DownloadAuditProtocol",
    "DownloadTokenServiceProtocol",
    "IPLookupProtocol",
    "LoggerProtocol",
    "SecureTokenSource",
    # Repository protocols
    "DownloadStatisticsData",
    "DownloadTokenRepository",
]

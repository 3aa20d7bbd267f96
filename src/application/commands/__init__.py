"""Commands - Write operations that change state.

Commands represent intent to perform an action. They are immutable
dataclasses with imperative names (GenerateDownloadTokens, RevokeDownloadToken).

Each command has a corresponding handler that contains the business logic
to execute the command.
"""

from src.application.commands.download_commands import (
    CleanupExpiredTokens,
    DocumentRef,
    DownloadLinkConfig,
    GenerateDownloadTokens,
    RequestNewDownloadLinks,
    RevokeDownloadToken,
    SecureDownloadLink,
    VerifiedDownload,
    VerifyDownloadToken,
)

__all__ = [
    # Commands
    "CleanupExpiredTokens",
    "GenerateDownloadTokens",
    "RequestNewDownloadLinks",
    "RevokeDownloadToken",
    "VerifyDownloadToken",
    # Inputs and results
    "DocumentRef",
    "DownloadLinkConfig",
    "SecureDownloadLink",
    "VerifiedDownload",
]

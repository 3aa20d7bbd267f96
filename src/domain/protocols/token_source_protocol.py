"""Token source and token generator protocols.

Two levels:
- SecureTokenSource: one raw source of random token strings
  (database function, local CSPRNG). May raise.
- DownloadTokenServiceProtocol: what handlers use. Chooses between sources
  and reports failure as a Result.
"""

from typing import Protocol

from src.core.result import Result
from src.domain.errors import TokenGenerationError


class SecureTokenSource(Protocol):
    """A single source of download token strings."""

    @property
    def name(self) -> str:
        """Short source name used in logs."""
        ...

    async def generate(self) -> str:
        """Produce one token string.

        Raises:
            Exception: Any failure of the underlying source.
        """
        ...


class DownloadTokenServiceProtocol(Protocol):
    """Produces token strings for new download links.

    Implementations:
        - SecureDownloadTokenService: src/infrastructure/security/
    """

    async def generate_token(self) -> Result[str, TokenGenerationError]:
        """Generate one token string of at least 32 characters.

        Returns:
            Success(token) or Failure(TokenGenerationError) when no
            acceptable source produced a value.
        """
        ...

"""Secure download token service.

Produces token strings for new download links.

Token Strategy:
    - Primary source: database function (server-side randomness)
    - Fallback source: local CSPRNG, only if fallback is enabled
    - Every value must be at least 32 characters
    - Using the fallback is logged at WARNING as degraded token entropy

Architecture:
    - Infrastructure service implementing DownloadTokenServiceProtocol
    - Sources injected (SecureTokenSource), so tests swap them freely
"""

from src.core.constants import TOKEN_LENGTH
from src.core.enums import ErrorCode
from src.core.result import Failure, Result, Success
from src.domain.errors import TokenGenerationError
from src.domain.protocols import LoggerProtocol, SecureTokenSource


class SecureDownloadTokenService:
    """Download token generation with an optional fallback source.

    Usage:
        service = SecureDownloadTokenService(
            primary=DatabaseTokenSource(session),
            fallback=LocalTokenSource(),
            logger=logger,
        )
        result = await service.generate_token()
    """

    def __init__(
        self,
        primary: SecureTokenSource,
        logger: LoggerProtocol,
        fallback: SecureTokenSource | None = None,
        fallback_enabled: bool = True,
        min_length: int = TOKEN_LENGTH,
    ) -> None:
        """Initialize token service.

        Args:
            primary: Preferred token source.
            logger: Structured logger.
            fallback: Source used when primary fails.
            fallback_enabled: If False, primary failure is a hard failure.
            min_length: Shortest acceptable token.
        """
        self._primary = primary
        self._fallback = fallback
        self._fallback_enabled = fallback_enabled
        self._min_length = min_length
        self._logger = logger

    async def generate_token(self) -> Result[str, TokenGenerationError]:
        """Generate one token string.

        Returns:
            Success(token) or Failure(TokenGenerationError).
        """
        try:
            token = await self._primary.generate()
            if len(token) >= self._min_length:
                return Success(value=token)
            primary_error = f"token shorter than {self._min_length} characters"
        except Exception as e:
            primary_error = f"{type(e).__name__}: {e}"

        if self._fallback is None or not self._fallback_enabled:
            self._logger.error(
                "download_token_source_failed",
                source=self._primary.name,
                reason=primary_error,
                fallback_enabled=self._fallback_enabled,
            )
            return Failure(
                error=TokenGenerationError(
                    code=ErrorCode.TOKEN_GENERATION_FAILED,
                    message="Secure token source unavailable",
                    details={"source": self._primary.name, "reason": primary_error},
                )
            )

        self._logger.warning(
            "degraded_token_entropy",
            primary_source=self._primary.name,
            fallback_source=self._fallback.name,
            reason=primary_error,
        )
        try:
            token = await self._fallback.generate()
        except Exception as e:
            self._logger.error(
                "download_token_fallback_failed",
                error=e,
                source=self._fallback.name,
            )
            return Failure(
                error=TokenGenerationError(
                    code=ErrorCode.TOKEN_GENERATION_FAILED,
                    message="All token sources failed",
                    details={"source": self._fallback.name, "reason": str(e)},
                )
            )

        if len(token) < self._min_length:
            return Failure(
                error=TokenGenerationError(
                    code=ErrorCode.TOKEN_GENERATION_FAILED,
                    message=f"Generated token shorter than {self._min_length} characters",
                    details={"source": self._fallback.name},
                )
            )
        return Success(value=token)

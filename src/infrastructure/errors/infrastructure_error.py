"""Infrastructure layer error types.

Infrastructure errors represent failures in external systems (lookup
services, the database) that adapters report through Result types.

Architecture:
- Infrastructure catches exceptions and maps to DomainError subclasses
- Infrastructure errors inherit from DomainError (not Exception)
- InfrastructureErrorCode tracks the precise cause internally
"""

from dataclasses import dataclass
from typing import Any

from src.core.errors import DomainError
from src.infrastructure.enums import InfrastructureErrorCode


@dataclass(frozen=True, slots=True, kw_only=True)
class InfrastructureError(DomainError):
    """Base infrastructure error.

    Attributes:
        code: Domain ErrorCode.
        message: Human-readable message.
        infrastructure_code: Precise infrastructure cause.
        details: Additional context.
    """

    infrastructure_code: InfrastructureErrorCode | None = None
    details: dict[str, Any] | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class ExternalServiceError(InfrastructureError):
    """External service call failed (IP lookup services).

    Attributes:
        code: Domain ErrorCode.
        message: Human-readable message.
        infrastructure_code: Timeout, unavailable or bad response.
        service_name: Name of the external service.
        details: Additional context (status code, URL).
    """

    service_name: str

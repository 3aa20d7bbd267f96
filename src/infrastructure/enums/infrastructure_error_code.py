"""Infrastructure-specific error codes.

Internal codes for tracking infrastructure failures. Errors carry them next
to the domain ErrorCode.

Categories:
- External service errors (EXTERNAL_SERVICE_*)
"""

from enum import Enum


class InfrastructureErrorCode(Enum):
    """Infrastructure-specific error codes."""

    # External service errors
    EXTERNAL_SERVICE_UNAVAILABLE = "external_service_unavailable"
    EXTERNAL_SERVICE_TIMEOUT = "external_service_timeout"
    EXTERNAL_SERVICE_BAD_RESPONSE = "external_service_bad_response"

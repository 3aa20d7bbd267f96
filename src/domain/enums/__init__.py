"""Domain enums for business logic.

This package contains enumerations used throughout the domain layer.
Enums are centralized here for discoverability and maintainability.

Available Enums:
    - VerificationFailureReason: Terminal reasons a download is refused
"""

from src.domain.enums.verification_failure_reason import VerificationFailureReason

__all__ = [
    "VerificationFailureReason",
]

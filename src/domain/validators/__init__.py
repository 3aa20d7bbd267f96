"""Domain validators.

Pure validation functions shared by every layer.

Usage:
    from src.domain.validators import normalize_email, validate_email
"""

from src.domain.validators.email import is_valid_email, normalize_email, validate_email

__all__ = [
    "is_valid_email",
    "normalize_email",
    "validate_email",
]

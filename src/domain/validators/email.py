"""Email normalization and syntax rules.

One rule set, applied everywhere an email is stored or compared:
normalize (lower-case, then trim) before persisting or matching, and
validate syntax before a token is ever bound to an address.

Validators are pure functions; validate_email raises ValueError on failure
and returns the normalized address.
"""

import re

# No whitespace, one "@", non-empty local part, dotted domain part.
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def normalize_email(email: str) -> str:
    """Normalize email for storage and comparison.

    Args:
        email: Raw email as supplied by a caller.

    Returns:
        Lower-cased email with leading/trailing whitespace removed.

    Example:
        >>> normalize_email("  User@Example.COM ")
        'user@example.com'
    """
    return email.lower().strip()


def is_valid_email(email: str) -> bool:
    """Check email syntax.

    Surrounding whitespace is ignored; whitespace inside the address is not.

    Args:
        email: Email to check.

    Returns:
        True if the trimmed email is syntactically valid.

    Example:
        >>> is_valid_email("buyer@x.com")
        True
        >>> is_valid_email("buyer@localhost")
        False
    """
    return EMAIL_PATTERN.fullmatch(email.strip()) is not None


def validate_email(email: str) -> str:
    """Validate email syntax and return its normalized form.

    Args:
        email: Email to validate.

    Returns:
        Normalized email.

    Raises:
        ValueError: If email format is invalid.
    """
    if not is_valid_email(email):
        raise ValueError(f"Invalid email format: {email}")
    return normalize_email(email)

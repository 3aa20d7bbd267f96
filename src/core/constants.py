"""Centralized constants for internal implementation details.

This module contains constants that are internal implementation details,
NOT environment-specific configuration. For environment-specific settings,
use `src/core/config.py` instead.

Categories:
- Tokens: Length and alphabet of download tokens
- Download links: Defaults and URL layout
- Timeouts: Default timeouts for external service calls
- Limits: Truncation and safety limits

Example:
    >>> from src.core.constants import TOKEN_LENGTH, DOWNLOAD_PATH_PREFIX
    >>> url = f"{base}{DOWNLOAD_PATH_PREFIX}/{token}"
"""

import string

# =============================================================================
# Tokens
# =============================================================================

TOKEN_LENGTH: int = 32
"""Minimum (and locally generated) length of a download token."""

TOKEN_ALPHABET: str = string.ascii_uppercase + string.ascii_lowercase + string.digits
"""62-character alphabet for locally generated tokens."""

TOKEN_PREVIEW_LENGTH: int = 8
"""Characters of a token that may appear in logs."""


# =============================================================================
# Download Links
# =============================================================================

DEFAULT_EXPIRATION_HOURS: int = 72
"""Default link lifetime (3 days)."""

DEFAULT_MAX_DOWNLOADS: int = 5
"""Default number of successful downloads per link."""

DOWNLOAD_PATH_PREFIX: str = "/secure-download"
"""Path segment that precedes the token in shareable links."""


# =============================================================================
# Timeouts
# =============================================================================

IP_LOOKUP_TIMEOUT_DEFAULT: float = 5.0
"""Default timeout for a single IP lookup service call in seconds."""


# =============================================================================
# IP Lookup Services (tried in this order)
# =============================================================================

IPIFY_URL: str = "https://api.ipify.org?format=json"
IPAPI_URL: str = "https://ipapi.co/json/"
HTTPBIN_URL: str = "https://httpbin.org/ip"


# =============================================================================
# Limits
# =============================================================================

USER_AGENT_MAX_LENGTH: int = 500
"""Maximum stored length of a user agent string."""

IP_ADDRESS_MAX_LENGTH: int = 45
"""Maximum stored length of an IP address (IPv6 text form)."""

AUDIT_QUERY_LIMIT_MAX: int = 1000
"""Upper bound on rows returned by a single audit query."""

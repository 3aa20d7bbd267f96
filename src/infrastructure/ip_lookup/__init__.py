"""Public IP lookup adapters.

Usage:
    from src.infrastructure.ip_lookup import FallbackIPLookup, IpifyLookup
"""

from src.infrastructure.ip_lookup.fallback import FallbackIPLookup
from src.infrastructure.ip_lookup.providers import (
    HttpBinLookup,
    IpApiLookup,
    IpifyLookup,
    JsonIPLookupProvider,
    extract_ip,
)

__all__ = [
    "FallbackIPLookup",
    "HttpBinLookup",
    "IpApiLookup",
    "IpifyLookup",
    "JsonIPLookupProvider",
    "extract_ip",
]

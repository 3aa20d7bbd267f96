"""IP lookup protocol.

Resolves the public address of the current caller from an external
"what is my IP" service. Several providers are capability-equivalent and
are tried in priority order.
"""

from typing import Protocol


class IPLookupProtocol(Protocol):
    """Resolve a public IP address.

    Implementations:
        - IpifyLookup, IpApiLookup, HttpBinLookup: single services
        - FallbackIPLookup: tries providers in order
    """

    @property
    def name(self) -> str:
        """Short provider name used in logs."""
        ...

    async def lookup(self) -> str | None:
        """Return the address, or None if this provider could not tell.

        Implementations should not raise; FallbackIPLookup still guards
        against providers that do.
        """
        ...

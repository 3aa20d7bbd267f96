"""Prioritized IP lookup.

Tries capability-equivalent providers in order and returns the first
address found. Providers that return None or raise are skipped, and an
exhausted list yields None. Never raises.
"""

from collections.abc import Sequence

from src.domain.protocols import IPLookupProtocol, LoggerProtocol


class FallbackIPLookup:
    """IP lookup over an ordered provider list.

    Example:
        >>> lookup = FallbackIPLookup(
        ...     providers=[IpifyLookup(), IpApiLookup(), HttpBinLookup()],
        ...     logger=logger,
        ... )
        >>> await lookup.lookup()
        '203.0.113.7'
    """

    name = "fallback"

    def __init__(
        self,
        providers: Sequence[IPLookupProtocol],
        logger: LoggerProtocol,
    ) -> None:
        """Initialize with providers in priority order.

        Args:
            providers: Providers, highest priority first.
            logger: Logger for provider failures.
        """
        self._providers = list(providers)
        self._logger = logger

    async def lookup(self) -> str | None:
        """Return the first address any provider reports, or None."""
        for provider in self._providers:
            try:
                address = await provider.lookup()
            except Exception as e:
                self._logger.warning(
                    "ip_lookup_provider_failed",
                    provider=provider.name,
                    error_type=type(e).__name__,
                    error_message=str(e),
                )
                continue

            if address:
                return address

            self._logger.debug("ip_lookup_provider_empty", provider=provider.name)

        self._logger.warning(
            "ip_lookup_exhausted",
            providers=[provider.name for provider in self._providers],
        )
        return None

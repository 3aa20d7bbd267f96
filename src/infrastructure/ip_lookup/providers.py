"""Public IP lookup providers.

Each provider calls one "what is my IP" JSON service with httpx and reads
the address from the response. Services disagree on the field name, so
one extraction function accepts all known spellings.

fetch() reports failures as Result types (ExternalServiceError);
lookup() logs them and returns None.

Services (tried in this order by default):
    - ipify:   {"ip": "203.0.113.7"}
    - ipapi:   {"ip": "203.0.113.7", "city": ...}
    - httpbin: {"origin": "203.0.113.7"}
"""

import ipaddress
from typing import Any

import httpx
import structlog

from src.core.constants import (
    HTTPBIN_URL,
    IP_LOOKUP_TIMEOUT_DEFAULT,
    IPAPI_URL,
    IPIFY_URL,
)
from src.core.enums import ErrorCode
from src.core.result import Failure, Result, Success
from src.infrastructure.enums import InfrastructureErrorCode
from src.infrastructure.errors import ExternalServiceError

IP_FIELDS: tuple[str, ...] = ("ip", "origin", "query")


def extract_ip(payload: Any) -> str | None:
    """Read an IP address from a lookup service response.

    Takes the first field of ip, origin, query that parses. A comma-separated
    value (proxied httpbin origin) yields its first entry.

    Args:
        payload: Decoded JSON body.

    Returns:
        The address if it parses as IPv4/IPv6, None otherwise.

    Example:
        >>> extract_ip({"origin": "203.0.113.7, 10.0.0.1"})
        '203.0.113.7'
    """
    if not isinstance(payload, dict):
        return None

    for field in IP_FIELDS:
        value = payload.get(field)
        if not isinstance(value, str) or not value.strip():
            continue
        candidate = value.split(",")[0].strip()
        try:
            return str(ipaddress.ip_address(candidate))
        except ValueError:
            continue
    return None


class JsonIPLookupProvider:
    """IP lookup against a JSON endpoint.

    Attributes:
        name: Provider name for logs and errors.
        url: Endpoint URL.
    """

    def __init__(
        self,
        *,
        name: str,
        url: str,
        timeout: float = IP_LOOKUP_TIMEOUT_DEFAULT,
    ) -> None:
        """Initialize provider.

        Args:
            name: Provider name for logs and errors.
            url: Endpoint returning JSON.
            timeout: Request timeout in seconds.
        """
        self.name = name
        self.url = url
        self._timeout = timeout
        self._logger = structlog.get_logger("ip_lookup")

    def _error(
        self,
        infrastructure_code: InfrastructureErrorCode,
        message: str,
        **details: Any,
    ) -> Failure[ExternalServiceError]:
        return Failure(
            error=ExternalServiceError(
                code=ErrorCode.EXTERNAL_SERVICE_ERROR,
                message=message,
                infrastructure_code=infrastructure_code,
                service_name=self.name,
                details={"url": self.url, **details},
            )
        )

    async def fetch(self) -> Result[str, ExternalServiceError]:
        """Call the service.

        Returns:
            Success(address) or Failure(ExternalServiceError) on timeout,
            connection error, non-2xx status, or a body without an address.
        """
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.get(self.url)
        except httpx.TimeoutException as e:
            return self._error(
                InfrastructureErrorCode.EXTERNAL_SERVICE_TIMEOUT,
                f"{self.name} lookup timed out",
                error=str(e),
            )
        except httpx.RequestError as e:
            return self._error(
                InfrastructureErrorCode.EXTERNAL_SERVICE_UNAVAILABLE,
                f"{self.name} lookup failed to connect",
                error=str(e),
            )

        if response.status_code != 200:
            return self._error(
                InfrastructureErrorCode.EXTERNAL_SERVICE_UNAVAILABLE,
                f"{self.name} lookup returned HTTP {response.status_code}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError:
            return self._error(
                InfrastructureErrorCode.EXTERNAL_SERVICE_BAD_RESPONSE,
                f"{self.name} lookup returned invalid JSON",
            )

        address = extract_ip(payload)
        if address is None:
            return self._error(
                InfrastructureErrorCode.EXTERNAL_SERVICE_BAD_RESPONSE,
                f"{self.name} lookup returned no address",
            )
        return Success(value=address)

    async def lookup(self) -> str | None:
        """Return the address, or None (failure logged)."""
        match await self.fetch():
            case Success(value=address):
                return address
            case Failure(error=error):
                self._logger.warning(
                    f"{self.name}_ip_lookup_failed",
                    error_message=error.message,
                    infrastructure_code=(
                        error.infrastructure_code.value
                        if error.infrastructure_code
                        else None
                    ),
                )
                return None


class IpifyLookup(JsonIPLookupProvider):
    """api.ipify.org provider."""

    def __init__(self, timeout: float = IP_LOOKUP_TIMEOUT_DEFAULT) -> None:
        super().__init__(name="ipify", url=IPIFY_URL, timeout=timeout)


class IpApiLookup(JsonIPLookupProvider):
    """ipapi.co provider."""

    def __init__(self, timeout: float = IP_LOOKUP_TIMEOUT_DEFAULT) -> None:
        super().__init__(name="ipapi", url=IPAPI_URL, timeout=timeout)


class HttpBinLookup(JsonIPLookupProvider):
    """httpbin.org provider."""

    def __init__(self, timeout: float = IP_LOOKUP_TIMEOUT_DEFAULT) -> None:
        super().__init__(name="httpbin", url=HTTPBIN_URL, timeout=timeout)

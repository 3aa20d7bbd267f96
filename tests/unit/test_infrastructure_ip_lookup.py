"""Unit tests for IP lookup providers and the fallback chain.

Tests cover:
- extract_ip: known field names, proxied values, invalid values
- JsonIPLookupProvider.fetch: success, timeout, connection error, HTTP
  error, invalid JSON, missing address
- lookup(): None on failure
- FallbackIPLookup: order, skipping failures, exhaustion

Architecture:
- Uses pytest-httpx for HTTP mocking
"""

from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from pytest_httpx import HTTPXMock

from src.core.constants import HTTPBIN_URL, IPAPI_URL, IPIFY_URL
from src.core.enums import ErrorCode
from src.core.result import Failure, Success
from src.infrastructure.enums import InfrastructureErrorCode
from src.infrastructure.errors import ExternalServiceError
from src.infrastructure.ip_lookup import (
    FallbackIPLookup,
    HttpBinLookup,
    IpApiLookup,
    IpifyLookup,
    extract_ip,
)


def make_provider(name: str, result: str | None = None, error: Exception | None = None):
    provider = AsyncMock()
    provider.name = name
    if error is not None:
        provider.lookup.side_effect = error
    else:
        provider.lookup.return_value = result
    return provider


@pytest.mark.unit
class TestExtractIp:
    """Test extract_ip()."""

    @pytest.mark.parametrize(
        ("payload", "expected"),
        [
            ({"ip": "203.0.113.7"}, "203.0.113.7"),
            ({"origin": "203.0.113.7"}, "203.0.113.7"),
            ({"query": "203.0.113.7"}, "203.0.113.7"),
            ({"origin": "203.0.113.7, 10.0.0.1"}, "203.0.113.7"),
            ({"ip": "2001:db8::1"}, "2001:db8::1"),
            ({"ip": "", "origin": "198.51.100.2"}, "198.51.100.2"),
            ({"ip": "garbage", "origin": "203.0.113.7"}, "203.0.113.7"),
            ({"ip": "garbage", "origin": "also-bad", "query": "192.0.2.5"}, "192.0.2.5"),
        ],
    )
    def test_reads_known_fields(self, payload, expected):
        """Test every known spelling yields the address, skipping bad fields."""
        assert extract_ip(payload) == expected

    @pytest.mark.parametrize(
        "payload",
        [{}, {"city": "Berlin"}, {"ip": "not-an-ip"}, {"ip": 42}, ["203.0.113.7"], None],
    )
    def test_rejects_payloads_without_address(self, payload):
        """Test missing or malformed addresses yield None."""
        assert extract_ip(payload) is None


@pytest.mark.unit
class TestJsonIPLookupProvider:
    """Test provider HTTP handling."""

    @pytest.mark.asyncio
    async def test_ipify_success(self, httpx_mock: HTTPXMock):
        """Test ipify response is parsed."""
        httpx_mock.add_response(url=IPIFY_URL, json={"ip": "203.0.113.7"})

        result = await IpifyLookup().fetch()

        assert result == Success(value="203.0.113.7")

    @pytest.mark.asyncio
    async def test_ipapi_success(self, httpx_mock: HTTPXMock):
        """Test ipapi.co response is parsed."""
        httpx_mock.add_response(
            url=IPAPI_URL, json={"ip": "198.51.100.2", "city": "Berlin"}
        )

        assert await IpApiLookup().lookup() == "198.51.100.2"

    @pytest.mark.asyncio
    async def test_httpbin_success(self, httpx_mock: HTTPXMock):
        """Test httpbin origin field is parsed."""
        httpx_mock.add_response(url=HTTPBIN_URL, json={"origin": "192.0.2.5"})

        assert await HttpBinLookup().lookup() == "192.0.2.5"

    @pytest.mark.asyncio
    async def test_timeout(self, httpx_mock: HTTPXMock):
        """Test timeout maps to EXTERNAL_SERVICE_TIMEOUT."""
        httpx_mock.add_exception(httpx.ReadTimeout("timed out"))

        result = await IpifyLookup(timeout=0.1).fetch()

        assert isinstance(result, Failure)
        assert isinstance(result.error, ExternalServiceError)
        assert result.error.code == ErrorCode.EXTERNAL_SERVICE_ERROR
        assert (
            result.error.infrastructure_code
            == InfrastructureErrorCode.EXTERNAL_SERVICE_TIMEOUT
        )
        assert result.error.service_name == "ipify"

    @pytest.mark.asyncio
    async def test_connection_error(self, httpx_mock: HTTPXMock):
        """Test connection failure maps to EXTERNAL_SERVICE_UNAVAILABLE."""
        httpx_mock.add_exception(httpx.ConnectError("connection refused"))

        result = await IpifyLookup().fetch()

        assert isinstance(result, Failure)
        assert (
            result.error.infrastructure_code
            == InfrastructureErrorCode.EXTERNAL_SERVICE_UNAVAILABLE
        )

    @pytest.mark.asyncio
    async def test_http_error_status(self, httpx_mock: HTTPXMock):
        """Test non-200 status maps to EXTERNAL_SERVICE_UNAVAILABLE."""
        httpx_mock.add_response(url=IPIFY_URL, status_code=503)

        result = await IpifyLookup().fetch()

        assert isinstance(result, Failure)
        assert result.error.details["status_code"] == 503

    @pytest.mark.asyncio
    async def test_invalid_json(self, httpx_mock: HTTPXMock):
        """Test non-JSON body maps to EXTERNAL_SERVICE_BAD_RESPONSE."""
        httpx_mock.add_response(url=IPIFY_URL, content=b"<html>oops</html>")

        result = await IpifyLookup().fetch()

        assert isinstance(result, Failure)
        assert (
            result.error.infrastructure_code
            == InfrastructureErrorCode.EXTERNAL_SERVICE_BAD_RESPONSE
        )

    @pytest.mark.asyncio
    async def test_missing_address(self, httpx_mock: HTTPXMock):
        """Test JSON without an address maps to EXTERNAL_SERVICE_BAD_RESPONSE."""
        httpx_mock.add_response(url=IPIFY_URL, json={"city": "Berlin"})

        result = await IpifyLookup().fetch()

        assert isinstance(result, Failure)
        assert "no address" in result.error.message

    @pytest.mark.asyncio
    async def test_lookup_returns_none_on_failure(self, httpx_mock: HTTPXMock):
        """Test lookup() hides the failure behind None."""
        httpx_mock.add_response(url=IPIFY_URL, status_code=500)

        assert await IpifyLookup().lookup() is None


@pytest.mark.unit
class TestFallbackIPLookup:
    """Test provider chain."""

    @pytest.mark.asyncio
    async def test_first_provider_wins(self):
        """Test later providers are not called once one answers."""
        first = make_provider("ipify", "203.0.113.7")
        second = make_provider("ipapi", "198.51.100.2")
        lookup = FallbackIPLookup(providers=[first, second], logger=MagicMock())

        assert await lookup.lookup() == "203.0.113.7"
        second.lookup.assert_not_called()

    @pytest.mark.asyncio
    async def test_skips_empty_and_failing_providers(self):
        """Test None and exceptions move on to the next provider."""
        empty = make_provider("ipify", None)
        broken = make_provider("ipapi", error=RuntimeError("boom"))
        working = make_provider("httpbin", "192.0.2.5")
        mock_logger = MagicMock()
        lookup = FallbackIPLookup(providers=[empty, broken, working], logger=mock_logger)

        assert await lookup.lookup() == "192.0.2.5"
        mock_logger.warning.assert_called_once()
        assert mock_logger.warning.call_args.args[0] == "ip_lookup_provider_failed"
        assert mock_logger.warning.call_args.kwargs["provider"] == "ipapi"

    @pytest.mark.asyncio
    async def test_exhausted_returns_none(self):
        """Test all providers failing yields None."""
        mock_logger = MagicMock()
        lookup = FallbackIPLookup(
            providers=[make_provider("ipify"), make_provider("ipapi")],
            logger=mock_logger,
        )

        assert await lookup.lookup() is None
        assert mock_logger.warning.call_args.args[0] == "ip_lookup_exhausted"
        assert mock_logger.warning.call_args.kwargs["providers"] == ["ipify", "ipapi"]

    @pytest.mark.asyncio
    async def test_chain_over_http_providers(self, httpx_mock: HTTPXMock):
        """Test real providers fall through to the first working service."""
        httpx_mock.add_response(url=IPIFY_URL, status_code=503)
        httpx_mock.add_response(url=IPAPI_URL, json={"error": True})
        httpx_mock.add_response(url=HTTPBIN_URL, json={"origin": "192.0.2.5"})
        lookup = FallbackIPLookup(
            providers=[IpifyLookup(), IpApiLookup(), HttpBinLookup()],
            logger=MagicMock(),
        )

        assert await lookup.lookup() == "192.0.2.5"

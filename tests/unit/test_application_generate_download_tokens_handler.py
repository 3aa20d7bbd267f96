"""Unit tests for GenerateDownloadTokensHandler.

Tests cover:
- One link per document, bound to the normalized email and one expiry
- URL format (base URL, path prefix, percent-encoded email)
- Partial failure: failed documents are skipped, the rest succeed
- Validation failures (email, expiration hours, max downloads)

Architecture:
- In-memory token store (tests/utils/fakes.py)
- Real SecureDownloadTokenService over the local token source
"""

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest
from uuid_extensions import uuid7

from src.application.commands.download_commands import (
    DocumentRef,
    DownloadLinkConfig,
    GenerateDownloadTokens,
)
from src.application.commands.handlers.generate_download_tokens_handler import (
    GenerateDownloadTokensHandler,
    build_secure_url,
)
from src.core.enums import ErrorCode
from src.core.errors import ValidationError
from src.core.result import Failure, Success
from src.domain.errors import TokenGenerationError
from src.infrastructure.security import LocalTokenSource, SecureDownloadTokenService

BASE_URL = "https://shop.example.com"


def make_refs(count: int) -> list[DocumentRef]:
    return [DocumentRef(id=uuid7(), name=f"document-{i}.pdf") for i in range(count)]


@pytest.fixture
def handler(store, mock_logger) -> GenerateDownloadTokensHandler:
    return GenerateDownloadTokensHandler(
        token_repo=store,
        token_service=SecureDownloadTokenService(
            primary=LocalTokenSource(), logger=mock_logger
        ),
        logger=mock_logger,
        base_url=BASE_URL,
    )


@pytest.mark.unit
class TestBuildSecureUrl:
    """Test build_secure_url()."""

    def test_url_layout(self):
        """Test URL is base + /secure-download/ + token + email query."""
        url = build_secure_url(BASE_URL, "abc123", "buyer@x.com")

        assert url == f"{BASE_URL}/secure-download/abc123?email=buyer%40x.com"

    def test_email_is_fully_percent_encoded(self):
        """Test reserved characters in the email are encoded."""
        url = build_secure_url(BASE_URL, "abc", "a+b/c@x.com")

        assert url.endswith("?email=a%2Bb%2Fc%40x.com")

    def test_trailing_slash_on_base_is_ignored(self):
        """Test no double slash when base URL ends with '/'."""
        url = build_secure_url(f"{BASE_URL}/", "abc", "buyer@x.com")

        assert url.startswith(f"{BASE_URL}/secure-download/abc?")


@pytest.mark.unit
class TestGenerateDownloadTokensSuccess:
    """Test successful link generation."""

    @pytest.mark.asyncio
    async def test_one_link_per_document(self, handler, store):
        """Test every document gets a stored, active token and a link."""
        # Arrange
        documents = make_refs(3)
        cmd = GenerateDownloadTokens(
            documents=documents, recipient_email="buyer@x.com", order_id="order-42"
        )

        # Act
        result = await handler.handle(cmd)

        # Assert
        assert isinstance(result, Success)
        links = result.value
        assert [link.document_id for link in links] == [d.id for d in documents]
        assert [link.document_name for link in links] == [d.name for d in documents]
        assert len(store.tokens) == 3
        for stored in store.tokens.values():
            assert stored.order_id == "order-42"
            assert stored.download_count == 0
            assert stored.is_active is True
            assert stored.max_downloads == 5

    @pytest.mark.asyncio
    async def test_tokens_are_unique_and_long_enough(self, handler):
        """Test token strings are distinct and at least 32 characters."""
        cmd = GenerateDownloadTokens(
            documents=make_refs(5), recipient_email="buyer@x.com", order_id="order-1"
        )

        result = await handler.handle(cmd)

        tokens = [link.token for link in result.value]
        assert len(set(tokens)) == 5
        assert all(len(token) >= 32 for token in tokens)

    @pytest.mark.asyncio
    async def test_email_is_normalized(self, handler, store):
        """Test stored and returned email is lower-cased and trimmed."""
        cmd = GenerateDownloadTokens(
            documents=make_refs(1), recipient_email="  Buyer@X.com ", order_id="o-1"
        )

        result = await handler.handle(cmd)

        link = result.value[0]
        assert link.recipient_email == "buyer@x.com"
        assert next(iter(store.tokens.values())).recipient_email == "buyer@x.com"
        assert link.secure_url == (
            f"{BASE_URL}/secure-download/{link.token}?email=buyer%40x.com"
        )

    @pytest.mark.asyncio
    async def test_batch_shares_one_expiry(self, handler, store):
        """Test all links expire at the same instant, 72 hours out by default."""
        before = datetime.now(UTC)
        cmd = GenerateDownloadTokens(
            documents=make_refs(3), recipient_email="buyer@x.com", order_id="o-1"
        )

        result = await handler.handle(cmd)
        after = datetime.now(UTC)

        expiries = {link.expires_at for link in result.value}
        assert len(expiries) == 1
        expires_at = expiries.pop()
        assert before + timedelta(hours=72) <= expires_at <= after + timedelta(hours=72)

    @pytest.mark.asyncio
    async def test_custom_config_is_applied(self, handler, store):
        """Test expiration hours and max downloads overrides."""
        before = datetime.now(UTC)
        cmd = GenerateDownloadTokens(
            documents=make_refs(1),
            recipient_email="buyer@x.com",
            order_id="o-1",
            config=DownloadLinkConfig(expiration_hours=1, max_downloads=2),
        )

        result = await handler.handle(cmd)

        link = result.value[0]
        stored = next(iter(store.tokens.values()))
        assert stored.max_downloads == 2
        assert link.expires_at < before + timedelta(hours=2)

    @pytest.mark.asyncio
    async def test_empty_document_list_returns_empty_success(self, handler, store):
        """Test no documents yields Success([])."""
        cmd = GenerateDownloadTokens(
            documents=[], recipient_email="buyer@x.com", order_id="o-1"
        )

        result = await handler.handle(cmd)

        assert isinstance(result, Success)
        assert result.value == []
        assert store.tokens == {}


@pytest.mark.unit
class TestGenerateDownloadTokensPartialFailure:
    """Test per-document failures do not abort the batch."""

    @pytest.mark.asyncio
    async def test_failed_insert_is_skipped(self, handler, store, mock_logger):
        """Test 3 documents with 1 rejected insert yields 2 links."""
        # Arrange
        documents = make_refs(3)
        store.fail_save_for.add(documents[1].id)
        cmd = GenerateDownloadTokens(
            documents=documents, recipient_email="buyer@x.com", order_id="o-1"
        )

        # Act
        result = await handler.handle(cmd)

        # Assert
        assert isinstance(result, Success)
        assert [link.document_id for link in result.value] == [
            documents[0].id,
            documents[2].id,
        ]
        assert len(store.tokens) == 2
        error_events = [c.args[0] for c in mock_logger.error.call_args_list]
        assert "download_token_store_failed" in error_events
        warning_events = [c.args[0] for c in mock_logger.warning.call_args_list]
        assert "download_links_partially_generated" in warning_events

    @pytest.mark.asyncio
    async def test_token_generation_failure_is_skipped(self, store, mock_logger):
        """Test a document whose token cannot be generated is skipped."""
        token_service = AsyncMock()
        token_service.generate_token.side_effect = [
            Success(value="a" * 32),
            Failure(
                error=TokenGenerationError(
                    code=ErrorCode.TOKEN_GENERATION_FAILED,
                    message="Secure token source unavailable",
                )
            ),
        ]
        handler = GenerateDownloadTokensHandler(
            token_repo=store,
            token_service=token_service,
            logger=mock_logger,
            base_url=BASE_URL,
        )
        documents = make_refs(2)
        cmd = GenerateDownloadTokens(
            documents=documents, recipient_email="buyer@x.com", order_id="o-1"
        )

        result = await handler.handle(cmd)

        assert isinstance(result, Success)
        assert len(result.value) == 1
        assert result.value[0].document_id == documents[0].id
        error_events = [c.args[0] for c in mock_logger.error.call_args_list]
        assert "download_token_generation_failed" in error_events


@pytest.mark.unit
class TestGenerateDownloadTokensValidation:
    """Test input validation."""

    @pytest.mark.asyncio
    async def test_invalid_email_fails(self, handler, store):
        """Test malformed recipient email returns Failure(ValidationError)."""
        cmd = GenerateDownloadTokens(
            documents=make_refs(1), recipient_email="not-an-email", order_id="o-1"
        )

        result = await handler.handle(cmd)

        assert isinstance(result, Failure)
        assert isinstance(result.error, ValidationError)
        assert result.error.code == ErrorCode.INVALID_EMAIL
        assert result.error.field == "recipient_email"
        assert store.tokens == {}

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("config", "field"),
        [
            (DownloadLinkConfig(expiration_hours=0), "expiration_hours"),
            (DownloadLinkConfig(max_downloads=0), "max_downloads"),
        ],
    )
    async def test_non_positive_settings_fail(self, handler, store, config, field):
        """Test expiration_hours and max_downloads must be at least 1."""
        cmd = GenerateDownloadTokens(
            documents=make_refs(1),
            recipient_email="buyer@x.com",
            order_id="o-1",
            config=config,
        )

        result = await handler.handle(cmd)

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.VALIDATION_FAILED
        assert result.error.field == field
        assert store.tokens == {}

    @pytest.mark.asyncio
    async def test_token_service_not_called_on_invalid_input(self, store):
        """Test validation happens before any token is generated."""
        token_service = AsyncMock()
        handler = GenerateDownloadTokensHandler(
            token_repo=store,
            token_service=token_service,
            logger=MagicMock(),
            base_url=BASE_URL,
        )
        cmd = GenerateDownloadTokens(
            documents=make_refs(2), recipient_email="bad", order_id="o-1"
        )

        await handler.handle(cmd)

        token_service.generate_token.assert_not_called()

"""Unit tests for the DownloadToken entity.

Tests cover:
- Expiry (strictly after expires_at)
- Quota checks and remaining downloads
- Email matching (case and whitespace insensitive)
"""

from datetime import UTC, datetime, timedelta

import pytest
from freezegun import freeze_time

from tests.utils.utils import make_document, make_token


@pytest.mark.unit
class TestDownloadTokenExpiry:
    """Test DownloadToken.is_expired()."""

    def test_future_expiry_is_not_expired(self):
        """Test token expiring later is still valid."""
        token = make_token(expires_in=timedelta(hours=1))

        assert token.is_expired() is False

    def test_past_expiry_is_expired(self):
        """Test token whose expiry passed is expired."""
        token = make_token(expires_in=timedelta(seconds=-1))

        assert token.is_expired() is True

    def test_exact_expiry_instant_is_not_expired(self):
        """Test expiry is strict: now == expires_at is still valid."""
        token = make_token()

        assert token.is_expired(token.expires_at) is False
        assert token.is_expired(token.expires_at + timedelta(microseconds=1)) is True

    def test_default_reference_time_is_current_utc(self):
        """Test is_expired() without an argument reads the clock."""
        with freeze_time("2026-01-01 12:00:00"):
            token = make_token(expires_in=timedelta(hours=72))
            expires_at = token.expires_at

        assert expires_at == datetime(2026, 1, 4, 12, 0, tzinfo=UTC)

        with freeze_time("2026-01-04 12:00:00"):
            assert token.is_expired() is False

        with freeze_time("2026-01-04 12:00:01"):
            assert token.is_expired() is True

    def test_uses_given_reference_time(self):
        """Test explicit now overrides the clock."""
        token = make_token(expires_in=timedelta(hours=1))
        later = datetime.now(UTC) + timedelta(hours=2)

        assert token.is_expired(later) is True


@pytest.mark.unit
class TestDownloadTokenQuota:
    """Test quota helpers."""

    def test_fresh_token_has_remaining_downloads(self):
        """Test new token has its full quota."""
        token = make_token(max_downloads=5)

        assert token.has_remaining_downloads() is True
        assert token.remaining_downloads == 5

    def test_exhausted_token_has_none_left(self):
        """Test download_count == max_downloads exhausts the quota."""
        token = make_token(max_downloads=2, download_count=2)

        assert token.has_remaining_downloads() is False
        assert token.remaining_downloads == 0

    def test_partially_used_token(self):
        """Test remaining downloads after some use."""
        token = make_token(max_downloads=3, download_count=1)

        assert token.has_remaining_downloads() is True
        assert token.remaining_downloads == 2


@pytest.mark.unit
class TestDownloadTokenEmail:
    """Test DownloadToken.matches_email()."""

    @pytest.mark.parametrize("claimed", ["buyer@x.com", "BUYER@X.COM", "  Buyer@x.com "])
    def test_matches_normalized_email(self, claimed):
        """Test case and surrounding whitespace are ignored."""
        token = make_token(recipient_email="buyer@x.com")

        assert token.matches_email(claimed) is True

    def test_different_email_does_not_match(self):
        """Test another address is rejected."""
        token = make_token(recipient_email="buyer@x.com")

        assert token.matches_email("other@x.com") is False


@pytest.mark.unit
class TestDownloadTokenDocument:
    """Test joined document metadata."""

    def test_document_id_matches_joined_document(self):
        """Test builder binds the token to its document."""
        document = make_document(name="specs.pdf")
        token = make_token(document=document)

        assert token.document_id == document.id
        assert token.document is document
        assert token.document.name == "specs.pdf"

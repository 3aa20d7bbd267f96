"""Unit tests for DownloadAuditLogger.

Tests cover:
- Email normalization and user agent truncation
- Failure reason rules (None on success, system_error when missing)
- Enum and free-text reasons
- Recording failures (Failure result, exception) are logged, never raised
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from uuid_extensions import uuid7

from src.application.services.download_audit_logger import DownloadAuditLogger
from src.core.enums import ErrorCode
from src.core.result import Failure, Success
from src.domain.enums import VerificationFailureReason
from src.domain.errors import AuditError


@pytest.fixture
def mock_audit() -> AsyncMock:
    audit = AsyncMock()
    audit.record.return_value = Success(value=None)
    return audit


@pytest.mark.unit
class TestDownloadAuditLoggerRecording:
    """Test what gets written."""

    @pytest.mark.asyncio
    async def test_success_attempt(self, mock_audit):
        """Test success is recorded with normalized email and no reason."""
        # Arrange
        logger = DownloadAuditLogger(audit=mock_audit, logger=MagicMock())
        token_id = uuid7()

        # Act
        recorded = await logger.log_attempt(
            token_id=token_id,
            email="  Buyer@X.COM ",
            success=True,
            ip_address="203.0.113.7",
            user_agent="Mozilla/5.0",
        )

        # Assert
        assert recorded is True
        mock_audit.record.assert_awaited_once_with(
            token_id=token_id,
            attempted_email="buyer@x.com",
            success=True,
            failure_reason=None,
            ip_address="203.0.113.7",
            user_agent="Mozilla/5.0",
        )

    @pytest.mark.asyncio
    async def test_success_drops_failure_reason(self, mock_audit):
        """Test a reason passed with success=True is not stored."""
        logger = DownloadAuditLogger(audit=mock_audit, logger=MagicMock())

        await logger.log_attempt(
            email="buyer@x.com",
            success=True,
            failure_reason=VerificationFailureReason.EXPIRED,
        )

        assert mock_audit.record.await_args.kwargs["failure_reason"] is None

    @pytest.mark.asyncio
    async def test_enum_reason_stored_as_value(self, mock_audit):
        """Test VerificationFailureReason is stored as its string value."""
        logger = DownloadAuditLogger(audit=mock_audit, logger=MagicMock())

        await logger.log_attempt(
            email="buyer@x.com",
            success=False,
            failure_reason=VerificationFailureReason.QUOTA_EXCEEDED,
        )

        assert mock_audit.record.await_args.kwargs["failure_reason"] == "quota_exceeded"

    @pytest.mark.asyncio
    async def test_free_text_reason_kept(self, mock_audit):
        """Test informational reasons are stored verbatim."""
        logger = DownloadAuditLogger(audit=mock_audit, logger=MagicMock())

        await logger.log_attempt(
            email="buyer@x.com",
            success=False,
            failure_reason="New download links requested for order o-1",
        )

        assert (
            mock_audit.record.await_args.kwargs["failure_reason"]
            == "New download links requested for order o-1"
        )

    @pytest.mark.asyncio
    async def test_failure_without_reason_is_system_error(self, mock_audit):
        """Test a failed attempt always carries a reason."""
        logger = DownloadAuditLogger(audit=mock_audit, logger=MagicMock())

        await logger.log_attempt(email="buyer@x.com", success=False)

        assert mock_audit.record.await_args.kwargs["failure_reason"] == "system_error"

    @pytest.mark.asyncio
    async def test_user_agent_truncated(self, mock_audit):
        """Test user agent is cut to 500 characters."""
        logger = DownloadAuditLogger(audit=mock_audit, logger=MagicMock())

        await logger.log_attempt(email="buyer@x.com", success=True, user_agent="A" * 800)

        assert mock_audit.record.await_args.kwargs["user_agent"] == "A" * 500

    @pytest.mark.asyncio
    async def test_ip_address_truncated(self, mock_audit):
        """Test IP address is cut to 45 characters."""
        logger = DownloadAuditLogger(audit=mock_audit, logger=MagicMock())

        await logger.log_attempt(email="buyer@x.com", success=True, ip_address="x" * 200)

        assert mock_audit.record.await_args.kwargs["ip_address"] == "x" * 45


@pytest.mark.unit
class TestDownloadAuditLoggerFailures:
    """Test recording failures never propagate."""

    @pytest.mark.asyncio
    async def test_failure_result_is_logged(self, mock_audit):
        """Test Failure from the adapter is logged and reported as False."""
        mock_audit.record.return_value = Failure(
            error=AuditError(
                code=ErrorCode.AUDIT_RECORD_FAILED,
                message="Failed to record download attempt: connection lost",
            )
        )
        mock_logger = MagicMock()
        logger = DownloadAuditLogger(audit=mock_audit, logger=mock_logger)

        recorded = await logger.log_attempt(email="buyer@x.com", success=True)

        assert recorded is False
        mock_logger.error.assert_called_once()
        call = mock_logger.error.call_args
        assert call.args[0] == "download_attempt_not_recorded"
        assert call.kwargs["error_code"] == "audit_record_failed"

    @pytest.mark.asyncio
    async def test_exception_is_logged(self, mock_audit):
        """Test an exception from the adapter is swallowed and logged."""
        error = RuntimeError("pool exhausted")
        mock_audit.record.side_effect = error
        mock_logger = MagicMock()
        logger = DownloadAuditLogger(audit=mock_audit, logger=mock_logger)

        recorded = await logger.log_attempt(
            email="buyer@x.com",
            success=False,
            failure_reason=VerificationFailureReason.EXPIRED,
        )

        assert recorded is False
        call = mock_logger.error.call_args
        assert call.args[0] == "download_attempt_not_recorded"
        assert call.kwargs["error"] is error
        assert call.kwargs["failure_reason"] == "expired"

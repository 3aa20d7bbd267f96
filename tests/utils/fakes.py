"""In-memory test doubles for the download token and attempt ports.

InMemoryDownloadStore implements both DownloadTokenRepository and
DownloadAuditProtocol over plain dicts and lists, so handler tests can
assert on state instead of on mock calls.

Reads yield to the event loop after taking their snapshot, which lets
concurrent verifications interleave between the quota check and the
conditional increment the way separate database round trips would.
"""

import asyncio
from dataclasses import replace
from datetime import UTC, datetime, timedelta
from uuid import UUID

from uuid_extensions import uuid7

from src.core.enums import ErrorCode
from src.core.result import Failure, Result, Success
from src.domain.entities import DownloadAttempt, DownloadToken, ProjectDocument
from src.domain.errors import AuditError
from src.domain.protocols import DownloadStatisticsData


class InMemoryDownloadStore:
    """Dict-backed token repository and attempt trail."""

    def __init__(self) -> None:
        self.documents: dict[UUID, ProjectDocument] = {}
        self.deleted_documents: set[UUID] = set()
        self.tokens: dict[UUID, DownloadToken] = {}
        self.attempts: list[DownloadAttempt] = []

        # Failure injection
        self.fail_save_for: set[UUID] = set()
        self.lookup_error: Exception | None = None
        self.deactivate_error: Exception | None = None
        self.record_fails: bool = False

    # ------------------------------------------------------------------
    # Test setup helpers
    # ------------------------------------------------------------------

    def add_document(self, document: ProjectDocument) -> ProjectDocument:
        self.documents[document.id] = document
        return document

    def delete_document(self, document_id: UUID) -> None:
        """Soft delete: tokens keep pointing at it, reads see no document."""
        self.deleted_documents.add(document_id)

    def add_token(self, token: DownloadToken) -> DownloadToken:
        if token.document is not None:
            self.add_document(token.document)
        self.tokens[token.id] = replace(token, document=None)
        return token

    def attempts_for(self, token_id: UUID | None) -> list[DownloadAttempt]:
        return [a for a in self.attempts if a.token_id == token_id]

    def _document_for(self, document_id: UUID) -> ProjectDocument | None:
        if document_id in self.deleted_documents:
            return None
        return self.documents.get(document_id)

    def _snapshot(self, token: DownloadToken) -> DownloadToken:
        return replace(token, document=self._document_for(token.document_id))

    # ------------------------------------------------------------------
    # DownloadTokenRepository
    # ------------------------------------------------------------------

    async def save(
        self,
        *,
        token: str,
        document_id: UUID,
        recipient_email: str,
        order_id: str,
        expires_at: datetime,
        max_downloads: int,
    ) -> DownloadToken:
        if document_id in self.fail_save_for:
            raise RuntimeError(f"insert failed for document {document_id}")
        if any(t.token == token for t in self.tokens.values()):
            raise RuntimeError("duplicate token")

        stored = DownloadToken(
            id=uuid7(),
            token=token,
            document_id=document_id,
            recipient_email=recipient_email,
            order_id=order_id,
            expires_at=expires_at,
            max_downloads=max_downloads,
        )
        self.tokens[stored.id] = stored
        return self._snapshot(stored)

    async def find_active_by_token(self, token: str) -> DownloadToken | None:
        if self.lookup_error is not None:
            raise self.lookup_error

        found = next(
            (t for t in self.tokens.values() if t.token == token and t.is_active),
            None,
        )
        snapshot = self._snapshot(found) if found is not None else None
        await asyncio.sleep(0)
        return snapshot

    async def find_by_id(self, token_id: UUID) -> DownloadToken | None:
        found = self.tokens.get(token_id)
        return self._snapshot(found) if found is not None else None

    async def try_consume_download(self, token_id: UUID) -> bool:
        token = self.tokens.get(token_id)
        if token is None or not token.is_active:
            return False
        if token.download_count >= token.max_downloads:
            return False
        token.download_count += 1
        token.updated_at = datetime.now(UTC)
        return True

    async def deactivate(self, token_id: UUID) -> bool:
        if self.deactivate_error is not None:
            raise self.deactivate_error
        token = self.tokens.get(token_id)
        if token is None:
            return False
        token.is_active = False
        return True

    async def deactivate_expired(self, now: datetime) -> int:
        expired = [
            t for t in self.tokens.values() if t.is_active and t.expires_at < now
        ]
        for token in expired:
            token.is_active = False
        return len(expired)

    async def count_statistics(
        self, order_id: str | None = None
    ) -> DownloadStatisticsData:
        now = datetime.now(UTC)
        tokens = [
            t for t in self.tokens.values() if order_id is None or t.order_id == order_id
        ]
        token_ids = {t.id for t in tokens}
        attempts = [
            a for a in self.attempts if order_id is None or a.token_id in token_ids
        ]
        active = sum(1 for t in tokens if t.is_active and t.expires_at > now)
        successful = sum(1 for a in attempts if a.success)
        return DownloadStatisticsData(
            total_tokens=len(tokens),
            active_tokens=active,
            expired_tokens=len(tokens) - active,
            total_attempts=len(attempts),
            successful_downloads=successful,
            failed_attempts=len(attempts) - successful,
        )

    # ------------------------------------------------------------------
    # DownloadAuditProtocol
    # ------------------------------------------------------------------

    async def record(
        self,
        *,
        attempted_email: str,
        success: bool,
        token_id: UUID | None = None,
        failure_reason: str | None = None,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> Result[None, AuditError]:
        if self.record_fails:
            return Failure(
                error=AuditError(
                    code=ErrorCode.AUDIT_RECORD_FAILED,
                    message="Failed to record download attempt: connection lost",
                )
            )

        attempted_at = datetime.now(UTC)
        if self.attempts and attempted_at <= self.attempts[-1].attempted_at:
            # Keep insertion order visible in timestamps
            attempted_at = self.attempts[-1].attempted_at + timedelta(microseconds=1)

        self.attempts.append(
            DownloadAttempt(
                id=uuid7(),
                token_id=token_id,
                attempted_email=attempted_email,
                success=success,
                failure_reason=failure_reason,
                ip_address=ip_address,
                user_agent=user_agent,
                attempted_at=attempted_at,
            )
        )
        return Success(value=None)

    async def query(
        self,
        *,
        token_id: UUID | None = None,
        attempted_email: str | None = None,
        success: bool | None = None,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> Result[list[DownloadAttempt], AuditError]:
        rows = [
            a
            for a in self.attempts
            if (token_id is None or a.token_id == token_id)
            and (attempted_email is None or a.attempted_email == attempted_email)
            and (success is None or a.success is success)
            and (start_date is None or a.attempted_at >= start_date)
            and (end_date is None or a.attempted_at <= end_date)
        ]
        rows.sort(key=lambda a: a.attempted_at, reverse=True)
        return Success(value=rows[offset : offset + limit])

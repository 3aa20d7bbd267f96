"""DownloadAttempt domain entity.

One immutable record per verification outcome (success or failure) plus
informational entries such as link re-issue requests. Attempts are
append-only: nothing in the application updates or deletes them.
"""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True, slots=True, kw_only=True)
class DownloadAttempt:
    """Download attempt audit record.

    Attributes:
        id: Attempt identifier.
        token_id: Token the attempt resolved to (None if unresolved).
        attempted_email: Normalized email supplied by the requester.
        ip_address: Client IP address, when known.
        user_agent: Client user agent, when known.
        success: Whether the download was allowed.
        failure_reason: Reason for refusal (present iff success is False).
        attempted_at: When the attempt was recorded.
    """

    id: UUID
    token_id: UUID | None
    attempted_email: str
    success: bool
    attempted_at: datetime
    failure_reason: str | None = None
    ip_address: str | None = None
    user_agent: str | None = None

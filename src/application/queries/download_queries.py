"""Secure download queries (CQRS read operations).

Queries NEVER change state.
"""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True, kw_only=True)
class GetDownloadStatistics:
    """Token and attempt counts.

    Attributes:
        order_id: Restrict to one purchase (None for everything).

    Example:
        >>> result = await handler.handle(GetDownloadStatistics(order_id="order-42"))
    """

    order_id: str | None = None


@dataclass(frozen=True, kw_only=True)
class ListDownloadAttempts:
    """Read the attempt trail, newest first.

    Attributes:
        token_id: Filter by token.
        email: Filter by email (normalized before querying).
        success: Filter by outcome.
        start_date: From date (inclusive).
        end_date: To date (inclusive).
        limit: Maximum results.
        offset: Pagination offset.
    """

    token_id: UUID | None = None
    email: str | None = None
    success: bool | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    limit: int = 100
    offset: int = 0


@dataclass(frozen=True, kw_only=True)
class GetDownloadToken:
    """Single token by id, whatever its state (support lookups).

    Attributes:
        token_id: Token record identifier.
    """

    token_id: UUID

"""Result types for railway-oriented programming.

Operations that can fail in expected ways return a Result instead of raising.
Handlers inspect the outcome explicitly, which keeps every failure branch
visible (and testable) at the call site.

Usage:
    result = await handler.handle(VerifyDownloadToken(token=token, email=email))
    match result:
        case Success(value=verified):
            stream(verified.document.url)
        case Failure(error=error):
            show(error.message)
"""

from dataclasses import dataclass
from typing import Generic, TypeAlias, TypeVar

T = TypeVar("T")  # Success type
E = TypeVar("E")  # Error type


@dataclass(frozen=True, slots=True, kw_only=True)
class Success(Generic[T]):
    """Represents a successful operation result.

    Attributes:
        value: The successful result value.
    """

    value: T


@dataclass(frozen=True, slots=True, kw_only=True)
class Failure(Generic[E]):
    """Represents a failed operation result.

    Attributes:
        error: The error that occurred.
    """

    error: E


# Type alias for Result union
Result: TypeAlias = Success[T] | Failure[E]

"""Download token sources.

Two interchangeable sources of token strings:

- DatabaseTokenSource: PostgreSQL function generate_secure_token()
  (pgcrypto gen_random_bytes, installed by the migration). Preferred.
- LocalTokenSource: 32 characters drawn with the secrets module from a
  62-character alphabet (about 190 bits). Used when the database
  function is unavailable.

Both are plain callables behind SecureTokenSource; choosing between them
is SecureDownloadTokenService's job.
"""

import secrets

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.constants import TOKEN_ALPHABET, TOKEN_LENGTH


class DatabaseTokenSource:
    """Token source backed by the generate_secure_token() SQL function.

    Attributes:
        session: SQLAlchemy async session shared with the request.
    """

    name = "database"

    def __init__(self, session: AsyncSession) -> None:
        """Initialize source with database session.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def generate(self) -> str:
        """Call generate_secure_token() inside a savepoint.

        A failed call rolls back only the savepoint, so the session stays
        usable for the caller.

        Returns:
            Token string produced by the database.

        Raises:
            SQLAlchemyError: If the function is missing or the call fails.
            ValueError: If the function returned NULL.
        """
        async with self.session.begin_nested():
            result = await self.session.execute(select(func.generate_secure_token()))
            token = result.scalar_one()
        if not token:
            raise ValueError("generate_secure_token() returned no value")
        return str(token)


class LocalTokenSource:
    """Token source using the operating system CSPRNG.

    Example:
        >>> token = await LocalTokenSource().generate()
        >>> len(token)
        32
    """

    name = "local"

    def __init__(self, length: int = TOKEN_LENGTH, alphabet: str = TOKEN_ALPHABET) -> None:
        self._length = length
        self._alphabet = alphabet

    async def generate(self) -> str:
        """Draw a token from the alphabet."""
        return "".join(secrets.choice(self._alphabet) for _ in range(self._length))

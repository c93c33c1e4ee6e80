"""
URL Mapping Store

Durable mapping from an allocated code to the original URL.

The store never allocates codes itself. It trusts the caller to hand it
unique codes, but still refuses to overwrite an existing entry.
"""

import logging
from typing import Union

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from shorturl.core.exceptions import (
    CodeNotFoundError,
    DuplicateCodeError,
    InvalidCodeError,
    InvalidURLError,
    StorageUnavailableError,
    URLShortenerException,
)
from shorturl.core.validators import parse_code
from shorturl.db.models import UrlEntry

logger = logging.getLogger(__name__)


class UrlMappingStore:
    """Insert and look up UrlEntry rows. Only this class writes url_entries."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def add(self, code: int, original_url: str) -> UrlEntry:
        """
        Insert an entry inside the session's current transaction.

        Args:
            code: Code previously issued by the counter allocator
            original_url: The long URL (non-empty)

        Returns:
            The new UrlEntry (flushed, not committed)

        Raises:
            InvalidURLError: If original_url is empty
            InvalidCodeError: If code is not a positive integer
            DuplicateCodeError: If the code is already registered
            StorageUnavailableError: If the insert fails for another reason
        """
        if not original_url:
            raise InvalidURLError(original_url or "", reason="original URL must not be empty")
        if isinstance(code, str):
            raise InvalidCodeError(code)
        code = parse_code(code)

        try:
            existing = await self.session.get(UrlEntry, code)
            if existing is not None:
                logger.error(f"Refusing to overwrite short code {code} ({existing.original_url})")
                raise DuplicateCodeError(code)

            entry = UrlEntry(code=code, original_url=original_url, visit_count=0)
            self.session.add(entry)
            await self.session.flush()
            return entry

        except IntegrityError as e:
            # Another transaction inserted the same code after our check
            logger.error(f"Duplicate short code {code}", exc_info=True)
            raise DuplicateCodeError(code) from e
        except SQLAlchemyError as e:
            raise StorageUnavailableError(
                f"failed to store short code {code}: {e}",
                original_error=e
            )

    async def register(self, code: int, original_url: str) -> UrlEntry:
        """
        Insert an entry and commit it.

        After this returns, resolve(code) sees the entry from any session.

        Raises:
            Same as add(); the session is rolled back on failure
        """
        try:
            entry = await self.add(code, original_url)
            await self.session.commit()
        except URLShortenerException:
            await self.session.rollback()
            raise
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Failed to commit short code {code}: {e}", exc_info=True)
            raise StorageUnavailableError(
                f"failed to commit short code {code}: {e}",
                original_error=e
            )

        logger.info(f"UrlEntry created: {entry.code} -> {entry.original_url}")
        return entry

    async def resolve(self, code: Union[int, str]) -> UrlEntry:
        """
        Retrieve the entry for a code.

        Args:
            code: Integer code, or its decimal string form from a URL path

        Returns:
            The matching UrlEntry

        Raises:
            InvalidCodeError: If a string code does not parse
            CodeNotFoundError: If no entry exists for the code
            StorageUnavailableError: If the lookup fails
        """
        code = parse_code(code)

        try:
            statement = select(UrlEntry).where(UrlEntry.code == code)
            result = await self.session.execute(statement)
            entry = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise StorageUnavailableError(
                f"failed to look up short code {code}: {e}",
                original_error=e
            )

        if entry is None:
            raise CodeNotFoundError(code)
        return entry

"""
URL Shortening Service

This service composes the counter allocator and the mapping store into the
registration flow used by the API:

1. Allocate the next code
2. Store (code, url)
3. Return the entry

Registration modes:
- Atomic (default): allocation and insert share one transaction. A failed
  insert rolls the counter back too, so codes stay gapless.
- Two-step: allocation is committed before the insert. A failed insert leaves
  the code permanently unused (a gap). The counter is never rolled back, since
  another request may already hold a later code.
"""

import logging
from typing import Optional, Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from shorturl.core.exceptions import (
    InvalidURLError,
    StorageUnavailableError,
    URLShortenerException,
)
from shorturl.core.setting import settings
from shorturl.db.models import UrlEntry
from shorturl.services.counter_allocator import CounterAllocator
from shorturl.services.url_store import UrlMappingStore

logger = logging.getLogger(__name__)


class URLShorteningService:
    """
    Core business logic for URL shortening.

    Input validation (protocol, domain) happens in the API layer before this
    service is called.
    """

    def __init__(self, session: AsyncSession, atomic: Optional[bool] = None):
        """
        Initialize the URL shortening service.

        Args:
            session: Database session shared by the allocator and the store
            atomic: Registration mode (default: settings.ATOMIC_REGISTRATION)
        """
        self.session = session
        self.allocator = CounterAllocator(session)
        self.store = UrlMappingStore(session)
        self.atomic = settings.ATOMIC_REGISTRATION if atomic is None else atomic

    async def shorten(self, original_url: str) -> UrlEntry:
        """
        Register a URL under a freshly allocated code.

        Args:
            original_url: An already validated long URL

        Returns:
            The stored UrlEntry

        Raises:
            InvalidURLError: If original_url is empty
            DuplicateCodeError: If the allocated code is somehow taken
            StorageUnavailableError: If allocation or registration fails
        """
        if not original_url:
            raise InvalidURLError(original_url or "", reason="original URL must not be empty")

        if self.atomic:
            return await self._shorten_in_one_transaction(original_url)
        return await self._shorten_in_two_steps(original_url)

    async def _shorten_in_one_transaction(self, original_url: str) -> UrlEntry:
        try:
            code = await self.allocator.next_value()
            entry = await self.store.add(code, original_url)
            await self.session.commit()
        except URLShortenerException:
            await self.session.rollback()
            logger.error(f"Failed to shorten {original_url}", exc_info=True)
            raise
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Failed to commit short URL for {original_url}: {e}", exc_info=True)
            raise StorageUnavailableError(
                f"failed to commit short URL: {e}",
                original_error=e
            )

        logger.info(f"UrlEntry created: {entry.code} -> {entry.original_url}")
        return entry

    async def _shorten_in_two_steps(self, original_url: str) -> UrlEntry:
        code = await self.allocator.allocate_next()
        try:
            return await self.store.register(code, original_url)
        except URLShortenerException:
            logger.warning(f"Code {code} was allocated but not registered; it stays unused")
            raise

    async def resolve(self, raw_code: Union[int, str]) -> UrlEntry:
        """
        Look up the entry for a code as received from the client.

        Raises:
            InvalidCodeError, CodeNotFoundError, StorageUnavailableError
        """
        return await self.store.resolve(raw_code)

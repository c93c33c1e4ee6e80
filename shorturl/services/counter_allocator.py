"""
Counter Allocator

Hands out short codes from a named, monotonically increasing counter stored
in the counters table.

The increment-and-fetch is one UPDATE ... RETURNING statement, so the database
guarantees that two callers never observe the same value, whether they run in
the same process or not. The allocator returns the pre-increment value:
a fresh counter with start=1 issues 1, 2, 3, ...
"""

import logging
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from shorturl.core.exceptions import StorageUnavailableError
from shorturl.core.setting import settings
from shorturl.db.models import Counter

logger = logging.getLogger(__name__)


class CounterAllocator:
    """
    Issues unique, strictly increasing codes.

    Only this class writes to the counters table.
    """

    def __init__(
        self,
        session: AsyncSession,
        name: Optional[str] = None,
        start: Optional[int] = None
    ):
        """
        Initialize the allocator.

        Args:
            session: Database session the increments run in
            name: Counter row name (default: settings.COUNTER_NAME)
            start: First value a fresh counter issues (default: settings.COUNTER_START)
        """
        self.session = session
        self.name = name or settings.COUNTER_NAME
        self.start = settings.COUNTER_START if start is None else start

    async def next_value(self) -> int:
        """
        Increment the counter inside the session's current transaction.

        Nothing is committed; the caller decides when the increment becomes
        durable. Rolling back the transaction gives the value back.

        Returns:
            The allocated code

        Raises:
            StorageUnavailableError: If the increment fails
        """
        statement = (
            update(Counter)
            .where(Counter.name == self.name)
            .values(next_value=Counter.next_value + 1)
            .returning(Counter.next_value)
            .execution_options(synchronize_session=False)
        )

        try:
            result = await self.session.execute(statement)
            incremented = result.scalar_one_or_none()

            if incremented is not None:
                return incremented - 1

            # First use: the row does not exist yet
            self.session.add(Counter(name=self.name, next_value=self.start + 1))
            await self.session.flush()
            logger.info(f"Counter '{self.name}' created, first code is {self.start}")
            return self.start

        except IntegrityError as e:
            raise StorageUnavailableError(
                f"counter '{self.name}' was created concurrently; retry the allocation",
                original_error=e
            )
        except SQLAlchemyError as e:
            raise StorageUnavailableError(
                f"failed to increment counter '{self.name}': {e}",
                original_error=e
            )

    async def allocate_next(self) -> int:
        """
        Allocate the next code and commit the increment.

        Once this returns, the code is durably consumed: it will never be
        issued again, even if the caller fails to use it.

        Returns:
            The allocated code

        Raises:
            StorageUnavailableError: If the increment cannot be committed
        """
        try:
            code = await self.next_value()
            await self.session.commit()
        except StorageUnavailableError:
            await self.session.rollback()
            logger.error(f"Allocation from counter '{self.name}' failed", exc_info=True)
            raise
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Failed to commit counter '{self.name}': {e}", exc_info=True)
            raise StorageUnavailableError(
                f"failed to commit counter '{self.name}': {e}",
                original_error=e
            )

        logger.debug(f"Allocated code {code} from counter '{self.name}'")
        return code

    async def ensure_counter(self) -> None:
        """
        Create the counter row if it does not exist.

        Idempotent - safe to call on every startup and from several
        instances at once.
        """
        try:
            existing = await self.session.get(Counter, self.name)
            if existing is not None:
                logger.debug(f"Counter '{self.name}' already exists at {existing.next_value}")
                return

            self.session.add(Counter(name=self.name, next_value=self.start))
            await self.session.commit()
            logger.info(f"Counter '{self.name}' initialized at {self.start}")

        except IntegrityError:
            # Race condition: another instance created the row simultaneously
            await self.session.rollback()
            logger.info(f"Counter '{self.name}' already exists (created by another instance)")
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Failed to initialize counter '{self.name}': {e}", exc_info=True)
            raise StorageUnavailableError(
                f"failed to initialize counter '{self.name}': {e}",
                original_error=e
            )

    async def peek(self) -> int:
        """Return the value the next allocation will issue, without consuming it."""
        try:
            statement = select(Counter.next_value).where(Counter.name == self.name)
            result = await self.session.execute(statement)
            current = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise StorageUnavailableError(
                f"failed to read counter '{self.name}': {e}",
                original_error=e
            )
        return self.start if current is None else current

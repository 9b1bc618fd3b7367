"""
Visit Count Service

This service records clicks on short links.

Design Decisions:
- Database-level atomic increment (UPDATE ... SET clicks = clicks + 1)
  instead of read-modify-write, so concurrent redirects never lose a click
- clicks, last_clicked and updated_at change in the same statement
- Commit is left to the caller so the click and the redirect decision
  belong to one transaction
"""

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from shortlinks.db.models import Link, utcnow


class VisitCountService:
    """
    Service for managing click counts.
    """

    def __init__(self, session: AsyncSession):
        """
        Initialize the visit count service with a database session.

        Args:
            session: Async database session for database operations
        """
        self.session = session

    async def record_click(self, short_code: str) -> bool:
        """
        Increment the click count and stamp last_clicked for a short code.

        Args:
            short_code: The short code that was visited

        Returns:
            True if a link was updated, False if the code is unknown
            (nothing is written in that case)
        """
        now = utcnow()
        statement = (
            update(Link)
            .where(Link.short_code == short_code)
            .values(clicks=Link.clicks + 1, last_clicked=now, updated_at=now)
            .execution_options(synchronize_session=False)
        )

        result = await self.session.execute(statement)
        return result.rowcount > 0

    async def get_click_count(self, short_code: str) -> int:
        """
        Get the current click count for a short URL.

        Returns:
            Click count (0 if not found)
        """
        statement = select(Link.clicks).where(Link.short_code == short_code)
        result = await self.session.execute(statement)
        count = result.scalar_one_or_none()
        return count if count is not None else 0

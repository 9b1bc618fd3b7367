"""
Link Listing Service

Read-only views over stored links for the admin and recent-links screens,
plus a single-link lookup that does not count as a visit.

Ordering is newest first by created_at, with id as tie-breaker so the
recent listing is always a prefix of the full listing.
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from shortlinks.core.exceptions import NotFoundError, StoreError
from shortlinks.core.validators import sanitize_short_code
from shortlinks.db.models import Link
from shortlinks.services.url_service import URLShorteningService

DEFAULT_RECENT_LIMIT = 10


class LinkListingService:
    """
    Service for reading stored links without mutating them.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.url_service = URLShorteningService(session)

    async def list_all(self) -> list[Link]:
        """All links, newest first."""
        return await self._list(limit=None)

    async def list_recent(self, limit: int = DEFAULT_RECENT_LIMIT) -> list[Link]:
        """The `limit` most recently created links, newest first."""
        return await self._list(limit=limit)

    async def get_link(self, short_code: str) -> Link:
        """
        Look up a single link by short code.

        Raises:
            NotFoundError: If the code is malformed or unknown
            StoreError: If the database fails
        """
        code = sanitize_short_code(short_code)
        if code is None:
            raise NotFoundError(short_code)

        try:
            link = await self.url_service.get_by_short_code(code)
        except SQLAlchemyError as e:
            raise StoreError(f"failed to load short code '{code}'", original_error=e)

        if link is None:
            raise NotFoundError(code)
        return link

    async def _list(self, limit: Optional[int]) -> list[Link]:
        statement = select(Link).order_by(Link.created_at.desc(), Link.id.desc())
        if limit is not None:
            statement = statement.limit(limit)

        try:
            result = await self.session.execute(statement)
        except SQLAlchemyError as e:
            raise StoreError("failed to list links", original_error=e)
        return list(result.scalars().all())

"""
Redirect Service

This service resolves a short code to its target URL and records the visit.

The click is committed before the target URL is handed back, so a redirect
is never issued for a visit that was not persisted, and a failure before
the commit leaves the counter untouched.
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from shortlinks.core.exceptions import NotFoundError, StoreError
from shortlinks.core.validators import sanitize_short_code
from shortlinks.db.models import Link
from shortlinks.services.visit_count_service import VisitCountService

logger = logging.getLogger(__name__)


class RedirectService:
    """
    Service for handling URL redirections.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.visit_count_service = VisitCountService(session)

    async def resolve(self, short_code: str) -> str:
        """
        Record a visit and return the URL to redirect to.

        Args:
            short_code: The short code from the request path

        Returns:
            The stored original URL

        Raises:
            NotFoundError: If the code is malformed or unknown (no side effects)
            StoreError: If the database fails
        """
        code = sanitize_short_code(short_code)
        if code is None:
            raise NotFoundError(short_code)

        try:
            if not await self.visit_count_service.record_click(code):
                await self.session.rollback()
                raise NotFoundError(code)

            result = await self.session.execute(
                select(Link.original_url).where(Link.short_code == code)
            )
            original_url = result.scalar_one()
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise StoreError(f"failed to resolve short code '{code}'", original_error=e)

        logger.debug("Redirecting %s -> %s", code, original_url)
        return original_url

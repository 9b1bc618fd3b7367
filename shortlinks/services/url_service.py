"""
URL Shortening Service

This service handles the core business logic for URL shortening:
- Normalizing submitted URLs (explicit http/https scheme)
- Reusing the stored link when the same URL is shortened again
- Deriving a display title from the hostname
- Assigning a random base62 short code, retrying on collisions

Design Decisions:
- Random codes instead of counter-based ones: codes do not reveal how many
  links exist, and the unique index on short_code rejects the rare collision
- Retries are bounded; running out of attempts is a StoreError
- A unique-constraint violation is ambiguous (short_code or url_hash),
  so after a rollback the service first looks for a record created by a
  concurrent request for the same URL and reuses it
"""

import logging
import re
from dataclasses import dataclass
from typing import Callable, Optional
from urllib.parse import urlparse

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from shortlinks.core.exceptions import ShortCodeExhaustedError, StoreError
from shortlinks.core.validators import require_original_url
from shortlinks.db.models import Link, url_digest
from shortlinks.services.short_code import DEFAULT_CODE_LENGTH, generate_short_code

logger = logging.getLogger(__name__)

SCHEME_PATTERN = re.compile(r"^https?://", re.IGNORECASE)
DEFAULT_SCHEME = "https://"
UNTITLED = "Untitled"
DEFAULT_MAX_ATTEMPTS = 5
# Letters (including IDN), digits, dots, hyphens; colons for IPv6 literals
HOSTNAME_PATTERN = re.compile(r"[\w.:-]+")


def normalize_url(raw_url: str) -> str:
    """
    Produce the canonical absolute form of a submitted URL.

    Leading/trailing whitespace is trimmed and https:// is prepended when
    the input has no http(s) scheme. No other validation happens here.

    Example:
        normalize_url("example.com/path") -> "https://example.com/path"
        normalize_url("HTTP://a.com") -> "HTTP://a.com"
    """
    url = raw_url.strip()
    if not SCHEME_PATTERN.match(url):
        url = DEFAULT_SCHEME + url
    return url


def derive_title(normalized_url: str) -> str:
    """
    Hostname of the URL without a leading "www.", or "Untitled" when the
    URL has no valid hostname.
    """
    try:
        hostname = urlparse(normalized_url).hostname
    except ValueError:
        return UNTITLED

    if not hostname or not HOSTNAME_PATTERN.fullmatch(hostname):
        return UNTITLED
    if hostname.startswith("www."):
        hostname = hostname[len("www."):]
    return hostname or UNTITLED


def resolve_title(title: Optional[str], normalized_url: str) -> str:
    if isinstance(title, str) and title.strip():
        return title.strip()
    return derive_title(normalized_url)


@dataclass(frozen=True)
class ShortenResult:
    """Outcome of a shorten request: the stored link and whether it is new."""
    link: Link
    created: bool


class URLShorteningService:
    """
    Core business logic for URL shortening.

    Handles normalization, dedup, code generation and database writes.
    Separated from API layer for testability and maintainability.
    """

    def __init__(
        self,
        session: AsyncSession,
        code_length: int = DEFAULT_CODE_LENGTH,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        code_generator: Callable[[int], str] = generate_short_code,
    ):
        """
        Initialize the URL shortening service.

        Args:
            session: Database session
            code_length: Length of generated short codes
            max_attempts: Fresh codes to try before giving up on collisions
            code_generator: Callable producing a code of the given length
        """
        self.session = session
        self.code_length = code_length
        self.max_attempts = max_attempts
        self.code_generator = code_generator

    async def get_existing_short_url(self, original_url: str) -> Optional[Link]:
        """
        Find the link stored for a normalized URL.

        Raises:
            SQLAlchemyError: If the query fails
        """
        statement = (
            select(Link)
            .where(Link.url_hash == url_digest(original_url), Link.original_url == original_url)
            .limit(1)
        )
        result = await self.session.execute(statement)
        return result.scalars().first()

    async def get_by_short_code(self, short_code: str) -> Optional[Link]:
        """
        Find the link for a short code.

        Raises:
            SQLAlchemyError: If the query fails
        """
        statement = select(Link).where(Link.short_code == short_code)
        result = await self.session.execute(statement)
        return result.scalars().first()

    async def create_short_url(
        self,
        original_url: str,
        title: Optional[str] = None,
    ) -> ShortenResult:
        """
        Create a new short URL or return existing one if URL was already shortened.

        Args:
            original_url: The URL to shorten, with or without scheme
            title: Optional display title

        Returns:
            ShortenResult with created=False when an existing link was reused

        Raises:
            ValidationError: If original_url is missing or not a string
            StoreError: If the database fails or no unique code could be found
        """
        normalized = normalize_url(require_original_url(original_url))

        try:
            existing = await self.get_existing_short_url(normalized)
        except SQLAlchemyError as e:
            raise StoreError("failed to look up existing link", original_error=e)
        if existing:
            return ShortenResult(link=existing, created=False)

        final_title = resolve_title(title, normalized)

        for attempt in range(1, self.max_attempts + 1):
            link = Link(
                title=final_title,
                original_url=normalized,
                url_hash=url_digest(normalized),
                short_code=self.code_generator(self.code_length),
                clicks=0,
            )
            self.session.add(link)

            try:
                await self.session.commit()
            except IntegrityError:
                await self.session.rollback()
                reused = await self._find_after_conflict(normalized)
                if reused:
                    logger.info(
                        "Concurrent shorten of %s, reusing %s", normalized, reused.short_code
                    )
                    return ShortenResult(link=reused, created=False)
                logger.warning(
                    "Short code collision on %s (attempt %d/%d)",
                    link.short_code, attempt, self.max_attempts
                )
                continue
            except SQLAlchemyError as e:
                await self.session.rollback()
                raise StoreError("failed to create short URL", original_error=e)

            await self.session.refresh(link)
            logger.info("Created %s -> %s", link.short_code, link.original_url)
            return ShortenResult(link=link, created=True)

        raise ShortCodeExhaustedError(self.max_attempts)

    async def _find_after_conflict(self, normalized: str) -> Optional[Link]:
        try:
            return await self.get_existing_short_url(normalized)
        except SQLAlchemyError as e:
            raise StoreError("failed to look up existing link", original_error=e)

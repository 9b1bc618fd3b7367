"""
Tests for URL normalization, title derivation, short code generation and
the shorten operation.
"""

import re

import pytest

from conftest import fetch_all_links
from shortlinks.core.exceptions import ShortCodeExhaustedError, ValidationError
from shortlinks.db.models import Link, url_digest
from shortlinks.services.short_code import BASE62_CHARS, generate_short_code
from shortlinks.services.url_service import (
    URLShorteningService,
    derive_title,
    normalize_url,
)

SHORT_CODE_RE = re.compile(r"^[0-9a-zA-Z]{6}$")


class TestNormalizeUrl:
    """Test URL normalization."""

    def test_prepends_https_when_scheme_missing(self):
        assert normalize_url("example.com/path") == "https://example.com/path"

    def test_keeps_existing_scheme(self):
        assert normalize_url("http://already.com") == "http://already.com"
        assert normalize_url("https://secure.com/x?y=1") == "https://secure.com/x?y=1"

    def test_scheme_match_is_case_insensitive(self):
        assert normalize_url("HTTPS://Example.com") == "HTTPS://Example.com"
        assert normalize_url("Http://example.com") == "Http://example.com"

    def test_trims_whitespace(self):
        assert normalize_url("  example.com  ") == "https://example.com"
        assert normalize_url("\thttp://a.com\n") == "http://a.com"

    def test_other_schemes_get_https_prefix(self):
        assert normalize_url("ftp://files.com") == "https://ftp://files.com"

    def test_idempotent(self):
        inputs = ["example.com", "http://a.com", " b.org/path ", "HTTPS://C.NET", "", "::::"]
        for raw in inputs:
            once = normalize_url(raw)
            assert normalize_url(once) == once, f"Not idempotent for {raw!r}"

    def test_prefix_added_exactly_once(self):
        normalized = normalize_url("example.com")
        assert normalized.count("https://") == 1

    def test_malformed_input_does_not_fail(self):
        assert normalize_url("not a url at all") == "https://not a url at all"


class TestDeriveTitle:
    """Test title derivation from the normalized URL."""

    def test_hostname(self):
        assert derive_title("https://example.com/path") == "example.com"

    def test_strips_leading_www(self):
        assert derive_title("https://www.google.com") == "google.com"

    def test_only_leading_www_is_stripped(self):
        assert derive_title("https://docs.www.example.com") == "docs.www.example.com"

    def test_hostname_is_lowercased(self):
        assert derive_title("https://WWW.Example.COM") == "example.com"

    def test_untitled_without_hostname(self):
        assert derive_title("https://") == "Untitled"

    def test_untitled_for_unparseable_url(self):
        assert derive_title("https://[::1") == "Untitled"

    @pytest.mark.parametrize("url", [
        "https://exa mple.com/x",
        "https://exa<mple.com",
        "https://bad\"host.com",
        "not a url at all",
    ])
    def test_untitled_for_invalid_hostname(self, url):
        assert derive_title(normalize_url(url)) == "Untitled"

    def test_international_hostname_kept(self):
        assert derive_title("https://www.bücher.de/") == "bücher.de"


class TestShortCodeGeneration:
    """Test random short code generation."""

    def test_alphabet(self):
        assert len(BASE62_CHARS) == 62
        assert set(BASE62_CHARS) == set("0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ")

    def test_default_code_shape(self):
        for _ in range(200):
            assert SHORT_CODE_RE.match(generate_short_code())

    def test_custom_length(self):
        assert len(generate_short_code(10)) == 10


@pytest.mark.asyncio
class TestCreateShortUrl:
    """Test the shorten operation against a real database."""

    async def test_creates_normalized_link(self, session):
        service = URLShorteningService(session)

        result = await service.create_short_url("example.com/path")

        assert result.created is True
        assert result.link.original_url == "https://example.com/path"
        assert result.link.title == "example.com"
        assert result.link.clicks == 0
        assert result.link.last_clicked is None
        assert result.link.id is not None
        assert SHORT_CODE_RE.match(result.link.short_code)

    async def test_same_url_is_reused(self, session, session_maker):
        service = URLShorteningService(session)

        first = await service.create_short_url("example.com/path")
        second = await service.create_short_url("  https://example.com/path ")

        assert second.created is False
        assert second.link.short_code == first.link.short_code
        assert len(await fetch_all_links(session_maker)) == 1

    async def test_stores_url_hash(self, session):
        service = URLShorteningService(session)

        result = await service.create_short_url("example.com/hashed")

        assert result.link.url_hash == url_digest("https://example.com/hashed")
        assert len(result.link.url_hash) == 64

    async def test_very_long_url_is_stored_and_reused(self, session, session_maker):
        long_url = "example.com/" + "a" * 5000
        service = URLShorteningService(session)

        first = await service.create_short_url(long_url)
        second = await service.create_short_url(long_url)

        assert first.created is True
        assert first.link.original_url == "https://" + long_url
        assert second.created is False
        assert second.link.short_code == first.link.short_code
        assert len(await fetch_all_links(session_maker)) == 1

    async def test_get_by_short_code(self, session):
        service = URLShorteningService(session)
        created = await service.create_short_url("lookup.com")

        found = await service.get_by_short_code(created.link.short_code)

        assert found is not None
        assert found.id == created.link.id
        assert await service.get_by_short_code("zzzzzz") is None

    async def test_caller_title_and_scheme_preserved(self, session):
        service = URLShorteningService(session)

        result = await service.create_short_url("http://already.com", title="My Site")

        assert result.link.title == "My Site"
        assert result.link.original_url == "http://already.com"

    async def test_blank_title_falls_back_to_hostname(self, session):
        service = URLShorteningService(session)

        result = await service.create_short_url("www.example.org", title="   ")

        assert result.link.title == "example.org"

    async def test_caller_title_is_trimmed(self, session):
        service = URLShorteningService(session)

        result = await service.create_short_url("example.net", title="  Docs  ")

        assert result.link.title == "Docs"

    @pytest.mark.parametrize("bad_value", [None, "", 123, ["https://a.com"]])
    async def test_rejects_missing_or_non_string_url(self, session, session_maker, bad_value):
        service = URLShorteningService(session)

        with pytest.raises(ValidationError):
            await service.create_short_url(bad_value)

        assert await fetch_all_links(session_maker) == []

    async def test_codes_are_unique(self, session):
        service = URLShorteningService(session)

        codes = set()
        for i in range(50):
            result = await service.create_short_url(f"example.com/{i}")
            codes.add(result.link.short_code)

        assert len(codes) == 50

    async def test_retries_on_short_code_collision(self, session):
        session.add(Link(
            title="taken",
            original_url="https://taken.com",
            url_hash=url_digest("https://taken.com"),
            short_code="AAAAAA",
        ))
        await session.commit()

        codes = iter(["AAAAAA", "AAAAAA", "BBBBBB"])
        service = URLShorteningService(session, code_generator=lambda length: next(codes))

        result = await service.create_short_url("fresh.com")

        assert result.created is True
        assert result.link.short_code == "BBBBBB"
        assert result.link.original_url == "https://fresh.com"

    async def test_gives_up_after_max_attempts(self, session, session_maker):
        session.add(Link(
            title="taken",
            original_url="https://taken.com",
            url_hash=url_digest("https://taken.com"),
            short_code="AAAAAA",
        ))
        await session.commit()

        service = URLShorteningService(
            session, max_attempts=3, code_generator=lambda length: "AAAAAA"
        )

        with pytest.raises(ShortCodeExhaustedError) as exc_info:
            await service.create_short_url("fresh.com")

        assert exc_info.value.attempts == 3
        assert len(await fetch_all_links(session_maker)) == 1

    async def test_concurrent_insert_of_same_url_is_reused(self, session, session_maker):
        async with session_maker() as other:
            winner = await URLShorteningService(other).create_short_url("race.com")

        class LateLookupService(URLShorteningService):
            """Misses the winner on the first lookup, as a racing request would."""
            lookups = 0

            async def get_existing_short_url(self, original_url):
                self.lookups += 1
                if self.lookups == 1:
                    return None
                return await super().get_existing_short_url(original_url)

        result = await LateLookupService(session).create_short_url("race.com")

        assert result.created is False
        assert result.link.short_code == winner.link.short_code
        assert len(await fetch_all_links(session_maker)) == 1

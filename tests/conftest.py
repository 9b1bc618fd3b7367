"""Pytest configuration and fixtures."""

import os

# shortlinks.main builds a module-level app on import; it needs a store URL.
# Tests build their own apps against temporary databases.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select

from shortlinks.core.setting import Settings
from shortlinks.db.models import Link
from shortlinks.db.session import create_engine_for_url, create_session_maker, init_db
from shortlinks.main import create_app

TEST_BASE_URL = "http://sho.rt"


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings pointing at a throwaway SQLite file."""
    return Settings(
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'shortlinks.db'}",
        BASE_URL=TEST_BASE_URL,
        LOG_LEVEL="WARNING",
        _env_file=None,
    )


@pytest_asyncio.fixture
async def engine(settings):
    engine = create_engine_for_url(settings.DATABASE_URL)
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return create_session_maker(engine)


@pytest_asyncio.fixture
async def session(session_maker) -> AsyncGenerator:
    async with session_maker() as session:
        yield session


@pytest_asyncio.fixture
async def app(settings):
    app = create_app(settings)
    await init_db(app.state.engine)
    yield app
    await app.state.engine.dispose()


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        yield ac


async def fetch_link(session_maker, short_code: str) -> Link:
    """Load a link through a fresh session so no cached state leaks in."""
    async with session_maker() as fresh:
        result = await fresh.execute(select(Link).where(Link.short_code == short_code))
        return result.scalars().one()


async def fetch_all_links(session_maker) -> list[Link]:
    async with session_maker() as fresh:
        result = await fresh.execute(select(Link).order_by(Link.id))
        return list(result.scalars().all())

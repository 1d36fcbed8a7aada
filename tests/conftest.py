import pytest_asyncio

from cafe_api.core.db import init_db, close_db


@pytest_asyncio.fixture
async def db():
    """Fresh in-memory SQLite schema per test."""
    await init_db("sqlite://:memory:")
    yield
    await close_db()

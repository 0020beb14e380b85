# test/conftest.py
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from simple_blog.main import create_app
from simple_blog.settings_loader import Settings
from simple_blog.store import Base, SqlPostStore

# StaticPool keeps the in-memory DB alive across connections within a test
TEST_DB_URL = "sqlite+aiosqlite:///:memory:"

test_engine = create_async_engine(
    TEST_DB_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TEST_SETTINGS = Settings(
    supabase_url=None,
    supabase_key="",
    db_url=TEST_DB_URL,
    port=5000,
    cors_origins=["*"],
)


@pytest_asyncio.fixture(scope="function")
async def store():
    """
    A SqlPostStore on a fresh in-memory database for each test function.
    """
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield SqlPostStore(test_engine)

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture(scope="function")
async def app(store):
    return create_app(settings=TEST_SETTINGS, store=store)


@pytest_asyncio.fixture(scope="function")
async def client(app):
    """AsyncClient talking straight to the backend app"""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

# test/test_store.py
import pytest

from simple_blog.main import create_store
from simple_blog.settings_loader import load_settings_from_env
from simple_blog.store import SqlPostStore
from simple_blog.supabase_store import SupabasePostStore

from conftest import TEST_SETTINGS


@pytest.mark.asyncio
async def test_insert_fills_generated_fields(store):
    rows = await store.insert_post(title="A", content="B")

    assert len(rows) == 1
    assert rows[0]["id"]
    assert rows[0]["created_at"] is not None
    assert rows[0]["title"] == "A"


@pytest.mark.asyncio
async def test_list_is_newest_first(store):
    await store.insert_post(title="old", content="x")
    await store.insert_post(title="new", content="y")

    rows = await store.list_posts()

    assert [r["title"] for r in rows] == ["new", "old"]
    assert rows[0]["created_at"] >= rows[1]["created_at"]


@pytest.mark.asyncio
async def test_create_store_prefers_supabase():
    settings = TEST_SETTINGS._replace(
        supabase_url="https://demo.supabase.co", supabase_key="k"
    )
    store = await create_store(settings)

    assert isinstance(store, SupabasePostStore)
    assert store.rest_url == "https://demo.supabase.co/rest/v1"
    await store.close()


@pytest.mark.asyncio
async def test_create_store_falls_back_to_sql():
    store = await create_store(TEST_SETTINGS._replace(db_url="sqlite+aiosqlite:///:memory:"))

    assert isinstance(store, SqlPostStore)
    await store.close()


def test_settings_defaults(monkeypatch):
    monkeypatch.setattr("simple_blog.settings_loader.dotenv.load_dotenv", lambda: None)
    for key in ("SUPABASE_URL", "SUPABASE_ANON_KEY", "DB_URL", "PORT", "CORS_ORIGINS"):
        monkeypatch.delenv(key, raising=False)

    settings = load_settings_from_env()

    assert settings.supabase_url is None
    assert settings.port == 5000
    assert settings.cors_origins == ["*"]


def test_settings_from_env(monkeypatch):
    monkeypatch.setattr("simple_blog.settings_loader.dotenv.load_dotenv", lambda: None)
    monkeypatch.setenv("SUPABASE_URL", "https://demo.supabase.co")
    monkeypatch.setenv("SUPABASE_ANON_KEY", "secret")
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("CORS_ORIGINS", "http://localhost:3000, http://127.0.0.1:3000")

    settings = load_settings_from_env()

    assert settings.supabase_url == "https://demo.supabase.co"
    assert settings.supabase_key == "secret"
    assert settings.port == 8080
    assert settings.cors_origins == ["http://localhost:3000", "http://127.0.0.1:3000"]

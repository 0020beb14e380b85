import os
from typing import NamedTuple

import dotenv

DEFAULT_DB_URL = "sqlite+aiosqlite:///./blog.db"
DEFAULT_PORT = 5000


class Settings(NamedTuple):
    supabase_url: str | None
    supabase_key: str
    db_url: str
    port: int
    cors_origins: list[str]


def load_settings_from_env() -> Settings:
    """
    Reads backend configuration from the environment (and .env if present).

    Example .env:
    SUPABASE_URL=https://xyz.supabase.co
    SUPABASE_ANON_KEY=eyJ...
    PORT=5000

    Without SUPABASE_URL the service falls back to the local SQL database at DB_URL.
    """
    dotenv.load_dotenv()

    origins = os.environ.get("CORS_ORIGINS", "*")

    return Settings(
        supabase_url=os.environ.get("SUPABASE_URL") or None,
        supabase_key=os.environ.get("SUPABASE_ANON_KEY", ""),
        db_url=os.environ.get("DB_URL", DEFAULT_DB_URL),
        port=int(os.environ.get("PORT") or DEFAULT_PORT),
        cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
    )


class FrontendSettings(NamedTuple):
    api_url: str
    port: int


def load_frontend_settings_from_env() -> FrontendSettings:
    dotenv.load_dotenv()
    return FrontendSettings(
        api_url=os.environ.get("BLOG_API_URL", f"http://localhost:{DEFAULT_PORT}"),
        port=int(os.environ.get("FRONTEND_PORT") or 3000),
    )

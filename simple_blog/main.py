import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from simple_blog.errors import StorageError
from simple_blog.perf import performance_middleware
from simple_blog.routes import posts
from simple_blog.settings_loader import Settings, load_settings_from_env
from simple_blog.store import PostStore, SqlPostStore
from simple_blog.supabase_store import SupabasePostStore

logger = logging.getLogger(__name__)
logging.basicConfig()
logging.getLogger("simple_blog").setLevel(logging.INFO)


async def create_store(settings: Settings) -> PostStore:
    """Hosted Supabase when configured, otherwise the local SQL database."""
    if settings.supabase_url:
        logger.info(f"Using Supabase storage at {settings.supabase_url}")
        return SupabasePostStore(settings.supabase_url, settings.supabase_key)

    logger.info(f"Using SQL storage at {settings.db_url}")
    store = SqlPostStore.from_url(settings.db_url)
    await store.init_db()
    return store


async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
    # Every storage failure is a 400 on the wire; the subclass only shows in logs
    logger.warning(
        f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}"
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST, content={"error": exc.message}
    )


def create_app(
    settings: Settings | None = None, store: PostStore | None = None
) -> FastAPI:
    """
    Builds the API. Pass `store` to run against a substitute backend;
    otherwise one is created from settings when the app starts.
    """
    settings = settings or load_settings_from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup: create the store unless one was handed in
        owned = app.state.store is None
        if owned:
            app.state.store = await create_store(settings)
        yield
        # Shutdown: release connections we opened
        if owned:
            await app.state.store.close()
            app.state.store = None

    app = FastAPI(title="Simple Blog", lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials="*" not in settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.middleware("http")(performance_middleware)
    app.add_exception_handler(StorageError, storage_error_handler)

    app.include_router(posts.router)

    @app.get("/status")
    async def status_check() -> dict:
        return {"status": "up"}

    return app


app = create_app()


def run() -> None:
    settings = app.state.settings
    logger.info(f"Server running on port {settings.port}")
    uvicorn.run(app, host="0.0.0.0", port=settings.port)

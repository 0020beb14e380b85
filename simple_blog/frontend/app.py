import locale
import logging
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import FastAPI, Form, Request
from fastapi.templating import Jinja2Templates

from simple_blog.frontend.api_client import BlogApiClient
from simple_blog.frontend.view import BlogView, Draft, format_timestamp
from simple_blog.settings_loader import (
    FrontendSettings,
    load_frontend_settings_from_env,
)

logger = logging.getLogger(__name__)
logging.basicConfig()
logging.getLogger("simple_blog").setLevel(logging.INFO)

templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))
templates.env.filters["timestamp"] = format_timestamp


def create_frontend_app(
    settings: FrontendSettings | None = None, api: BlogApiClient | None = None
) -> FastAPI:
    settings = settings or load_frontend_settings_from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup: open our own client unless one was handed in
        owned = app.state.api is None
        if owned:
            app.state.api = BlogApiClient(settings.api_url)
        yield
        if owned:
            await app.state.api.aclose()
            app.state.api = None

    app = FastAPI(title="Simple Blog Frontend", lifespan=lifespan)
    app.state.settings = settings
    app.state.api = api

    def render(request: Request, view: BlogView):
        return templates.TemplateResponse(
            request,
            "index.html",
            {"posts": view.posts, "draft": view.draft, "error": view.error},
        )

    @app.get("/")
    async def index(request: Request):
        view = BlogView(api=request.app.state.api)
        await view.mount()
        return render(request, view)

    @app.post("/")
    async def submit(request: Request, title: str = Form(""), content: str = Form("")):
        view = BlogView(api=request.app.state.api, draft=Draft(title, content))
        if not await view.submit():
            # Keep what was typed; the page still needs a list to show
            error = view.error
            await view.refresh()
            view.error = error or view.error
        return render(request, view)

    return app


app = create_frontend_app()


def run() -> None:
    # strftime("%c") follows LC_TIME, which Python leaves at "C" until asked
    locale.setlocale(locale.LC_TIME, "")
    settings = app.state.settings
    logger.info(f"Frontend running on port {settings.port}, API at {settings.api_url}")
    uvicorn.run(app, host="0.0.0.0", port=settings.port)

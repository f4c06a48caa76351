"""
BookCrew FastAPI application.

Server-rendered front end for the BookCrew backend. Entry point for uvicorn:

    uvicorn bookcrew.main:app
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path

import httpx
from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from bookcrew import config
from bookcrew.logging_config import configure_logging
from bookcrew.render import render_template
from bookcrew.routes import auth_pages, meetings, members, proxy, ui, workspaces
from bookcrew.routes import settings as settings_routes
from bookcrew.routes.deps import PageRedirect
from bookcrew.session import set_flash

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for FastAPI application.

    Opens the shared backend connection pool on startup and closes it on
    shutdown. No timeout: backend calls wait as long as the backend does.
    """
    configure_logging()
    app.state.http = httpx.AsyncClient(timeout=None)
    logger.info("backend: %s", config.settings.BACKEND_API_URL)

    yield

    await app.state.http.aclose()
    logger.info("backend connection pool closed")


app = FastAPI(
    title="BookCrew",
    docs_url=None,
    redoc_url=None,
    lifespan=lifespan,
)

# Register routes
app.include_router(auth_pages.router)
app.include_router(workspaces.router)
app.include_router(meetings.router)
app.include_router(members.router)
app.include_router(settings_routes.router)
app.include_router(proxy.router)
app.include_router(ui.router)

_STATIC = Path(__file__).parent / "static"
app.mount("/static", StaticFiles(directory=str(_STATIC)), name="static")


@app.exception_handler(PageRedirect)
async def page_redirect_handler(request: Request, exc: PageRedirect):
    response = RedirectResponse(exc.url, status_code=303)
    set_flash(response, exc.toasts)
    return response


@app.exception_handler(StarletteHTTPException)
async def not_found_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code != 404 or request.url.path.startswith("/api/"):
        return await http_exception_handler(request, exc)
    body = render_template("not_found", {})
    html = render_template(
        "layout", {"title": "페이지를 찾을 수 없습니다 | BookCrew", "body": body, "toasts": []}
    )
    return HTMLResponse(html, status_code=404)


@app.get("/health")
async def health():
    """Health check endpoint for uptime monitoring."""
    return {"status": "ok"}

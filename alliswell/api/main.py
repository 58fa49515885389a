from __future__ import annotations

import os
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response
from structlog.contextvars import bind_contextvars, clear_contextvars

from alliswell.api import pages
from alliswell.api.cookies import flash
from alliswell.api.deps import NotAuthenticatedError
from alliswell.api.routes import register_routes
from alliswell.core.config import get_settings
from alliswell.core.logging import setup_logging
from alliswell.infrastructure.db.session import dispose_engine

logger = structlog.get_logger()


def _is_api_request(request: Request) -> bool:
    return request.url.path.startswith("/api/")


def create_app() -> FastAPI:
    """Application factory for the web app."""
    setup_logging()
    settings = get_settings()

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "service_startup",
            service=settings.app_name,
            environment=settings.environment,
            version=settings.version,
            session_backend=settings.session_backend,
        )
        if not settings.openai_api_key:
            logger.warning("chat_relay_unconfigured", msg="OPENAI_API_KEY not configured")
        yield
        await dispose_engine()

    app = FastAPI(title=settings.app_name, version=settings.version, lifespan=lifespan)

    register_routes(app)

    @app.exception_handler(NotAuthenticatedError)
    async def not_authenticated_handler(request: Request, exc: NotAuthenticatedError) -> Response:
        await logger.ainfo("access_denied", api=exc.api)
        if exc.api:
            return JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED,
                content={"success": False, "error": exc.detail},
            )
        response = RedirectResponse(url="/login", status_code=status.HTTP_303_SEE_OTHER)
        flash(response, exc.detail)
        return response

    @app.exception_handler(StarletteHTTPException)
    async def not_found_handler(request: Request, exc: StarletteHTTPException) -> Response:
        if exc.status_code == status.HTTP_404_NOT_FOUND and not _is_api_request(request):
            return HTMLResponse(pages.not_found_page(), status_code=status.HTTP_404_NOT_FOUND)
        return await http_exception_handler(request, exc)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> Response:
        await logger.aexception("unhandled_error", error_type=type(exc).__name__)
        detail = str(exc) if settings.expose_error_details else None
        if _is_api_request(request):
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={"success": False, "error": detail or "Internal server error"},
            )
        return HTMLResponse(
            pages.error_page(detail), status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    @app.middleware("http")
    async def correlation_id_middleware(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        request_id = request.headers.get("x-request-id", str(uuid4()))
        bind_contextvars(
            request_id=request_id,
            path=str(request.url.path),
            method=request.method,
        )
        try:
            response = await call_next(request)
            response.headers["X-Request-ID"] = request_id
            return response
        finally:
            clear_contextvars()

    return app


app = create_app()


def run() -> None:
    """Serve the app with uvicorn (``alliswell`` console script)."""
    import uvicorn

    uvicorn.run(
        "alliswell.api.main:app",
        host=os.environ.get("HOST", "0.0.0.0"),
        port=int(os.environ.get("PORT", "3000")),
    )

from fastapi import FastAPI

from . import assessments, auth, chat, health, pages


def register_routes(app: FastAPI) -> None:
    """Attach all routers to the FastAPI application."""
    app.include_router(health.router)
    app.include_router(pages.router)
    app.include_router(auth.router)
    app.include_router(chat.router)
    app.include_router(assessments.router)

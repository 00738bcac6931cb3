"""
Application factory.

    app = create_app()                      # wires itself from settings on startup
    app = create_app(container=container)   # pre-wired (tests, embedding)
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from atelier import __version__
from atelier.api import install_routes
from atelier.config import Settings, get_settings
from atelier.container import Container, build_container
from atelier.db import create_database

log = structlog.get_logger(__name__)


def create_app(
    settings: Settings | None = None,
    container: Container | None = None,
) -> FastAPI:
    if container is not None:
        settings = container.settings
    settings = settings if settings is not None else get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if container is not None:
            yield
            return

        sessions, engine = await create_database(settings.database_url)
        app.state.container = build_container(settings, sessions)
        log.info(
            "app.started",
            gateway=app.state.container.gateway.name,
            database=engine.url.render_as_string(hide_password=True),
        )
        try:
            yield
        finally:
            await engine.dispose()
            log.info("app.stopped")

    app = FastAPI(title="atelier", version=__version__, lifespan=lifespan)
    if container is not None:
        app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_origins != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    install_routes(app)
    return app


__all__ = ("create_app",)

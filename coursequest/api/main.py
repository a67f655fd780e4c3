"""HTTP service entrypoint."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from coursequest import __version__
from coursequest.api.errors import register_error_handlers
from coursequest.api.routes import router
from coursequest.app import App, create_app
from coursequest.config.logging import configure_logging
from coursequest.config.settings import load_settings

logger = logging.getLogger(__name__)


def create_api(app: App) -> FastAPI:
    """Build the FastAPI application around an application container.

    The pool is opened on startup and closed on shutdown by the lifespan handler.
    """

    @asynccontextmanager
    async def lifespan(_api: FastAPI) -> AsyncIterator[None]:
        await app.pool.open(wait=True)
        logger.info("api started env=%s", app.settings.app_env)
        try:
            yield
        finally:
            logger.info("shutting down")
            await app.pool.close()

    api = FastAPI(title="CourseQuest", version=__version__, lifespan=lifespan)
    api.state.app = app
    api.include_router(router)
    register_error_handlers(api, expose_details=not app.settings.is_production)
    return api


def main() -> None:
    """Run the HTTP service with uvicorn."""

    settings = load_settings()
    configure_logging(settings.log_level)

    api = create_api(create_app(settings))
    uvicorn.run(api, host=settings.api_host, port=settings.api_port, log_config=None)


if __name__ == "__main__":
    main()

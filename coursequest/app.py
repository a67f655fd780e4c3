"""Application composition root.

This module wires together configuration and the DB pool for the HTTP service and the bot runtime.
"""

from __future__ import annotations

from dataclasses import dataclass

from psycopg_pool import AsyncConnectionPool

from coursequest.config.settings import Settings
from coursequest.db.pool import create_pool


@dataclass(frozen=True)
class App:
    """Shared application dependencies for handlers."""

    settings: Settings
    pool: AsyncConnectionPool


def create_app(settings: Settings) -> App:
    """Create the application container.

    Note:
        The returned DB pool is not opened. Call `await app.pool.open()` at startup.
    """

    pool = create_pool(settings.database_url, max_size=settings.db_pool_max_size)
    return App(settings=settings, pool=pool)

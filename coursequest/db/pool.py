"""Async Postgres connection pool shared by the HTTP service and the bot.

One psycopg3 `AsyncConnectionPool` per process. Request handlers borrow a connection with
`get_conn` for the duration of one search or comparison and give it back immediately.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import psycopg
from dotenv import load_dotenv
from psycopg import AsyncConnection
from psycopg_pool import AsyncConnectionPool

from coursequest.db.connection import require_database_url

logger = logging.getLogger(__name__)

APPLICATION_NAME = "coursequest"


def create_pool(
        database_url: str | None = None,
        *,
        min_size: int = 1,
        max_size: int | None = None,
        timeout: float = 30.0,
) -> AsyncConnectionPool:
    """Build the pool without connecting.

    The pool starts closed (`open=False`); the process entrypoint opens it on startup and closes it
    on shutdown. Without `database_url`, `DATABASE_URL` is read from the environment / `.env`.
    """

    if database_url is None:
        load_dotenv(".env")
        database_url = require_database_url()

    return AsyncConnectionPool(
        conninfo=database_url,
        min_size=min_size,
        max_size=max_size,
        timeout=timeout,
        kwargs={"application_name": APPLICATION_NAME},
        open=False,
    )


@asynccontextmanager
async def get_conn(pool: AsyncConnectionPool) -> AsyncIterator[AsyncConnection]:
    """Borrow a connection for one unit of work."""

    async with pool.connection() as conn:
        yield conn


async def ping(pool: AsyncConnectionPool) -> bool:
    """Health probe: True if a pooled connection answers `SELECT 1`."""

    try:
        async with get_conn(pool) as conn:
            await conn.execute("SELECT 1")
    except psycopg.Error as exc:
        logger.warning("database ping failed error=%s", exc.__class__.__name__)
        return False
    return True

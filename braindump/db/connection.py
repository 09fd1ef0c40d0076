"""Read-only connections to the Goose SQLite session store."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

import aiosqlite

logger = logging.getLogger("braindump.db")


def _read_only_uri(db_path: Path) -> str:
    return f"{db_path.resolve().as_uri()}?mode=ro"


@asynccontextmanager
async def open_store(db_path: Path) -> AsyncIterator[aiosqlite.Connection]:
    """Open ``db_path`` read-only with name-addressable rows.

    The agent may be writing to the store while we read it, hence the busy
    timeout.
    """
    conn = await aiosqlite.connect(_read_only_uri(db_path), uri=True)
    try:
        conn.row_factory = aiosqlite.Row
        await conn.execute("PRAGMA busy_timeout=5000")
        logger.debug("Opened session store: %s", db_path)
        yield conn
    finally:
        await conn.close()
        logger.debug("Closed session store: %s", db_path)

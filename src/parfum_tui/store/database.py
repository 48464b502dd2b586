# manages the local sqlite file standing in for browser cookies/local storage
import asyncio
import os.path
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import aiosqlite

from parfum_tui.utils.logger import get_logger

_logger = get_logger(__name__)

# None -> no persisted storage available, callers fall back to memory only
DB_PATH: Optional[str] = "data/parfum.sqlite"

SCHEMA = """
CREATE TABLE IF NOT EXISTS kv (
    key        TEXT PRIMARY KEY,
    value      TEXT NOT NULL,
    expires_at TEXT
);
"""

_initialized = False
_init_lock = asyncio.Lock()


def configure(path: Optional[str]) -> None:
    """Point the store at another file (or disable it with None / "")."""
    global DB_PATH, _initialized
    DB_PATH = path or None
    _initialized = False


def is_available() -> bool:
    return bool(DB_PATH)


async def _init_db(conn: aiosqlite.Connection) -> None:
    _logger.info(f"Initializing local store at {DB_PATH}...")
    await conn.executescript(SCHEMA)
    await conn.commit()


@asynccontextmanager
async def connect() -> AsyncIterator[aiosqlite.Connection]:
    """Async context manager yielding an aiosqlite connection.

    Creates the parent directory and the kv table on first use.
    """
    global _initialized
    if not DB_PATH:
        raise RuntimeError("local store is disabled")

    parent = os.path.dirname(DB_PATH)
    if parent and not os.path.isdir(parent):
        os.makedirs(parent, exist_ok=True)

    conn = await aiosqlite.connect(DB_PATH)
    try:
        if not _initialized:
            async with _init_lock:
                if not _initialized:
                    await _init_db(conn)
                    _initialized = True
        yield conn
    finally:
        await conn.close()

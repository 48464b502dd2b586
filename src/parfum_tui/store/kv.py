# src/parfum_tui/store/kv.py
from __future__ import annotations

import json
from datetime import datetime, timedelta
from typing import Any, Optional

import aiosqlite

from parfum_tui.store import database
from parfum_tui.utils.logger import get_logger

_logger = get_logger(__name__)


def _expired(expires_at: Optional[str], now: datetime) -> bool:
    if not expires_at:
        return False
    try:
        return datetime.fromisoformat(expires_at) <= now
    except ValueError:
        return True


async def get_value(key: str, now: Optional[datetime] = None) -> Any:
    """
    Return the JSON-decoded value stored under key, or None.

    Missing, expired or undecodable entries and an unavailable store all read
    as None; nothing here raises.
    """
    if not database.is_available():
        return None
    now = now or datetime.now()
    try:
        async with database.connect() as conn:
            cur = await conn.execute(
                "SELECT value, expires_at FROM kv WHERE key = ?;", (key,)
            )
            row = await cur.fetchone()
            await cur.close()
    except (aiosqlite.Error, OSError) as e:
        _logger.warning(f"Could not read '{key}' from local store: {e}")
        return None

    if not row:
        return None
    value, expires_at = row
    if _expired(expires_at, now):
        _logger.debug(f"'{key}' expired at {expires_at}")
        return None
    try:
        return json.loads(value)
    except ValueError:
        _logger.warning(f"Discarding corrupt value stored under '{key}'")
        return None


async def set_value(
    key: str,
    value: Any,
    ttl: Optional[timedelta] = None,
    now: Optional[datetime] = None,
) -> bool:
    """Upsert value under key. Returns True if it was written."""
    if not database.is_available():
        return False
    expires_at = None
    if ttl is not None:
        expires_at = ((now or datetime.now()) + ttl).isoformat()
    try:
        async with database.connect() as conn:
            await conn.execute(
                """
                INSERT INTO kv(key, value, expires_at) VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    expires_at = excluded.expires_at;
                """,
                (key, json.dumps(value), expires_at),
            )
            await conn.commit()
    except (aiosqlite.Error, OSError) as e:
        _logger.error(f"Could not persist '{key}': {e}")
        return False
    return True


async def delete_value(key: str) -> None:
    if not database.is_available():
        return
    try:
        async with database.connect() as conn:
            await conn.execute("DELETE FROM kv WHERE key = ?;", (key,))
            await conn.commit()
    except (aiosqlite.Error, OSError) as e:
        _logger.error(f"Could not delete '{key}': {e}")


async def purge_expired(now: Optional[datetime] = None) -> int:
    """Drop every expired row, return how many went."""
    if not database.is_available():
        return 0
    now = now or datetime.now()
    try:
        async with database.connect() as conn:
            res = await conn.execute(
                "DELETE FROM kv WHERE expires_at IS NOT NULL AND expires_at <= ?;",
                (now.isoformat(),),
            )
            await conn.commit()
            return res.rowcount
    except (aiosqlite.Error, OSError) as e:
        _logger.error(f"Could not purge expired entries: {e}")
        return 0

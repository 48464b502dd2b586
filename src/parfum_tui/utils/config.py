from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import timedelta
from typing import Mapping, Optional


def _to_float(val) -> Optional[float]:
    try:
        return float(val)
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class Settings:
    """
    Runtime configuration, read from the environment.

    Fields:
      - api_url: base url of the backend REST API
      - data_path: sqlite file holding session + cart, None for memory only
      - session_days: lifetime of the persisted session (cookie expiry)
      - request_timeout: seconds before an API call gives up, None waits forever
      - log_file: where log records go while the TUI owns the terminal
    """

    api_url: str = "http://localhost:8000"
    data_path: Optional[str] = "data/parfum.sqlite"
    session_days: int = 7
    request_timeout: Optional[float] = None
    log_file: Optional[str] = None

    @property
    def session_ttl(self) -> timedelta:
        return timedelta(days=self.session_days)

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if env is None else env
        days = env.get("PARFUM_SESSION_DAYS", "")
        return cls(
            api_url=env.get("PARFUM_API_URL", cls.api_url).rstrip("/"),
            data_path=env.get("PARFUM_DATA_PATH", cls.data_path) or None,
            session_days=int(days) if days.isdigit() else cls.session_days,
            request_timeout=_to_float(env.get("PARFUM_API_TIMEOUT")),
            log_file=env.get("PARFUM_LOG_FILE") or None,
        )

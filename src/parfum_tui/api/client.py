# thin HTTP wrapper around the backend; attaches the bearer token and handles 401
from __future__ import annotations

import asyncio
from typing import Any, Callable, Dict, Optional

import requests

from parfum_tui.utils.logger import get_logger
from parfum_tui.utils.state import SessionStore

_logger = get_logger(__name__)


def _first_error(errors: Any) -> Optional[str]:
    if isinstance(errors, dict):
        for msgs in errors.values():
            found = _first_error(msgs)
            if found:
                return found
    elif isinstance(errors, (list, tuple)):
        for msg in errors:
            found = _first_error(msg)
            if found:
                return found
    elif isinstance(errors, str) and errors:
        return errors
    return None


class ApiError(Exception):
    """
    A failed backend call. status is None when the request never got a
    response (connection refused, DNS, ...).
    """

    def __init__(self, status: Optional[int], payload: Any = None, reason: str = ""):
        self.status = status
        self.payload = payload
        self.reason = reason
        super().__init__(self.message or reason or f"HTTP {status}")

    @property
    def message(self) -> Optional[str]:
        """User-facing text taken from message, error, or the errors payload."""
        data = self.payload
        if not isinstance(data, dict):
            return None
        for key in ("message", "error"):
            if isinstance(data.get(key), str) and data[key]:
                return data[key]
        return _first_error(data.get("errors"))


class UnauthorizedError(ApiError):
    """Token missing or rejected. The session is already cleared when raised."""


def error_message(err: BaseException, fallback: str) -> str:
    if isinstance(err, ApiError) and err.message:
        return err.message
    return fallback


class ApiClient:
    """
    Every request carries the session's bearer token when there is one.

    On a 401 the session store is cleared, on_unauthorized runs (the app sends
    the user back to its root screen) and UnauthorizedError is raised. Other
    error statuses come back as ApiError for the caller to interpret.
    """

    def __init__(
        self,
        base_url: str,
        session: SessionStore,
        on_unauthorized: Optional[Callable[[], None]] = None,
        timeout: Optional[float] = None,
        http: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.session = session
        self.on_unauthorized = on_unauthorized
        self.timeout = timeout
        self._http = http or requests.Session()

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        token = self.session.get_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    @staticmethod
    def _decode(resp) -> Any:
        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError:
            return resp.text

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
        files: Any = None,
    ) -> Any:
        url = f"{self.base_url}{path}"
        _logger.debug(f"{method} {url}")
        try:
            resp = await asyncio.to_thread(
                self._http.request,
                method,
                url,
                params=params,
                json=json,
                files=files,
                headers=self._headers(),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            _logger.warning(f"{method} {url} failed: {e}")
            raise ApiError(None, reason=str(e)) from e

        payload = self._decode(resp)
        if resp.status_code == 401:
            _logger.info(f"{method} {url} -> 401, dropping session")
            await self.session.clear()
            if self.on_unauthorized:
                self.on_unauthorized()
            raise UnauthorizedError(401, payload)
        if not 200 <= resp.status_code < 300:
            _logger.info(f"{method} {url} -> {resp.status_code}")
            raise ApiError(resp.status_code, payload)
        return payload

    async def get(self, path: str, **kwargs) -> Any:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs) -> Any:
        return await self.request("POST", path, **kwargs)

    async def put(self, path: str, **kwargs) -> Any:
        return await self.request("PUT", path, **kwargs)

    async def delete(self, path: str, **kwargs) -> Any:
        return await self.request("DELETE", path, **kwargs)

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from typing import Callable, List, Optional

from parfum_tui.api.models import User
from parfum_tui.store import kv
from parfum_tui.utils.logger import get_logger

_logger = get_logger(__name__)

TOKEN_KEY = "auth_token"
USER_KEY = "user"

SessionListener = Callable[["SessionStore"], None]


@dataclass
class SessionStore:
    """
    Centralized login state shared by every screen and the API client.

    Fields:
      - token: opaque bearer token, None when logged out
      - user: cached profile of the logged-in user
      - ttl: how long the persisted copy stays valid

    Reads come from memory and never fail. Writes update memory, notify
    subscribers and then persist to the local store.
    """

    token: Optional[str] = None
    user: Optional[User] = None
    ttl: timedelta = timedelta(days=7)

    _listeners: List[SessionListener] = field(
        default_factory=list, repr=False, compare=False
    )

    def get_token(self) -> Optional[str]:
        return self.token or None

    def get_user(self) -> Optional[User]:
        return self.user

    def is_authenticated(self) -> bool:
        return bool(self.token)

    def is_admin(self) -> bool:
        return self.user is not None and self.user.role == "admin"

    async def load(self) -> None:
        """Hydrate from the local store. Anything unusable reads as logged out."""
        token = await kv.get_value(TOKEN_KEY)
        user = await kv.get_value(USER_KEY)
        self.token = token if isinstance(token, str) and token else None
        self.user = User.from_dict(user) if isinstance(user, dict) else None
        _logger.debug(f"Session loaded, authenticated={self.is_authenticated()}")
        self._notify()

    async def set_token(self, token: str) -> None:
        self.token = token
        self._notify()
        await kv.set_value(TOKEN_KEY, token, ttl=self.ttl)

    async def set_user(self, user: User) -> None:
        self.user = user
        self._notify()
        await kv.set_value(USER_KEY, user.to_dict(), ttl=self.ttl)

    async def clear(self) -> None:
        """
        Log out locally. Memory is wiped and listeners told before the first
        await, so nobody observes a half-cleared session.
        """
        self.token = None
        self.user = None
        self._notify()
        await kv.delete_value(TOKEN_KEY)
        await kv.delete_value(USER_KEY)

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

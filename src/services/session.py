"""Per-request session context with change notification."""

import logging
from collections.abc import Callable

from pydantic import BaseModel, ConfigDict

from src.errors import Unauthorized

logger = logging.getLogger(__name__)


class SessionUser(BaseModel):
    model_config = ConfigDict(frozen=True)

    user_id: str
    email: str | None = None
    name: str | None = None


SessionListener = Callable[["SessionUser | None"], None]


class SessionContext:
    """
    Holds the signed-in user for one request.

    Listeners registered with `subscribe` are called with the new user (or None)
    every time the session signs in or out.
    """

    def __init__(self, user: SessionUser | None = None):
        self._user = user
        self._listeners: list[SessionListener] = []

    @property
    def user(self) -> SessionUser | None:
        return self._user

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register a listener. Returns a callable that unsubscribes it."""
        self._listeners.append(listener)
        return lambda: self.unsubscribe(listener)

    def unsubscribe(self, listener: SessionListener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    def sign_in(self, user: SessionUser):
        self._user = user
        self._notify()

    def sign_out(self):
        self._user = None
        self._notify()

    def require_user(self) -> SessionUser:
        if self._user is None:
            raise Unauthorized("Authentication required")
        return self._user

    def _notify(self):
        for listener in list(self._listeners):
            listener(self._user)


def log_session_change(user: SessionUser | None):
    if user is None:
        logger.info("Session signed out")
    else:
        logger.info(f"Session signed in as {user.user_id}")

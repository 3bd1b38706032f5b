"""Server-side sessions and the request-scoped identity context.

A session is a random opaque token stored in a cookie and mapped on the
server to a user id plus an expiry. Handlers never read the cookie
themselves: they depend on `get_request_context` (anonymous allowed) or
`require_context` (authenticated only), which carry the store and the
current principal.
"""

import secrets
import threading
import time
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from fastapi import Depends, Request, Response

from core.config import SESSION_COOKIE_NAME, SESSION_COOKIE_SECURE, SESSION_MAX_AGE
from core.exceptions import AuthenticationError
from core.logger import get_logger
from database.deps import get_store
from database.store import RecordStore
from schemas.user_schema import UserRecord

logger = get_logger("core.session")


class SessionStore:
    """In-process table of live sessions.

    Attributes:
        max_age: Session lifetime in seconds.
        cookie_name: Name of the cookie carrying the token.
        secure: Whether the cookie is marked Secure.
    """

    def __init__(
        self,
        max_age: int = SESSION_MAX_AGE,
        cookie_name: str = SESSION_COOKIE_NAME,
        secure: bool = SESSION_COOKIE_SECURE,
        clock=time.monotonic,
    ):
        self.max_age = max_age
        self.cookie_name = cookie_name
        self.secure = secure
        self._clock = clock
        self._sessions: Dict[str, Tuple[int, float]] = {}
        self._lock = threading.Lock()

    def create(self, user_id: int) -> str:
        token = secrets.token_urlsafe(32)
        with self._lock:
            self._purge_expired()
            self._sessions[token] = (user_id, self._clock() + self.max_age)
        return token

    def get_user_id(self, token: Optional[str]) -> Optional[int]:
        """Return the user bound to `token`, or None if unknown or expired."""
        if not token:
            return None
        with self._lock:
            entry = self._sessions.get(token)
            if entry is None:
                return None
            user_id, expires_at = entry
            if expires_at <= self._clock():
                del self._sessions[token]
                return None
            return user_id

    def destroy(self, token: Optional[str]) -> None:
        if not token:
            return
        with self._lock:
            self._sessions.pop(token, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def _purge_expired(self) -> None:
        now = self._clock()
        expired = [t for t, (_, exp) in self._sessions.items() if exp <= now]
        for token in expired:
            del self._sessions[token]


@dataclass
class RequestContext:
    """Per-request view of who is calling and which store to use."""

    store: RecordStore
    user: Optional[UserRecord] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def principal(self) -> UserRecord:
        """The authenticated user.

        Raises:
            AuthenticationError: If the request carries no valid session.
        """
        if self.user is None:
            raise AuthenticationError()
        return self.user

    @property
    def user_id(self) -> int:
        return self.principal.id


def get_session_store(request: Request) -> SessionStore:
    return request.app.state.sessions


def get_request_context(
    request: Request,
    store: RecordStore = Depends(get_store),
    sessions: SessionStore = Depends(get_session_store),
) -> RequestContext:
    """Resolve the session cookie into a `RequestContext`.

    A token bound to a user that no longer exists counts as anonymous.
    """
    user_id = sessions.get_user_id(request.cookies.get(sessions.cookie_name))
    user = store.users.get(user_id) if user_id is not None else None
    return RequestContext(store=store, user=user)


def require_context(ctx: RequestContext = Depends(get_request_context)) -> RequestContext:
    """Dependency for per-user endpoints: rejects anonymous requests with 401."""
    if not ctx.is_authenticated:
        raise AuthenticationError()
    return ctx


def start_session(request: Request, response: Response, sessions: SessionStore, user: UserRecord) -> None:
    """Bind a fresh session to `user`, replacing any session the client had."""
    sessions.destroy(request.cookies.get(sessions.cookie_name))
    token = sessions.create(user.id)
    response.set_cookie(
        key=sessions.cookie_name,
        value=token,
        max_age=sessions.max_age,
        httponly=True,
        samesite="lax",
        secure=sessions.secure,
    )
    logger.info("Session started for user id=%s", user.id)


def end_session(request: Request, response: Response, sessions: SessionStore) -> None:
    sessions.destroy(request.cookies.get(sessions.cookie_name))
    response.delete_cookie(sessions.cookie_name)

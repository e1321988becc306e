# agentchat/core/session.py
"""
Caller identity for request handlers.

Every handler receives an explicit, role-tagged `SessionContext` through a
FastAPI dependency instead of reading shared auth state. The `IdentityVerifier`
keeps a small cache of resolved roles; it subscribes to `SessionEvents` so a
sign-in, sign-out or profile change makes it re-resolve the affected user.
"""
import logging
import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from agentchat.core import config
from agentchat.core.database import get_db
from agentchat.core.errors import Forbidden, Unauthenticated, to_http_exception
from agentchat.core.security import decode_access_token
from agentchat.models.profile import Profile, ProfileRole

logger = logging.getLogger(__name__)

ADMIN_REQUIRED_MESSAGE = "Access denied: Admin privileges required"


@dataclass(frozen=True)
class SessionContext:
    """The authenticated caller of one request."""

    user_id: str
    email: str
    role: ProfileRole
    token_id: str
    expires_at: float

    @property
    def is_admin(self) -> bool:
        return self.role is ProfileRole.ADMIN


class SessionEventType(str, Enum):
    SIGNED_IN = "signed_in"
    SIGNED_OUT = "signed_out"
    PROFILE_UPDATED = "profile_updated"


@dataclass(frozen=True)
class SessionEvent:
    type: SessionEventType
    user_id: str
    token_id: Optional[str] = None
    expires_at: Optional[float] = None


Subscriber = Callable[[SessionEvent], None]


class SessionEvents:
    """In-process publish/subscribe for sign-in, sign-out and profile changes."""

    def __init__(self) -> None:
        self._subscribers: List[Subscriber] = []
        self._lock = threading.Lock()

    def subscribe(self, subscriber: Subscriber) -> Callable[[], None]:
        """Register `subscriber`; returns a callable that removes it again."""
        with self._lock:
            self._subscribers.append(subscriber)

        def unsubscribe() -> None:
            with self._lock:
                if subscriber in self._subscribers:
                    self._subscribers.remove(subscriber)

        return unsubscribe

    def publish(self, event: SessionEvent) -> None:
        with self._lock:
            subscribers = list(self._subscribers)
        logger.debug("Publishing %s for user %s to %d subscribers", event.type.value, event.user_id, len(subscribers))
        for subscriber in subscribers:
            try:
                subscriber(event)
            except Exception:
                logger.exception("Session event subscriber failed for %s", event.type.value)


class IdentityVerifier:
    """
    Turns a bearer token into a SessionContext.

    Resolved roles are cached for `role_ttl` seconds. Events only reach the
    verifier of the same process, so the TTL bounds how long another worker
    keeps a stale role.
    """

    def __init__(
        self,
        events: SessionEvents,
        role_ttl: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.role_ttl = config.ROLE_CACHE_TTL_SECONDS if role_ttl is None else role_ttl
        self._clock = clock
        self._roles: Dict[str, Tuple[str, ProfileRole, float]] = {}
        self._revoked: Dict[str, float] = {}
        self._lock = threading.Lock()
        events.subscribe(self._on_event)

    def verify(self, db: Session, token: Optional[str]) -> SessionContext:
        if not token:
            raise Unauthenticated("No authorization header")

        payload = decode_access_token(token)
        if not payload:
            raise Unauthenticated("Invalid token")

        token_id = payload["jti"]
        with self._lock:
            if token_id in self._revoked:
                raise Unauthenticated("Token has been revoked")
            cached = self._roles.get(payload["sub"])
        if cached is not None and self._clock() - cached[2] >= self.role_ttl:
            cached = None

        if cached is None:
            profile = db.query(Profile).filter(Profile.id == payload["sub"]).first()
            if not profile:
                raise Unauthenticated("User not found")
            cached = (profile.email, ProfileRole(profile.role), self._clock())
            with self._lock:
                self._roles[profile.id] = cached

        email, role, _ = cached
        return SessionContext(
            user_id=payload["sub"],
            email=email,
            role=role,
            token_id=token_id,
            expires_at=float(payload["exp"]),
        )

    def forget(self, user_id: Optional[str] = None) -> None:
        """Drop cached roles for one user, or for everybody."""
        with self._lock:
            if user_id is None:
                self._roles.clear()
            else:
                self._roles.pop(user_id, None)

    def _on_event(self, event: SessionEvent) -> None:
        if event.type is SessionEventType.SIGNED_OUT and event.token_id:
            self._revoke(event.token_id, event.expires_at or time.time())
        self.forget(event.user_id)

    def _revoke(self, token_id: str, expires_at: float) -> None:
        now = time.time()
        with self._lock:
            # Expired tokens fail signature checks anyway
            for stale in [jti for jti, exp in self._revoked.items() if exp < now]:
                del self._revoked[stale]
            self._revoked[token_id] = expires_at


session_events = SessionEvents()
identity_verifier = IdentityVerifier(session_events)

bearer_scheme = HTTPBearer(auto_error=False)


def get_identity_verifier() -> IdentityVerifier:
    return identity_verifier


def get_session_events() -> SessionEvents:
    return session_events


def get_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[str]:
    """The raw bearer token, if any. Function endpoints verify it inside their own error envelope."""
    return credentials.credentials if credentials else None


def get_session(
    token: Optional[str] = Depends(get_bearer_token),
    db: Session = Depends(get_db),
    verifier: IdentityVerifier = Depends(get_identity_verifier),
) -> SessionContext:
    try:
        return verifier.verify(db, token)
    except Unauthenticated as exc:
        raise to_http_exception(exc)


def require_admin(session: SessionContext = Depends(get_session)) -> SessionContext:
    if not session.is_admin:
        raise to_http_exception(Forbidden(ADMIN_REQUIRED_MESSAGE))
    return session


def ensure_admin(session: SessionContext) -> None:
    """Raise Forbidden unless the caller is an admin."""
    if not session.is_admin:
        raise Forbidden(ADMIN_REQUIRED_MESSAGE)

"""Mock login sessions passed explicitly through request dependencies."""

import secrets
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Optional
from fastapi import Depends, Header, Request
from consultant_hub.errors import UnauthorizedError, ValidationError
from consultant_hub.records.repo import RecordRepository
from consultant_hub.utils.logging_utils import StructuredLogger

MIN_PASSWORD_LENGTH = 6

# Display names for known demo accounts
KNOWN_USER_NAMES = {
    "anna.schmidt@consulting.eu": "Dr. Anna Schmidt",
}

logger = StructuredLogger("consultant_hub.session")


@dataclass
class SessionContext:
    """Identity of the logged-in user for one session."""
    token: str
    user_id: str
    email: str
    name: str
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class SessionStore:
    """In-process registry of active sessions.

    One store is created per application and kept on ``app.state``; request
    handlers receive the resolved ``SessionContext`` through a dependency.
    """

    def __init__(self):
        self._sessions: Dict[str, SessionContext] = {}

    def init(self, email: Optional[str], password: Optional[str], repo: RecordRepository) -> SessionContext:
        """
        Log a user in (mocked credential check) and open a session.

        Any non-empty email with a password of at least six characters is
        accepted; the user row is created on first login.

        Raises:
            ValidationError: email missing or password too short
        """
        email = (email or "").strip().lower()
        if not email:
            raise ValidationError("Email is required", details={"email": "required"})
        if not password or len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
                details={"password": "too short"}
            )

        name = KNOWN_USER_NAMES.get(email, email.split("@")[0])
        user = repo.get_or_create_user(email, name)
        context = SessionContext(
            token=secrets.token_urlsafe(32),
            user_id=user.id,
            email=user.email,
            name=user.name or name,
        )
        self._sessions[context.token] = context
        logger.info("Session started", user_id=user.id)
        return context

    def get(self, token: Optional[str]) -> Optional[SessionContext]:
        if not token:
            return None
        return self._sessions.get(token)

    def teardown(self, token: Optional[str]) -> bool:
        """End a session. Returns False when the token was not active."""
        context = self._sessions.pop(token, None) if token else None
        if context:
            logger.info("Session ended", user_id=context.user_id)
        return context is not None


def bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def get_session_store(request: Request) -> SessionStore:
    """FastAPI dependency returning the application's session store."""
    return request.app.state.session_store


def get_optional_session(
    authorization: Optional[str] = Header(default=None),
    store: SessionStore = Depends(get_session_store)
) -> Optional[SessionContext]:
    """Resolve the session from ``Authorization: Bearer <token>``, or None."""
    return store.get(bearer_token(authorization))


def get_session_context(
    session: Optional[SessionContext] = Depends(get_optional_session)
) -> SessionContext:
    """Resolve the session or fail with 401."""
    if session is None:
        raise UnauthorizedError()
    return session

"""Login session API router."""

from fastapi import APIRouter, Depends, Header
from pydantic import BaseModel
from typing import Optional
from consultant_hub.api.dependencies import get_repo
from consultant_hub.auth.session import (
    SessionContext,
    SessionStore,
    get_session_context,
    get_session_store,
    bearer_token
)
from consultant_hub.records.repo import RecordRepository


router = APIRouter(prefix="/api/session", tags=["session"])


class LoginRequest(BaseModel):
    """Login request model."""
    email: str
    password: str


class SessionResponse(BaseModel):
    """Active session returned to the browser."""
    token: Optional[str] = None
    user_id: str
    email: str
    name: str


@router.post("", response_model=SessionResponse)
async def login(
    login_request: LoginRequest,
    repo: RecordRepository = Depends(get_repo),
    store: SessionStore = Depends(get_session_store)
):
    """Open a session (mocked credential check)."""
    context = store.init(login_request.email, login_request.password, repo)
    return SessionResponse(token=context.token, user_id=context.user_id, email=context.email, name=context.name)


@router.get("", response_model=SessionResponse)
async def current_session(session: SessionContext = Depends(get_session_context)):
    """Return the user behind the bearer token."""
    return SessionResponse(user_id=session.user_id, email=session.email, name=session.name)


@router.delete("")
async def logout(
    authorization: Optional[str] = Header(default=None),
    store: SessionStore = Depends(get_session_store)
):
    """Close the session. Logging out twice is not an error."""
    ended = store.teardown(bearer_token(authorization))
    return {"logged_out": ended}

"""
Authentication API Router - Login und Logout.
"""

from fastapi import APIRouter, Depends

from hookline.api.dependencies import get_authenticator, get_request_context
from hookline.api.error_handling import handle_session_errors, raise_for_error
from hookline.api.models import LoginRequest, LoginResponse, SessionRequest, SessionTokenResponse, UserResponse
from hookline.api.request_context import RequestContext
from hookline.services.authenticator import Authenticator


router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post("/login", response_model=LoginResponse)
@handle_session_errors("user login")
async def login(
    credentials: LoginRequest,
    ctx: RequestContext = Depends(get_request_context),
    users: Authenticator = Depends(get_authenticator),
):
    """
    User-Login.

    Counts the attempt on the current session, verifies the credentials
    and replaces the session with an authenticated one.
    """
    err, user = await users.login(credentials.model_dump(), ctx)
    raise_for_error(err)

    return LoginResponse(
        session_id=ctx.session.session_id if ctx.session else None,
        user=UserResponse(**user.public()),
    )


@router.post("/logout", response_model=SessionTokenResponse)
@handle_session_errors("user logout")
async def logout(
    body: SessionRequest,
    ctx: RequestContext = Depends(get_request_context),
    users: Authenticator = Depends(get_authenticator),
):
    """Replaces the current session with a new guest session."""
    err, session_id = await users.logout(body.model_dump(), ctx)
    raise_for_error(err)

    return SessionTokenResponse(session_id=session_id)

"""
Session API Router - issues guest tokens and reports the current session.
"""

from fastapi import APIRouter, Depends, HTTPException, status

from hookline.api.dependencies import get_request_context, get_session_manager
from hookline.api.error_handling import handle_session_errors, raise_for_error
from hookline.api.models import SessionInfoResponse, SessionRequest, SessionTokenResponse, UserResponse
from hookline.api.request_context import RequestContext
from hookline.auth.session_manager import SessionManager


router = APIRouter(prefix="/session", tags=["session"])


@router.post("", response_model=SessionTokenResponse)
@handle_session_errors("issue session")
async def issue_session(
    body: SessionRequest,
    ctx: RequestContext = Depends(get_request_context),
    sessions: SessionManager = Depends(get_session_manager),
):
    """
    Returns the client's session token, creating a guest session if the
    request carries none (or an invalid/expired one).
    """
    err, session_id = await sessions.issue(body.client, body.platform, ctx)
    raise_for_error(err)

    return SessionTokenResponse(session_id=session_id)


@router.get("", response_model=SessionInfoResponse)
@handle_session_errors("fetch session")
async def current_session(ctx: RequestContext = Depends(get_request_context)):
    """Current session data (never the raw session id)."""
    session = ctx.session
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No active session"
        )

    user = ctx.current_user
    return SessionInfoResponse(
        client=session.client,
        platform=session.platform or {},
        expires=session.expires,
        login_attempts=session.login_attempts or 0,
        guest=session.is_guest,
        user=UserResponse(**user.public()) if user else None,
    )

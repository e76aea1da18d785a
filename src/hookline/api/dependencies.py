"""
FastAPI dependencies for the request context and application modules
"""

from fastapi import Depends, HTTPException, Request, Response, status

from hookline.api.auth_context import get_application
from hookline.api.request_context import RequestContext
from hookline.auth.session_manager import SessionManager
from hookline.infrastructure.application import Application
from hookline.services.authenticator import Authenticator


async def get_request_context(
    request: Request,
    response: Response,
    application: Application = Depends(get_application),
) -> RequestContext:
    """
    Request context with the client's session already resolved.
    """
    ctx = RequestContext(application, request, response)
    await ctx.get_session_id()
    return ctx


def _get_module(application: Application, name: str):
    module = application.get_module(name)
    if module is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Module '{name}' not available"
        )
    return module


def get_session_manager(application: Application = Depends(get_application)) -> SessionManager:
    return _get_module(application, SessionManager.name)


def get_authenticator(application: Application = Depends(get_application)) -> Authenticator:
    return _get_module(application, Authenticator.name)

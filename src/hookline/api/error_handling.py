"""
Zentrale Fehlerbehandlung für die Hookline API
Maps session errors to HTTP responses for all routers
"""

import inspect
import logging
from functools import wraps
from typing import Callable, Any, Optional

from fastapi import HTTPException, status

from hookline.auth.errors import SessionError

logger = logging.getLogger("uvicorn.error")


STATUS_BY_CODE = {
    "limit_exceeded": status.HTTP_429_TOO_MANY_REQUESTS,
    "invalid_login": status.HTTP_401_UNAUTHORIZED,
    "invalid_password": status.HTTP_401_UNAUTHORIZED,
    "invalid_arguments": status.HTTP_400_BAD_REQUEST,
    "invalid_id": status.HTTP_400_BAD_REQUEST,
    "invalid_envelope": status.HTTP_400_BAD_REQUEST,
    "not_exist": status.HTTP_404_NOT_FOUND,
    "store_error": status.HTTP_503_SERVICE_UNAVAILABLE,
}


def to_http_exception(err: SessionError) -> HTTPException:
    status_code = STATUS_BY_CODE.get(err.code, status.HTTP_500_INTERNAL_SERVER_ERROR)
    detail = {"code": err.code, "message": str(err)}
    if status_code == status.HTTP_500_INTERNAL_SERVER_ERROR:
        detail["message"] = "We are unable to process your request at this time. Try again later."
    return HTTPException(status_code=status_code, detail=detail)


def raise_for_error(err: Optional[Exception]) -> None:
    """Raises the HTTPException matching a returned error, if any."""
    if err is None:
        return
    if isinstance(err, SessionError):
        raise to_http_exception(err)
    raise err


def handle_session_errors(operation_name: str = "session operation"):
    """
    Decorator für einheitliche Fehlerbehandlung in API-Endpunkten.

    Args:
        operation_name: Name der Operation für Fehlermeldungen

    Verwendung:
        @router.post("/endpoint")
        @handle_session_errors("issue session")
        async def my_endpoint(ctx = Depends(get_request_context)):
            ...
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def async_wrapper(*args, **kwargs) -> Any:
            try:
                return await func(*args, **kwargs)
            except HTTPException:
                # HTTPExceptions direkt durchreichen (404, etc.)
                raise
            except SessionError as exc:
                logger.info("Session error in %s: %s", operation_name, exc)
                raise to_http_exception(exc)
            except Exception as exc:
                logger.exception("Unexpected error in %s: %s", operation_name, exc)
                raise HTTPException(
                    status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                    detail=f"Internal server error during {operation_name}"
                )

        if not inspect.iscoroutinefunction(func):
            raise TypeError(f"{func.__name__} must be a coroutine function")
        return async_wrapper

    return decorator

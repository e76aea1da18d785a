"""
Centralized application context storage for the FastAPI app.
"""

from typing import Optional

from fastapi import HTTPException, Request, status

from hookline.infrastructure.application import Application


def set_app_context(app, application: Application) -> None:
    """Attach the application orchestrator to the FastAPI app state."""
    app.state.application = application


def get_application(request: Request) -> Application:
    """Fetch the application orchestrator from the FastAPI app state."""
    application: Optional[Application] = getattr(request.app.state, "application", None)
    if not application or not application.loaded:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Application not initialized",
        )
    return application

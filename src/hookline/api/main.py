"""
FastAPI Main Application for the Hookline Web API
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from hookline.api.auth_context import set_app_context
from hookline.api.request_context import SESSION_HEADER
from hookline.api.routers import auth, session
from hookline.auth.session_manager import SessionManager
from hookline.config import get_config
from hookline.domain.user import User
from hookline.infrastructure.application import Application
from hookline.repositories import InMemoryStore, MySQLSessionStore, connection_factory_from_config
from hookline.services.authenticator import Authenticator
from hookline.services.user_directory import InMemoryUserDirectory

logger = logging.getLogger("uvicorn.error")


def build_session_store(config: dict):
    store_config = config.get("store") or {}
    backend = store_config.get("backend", "memory")

    if backend == "mysql":
        return MySQLSessionStore(
            connection_factory_from_config(config.get("database") or {}),
            table=store_config.get("table", "app_session"),
        )
    if backend == "memory":
        return InMemoryStore("AppSession")

    raise ValueError(f"Unknown store backend: {backend}")


def build_application(config: dict) -> Application:
    """Application with the session and user modules registered."""
    application = Application(config)
    users = [User(**user) for user in config.get("users") or []]

    # Session module first: its getSessionId handler attaches the session
    # the user module reads
    application.add_module(
        SessionManager(build_session_store(config)),
        Authenticator(InMemoryUserDirectory(users)),
    )
    return application


def create_app(application: Optional[Application] = None) -> FastAPI:
    application = application or build_application(get_config())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        application.start()
        logger.info("✓ %s ready", application.name)
        try:
            yield
        finally:
            application.close()

    app = FastAPI(
        title="Hookline API",
        description="Session and hook backend for pluggable application modules",
        version="1.0.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        lifespan=lifespan,
    )
    set_app_context(app, application)

    # CORS middleware for frontend access
    app.add_middleware(
        CORSMiddleware,
        allow_origins=(application.config.get("cors") or {}).get("allow_origins", ["*"]),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[SESSION_HEADER],
    )

    app.include_router(session.router, prefix="/api")
    app.include_router(auth.router, prefix="/api")

    @app.get("/api/health")
    def health_check():
        """Health check endpoint"""
        return {
            "status": "healthy",
            "service": application.name,
            "modules": list(application.modules),
            "scheduler": {
                "jobs": list(application.scheduler.cron_jobs),
                "running": application.scheduler.running,
            },
        }

    return app

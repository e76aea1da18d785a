"""
Pytest Configuration and Shared Fixtures for the Hookline Test Suite.

This module provides:
- A deterministic clock
- An in-memory session store and user directory
- A loaded application with the session and user modules
"""

import sys
import logging
from pathlib import Path

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from hookline.auth.session_manager import SessionManager  # noqa: E402
from hookline.domain.user import User  # noqa: E402
from hookline.infrastructure.application import Application  # noqa: E402
from hookline.repositories.memory_store import InMemoryStore  # noqa: E402
from hookline.services.authenticator import Authenticator  # noqa: E402
from hookline.services.user_directory import InMemoryUserDirectory  # noqa: E402

from tests.fixtures.helpers import FakeClock  # noqa: E402

# Configure logging
logging.basicConfig(
    level=logging.DEBUG,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

ALICE_PASSWORD = "s3cret-pass"


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore("AppSession")


@pytest.fixture
def alice() -> User:
    return User(id=7, login="alice", email="alice@example.com", password=ALICE_PASSWORD, group="member")


@pytest.fixture
def directory(alice) -> InMemoryUserDirectory:
    return InMemoryUserDirectory([alice])


@pytest.fixture
def app_config() -> dict:
    return {
        "app": {"name": "Hookline Test", "mode": "test", "login_attempt": 5},
        "scheduler": {"tick_seconds": 300},
    }


@pytest.fixture
def application(app_config, clock, store, directory) -> Application:
    """Loaded application: session module first, then the user module."""
    application = Application(app_config, clock=clock)
    application.add_module(
        SessionManager(store, clock=clock),
        Authenticator(directory),
    )
    application.load()
    return application


@pytest.fixture
def sessions(application) -> SessionManager:
    return application.get_module("AppSession")


@pytest.fixture
def users(application) -> Authenticator:
    return application.get_module("User")


@pytest.fixture
def api_client(application):
    """TestClient running the app lifespan around the shared application."""
    from fastapi.testclient import TestClient

    from hookline.api.main import create_app

    with TestClient(create_app(application)) as client:
        yield client

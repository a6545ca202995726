"""
Pytest configuration and fixtures for testing.

This module provides shared fixtures for settings, the simulated media
server, the application and its test client.
"""

import pytest
from fastapi.testclient import TestClient

from mocks.websocket_mocks import (
    MediaServerStub,
    create_mock_media_server,
    create_mock_websocket,
)
from signal_relay import application
from signal_relay.connection import ClientConnection
from signal_relay.managers.connection_registry import ConnectionRegistry
from signal_relay.managers.media_server import MediaServerClient
from signal_relay.routing import SessionRouter
from signal_relay.settings import Settings

MEDIA_SERVER_URL = "http://media-server.test"
API_KEY = "test-api-key"


@pytest.fixture
def settings():
    """
    Provides settings pointing at the simulated media server.

    Returns:
        Settings: Test settings instance
    """
    return Settings(
        MEDIA_SERVER_URL=MEDIA_SERVER_URL,
        MEDIA_SERVER_API_KEY=API_KEY,
        MEDIA_SERVER_TIMEOUT=1.0,
        CORS_ORIGIN="*",
    )


@pytest.fixture
def api_headers():
    """
    Provides headers carrying the correct media server credential.

    Returns:
        dict: Headers dictionary with x-api-key
    """
    return {"x-api-key": API_KEY}


@pytest.fixture
def media_server_stub():
    """
    Provides a recording simulated media server.

    Returns:
        MediaServerStub: Stub whose requests succeed by default
    """
    return MediaServerStub()


@pytest.fixture
def media_server(settings, media_server_stub):
    """
    Provides a MediaServerClient talking to the simulated media server.

    Returns:
        MediaServerClient: Client using the stub's transport
    """
    return MediaServerClient.from_settings(
        settings, transport=media_server_stub.transport
    )


@pytest.fixture
def app(settings, media_server):
    """
    Create the application wired to the simulated media server.

    Returns:
        FastAPI: FastAPI application instance.
    """
    return application(settings=settings, media_server=media_server)


@pytest.fixture
def client(app):
    """
    Create a test client for the application.

    The client is entered as a context manager so that HTTP requests and
    WebSocket sessions share one event loop.

    Yields:
        TestClient: FastAPI test client instance.
    """
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def registry():
    """Provides an empty ConnectionRegistry."""
    return ConnectionRegistry()


@pytest.fixture
def mock_media_server():
    """Provides a mocked MediaServerClient whose calls succeed."""
    return create_mock_media_server()


@pytest.fixture
def session_router(registry, mock_media_server):
    """Provides a SessionRouter over a fresh registry and mocked media server."""
    return SessionRouter(registry, mock_media_server)


@pytest.fixture
def make_connection():
    """
    Factory for live ClientConnection handles over mock WebSockets.

    Returns:
        Callable: ``make_connection(connection_id=None, alive=True)``
    """

    def _make(connection_id: str | None = None, alive: bool = True):
        connection = ClientConnection(
            create_mock_websocket(), connection_id=connection_id
        )
        connection.alive = alive
        return connection

    return _make

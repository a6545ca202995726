# Uvicorn application factory <https://www.uvicorn.org/#application-factories>
from contextlib import asynccontextmanager

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from signal_relay.logging import logger
from signal_relay.managers.connection_registry import ConnectionRegistry
from signal_relay.managers.media_server import MediaServerClient
from signal_relay.middlewares.correlation_id import CorrelationIDMiddleware
from signal_relay.routing import SessionRouter, collect_subrouters
from signal_relay.settings import Settings, app_settings


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Nothing needs to be initialized before serving; on shutdown the media
    server HTTP client is closed. Registry state is in-memory only and is
    simply dropped.
    """
    logger.info(
        f"Signaling relay ready, forwarding to {app.state.media_server.base_url}"
    )
    yield
    logger.info("Application shutdown initiated")
    await app.state.media_server.aclose()
    logger.info("Application shutdown complete")


def application(
    settings: Settings | None = None,
    media_server: MediaServerClient | None = None,
) -> FastAPI:
    """
    Initializes and configures the FastAPI application.

    Builds the process-wide collaborators once and attaches them to
    ``app.state``:
    - ``registry``: the ConnectionRegistry
    - ``media_server``: the MediaServerClient
    - ``session_router``: the SessionRouter tying both together

    Then includes the routers collected by ``collect_subrouters()`` and adds
    the following middleware:
    - `CORSMiddleware`: Allowed origins from ``CORS_ORIGIN``.
    - `CorrelationIDMiddleware`: Middleware for request correlation IDs.

    Args:
        settings: Settings to use instead of the environment-sourced ones.
        media_server: Media server client to use instead of one built from
            settings.
    """
    settings = settings or app_settings

    app = FastAPI(
        title="Signaling relay",
        description="Relays SDP offers and answers between WebSocket clients and a media server",
        version="1.0.0",
        lifespan=lifespan,
    )

    registry = ConnectionRegistry()
    media_server = media_server or MediaServerClient.from_settings(settings)

    app.state.settings = settings
    app.state.registry = registry
    app.state.media_server = media_server
    app.state.session_router = SessionRouter(registry, media_server)

    app.include_router(collect_subrouters())

    # Middlewares (execute in REVERSE order of registration)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )
    app.add_middleware(CorrelationIDMiddleware)

    return app

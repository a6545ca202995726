"""FastAPI dependencies for the application."""

import secrets
from typing import Annotated

from fastapi import Depends, Header, HTTPException, Request, status

from signal_relay.constants import API_KEY_HEADER
from signal_relay.logging import logger
from signal_relay.managers.connection_registry import ConnectionRegistry
from signal_relay.routing import SessionRouter
from signal_relay.settings import Settings
from signal_relay.utils.metrics import sdp_answers_delivered_total


def get_settings(request: Request) -> Settings:
    """Settings the running application was built with."""
    return request.app.state.settings


def get_session_router(request: Request) -> SessionRouter:
    """Session router owned by the running application."""
    return request.app.state.session_router


def get_registry(request: Request) -> ConnectionRegistry:
    """Connection registry owned by the running application."""
    return request.app.state.registry


async def verify_media_server(
    settings: Annotated[Settings, Depends(get_settings)],
    api_key: Annotated[str | None, Header(alias=API_KEY_HEADER)] = None,
) -> None:
    """
    Reject callers that do not present the shared media server credential.

    Runs before the request body is looked at, so a bad credential always
    yields 401 regardless of the body.

    Raises:
        HTTPException: 401 if the x-api-key header is missing or wrong.
    """
    expected = settings.MEDIA_SERVER_API_KEY.get_secret_value()

    if api_key and secrets.compare_digest(
        api_key.encode(), expected.encode()
    ):
        return

    logger.warning("Rejected media server callback with invalid API key")
    sdp_answers_delivered_total.labels(result="unauthorized").inc()
    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized"
    )

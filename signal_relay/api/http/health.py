"""Health check endpoint for monitoring service status."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from signal_relay.dependencies import get_registry
from signal_relay.managers.connection_registry import ConnectionRegistry

router = APIRouter()


class HealthResponse(BaseModel):
    """Response model for health check endpoint."""

    status: str
    active_connections: int


@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Health check endpoint",
    tags=["health"],
)
async def health_check(
    registry: Annotated[ConnectionRegistry, Depends(get_registry)],
) -> HealthResponse:
    """
    Report liveness and the number of live signaling connections.

    The media server is not probed; it is only reached on demand.
    """
    return HealthResponse(status="healthy", active_connections=len(registry))

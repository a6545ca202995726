"""Callback endpoints used by the media server."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import ValidationError

from signal_relay.dependencies import get_session_router, verify_media_server
from signal_relay.routing import SessionRouter
from signal_relay.schemas.media_server import AnswerRequest, MessageResponse

router = APIRouter(
    prefix="/media-server",
    tags=["media-server"],
    dependencies=[Depends(verify_media_server)],
)


@router.post(
    "/answer",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    summary="Deliver an SDP answer to a connected client",
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {
                "application/json": {
                    "schema": AnswerRequest.model_json_schema()
                }
            },
        }
    },
)
async def receive_answer(
    request: Request,
    session_router: Annotated[SessionRouter, Depends(get_session_router)],
) -> MessageResponse:
    """
    Receive an SDP answer from the media server and push it to the client.

    The body is read only after the credential check has passed, so a bad
    credential is reported as 401 whatever the body contains. The
    ``clientId`` is normally the transport id the relay sent along with the
    offer; a registered alias is accepted as well.

    Returns:
        MessageResponse: Confirmation that the answer was sent.

    Raises:
        HTTPException: 400 if the body is malformed or clientId or sdpAnswer
            is missing, 404 if no live connection matches clientId.
    """
    try:
        payload = AnswerRequest.model_validate_json(await request.body())
    except ValidationError:
        payload = AnswerRequest()

    if not payload.clientId or not payload.sdpAnswer:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="clientId and sdpAnswer are required",
        )

    delivered = await session_router.deliver_answer(
        payload.clientId, payload.sdpAnswer
    )
    if not delivered:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Client not connected",
        )

    return MessageResponse(message="SDP answer sent to client")

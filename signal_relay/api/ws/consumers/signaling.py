from fastapi import APIRouter
from pydantic import ValidationError
from starlette.websockets import WebSocket

from signal_relay.api.ws.websocket import SignalingWebSocketEndpoint
from signal_relay.constants import INVALID_MESSAGE, ServerEvent
from signal_relay.logging import logger
from signal_relay.schemas.events import client_message_adapter
from signal_relay.utils.metrics import ws_messages_received_total

router = APIRouter()


@router.websocket_route("/ws")
class Signaling(SignalingWebSocketEndpoint):
    """
    Signaling channel for browser clients.

    Accepts JSON text frames ``{"event": ..., "data": {...}}`` with the
    events ``register`` and ``sdp-offer``, and pushes ``connected``,
    ``sdp-answer`` and ``error`` frames back.
    """

    async def on_receive(self, websocket: WebSocket, data: str | bytes) -> None:
        """
        Parses one frame and hands it to the session router.

        Malformed frames (invalid JSON, unknown event, wrong payload shape)
        are answered with an ``error`` frame and the connection stays open.
        """
        try:
            message = client_message_adapter.validate_json(data)
        except ValidationError:
            logger.debug(
                f"Received invalid data from {self.connection.connection_id}: "
                f"{data!r}"
            )
            ws_messages_received_total.labels(event="invalid").inc()
            await self.connection.send(
                ServerEvent.ERROR, {"message": INVALID_MESSAGE}
            )
            return

        ws_messages_received_total.labels(event=message.event).inc()
        await self.session_router.dispatch(self.connection, message.to_event())

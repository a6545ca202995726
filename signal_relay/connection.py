"""Connection handle for one live signaling client."""

import asyncio
import uuid
from typing import Any

from starlette.websockets import WebSocket, WebSocketDisconnect

from signal_relay.constants import ServerEvent
from signal_relay.logging import logger
from signal_relay.schemas.events import ServerMessage


class ClientConnection:
    """
    Handle for one live signaling client.

    Wraps the transport (a WebSocket) with the transport-assigned
    ``connection_id``, a liveness flag and a ``send`` capability. Handles are
    compared by identity; two handles are never equal even if they share a
    WebSocket.

    Attributes:
        connection_id: Unique id assigned on connect, used as the session
            identifier towards the media server.
        websocket: The underlying WebSocket.
        alive: True between on_connect and on_disconnect.
    """

    def __init__(
        self, websocket: WebSocket, connection_id: str | None = None
    ) -> None:
        self.websocket = websocket
        self.connection_id = connection_id or str(uuid.uuid4())
        self.alive = False
        self._send_lock = asyncio.Lock()

    def __repr__(self) -> str:
        return (
            f"ClientConnection(connection_id={self.connection_id!r}, "
            f"alive={self.alive})"
        )

    async def send(self, event: ServerEvent, data: dict[str, Any]) -> bool:
        """
        Push a message to this client.

        Sends are serialized per connection since answers are pushed from
        HTTP request tasks while the connection's own task may be sending
        too.

        Args:
            event: Outbound event name.
            data: Event payload.

        Returns:
            True if the message was handed to the transport, False if the
            connection is gone. Never raises for transport failures.
        """
        if not self.alive:
            logger.debug(
                f"Dropping {event} for closed connection {self.connection_id}"
            )
            return False

        message = ServerMessage(event=event, data=data)
        async with self._send_lock:
            try:
                await self.websocket.send_json(message.model_dump(mode="json"))
            except (WebSocketDisconnect, ConnectionError, RuntimeError) as e:
                # WebSocketDisconnect: Client disconnected
                # ConnectionError: Network errors
                # RuntimeError: WebSocket in invalid state
                logger.warning(
                    f"Failed to send {event} to connection "
                    f"{self.connection_id}: {e}"
                )
                self.alive = False
                return False

        return True

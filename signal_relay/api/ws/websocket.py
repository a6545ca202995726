from starlette import status
from starlette.endpoints import WebSocketEndpoint
from starlette.websockets import WebSocket

from signal_relay.connection import ClientConnection
from signal_relay.logging import clear_log_context, logger, set_log_context
from signal_relay.middlewares.correlation_id import set_correlation_id
from signal_relay.routing import SessionRouter
from signal_relay.schemas.events import ConnectEvent, DisconnectEvent
from signal_relay.utils.metrics import (
    ws_connections_active,
    ws_connections_total,
)


class SignalingWebSocketEndpoint(WebSocketEndpoint):  # type: ignore[misc]
    """
    WebSocket endpoint bound to the application's session router.

    Handles the connection lifecycle: every accepted socket gets a
    ``ClientConnection`` handle with a fresh transport id, and connect and
    disconnect are turned into router events. Frames are passed to
    ``on_receive`` undecoded (``encoding = None``) so that subclasses can
    answer malformed frames instead of having the connection closed.
    """

    encoding = None

    connection: ClientConnection
    session_router: SessionRouter

    async def on_connect(self, websocket: WebSocket) -> None:
        """
        Accepts the socket and registers it with the session router.

        Browser connections whose Origin is not in CORS_ORIGIN are closed
        with 1008 before they are accepted; clients sending no Origin header
        are let through.

        The first 8 characters of the transport id serve as correlation ID
        for all log lines of this connection.
        """
        settings = websocket.app.state.settings
        origin = websocket.headers.get("origin")
        allowed = settings.CORS_ORIGINS
        if origin and "*" not in allowed and origin not in allowed:
            logger.warning(f"Rejected signaling connection from origin {origin}")
            ws_connections_total.labels(status="rejected_origin").inc()
            await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
            return

        await websocket.accept()

        self.session_router = websocket.app.state.session_router
        self.connection = ClientConnection(websocket)

        set_correlation_id(self.connection.connection_id)
        set_log_context(connection_id=self.connection.connection_id)

        ws_connections_total.labels(status="accepted").inc()
        ws_connections_active.inc()

        await self.session_router.dispatch(self.connection, ConnectEvent())

    async def on_disconnect(self, websocket: WebSocket, close_code: int) -> None:
        """
        Deregisters the connection and notifies the media server.
        """
        if not hasattr(self, "connection"):
            return

        await self.session_router.dispatch(self.connection, DisconnectEvent())
        ws_connections_active.dec()

        logger.debug(
            f"Connection {self.connection.connection_id} closed with code "
            f"{close_code}"
        )
        clear_log_context()

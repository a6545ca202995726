import os
import pkgutil
from importlib import import_module
from typing import Any

from fastapi import APIRouter

from signal_relay.connection import ClientConnection
from signal_relay.constants import OFFER_FAILED_MESSAGE, ServerEvent
from signal_relay.exceptions import MediaServerError
from signal_relay.logging import logger
from signal_relay.managers.connection_registry import ConnectionRegistry
from signal_relay.managers.media_server import MediaServerClient
from signal_relay.schemas.events import (
    ConnectEvent,
    DisconnectEvent,
    OfferEvent,
    RegisterEvent,
    RouterEvent,
)
from signal_relay.utils.metrics import (
    disconnect_notifications_total,
    sdp_answers_delivered_total,
    sdp_offers_forwarded_total,
)


class SessionRouter:
    """
    Routes signaling events between clients and the media server.

    Offers travel client -> media server over HTTP and answers come back
    later through a separate inbound call. The two legs share no request
    context; they are correlated only by the session identifier, which is
    always the connection's transport id (``ClientConnection.connection_id``)
    and never a client-registered alias.
    """

    def __init__(
        self, registry: ConnectionRegistry, media_server: MediaServerClient
    ) -> None:
        self.registry = registry
        self.media_server = media_server

    async def dispatch(
        self, handle: ClientConnection, event: RouterEvent
    ) -> None:
        """
        Handle one connection event.

        Args:
            handle: The connection the event belongs to.
            event: One of the router event variants.

        Raises:
            TypeError: If ``event`` is not a router event.
        """
        match event:
            case ConnectEvent():
                await self.on_connect(handle)
            case RegisterEvent(client_id=client_id):
                self.on_register(handle, client_id)
            case OfferEvent(sdp=sdp):
                await self.on_offer(handle, sdp)
            case DisconnectEvent():
                await self.on_disconnect(handle)
            case _:
                raise TypeError(f"Unsupported router event: {event!r}")

    async def on_connect(self, handle: ClientConnection) -> None:
        handle.alive = True
        self.registry.add(handle)
        logger.info(f"Client connected: {handle.connection_id}")

        # Let the client know the session id the media server will use
        await handle.send(
            ServerEvent.CONNECTED, {"clientId": handle.connection_id}
        )

    def on_register(
        self, handle: ClientConnection, client_id: str | None
    ) -> None:
        self.registry.register(client_id, handle)

    async def on_offer(self, handle: ClientConnection, sdp: Any) -> None:
        """
        Forward an SDP offer to the media server.

        Does not wait for the answer. A failed forward is reported to the
        originating client as a single ``error`` message; the connection
        stays open.
        """
        session_id = handle.connection_id
        logger.info(f"Received SDP Offer from {session_id}")

        try:
            await self.media_server.process_sdp(session_id, sdp)
        except MediaServerError as e:
            logger.error(f"Error processing SDP Offer: {e}")
            sdp_offers_forwarded_total.labels(result="failed").inc()
            await handle.send(
                ServerEvent.ERROR, {"message": OFFER_FAILED_MESSAGE}
            )
            return

        sdp_offers_forwarded_total.labels(result="ok").inc()

    async def on_disconnect(self, handle: ClientConnection) -> None:
        """
        Deregister the connection and notify the media server.

        Notification failures are only logged since the client is gone.
        """
        handle.alive = False
        self.registry.remove_by_handle(handle)
        logger.info(f"Client disconnected: {handle.connection_id}")

        try:
            await self.media_server.notify_disconnect(handle.connection_id)
        except MediaServerError as e:
            logger.error(f"Error notifying media server: {e}")
            disconnect_notifications_total.labels(result="failed").inc()
            return

        disconnect_notifications_total.labels(result="ok").inc()

    async def deliver_answer(self, client_id: str, sdp_answer: Any) -> bool:
        """
        Push an SDP answer to the connection addressed by ``client_id``.

        Args:
            client_id: Transport id or registered alias.
            sdp_answer: Opaque answer payload.

        Returns:
            True if the answer was sent, False if no live connection matched.
        """
        handle = self.registry.lookup(client_id)

        if handle is None or not await handle.send(
            ServerEvent.SDP_ANSWER, {"sdp": sdp_answer}
        ):
            logger.warning(f"Socket not found for clientId {client_id}")
            sdp_answers_delivered_total.labels(result="not_found").inc()
            return False

        logger.info(f"Sent SDP answer to client {client_id}")
        sdp_answers_delivered_total.labels(result="delivered").inc()
        return True


# Track registered modules to prevent duplicate logging
_registered_http_modules: set[str] = set()
_registered_ws_modules: set[str] = set()


def collect_subrouters() -> APIRouter:
    """
    Collects and registers all HTTP and WebSocket routers for the application.

    Iterates through the `api/http` and `api/ws/consumers` directories,
    imports the corresponding modules, and adds their routers to the main
    `APIRouter` instance.
    """
    main_router: APIRouter = APIRouter()

    package_dir = os.path.dirname(__file__)
    package_name = os.path.basename(package_dir)

    for _, module, _ in pkgutil.iter_modules([f"{package_dir}/api/http"]):
        api = import_module(f".{module}", package=f"{package_name}.api.http")
        main_router.include_router(api.router)

        if module not in _registered_http_modules:
            logger.info(f'Register "{module}" api')
            _registered_http_modules.add(module)

    for _, module, _ in pkgutil.iter_modules(
        [f"{package_dir}/api/ws/consumers"]
    ):
        ws_consumer = import_module(
            f".{module}", package=f"{package_name}.api.ws.consumers"
        )
        main_router.include_router(ws_consumer.router)

        if module not in _registered_ws_modules:
            logger.info(f'Register "{module}" websocket consumer')
            _registered_ws_modules.add(module)

    return main_router

"""
Tests for the session router.

This module tests event dispatch, offer forwarding, answer delivery and
disconnect cleanup against a mocked media server.
"""

import pytest

from signal_relay.constants import OFFER_FAILED_MESSAGE
from signal_relay.exceptions import MediaServerError
from signal_relay.schemas.events import (
    ConnectEvent,
    DisconnectEvent,
    OfferEvent,
    RegisterEvent,
)


class TestDispatch:
    """Test routing of event variants to their handlers."""

    @pytest.mark.asyncio
    async def test_connect_registers_transport_id(
        self, session_router, registry, make_connection
    ):
        """Test that connect makes the handle live and addressable."""
        handle = make_connection("T1", alive=False)

        await session_router.dispatch(handle, ConnectEvent())

        assert handle.alive is True
        assert registry.lookup("T1") is handle
        assert registry.aliases == {}
        handle.websocket.send_json.assert_awaited_once_with(
            {"event": "connected", "data": {"clientId": "T1"}}
        )

    @pytest.mark.asyncio
    async def test_register_creates_alias(
        self, session_router, registry, make_connection
    ):
        """Test that register delegates to the registry."""
        handle = make_connection("T1")

        await session_router.dispatch(handle, RegisterEvent(client_id="u1"))

        assert registry.lookup("u1") is handle

    @pytest.mark.asyncio
    async def test_unknown_event_raises(self, session_router, make_connection):
        """Test that non-router events are rejected."""
        with pytest.raises(TypeError):
            await session_router.dispatch(make_connection(), {"event": "x"})


class TestOffer:
    """Test the offer forwarding path."""

    @pytest.mark.asyncio
    async def test_offer_uses_transport_id_not_alias(
        self, session_router, mock_media_server, make_connection
    ):
        """Test that the media server is addressed by transport id."""
        handle = make_connection("T1")
        await session_router.dispatch(handle, RegisterEvent(client_id="u1"))

        await session_router.dispatch(handle, OfferEvent(sdp="OFFER"))

        mock_media_server.process_sdp.assert_awaited_once_with("T1", "OFFER")
        handle.websocket.send_json.assert_not_called()

    @pytest.mark.asyncio
    async def test_offer_failure_sends_one_error(
        self, session_router, mock_media_server, make_connection
    ):
        """Test that a failed forward is reported once and not retried."""
        handle = make_connection("T1")
        mock_media_server.process_sdp.side_effect = MediaServerError(
            "/process-sdp", "Connection refused"
        )

        await session_router.dispatch(handle, OfferEvent(sdp="OFFER"))

        mock_media_server.process_sdp.assert_awaited_once()
        handle.websocket.send_json.assert_awaited_once_with(
            {"event": "error", "data": {"message": OFFER_FAILED_MESSAGE}}
        )
        assert handle.alive is True


class TestDisconnect:
    """Test disconnect cleanup."""

    @pytest.mark.asyncio
    async def test_disconnect_cleans_up_and_notifies(
        self, session_router, registry, mock_media_server, make_connection
    ):
        """Test that disconnect removes all entries and notifies by transport id."""
        handle = make_connection("T1", alive=False)
        await session_router.dispatch(handle, ConnectEvent())
        await session_router.dispatch(handle, RegisterEvent(client_id="u1"))

        await session_router.dispatch(handle, DisconnectEvent())

        assert handle.alive is False
        assert registry.lookup("u1") is None
        assert registry.lookup("T1") is None
        mock_media_server.notify_disconnect.assert_awaited_once_with("T1")

    @pytest.mark.asyncio
    async def test_disconnect_twice_is_safe(
        self, session_router, registry, make_connection
    ):
        """Test that repeated disconnects do not error."""
        handle = make_connection("T1", alive=False)
        await session_router.dispatch(handle, ConnectEvent())

        await session_router.dispatch(handle, DisconnectEvent())
        await session_router.dispatch(handle, DisconnectEvent())

        assert len(registry) == 0

    @pytest.mark.asyncio
    async def test_disconnect_notify_failure_is_swallowed(
        self, session_router, mock_media_server, make_connection
    ):
        """Test that a failed notification is only logged."""
        handle = make_connection("T1")
        mock_media_server.notify_disconnect.side_effect = MediaServerError(
            "/disconnect", "request timed out"
        )

        await session_router.dispatch(handle, DisconnectEvent())

        handle.websocket.send_json.assert_not_called()


class TestDeliverAnswer:
    """Test answer delivery."""

    @pytest.mark.asyncio
    async def test_deliver_by_transport_id(
        self, session_router, make_connection
    ):
        """Test delivery to the session the offer came from."""
        handle = make_connection("T1", alive=False)
        await session_router.dispatch(handle, ConnectEvent())
        handle.websocket.send_json.reset_mock()

        delivered = await session_router.deliver_answer("T1", "ANSWER")

        assert delivered is True
        handle.websocket.send_json.assert_awaited_once_with(
            {"event": "sdp-answer", "data": {"sdp": "ANSWER"}}
        )

    @pytest.mark.asyncio
    async def test_deliver_by_alias(self, session_router, make_connection):
        """Test delivery to a registered alias."""
        handle = make_connection("T1")
        await session_router.dispatch(handle, RegisterEvent(client_id="u1"))

        assert await session_router.deliver_answer("u1", "ANSWER") is True

    @pytest.mark.asyncio
    async def test_deliver_after_disconnect_is_not_found(
        self, session_router, make_connection
    ):
        """Test that answers for a departed client send nothing."""
        handle = make_connection("T1", alive=False)
        await session_router.dispatch(handle, ConnectEvent())
        await session_router.dispatch(handle, RegisterEvent(client_id="u1"))
        await session_router.dispatch(handle, DisconnectEvent())
        handle.websocket.send_json.reset_mock()

        assert await session_router.deliver_answer("u1", "ANSWER") is False
        assert await session_router.deliver_answer("T1", "ANSWER") is False
        handle.websocket.send_json.assert_not_called()

    @pytest.mark.asyncio
    async def test_deliver_to_broken_transport_is_not_found(
        self, session_router, make_connection
    ):
        """Test that a failed push is reported as not delivered."""
        handle = make_connection("T1", alive=False)
        await session_router.dispatch(handle, ConnectEvent())
        handle.websocket.send_json.side_effect = RuntimeError("closed")

        assert await session_router.deliver_answer("T1", "ANSWER") is False

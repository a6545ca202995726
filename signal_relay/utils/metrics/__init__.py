"""
Prometheus metrics for the signaling relay.

Connection metrics track the signaling channel, relay metrics track both
legs of the media server round trip.
"""

from signal_relay.utils.metrics._helpers import (
    _get_or_create_counter,
    _get_or_create_gauge,
)

# Signaling connection metrics
ws_connections_active = _get_or_create_gauge(
    "signal_relay_ws_connections_active",
    "Number of active signaling connections",
)

ws_connections_total = _get_or_create_counter(
    "signal_relay_ws_connections_total",
    "Total signaling connections",
    ["status"],  # accepted, rejected_origin
)

ws_messages_received_total = _get_or_create_counter(
    "signal_relay_ws_messages_received_total",
    "Total signaling messages received",
    ["event"],  # register, sdp-offer, invalid
)

# Relay metrics
sdp_offers_forwarded_total = _get_or_create_counter(
    "signal_relay_sdp_offers_forwarded_total",
    "SDP offers forwarded to the media server",
    ["result"],  # ok, failed
)

sdp_answers_delivered_total = _get_or_create_counter(
    "signal_relay_sdp_answers_delivered_total",
    "SDP answers received from the media server",
    ["result"],  # delivered, not_found, unauthorized
)

disconnect_notifications_total = _get_or_create_counter(
    "signal_relay_disconnect_notifications_total",
    "Disconnect notifications sent to the media server",
    ["result"],  # ok, failed
)


__all__ = [
    "ws_connections_active",
    "ws_connections_total",
    "ws_messages_received_total",
    "sdp_offers_forwarded_total",
    "sdp_answers_delivered_total",
    "disconnect_notifications_total",
]

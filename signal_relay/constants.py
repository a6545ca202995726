"""
Protocol constants for the signaling channel and the media server API.

These values define the wire protocol and must stay in sync with clients
and the media server. For configurable values (URLs, timeouts, credentials)
see signal_relay/settings.py.
"""

from enum import StrEnum


class ServerEvent(StrEnum):
    """Events pushed to a client over the signaling channel."""

    CONNECTED = "connected"
    SDP_ANSWER = "sdp-answer"
    ERROR = "error"


# ============================================================================
# Media Server API
# ============================================================================

# Header carrying the shared credential on both HTTP legs
API_KEY_HEADER = "x-api-key"

PROCESS_SDP_PATH = "/process-sdp"
DISCONNECT_PATH = "/disconnect"


# ============================================================================
# Client-facing error messages
# ============================================================================

OFFER_FAILED_MESSAGE = "Failed to process SDP Offer"
INVALID_MESSAGE = "Invalid message"

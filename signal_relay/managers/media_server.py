from typing import Any

import httpx

from signal_relay.constants import (
    API_KEY_HEADER,
    DISCONNECT_PATH,
    PROCESS_SDP_PATH,
)
from signal_relay.exceptions import MediaServerError
from signal_relay.logging import logger
from signal_relay.settings import Settings


class MediaServerClient:
    """
    HTTP client for the media-processing server.

    Wraps a shared ``httpx.AsyncClient`` configured with the media server base
    URL, the shared credential header and a bounded timeout. Every call is
    fire-and-forget from the relay's point of view: the response body is
    ignored and answers arrive later through the callback endpoint.

    All transport failures, timeouts and non-2xx responses are raised as
    ``MediaServerError``; nothing is retried.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Args:
            base_url: Media server base URL.
            api_key: Shared credential sent in the x-api-key header.
            timeout: Timeout in seconds for each call.
            transport: Optional transport, used by tests to simulate the
                media server.
        """
        self.base_url = base_url
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers={API_KEY_HEADER: api_key},
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "MediaServerClient":
        return cls(
            base_url=settings.MEDIA_SERVER_URL,
            api_key=settings.MEDIA_SERVER_API_KEY.get_secret_value(),
            timeout=settings.MEDIA_SERVER_TIMEOUT,
            transport=transport,
        )

    async def process_sdp(self, client_id: str, sdp: Any) -> None:
        """
        Forward an SDP offer for negotiation.

        Args:
            client_id: Session identifier (transport id of the connection).
            sdp: Opaque offer payload.

        Raises:
            MediaServerError: If the request fails.
        """
        await self._post(PROCESS_SDP_PATH, {"sdp": sdp, "clientId": client_id})

    async def notify_disconnect(self, client_id: str) -> None:
        """
        Tell the media server a session is gone.

        Raises:
            MediaServerError: If the request fails.
        """
        await self._post(DISCONNECT_PATH, {"clientId": client_id})

    async def _post(self, path: str, payload: dict[str, Any]) -> None:
        try:
            response = await self._client.post(path, json=payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise MediaServerError(
                path,
                f"media server responded with {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.TimeoutException as e:
            raise MediaServerError(path, "request timed out") from e
        except httpx.HTTPError as e:
            raise MediaServerError(path, str(e) or type(e).__name__) from e

        logger.debug(f"POST {path} -> {response.status_code}")

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

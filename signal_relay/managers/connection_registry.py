import threading

from signal_relay.connection import ClientConnection
from signal_relay.logging import logger


class ConnectionRegistry:
    """
    Registry of live signaling connections.

    Keeps two tables behind a single lock:

    - ``connections``: transport id -> handle, one entry per live handle.
    - ``aliases``: client-chosen id -> handle, at most one alias per handle.

    Lookups resolve aliases first and fall back to transport ids, so every
    live handle is addressable by its transport id and an alias is layered on
    top. All operations are atomic relative to each other.
    """

    def __init__(self) -> None:
        self.connections: dict[str, ClientConnection] = {}
        self.aliases: dict[str, ClientConnection] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self.connections)

    def add(self, handle: ClientConnection) -> None:
        """
        Record a live handle under its transport id.

        Args:
            handle: The connection that just connected.
        """
        with self._lock:
            self.connections[handle.connection_id] = handle
        logger.debug(f"Connection {handle.connection_id} added to registry")

    def register(self, client_id: str | None, handle: ClientConnection) -> None:
        """
        Map ``client_id`` to ``handle``.

        Last write wins: an alias already held by another handle is taken
        over, and an alias previously held by ``handle`` is dropped. A missing
        or empty ``client_id`` is ignored.

        Args:
            client_id: Alias chosen by the client.
            handle: The connection to address with it.
        """
        if not client_id:
            return

        with self._lock:
            for key in [k for k, v in self.aliases.items() if v is handle]:
                del self.aliases[key]
            self.aliases[client_id] = handle

        logger.info(
            f"Registered clientId {client_id} with connection "
            f"{handle.connection_id}"
        )

    def lookup(self, client_id: str) -> ClientConnection | None:
        """
        Get the handle currently addressed by ``client_id``.

        Args:
            client_id: An alias or a transport id.

        Returns:
            The handle if found, None otherwise.
        """
        with self._lock:
            handle = self.aliases.get(client_id)
            if handle is None:
                handle = self.connections.get(client_id)
            return handle

    def remove_by_handle(self, handle: ClientConnection) -> None:
        """
        Remove every entry referencing ``handle``.

        Safe to call repeatedly and for handles that were never registered.

        Args:
            handle: The connection that went away.
        """
        with self._lock:
            for key, value in self.aliases.items():
                if value is handle:
                    del self.aliases[key]
                    break
            if self.connections.get(handle.connection_id) is handle:
                del self.connections[handle.connection_id]

        logger.debug(f"Connection {handle.connection_id} removed from registry")

    def aliases_for(self, handle: ClientConnection) -> list[str]:
        """Aliases currently referencing ``handle`` (zero or one)."""
        with self._lock:
            return [k for k, v in self.aliases.items() if v is handle]

"""Shared monitor state: registry, dirty flag and connection state."""

import threading
from typing import Optional

from batterytray.core.registry import DeviceRegistry
from batterytray.core.types import ConnectionState


class MonitorState:
    """Everything the event listener and the poll loop share.

    One lock guards the registry, the dirty flag and the connection
    state. The connection condition variable is built on the same lock
    so startup can block until the hub reports a live session.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._connection_changed = threading.Condition(self._lock)
        self._dirty = False
        self._connection = ConnectionState.DISCONNECTED
        self.registry = DeviceRegistry(lock=self._lock)

    # --- Dirty flag ---

    def mark_dirty(self) -> None:
        with self._lock:
            self._dirty = True

    def take_dirty(self) -> bool:
        """Return the dirty flag and clear it in one step."""
        with self._lock:
            dirty = self._dirty
            self._dirty = False
            return dirty

    @property
    def dirty(self) -> bool:
        with self._lock:
            return self._dirty

    # --- Connection state ---

    @property
    def connection(self) -> ConnectionState:
        with self._lock:
            return self._connection

    @property
    def connected(self) -> bool:
        return self.connection is ConnectionState.CONNECTED

    def set_connection(self, state: ConnectionState) -> None:
        with self._connection_changed:
            self._connection = state
            self._connection_changed.notify_all()

    def wait_until_connected(self, timeout: Optional[float] = None) -> bool:
        """Block until the connection state is CONNECTED.

        Returns:
            False if ``timeout`` seconds passed first.
        """
        with self._connection_changed:
            return self._connection_changed.wait_for(
                lambda: self._connection is ConnectionState.CONNECTED,
                timeout=timeout,
            )

"""Event listener - turns hub callbacks into registry changes."""

import logging
from typing import Callable

from batterytray.core.errors import HubError
from batterytray.core.hub import DeviceHub
from batterytray.core.state import MonitorState
from batterytray.core.types import (
    ConnectionState, DeviceEvent, HubDevice, SessionState,
)

log = logging.getLogger(__name__)


class EventListener:
    """Handles session and device events on the hub's callback thread."""

    def __init__(
        self,
        state: MonitorState,
        hub: DeviceHub,
        capability_check: Callable[[HubDevice], bool],
    ):
        self._state = state
        self._hub = hub
        self._capability_check = capability_check

    def on_session_state(self, session_state: SessionState) -> None:
        # Devices stay registered while the hub session is down; only
        # per-device disconnects evict them.
        if session_state is SessionState.CONNECTED:
            log.info("Hub %s connected", self._hub.name)
            self._state.set_connection(ConnectionState.CONNECTED)
        else:
            log.info("Hub %s session %s", self._hub.name, session_state.name.lower())
            self._state.set_connection(ConnectionState.DISCONNECTED)

    def on_device_event(self, event: DeviceEvent) -> None:
        if event.is_connected:
            self._on_device_connected(event.device_id)
        else:
            self._on_device_disconnected(event.device_id)

    def _on_device_connected(self, device_id: str) -> None:
        try:
            device = self._hub.get_device_info(device_id)
        except HubError:
            log.warning("Could not get info for connected device %s", device_id)
            return
        if device is None:
            log.debug("Connected device %s vanished before lookup", device_id)
            return
        if self._state.registry.upsert_if_eligible(device, self._capability_check):
            log.info("Added device %s", device.model)
            self._state.mark_dirty()

    def _on_device_disconnected(self, device_id: str) -> None:
        record = self._state.registry.remove(device_id)
        if record is None:
            return
        log.info("Removed device %s", record.display_name)
        self._state.mark_dirty()

"""Battery monitor - central orchestrator wiring hub, state and poll loop."""

import logging
from typing import Optional

from batterytray.core.capability import capability_check
from batterytray.core.errors import HubConnectError, HubError, NoDevicesError
from batterytray.core.events import EventListener
from batterytray.core.hub import DeviceHub
from batterytray.core.poller import PollLoop
from batterytray.core.sink import NotificationSink
from batterytray.core.state import MonitorState
from batterytray.core.summary import render_summary

log = logging.getLogger(__name__)


class BatteryMonitor:
    """Owns the monitor state and drives it from one device hub.

    Used directly by the CLI (open + poll once) and by the tray app
    (start, then run until the process exits).
    """

    def __init__(
        self,
        hub: DeviceHub,
        sink: NotificationSink,
        interval: float = 1.0,
        connect_timeout: Optional[float] = 10.0,
    ):
        self._hub = hub
        self._connect_timeout = connect_timeout
        self._opened = False

        self.state = MonitorState()
        self._capability_check = capability_check(hub)
        self.listener = EventListener(self.state, hub, self._capability_check)
        self.poller = PollLoop(
            self.state, hub, sink, self._capability_check, interval=interval,
        )

    @property
    def hub(self) -> DeviceHub:
        return self._hub

    def open(self) -> None:
        """Connect to the hub and load the initial device list.

        Raises:
            HubConnectError: Connecting failed or timed out.
            NoDevicesError: The hub reported no devices at all.
        """
        if self._opened:
            return

        try:
            self._hub.connect(self.listener.on_session_state)
        except HubConnectError:
            raise
        except HubError as e:
            raise HubConnectError(f"Could not connect to {self._hub.name}: {e}") from e

        if not self.state.wait_until_connected(self._connect_timeout):
            raise HubConnectError(
                f"Timed out after {self._connect_timeout}s waiting for {self._hub.name}"
            )

        self._hub.subscribe(self.listener.on_device_event)

        try:
            devices = self._hub.enumerate_devices()
        except HubError as e:
            raise NoDevicesError(f"Could not enumerate {self._hub.name} devices: {e}") from e
        if not devices:
            raise NoDevicesError(f"{self._hub.name} reported no devices")

        registry = self.state.registry
        for device in devices:
            if registry.upsert_if_eligible(device, self._capability_check):
                log.info("Added device %s", device.model)
        self.state.mark_dirty()
        self._opened = True

    def start(self) -> None:
        """Open the hub and start background polling."""
        self.open()
        self.poller.start()

    def stop(self) -> None:
        self.poller.stop()
        try:
            self._hub.close()
        except HubError:
            log.debug("Hub %s did not close cleanly", self._hub.name)
        self._opened = False

    def refresh(self) -> None:
        """Force the next poll to push the summary even if nothing changed."""
        self.state.mark_dirty()

    def poll_once(self) -> bool:
        """Run a single polling round in the calling thread."""
        return self.poller.tick()

    def summary(self) -> str:
        return render_summary(self.state.registry.renderable_snapshot())

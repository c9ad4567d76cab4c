"""Poll loop - periodic rescan, battery reads and summary pushes."""

import logging
import threading
from typing import Callable, Iterable, Optional, Tuple

from batterytray.core.hub import DeviceHub
from batterytray.core.rescan import rescan
from batterytray.core.sink import NotificationSink
from batterytray.core.state import MonitorState
from batterytray.core.summary import render_summary
from batterytray.core.types import DeviceProperty, HubDevice

log = logging.getLogger(__name__)


class PollLoop:
    """Background worker that keeps the notification sink up to date.

    Every ``interval`` seconds while the hub is connected:
      1) rescan so devices missed by events still show up;
      2) take the dirty flag (structural changes since the last tick);
      3) re-read every battery level;
      4) if anything changed, render and push the summary.
    A push the sink rejects leaves the state dirty so the next tick
    tries again.
    """

    def __init__(
        self,
        state: MonitorState,
        hub: DeviceHub,
        sink: NotificationSink,
        capability_check: Callable[[HubDevice], bool],
        interval: float = 1.0,
        render: Callable[[Iterable[Tuple[str, int]]], str] = render_summary,
    ):
        self._state = state
        self._hub = hub
        self._sink = sink
        self._capability_check = capability_check
        self._interval = interval
        self._render = render
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.is_running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._loop, name="battery-poll", daemon=True)
        self._thread.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout)
        self._thread = None

    def _loop(self) -> None:
        while not self._stop.is_set():
            if self._state.connected:
                try:
                    self.tick()
                except Exception:
                    log.exception("Poll round failed, retrying in %ss", self._interval)
            self._stop.wait(self._interval)

    def _read_metric(self, device_id: str) -> Optional[int]:
        return self._hub.read_property(device_id, DeviceProperty.BATTERY_LEVEL)

    def tick(self) -> bool:
        """Run one polling round.

        Returns:
            True if a new summary was delivered to the sink.
        """
        registry = self._state.registry

        if rescan(self._hub.enumerate_devices, registry, self._capability_check):
            self._state.mark_dirty()

        changed = self._state.take_dirty()
        if registry.snapshot_and_update(self._read_metric):
            changed = True

        if not changed:
            return False

        text = self._render(registry.renderable_snapshot())
        if self._push(text):
            return True

        # Keep the summary pending until the sink accepts it.
        self._state.mark_dirty()
        return False

    def _push(self, text: str) -> bool:
        try:
            ok = self._sink.set_text(text)
        except Exception:
            log.exception("Notification sink raised while updating summary")
            return False
        if not ok:
            log.warning("Notification sink rejected summary update")
        return ok

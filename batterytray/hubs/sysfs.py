"""sysfs hub - peripheral batteries under /sys/class/power_supply/.

Device ids are the power_supply entry paths. Hotplug events come from a
udev netlink monitor on the power_supply subsystem.
"""

import logging
import threading
from pathlib import Path
from typing import Callable, List, Optional

import pyudev

from batterytray.core.errors import HubConnectError, HubError
from batterytray.core.hub import DeviceHub
from batterytray.core.types import (
    DeviceEvent, DeviceProperty, HubDevice, PropertyFlag, SessionState,
)

log = logging.getLogger(__name__)

POWER_SUPPLY_DIR = Path("/sys/class/power_supply")

_UDEV_ACTIONS = {"add": True, "remove": False}


def _read_sysfs(path: Path) -> Optional[str]:
    """Read a sysfs attribute file, returning stripped content or None."""
    try:
        return path.read_text().strip()
    except OSError:
        return None


class SysfsHub(DeviceHub):
    """Device hub over the kernel's power_supply class."""

    @property
    def name(self) -> str:
        return "sysfs"

    def __init__(self, root: Path = POWER_SUPPLY_DIR):
        self._root = Path(root)
        self._on_session_state: Optional[Callable[[SessionState], None]] = None
        self._on_event: Optional[Callable[[DeviceEvent], None]] = None
        self._watch_thread: Optional[threading.Thread] = None
        self._watching = False

    def connect(self, on_session_state: Callable[[SessionState], None]) -> None:
        if not self._root.is_dir():
            raise HubConnectError(f"{self._root} does not exist")
        self._on_session_state = on_session_state
        # sysfs is always there once the class directory exists.
        on_session_state(SessionState.CONNECTED)

    # --- Enumeration ---

    def _is_peripheral(self, entry: Path) -> bool:
        # scope=Device marks batteries of attached peripherals, as opposed
        # to the machine's own battery or mains adapter.
        return entry.is_dir() and _read_sysfs(entry / "scope") == "Device"

    def _describe(self, entry: Path) -> HubDevice:
        model = (
            _read_sysfs(entry / "model_name")
            or _read_sysfs(entry / "manufacturer")
            or entry.name
        )
        return HubDevice(id=str(entry), model=model)

    def enumerate_devices(self) -> List[HubDevice]:
        try:
            entries = sorted(self._root.iterdir())
        except OSError as e:
            raise HubError(f"Cannot list {self._root}: {e}") from e
        return [self._describe(entry) for entry in entries if self._is_peripheral(entry)]

    def get_device_info(self, device_id: str) -> Optional[HubDevice]:
        entry = Path(device_id)
        if not self._is_peripheral(entry):
            return None
        return self._describe(entry)

    # --- Properties ---

    @staticmethod
    def _read_capacity(entry: Path) -> Optional[int]:
        capacity = _read_sysfs(entry / "capacity")
        if capacity is None:
            return None
        try:
            return int(capacity)
        except ValueError:
            return None

    def get_property_flags(self, device_id: str, prop: DeviceProperty) -> PropertyFlag:
        if prop is not DeviceProperty.BATTERY_LEVEL:
            return PropertyFlag.NONE
        entry = Path(device_id)
        if not entry.is_dir():
            raise HubError(f"No such device {device_id}")
        # Devices that only report capacity_level have no percentage.
        if self._read_capacity(entry) is None:
            return PropertyFlag.NONE
        return PropertyFlag.CAN_READ

    def read_property(self, device_id: str, prop: DeviceProperty) -> Optional[int]:
        if prop is not DeviceProperty.BATTERY_LEVEL:
            return None
        return self._read_capacity(Path(device_id))

    # --- Hotplug ---

    def subscribe(self, on_event: Callable[[DeviceEvent], None]) -> None:
        self._on_event = on_event
        if self._watch_thread is not None:
            return

        try:
            context = pyudev.Context()
            monitor = pyudev.Monitor.from_netlink(context)
            monitor.filter_by(subsystem="power_supply")
        except Exception:
            log.warning("udev monitor unavailable, relying on rescans for new devices")
            return

        self._watching = True

        def _watch():
            for device in iter(monitor.poll, None):
                if not self._watching:
                    break
                self._handle_udev(device.action, device.sys_name)

        self._watch_thread = threading.Thread(target=_watch, name="udev-watch", daemon=True)
        self._watch_thread.start()

    def _handle_udev(self, action: Optional[str], sys_name: str) -> None:
        is_connected = _UDEV_ACTIONS.get(action)
        if is_connected is None or self._on_event is None:
            return
        self._on_event(DeviceEvent(device_id=str(self._root / sys_name), is_connected=is_connected))

    def close(self) -> None:
        self._watching = False
        self._on_event = None
        self._watch_thread = None

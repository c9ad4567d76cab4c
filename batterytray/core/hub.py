"""Abstract base class for device hubs."""

from abc import ABC, abstractmethod
from typing import Callable, List, Optional

from batterytray.core.types import (
    DeviceEvent, DeviceProperty, HubDevice, PropertyFlag, SessionState,
)


class DeviceHub(ABC):
    """An external service that owns the physical peripheral devices.

    Implementations:
    - SysfsHub: /sys/class/power_supply/ with udev hotplug events
    - ICueHub: Corsair iCUE SDK

    Methods other than ``connect`` raise HubError when the underlying
    call fails.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name (e.g., 'sysfs')."""
        ...

    @abstractmethod
    def connect(self, on_session_state: Callable[[SessionState], None]) -> None:
        """Open a session with the hub.

        The hub reports session state changes through ``on_session_state``,
        possibly from its own thread and possibly before this returns.

        Raises:
            HubConnectError: The session could not be requested.
        """
        ...

    @abstractmethod
    def subscribe(self, on_event: Callable[[DeviceEvent], None]) -> None:
        """Deliver device connect/disconnect events to ``on_event``.

        Events are delivered in hub order on a single callback thread.
        """
        ...

    @abstractmethod
    def enumerate_devices(self) -> List[HubDevice]:
        """Return every device the hub currently sees."""
        ...

    @abstractmethod
    def get_device_info(self, device_id: str) -> Optional[HubDevice]:
        """Look up one device, or None if the hub no longer knows it."""
        ...

    @abstractmethod
    def get_property_flags(self, device_id: str, prop: DeviceProperty) -> PropertyFlag:
        """Return the capability flags of ``prop`` on a device."""
        ...

    @abstractmethod
    def read_property(self, device_id: str, prop: DeviceProperty) -> Optional[int]:
        """Read the current value of ``prop``, or None if unreadable."""
        ...

    def close(self) -> None:
        """Release the hub session."""
        pass

"""Core abstractions for device battery monitoring."""

from batterytray.core.types import (
    SessionState,
    ConnectionState,
    DeviceProperty,
    PropertyFlag,
    HubDevice,
    DeviceEvent,
    DeviceRecord,
)
from batterytray.core.errors import (
    BatteryTrayError,
    HubError,
    StartupError,
    HubConnectError,
    NoDevicesError,
)
from batterytray.core.hub import DeviceHub
from batterytray.core.sink import NotificationSink
from batterytray.core.registry import DeviceRegistry
from batterytray.core.state import MonitorState
from batterytray.core.summary import render_summary
from batterytray.core.monitor import BatteryMonitor

__all__ = [
    "SessionState",
    "ConnectionState",
    "DeviceProperty",
    "PropertyFlag",
    "HubDevice",
    "DeviceEvent",
    "DeviceRecord",
    "BatteryTrayError",
    "HubError",
    "StartupError",
    "HubConnectError",
    "NoDevicesError",
    "DeviceHub",
    "NotificationSink",
    "DeviceRegistry",
    "MonitorState",
    "render_summary",
    "BatteryMonitor",
]

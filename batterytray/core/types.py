"""Core data types for the battery tray monitor."""

from dataclasses import dataclass
from enum import Enum, IntFlag, auto


class SessionState(Enum):
    """Session state reported by a device hub."""
    CONNECTING = auto()
    CONNECTED = auto()
    CLOSED = auto()
    TIMEOUT = auto()
    INVALID = auto()


class ConnectionState(Enum):
    """Whether the monitor currently has a live hub session."""
    DISCONNECTED = auto()
    CONNECTED = auto()


class DeviceProperty(Enum):
    """Device properties the monitor knows how to read."""
    BATTERY_LEVEL = auto()


class PropertyFlag(IntFlag):
    """Capability flags a hub reports for a device property."""
    NONE = 0
    CAN_READ = 1
    CAN_WRITE = 2
    INDEXED = 4


@dataclass(frozen=True)
class HubDevice:
    """A device as reported by the hub during enumeration.

    ``id`` is opaque and assigned by the hub; ``model`` is the
    human-readable model name.
    """
    id: str
    model: str


@dataclass(frozen=True)
class DeviceEvent:
    """A per-device connection status change."""
    device_id: str
    is_connected: bool


@dataclass
class DeviceRecord:
    """A tracked device and its last observed battery level.

    ``id`` and ``display_name`` never change once the record exists.
    ``last_value`` is 0 until the first successful read.
    """
    id: str
    display_name: str
    last_value: int = 0

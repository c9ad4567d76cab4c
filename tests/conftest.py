"""Pytest configuration and shared fakes."""

from typing import Callable, Dict, List, Optional

import pytest

from batterytray.core.errors import HubConnectError
from batterytray.core.hub import DeviceHub
from batterytray.core.sink import NotificationSink
from batterytray.core.types import (
    DeviceEvent, DeviceProperty, HubDevice, PropertyFlag, SessionState,
)


class FakeHub(DeviceHub):
    """In-memory device hub.

    ``values`` entries may be an int, None (unreadable) or an exception
    instance, which read_property raises.
    """

    def __init__(self, session_state: Optional[SessionState] = SessionState.CONNECTED):
        self.session_state = session_state
        self.connect_error: Optional[Exception] = None
        self.devices: Dict[str, HubDevice] = {}
        self.flags: Dict[str, PropertyFlag] = {}
        self.values: Dict[str, object] = {}
        self.enumerate_error: Optional[Exception] = None
        self.on_session_state: Optional[Callable[[SessionState], None]] = None
        self.on_event: Optional[Callable[[DeviceEvent], None]] = None
        self.enumerate_calls = 0
        self.read_calls: List[str] = []
        self.closed = False

    @property
    def name(self) -> str:
        return "fake"

    def add(self, device_id, model, value=50, flags=PropertyFlag.CAN_READ):
        self.devices[device_id] = HubDevice(id=device_id, model=model)
        self.flags[device_id] = flags
        self.values[device_id] = value

    def unplug(self, device_id):
        self.devices.pop(device_id, None)

    def emit(self, device_id, is_connected):
        self.on_event(DeviceEvent(device_id=device_id, is_connected=is_connected))

    def connect(self, on_session_state):
        if self.connect_error is not None:
            raise self.connect_error
        self.on_session_state = on_session_state
        if self.session_state is not None:
            on_session_state(self.session_state)

    def subscribe(self, on_event):
        self.on_event = on_event

    def enumerate_devices(self):
        self.enumerate_calls += 1
        if self.enumerate_error is not None:
            raise self.enumerate_error
        return list(self.devices.values())

    def get_device_info(self, device_id):
        return self.devices.get(device_id)

    def get_property_flags(self, device_id, prop):
        return self.flags.get(device_id, PropertyFlag.NONE)

    def read_property(self, device_id, prop):
        assert prop is DeviceProperty.BATTERY_LEVEL
        self.read_calls.append(device_id)
        value = self.values.get(device_id)
        if isinstance(value, Exception):
            raise value
        return value

    def close(self):
        self.closed = True


class RecordingSink(NotificationSink):
    """Sink that records every summary it is given."""

    def __init__(self, accept: bool = True):
        self.accept = accept
        self.texts: List[str] = []

    def set_text(self, text):
        self.texts.append(text)
        return self.accept


@pytest.fixture
def hub():
    return FakeHub()


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def always_eligible():
    return lambda candidate: True


@pytest.fixture
def failing_connect_hub():
    fake = FakeHub()
    fake.connect_error = HubConnectError("hub daemon not running")
    return fake

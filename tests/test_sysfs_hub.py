"""Tests for the sysfs hub against a fake power_supply tree."""

import pytest

from batterytray.core.errors import HubConnectError
from batterytray.core.types import (
    DeviceEvent, DeviceProperty, HubDevice, PropertyFlag, SessionState,
)
from batterytray.hubs.sysfs import SysfsHub


def _supply(root, name, **attrs):
    entry = root / name
    entry.mkdir()
    for attr, value in attrs.items():
        (entry / attr).write_text(f"{value}\n")
    return entry


@pytest.fixture
def power_supply(tmp_path):
    root = tmp_path / "power_supply"
    root.mkdir()
    _supply(root, "BAT0", type="Battery", scope="System", capacity=80)
    _supply(root, "AC", type="Mains")
    _supply(root, "hidpp_battery_0", type="Battery", scope="Device",
            capacity=65, model_name="G305 Lightspeed", manufacturer="Logitech")
    _supply(root, "ps-controller-battery", type="Battery", scope="Device",
            capacity_level="Normal")
    _supply(root, "hid-aa:bb-battery", type="Battery", scope="Device",
            capacity=40, manufacturer="Keychron")
    return root


class TestConnect:

    def test_reports_connected(self, power_supply):
        states = []
        SysfsHub(power_supply).connect(states.append)
        assert states == [SessionState.CONNECTED]

    def test_missing_class_dir(self, tmp_path):
        with pytest.raises(HubConnectError):
            SysfsHub(tmp_path / "nope").connect(lambda s: None)


class TestEnumeration:

    def test_only_peripherals(self, power_supply):
        devices = SysfsHub(power_supply).enumerate_devices()
        assert [d.model for d in devices] == [
            "Keychron", "G305 Lightspeed", "ps-controller-battery",
        ]

    def test_ids_are_paths(self, power_supply):
        devices = SysfsHub(power_supply).enumerate_devices()
        assert devices[1].id == str(power_supply / "hidpp_battery_0")

    def test_device_info(self, power_supply):
        hub = SysfsHub(power_supply)
        device_id = str(power_supply / "hidpp_battery_0")
        assert hub.get_device_info(device_id) == HubDevice(id=device_id, model="G305 Lightspeed")
        assert hub.get_device_info(str(power_supply / "BAT0")) is None
        assert hub.get_device_info(str(power_supply / "missing")) is None


class TestProperties:

    def test_flags(self, power_supply):
        hub = SysfsHub(power_supply)
        readable = str(power_supply / "hidpp_battery_0")
        level_only = str(power_supply / "ps-controller-battery")
        assert hub.get_property_flags(readable, DeviceProperty.BATTERY_LEVEL) == PropertyFlag.CAN_READ
        assert hub.get_property_flags(level_only, DeviceProperty.BATTERY_LEVEL) == PropertyFlag.NONE

    def test_read(self, power_supply):
        hub = SysfsHub(power_supply)
        device_id = str(power_supply / "hidpp_battery_0")
        assert hub.read_property(device_id, DeviceProperty.BATTERY_LEVEL) == 65
        (power_supply / "hidpp_battery_0" / "capacity").write_text("64\n")
        assert hub.read_property(device_id, DeviceProperty.BATTERY_LEVEL) == 64

    def test_unreadable(self, power_supply):
        hub = SysfsHub(power_supply)
        (power_supply / "hidpp_battery_0" / "capacity").write_text("garbage\n")
        assert hub.read_property(str(power_supply / "hidpp_battery_0"),
                                 DeviceProperty.BATTERY_LEVEL) is None
        assert hub.read_property(str(power_supply / "gone"), DeviceProperty.BATTERY_LEVEL) is None


class TestUdevEvents:

    def test_add_and_remove(self, power_supply):
        hub = SysfsHub(power_supply)
        events = []
        hub._on_event = events.append
        hub._handle_udev("add", "hidpp_battery_0")
        hub._handle_udev("change", "hidpp_battery_0")
        hub._handle_udev("remove", "hidpp_battery_0")
        device_id = str(power_supply / "hidpp_battery_0")
        assert events == [DeviceEvent(device_id, True), DeviceEvent(device_id, False)]

    def test_no_subscriber(self, power_supply):
        SysfsHub(power_supply)._handle_udev("add", "hidpp_battery_0")

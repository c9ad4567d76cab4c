"""iCUE hub - Corsair peripherals through the iCUE SDK (Windows only)."""

import logging
from typing import Callable, List, Optional

from cuesdk import (
    CorsairDeviceFilter,
    CorsairDevicePropertyId,
    CorsairDeviceType,
    CorsairError,
    CorsairEventId,
    CorsairPropertyFlag,
    CorsairSessionState,
    CueSdk,
)

from batterytray.core.errors import HubConnectError, HubError
from batterytray.core.hub import DeviceHub
from batterytray.core.types import (
    DeviceEvent, DeviceProperty, HubDevice, PropertyFlag, SessionState,
)

log = logging.getLogger(__name__)

_PROPERTY_IDS = {
    DeviceProperty.BATTERY_LEVEL: CorsairDevicePropertyId.CDPI_BatteryLevel,
}

# cuesdk enum members are plain ints; values it returns are Enumeration
# objects that convert with int().
_SESSION_STATES = {
    CorsairSessionState.CSS_Invalid: SessionState.INVALID,
    CorsairSessionState.CSS_Closed: SessionState.CLOSED,
    CorsairSessionState.CSS_Connecting: SessionState.CONNECTING,
    CorsairSessionState.CSS_Timeout: SessionState.TIMEOUT,
    CorsairSessionState.CSS_ConnectionRefused: SessionState.CLOSED,
    CorsairSessionState.CSS_ConnectionLost: SessionState.CLOSED,
    CorsairSessionState.CSS_Connected: SessionState.CONNECTED,
}

_FLAGS = (
    (CorsairPropertyFlag.CPF_CanRead, PropertyFlag.CAN_READ),
    (CorsairPropertyFlag.CPF_CanWrite, PropertyFlag.CAN_WRITE),
    (CorsairPropertyFlag.CPF_Indexed, PropertyFlag.INDEXED),
)


def _check(err, what: str) -> None:
    if err != CorsairError.CE_Success:
        raise HubError(f"{what} failed: {err}")


def session_state(state) -> SessionState:
    """Map a cuesdk session state to ours."""
    return _SESSION_STATES.get(int(state), SessionState.INVALID)


def property_flags(raw_flags: int) -> PropertyFlag:
    """Map a cuesdk property flag bitmask to PropertyFlag."""
    flags = PropertyFlag.NONE
    for corsair_flag, flag in _FLAGS:
        if raw_flags & corsair_flag:
            flags |= flag
    return flags


class ICueHub(DeviceHub):
    """Device hub backed by the Corsair iCUE SDK session.

    The SDK library is loaded on connect, so constructing the hub never
    fails on machines without iCUE.
    """

    @property
    def name(self) -> str:
        return "iCUE"

    def __init__(self, sdk: Optional[CueSdk] = None):
        self._sdk = sdk

    def _require_sdk(self) -> CueSdk:
        if self._sdk is None:
            raise HubError("iCUE session not connected")
        return self._sdk

    def connect(self, on_session_state: Callable[[SessionState], None]) -> None:
        if self._sdk is None:
            # cuesdk calls sys.exit() when its DLL is missing, and raises
            # AttributeError where the platform has no bundled library.
            try:
                self._sdk = CueSdk()
            except (OSError, AttributeError, SystemExit) as e:
                raise HubConnectError(f"Could not load the iCUE SDK: {e!r}") from e

        def _on_state_changed(evt):
            on_session_state(session_state(evt.state))

        err = self._sdk.connect(_on_state_changed)
        if err != CorsairError.CE_Success:
            raise HubConnectError(f"iCUE connect failed: {err}")

    def subscribe(self, on_event: Callable[[DeviceEvent], None]) -> None:
        def _on_event(evt):
            if evt.id != CorsairEventId.CEI_DeviceConnectionStatusChangedEvent:
                return
            on_event(DeviceEvent(
                device_id=evt.data.device_id,
                is_connected=bool(evt.data.is_connected),
            ))

        _check(self._require_sdk().subscribe_for_events(_on_event), "Event subscription")

    def enumerate_devices(self) -> List[HubDevice]:
        devices, err = self._require_sdk().get_devices(
            CorsairDeviceFilter(device_type_mask=CorsairDeviceType.CDT_All)
        )
        _check(err, "Device enumeration")
        return [HubDevice(id=d.device_id, model=d.model) for d in devices or []]

    def get_device_info(self, device_id: str) -> Optional[HubDevice]:
        info, err = self._require_sdk().get_device_info(device_id)
        if err == CorsairError.CE_DeviceNotFound:
            return None
        _check(err, f"Device info for {device_id}")
        return HubDevice(id=info.device_id, model=info.model)

    def get_property_flags(self, device_id: str, prop: DeviceProperty) -> PropertyFlag:
        info, err = self._require_sdk().get_device_property_info(
            device_id, _PROPERTY_IDS[prop], 0
        )
        if err == CorsairError.CE_DeviceNotFound:
            raise HubError(f"No such device {device_id}")
        if err != CorsairError.CE_Success:
            # Devices without the property report an error instead of flags.
            return PropertyFlag.NONE
        return property_flags(info["flags"])

    def read_property(self, device_id: str, prop: DeviceProperty) -> Optional[int]:
        value, err = self._require_sdk().read_device_property(device_id, _PROPERTY_IDS[prop], 0)
        if err != CorsairError.CE_Success:
            log.debug("Reading %s from %s failed: %s", prop.name, device_id, err)
            return None
        return int(value.value)

    def close(self) -> None:
        if self._sdk is None:
            return
        err = self._sdk.disconnect()
        if err != CorsairError.CE_Success:
            log.debug("iCUE disconnect returned %s", err)

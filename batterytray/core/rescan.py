"""Rescan - feed every visible hub device through the registry."""

import logging
from typing import Callable, List

from batterytray.core.errors import HubError
from batterytray.core.registry import DeviceRegistry
from batterytray.core.types import HubDevice

log = logging.getLogger(__name__)


def rescan(
    enumerate_devices: Callable[[], List[HubDevice]],
    registry: DeviceRegistry,
    capability_check: Callable[[HubDevice], bool],
) -> List[HubDevice]:
    """Add any eligible device the registry does not know yet.

    Only ever adds: removals come from disconnect events, so a rescan can
    run at any time without racing an in-flight disconnect. An empty or
    failed enumeration changes nothing.

    Returns:
        The devices that were newly added.
    """
    try:
        devices = enumerate_devices()
    except HubError:
        log.debug("Device enumeration failed, treating as no devices", exc_info=True)
        return []
    except Exception:
        log.exception("Unexpected error enumerating devices")
        return []

    added = []
    for device in devices:
        if registry.upsert_if_eligible(device, capability_check):
            log.info("Added device %s", device.model)
            added.append(device)
    return added

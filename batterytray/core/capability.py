"""Capability filter - decides which devices are worth monitoring."""

import logging
from typing import Callable, Optional

from batterytray.core.errors import HubError
from batterytray.core.hub import DeviceHub
from batterytray.core.types import DeviceProperty, HubDevice, PropertyFlag

log = logging.getLogger(__name__)


def supports_metric(flags: Optional[PropertyFlag]) -> bool:
    """Return True if the property flags say the metric can be read.

    A missing property (None) and a property with no read flag are both
    ineligible.
    """
    if flags is None:
        return False
    return bool(flags & PropertyFlag.CAN_READ)


def capability_check(
    hub: DeviceHub,
    prop: DeviceProperty = DeviceProperty.BATTERY_LEVEL,
) -> Callable[[HubDevice], bool]:
    """Build the eligibility predicate the registry runs on new candidates."""

    def check(candidate: HubDevice) -> bool:
        try:
            flags = hub.get_property_flags(candidate.id, prop)
        except HubError:
            log.debug("Could not read %s flags for %s", prop.name, candidate.id)
            return False
        eligible = supports_metric(flags)
        if not eligible:
            log.debug("Skipping %s: no readable %s", candidate.model, prop.name)
        return eligible

    return check

"""Device hub implementations."""

from batterytray.core.hub import DeviceHub

HUB_BACKENDS = ("sysfs", "icue")


def create_hub(backend: str) -> DeviceHub:
    """Instantiate the hub for a backend name from config or the CLI.

    Backends are imported on demand: the iCUE SDK only exists on Windows.
    """
    if backend == "sysfs":
        from batterytray.hubs.sysfs import SysfsHub
        return SysfsHub()
    if backend == "icue":
        from batterytray.hubs.icue import ICueHub
        return ICueHub()
    raise ValueError(f"Unknown hub backend {backend!r} (expected one of {', '.join(HUB_BACKENDS)})")


__all__ = ["HUB_BACKENDS", "create_hub"]

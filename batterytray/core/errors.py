"""Exceptions raised by the battery tray monitor."""


class BatteryTrayError(Exception):
    """Base class for all battery tray errors."""


class HubError(BatteryTrayError):
    """A call into the device hub failed."""


class StartupError(BatteryTrayError):
    """Startup cannot continue; the process should exit with status 1."""


class HubConnectError(StartupError, HubError):
    """The hub session could not be established."""


class NoDevicesError(StartupError):
    """The first enumeration after connecting found no devices."""

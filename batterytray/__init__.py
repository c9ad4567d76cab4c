"""batterytray - peripheral battery levels in the system tray."""

__version__ = "1.0.0"

"""Summary renderer - the tooltip text for a set of devices."""

from typing import Iterable, Tuple

NO_DEVICES_TEXT = "No devices connected"


def render_summary(entries: Iterable[Tuple[str, int]]) -> str:
    """Render ``(name, percent)`` pairs as one line per device, in order."""
    lines = [f"{name}: {value}%" for name, value in entries]
    if not lines:
        return NO_DEVICES_TEXT
    return "\n".join(lines)

#!/usr/bin/env python3
"""Command-line interface for the battery tray monitor."""

import sys
import json
import time
import logging
import argparse
from typing import Optional, TextIO

from batterytray.config import Config, configure_logging
from batterytray.core.errors import StartupError
from batterytray.core.monitor import BatteryMonitor
from batterytray.core.sink import NotificationSink
from batterytray.hubs import HUB_BACKENDS, create_hub

log = logging.getLogger(__name__)


class ConsoleSink(NotificationSink):
    """Prints every summary update to a text stream."""

    def __init__(self, stream: Optional[TextIO] = None, blank_line: bool = False):
        self._stream = stream
        self._blank_line = blank_line

    def set_text(self, text: str) -> bool:
        stream = self._stream or sys.stdout
        try:
            print(text, file=stream)
            if self._blank_line:
                print(file=stream)
            stream.flush()
        except OSError:
            return False
        return True


class _LatestTextSink(NotificationSink):
    """Keeps the last summary without displaying it."""

    def __init__(self):
        self.text: Optional[str] = None

    def set_text(self, text: str) -> bool:
        self.text = text
        return True


def _print_list(monitor: BatteryMonitor) -> None:
    records = monitor.state.registry.records()
    if not records:
        print("No devices with a readable battery level found.")
        return
    print(f"Found {len(records)} device(s):\n")
    for record in records:
        print(f"  {record.display_name}")
        print(f"    Id:      {record.id}")
        print(f"    Battery: {record.last_value}%")
        print()


def _print_json(monitor: BatteryMonitor) -> None:
    result = [
        {
            "id": record.id,
            "name": record.display_name,
            "battery_percent": record.last_value,
        }
        for record in monitor.state.registry.records()
    ]
    print(json.dumps(result))


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="batterytray - Peripheral Battery Monitor",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
Examples:
  %(prog)s              Show battery status for all devices
  %(prog)s --json       Output as JSON (for scripts/status bars)
  %(prog)s --list       List all tracked devices with their ids
  %(prog)s --watch      Print the summary every time it changes
  %(prog)s --hub icue   Read Corsair devices through iCUE
""",
    )
    parser.add_argument("--list", "-l", action="store_true", help="List all tracked devices")
    parser.add_argument("--json", "-j", action="store_true", help="Output as JSON")
    parser.add_argument("--watch", "-w", action="store_true", help="Print the summary whenever it changes")
    parser.add_argument("--hub", choices=HUB_BACKENDS, default=None, help="Device hub backend")
    parser.add_argument(
        "--interval", "-i", type=float, default=None,
        help="Polling interval in seconds (default: from config)",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    args = parser.parse_args(argv)
    if args.interval is not None and args.interval <= 0:
        parser.error("--interval must be a positive number of seconds")

    config = Config()
    configure_logging(logging.DEBUG if args.verbose else config.logging.get("level"))

    backend = args.hub or config.hub.get("backend", "sysfs")
    if args.interval is not None:
        interval = args.interval
    else:
        interval = config.polling.get("interval_seconds", 1.0)

    try:
        hub = create_hub(backend)
    except ValueError as e:
        log.error("%s", e)
        return 1

    if args.watch:
        sink = ConsoleSink(blank_line=True)
    elif args.json or args.list:
        sink = _LatestTextSink()
    else:
        sink = ConsoleSink()

    monitor = BatteryMonitor(
        hub,
        sink,
        interval=interval,
        connect_timeout=config.hub.get("connect_timeout_seconds"),
    )

    try:
        if args.watch:
            print(f"Monitoring battery (every {interval}s, Ctrl+C to stop)...\n")
            monitor.start()
            try:
                while True:
                    time.sleep(interval)
            except KeyboardInterrupt:
                print("\nStopped.")
            return 0

        monitor.open()
        monitor.poll_once()
    except StartupError as e:
        log.error("%s", e)
        return 1
    finally:
        monitor.stop()

    if args.list:
        _print_list(monitor)
    elif args.json:
        _print_json(monitor)
    return 0


if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python3
"""System tray icon whose tooltip lists device battery levels."""

import sys
import logging

from PyQt5.QtWidgets import QApplication, QSystemTrayIcon, QMenu, QAction, QStyle
from PyQt5.QtCore import pyqtSignal

from batterytray.config import Config, configure_logging
from batterytray.core.errors import StartupError
from batterytray.core.monitor import BatteryMonitor
from batterytray.core.sink import NotificationSink
from batterytray.core.summary import NO_DEVICES_TEXT
from batterytray.hubs import create_hub

log = logging.getLogger(__name__)


class BatteryTrayIcon(QSystemTrayIcon):
    """Tray icon showing the battery summary as its tooltip.

    Signals:
        summary_changed(str): New tooltip text; safe to emit from any thread.
    """

    summary_changed = pyqtSignal(str)

    def __init__(self, parent=None):
        super().__init__(parent)
        self._monitor = None

        self.setIcon(QApplication.style().standardIcon(QStyle.SP_MessageBoxInformation))
        self.setToolTip(NO_DEVICES_TEXT)
        self.summary_changed.connect(self.setToolTip)

        self._menu = QMenu()
        self._refresh_action = QAction("Refresh Now", self._menu)
        self._refresh_action.triggered.connect(self._refresh)
        self._menu.addAction(self._refresh_action)
        self._menu.addSeparator()
        quit_action = QAction("Quit", self._menu)
        quit_action.triggered.connect(QApplication.quit)
        self._menu.addAction(quit_action)
        self.setContextMenu(self._menu)

        self.show()

    def attach(self, monitor: BatteryMonitor) -> None:
        self._monitor = monitor

    def _refresh(self):
        if self._monitor is not None:
            self._monitor.refresh()


class TraySink(NotificationSink):
    """Notification sink that forwards summaries to the tray icon.

    Called from the poll thread; the Qt signal queues the tooltip update
    onto the GUI thread. Tray availability is checked once in main().
    """

    def __init__(self, icon: BatteryTrayIcon):
        self._icon = icon

    def set_text(self, text: str) -> bool:
        self._icon.summary_changed.emit(text)
        return True


def main():
    app = QApplication(sys.argv)
    app.setQuitOnLastWindowClosed(False)
    app.setApplicationName("batterytray")

    config = Config()
    configure_logging(config.logging.get("level"))

    if not QSystemTrayIcon.isSystemTrayAvailable():
        log.error("System tray is not available on this desktop environment.")
        sys.exit(1)

    try:
        hub = create_hub(config.hub.get("backend", "sysfs"))
    except ValueError as e:
        log.error("%s", e)
        sys.exit(1)

    tray = BatteryTrayIcon()
    monitor = BatteryMonitor(
        hub,
        TraySink(tray),
        interval=config.polling.get("interval_seconds", 1.0),
        connect_timeout=config.hub.get("connect_timeout_seconds"),
    )
    tray.attach(monitor)

    try:
        monitor.start()
    except StartupError as e:
        log.error("%s", e)
        sys.exit(1)

    sys.exit(app.exec_())


if __name__ == "__main__":
    main()

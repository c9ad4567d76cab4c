"""Device registry - the shared, lock-protected list of tracked devices."""

import logging
import threading
from dataclasses import replace
from typing import Callable, List, Optional, Tuple

from batterytray.core.types import DeviceRecord, HubDevice

log = logging.getLogger(__name__)


class DeviceRegistry:
    """Ordered collection of DeviceRecords, one per device id.

    Every method holds the lock for its whole duration and none of them
    calls back into the registry while holding it. Insertion order is
    kept and shows up in the rendered summary.
    """

    def __init__(self, lock=None):
        self._lock = lock if lock is not None else threading.Lock()
        self._records: List[DeviceRecord] = []

    def _find(self, device_id: str) -> Optional[int]:
        for index, record in enumerate(self._records):
            if record.id == device_id:
                return index
        return None

    def upsert_if_eligible(
        self,
        candidate: HubDevice,
        capability_check: Callable[[HubDevice], bool],
    ) -> bool:
        """Add ``candidate`` unless it is already tracked or ineligible.

        The capability check only runs for ids not yet in the registry,
        so repeated rescans and reconnect events are cheap no-ops.

        Returns:
            True if a new record was appended.
        """
        with self._lock:
            if self._find(candidate.id) is not None:
                return False
            if not capability_check(candidate):
                return False
            self._records.append(DeviceRecord(id=candidate.id, display_name=candidate.model))
            return True

    def remove(self, device_id: str) -> Optional[DeviceRecord]:
        """Remove a device. Returns the removed record, or None if absent."""
        with self._lock:
            index = self._find(device_id)
            if index is None:
                return None
            return self._records.pop(index)

    def snapshot_and_update(self, read_metric: Callable[[str], Optional[int]]) -> bool:
        """Re-read every device's metric and store the values that changed.

        ``read_metric`` must not touch the registry. A read that raises or
        returns None leaves that device's value as it was for this round.

        Returns:
            True if any record's value changed.
        """
        changed = False
        with self._lock:
            for record in self._records:
                try:
                    value = read_metric(record.id)
                except Exception:
                    log.debug("Battery read failed for %s", record.display_name, exc_info=True)
                    continue
                if value is None:
                    continue
                if value != record.last_value:
                    record.last_value = value
                    changed = True
        return changed

    def renderable_snapshot(self) -> List[Tuple[str, int]]:
        """Copy of (display_name, last_value) pairs in insertion order."""
        with self._lock:
            return [(r.display_name, r.last_value) for r in self._records]

    def records(self) -> List[DeviceRecord]:
        """Copies of all records in insertion order."""
        with self._lock:
            return [replace(r) for r in self._records]

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __contains__(self, device_id: str) -> bool:
        with self._lock:
            return self._find(device_id) is not None

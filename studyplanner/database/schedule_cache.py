"""Optional in-process cache for schedule template lookups.

Keyed strictly by (student, weekday). Entries live until clear() or process
exit, so readers may see a stale template until the cache is cleared.
"""

import logging
import threading
from typing import Callable, Dict, List, Tuple

from studyplanner.models.schedule_block import ScheduleBlock

logger = logging.getLogger(__name__)

Loader = Callable[[str, str], List[ScheduleBlock]]


class ScheduleCache:
    """Memoizes per-(student, weekday) schedule block lists."""

    def __init__(self):
        self._entries: Dict[Tuple[str, str], List[ScheduleBlock]] = {}
        self._lock = threading.Lock()

    def get_for_day(self, student_name: str, weekday: str, load: Loader) -> List[ScheduleBlock]:
        """Return cached blocks, loading them on first use.

        Failed loads are not cached.
        """
        key = (student_name, weekday)
        with self._lock:
            if key in self._entries:
                return list(self._entries[key])

        blocks = load(student_name, weekday)
        with self._lock:
            self._entries[key] = list(blocks)
        logger.debug(f"Cached {len(blocks)} schedule blocks for {student_name} on {weekday}")
        return list(blocks)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


class CachedScheduleStore:
    """ScheduleStore adapter that reads through a ScheduleCache."""

    def __init__(self, store, cache: ScheduleCache):
        self.store = store
        self.cache = cache

    def get_for_day(self, student_name: str, weekday: str) -> List[ScheduleBlock]:
        return self.cache.get_for_day(student_name, weekday, self.store.get_for_day)

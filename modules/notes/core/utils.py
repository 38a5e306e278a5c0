"""
Core Utilities.

Shared utility functions used across the note store.
All modules should import utilities from this module.
"""

import threading
from datetime import datetime, timezone


def utc_now() -> datetime:
    """
    Return current UTC time as timezone-naive datetime.

    All datetime values in the application should be timezone-naive
    and assumed to be UTC.

    Returns:
        Current UTC time with tzinfo stripped
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


class MonotonicClock:
    """
    Wall clock that never goes backwards.

    Readings are clamped to the last value handed out, so a timestamp
    taken later is always >= one taken earlier even if the system
    clock is adjusted in between.
    """

    def __init__(self) -> None:
        self._last: datetime | None = None
        self._lock = threading.Lock()

    def now(self) -> datetime:
        with self._lock:
            current = utc_now()
            if self._last is not None and current < self._last:
                current = self._last
            self._last = current
            return current

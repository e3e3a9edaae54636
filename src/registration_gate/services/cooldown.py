"""Process-local resend throttling for one-time codes."""

from __future__ import annotations

import math
import time
from collections.abc import Callable
from threading import Lock

from registration_gate.core.settings import settings


class CooldownTracker:
    """Minimum interval between code issuances per raw identifier.

    State lives only in this process and is lost on restart. It throttles
    resends but never authorizes anything. Check-and-record is a single
    critical section; the lock is never held across I/O.
    """

    def __init__(
        self,
        window_seconds: int | None = None,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._window = float(
            settings.otp_resend_cooldown_seconds if window_seconds is None else window_seconds
        )
        self._clock = clock
        self._last_issued: dict[str, float] = {}
        self._lock = Lock()

    @property
    def window_seconds(self) -> float:
        return self._window

    def check_and_record(self, identifier: str) -> tuple[bool, int]:
        """Return ``(allowed, remaining_seconds)`` and record "now" when allowed.

        A denied call leaves the stored timestamp untouched.
        """
        with self._lock:
            now = self._clock()
            last = self._last_issued.get(identifier)
            if last is not None:
                elapsed = now - last
                if elapsed < self._window:
                    return False, max(1, math.ceil(self._window - elapsed))
            self._last_issued[identifier] = now
            return True, 0

    def clear(self, *identifiers: str) -> None:
        """Forget the last issuance for each identifier."""
        with self._lock:
            for identifier in identifiers:
                self._last_issued.pop(identifier, None)

    def prune(self) -> int:
        """Drop entries whose window has elapsed and return how many went."""
        with self._lock:
            now = self._clock()
            stale = [
                key for key, last in self._last_issued.items() if now - last >= self._window
            ]
            for key in stale:
                del self._last_issued[key]
            return len(stale)

    def reset(self) -> None:
        with self._lock:
            self._last_issued.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._last_issued)


_TRACKER: CooldownTracker | None = None
_TRACKER_LOCK = Lock()


def get_cooldown_tracker() -> CooldownTracker:
    """Return the tracker shared by all requests served by this process."""
    global _TRACKER
    with _TRACKER_LOCK:
        if _TRACKER is None:
            _TRACKER = CooldownTracker()
        return _TRACKER

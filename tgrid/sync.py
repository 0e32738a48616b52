"""Synchronized-update state with a timeout."""

from __future__ import annotations

import time
from typing import Callable


class SyncState:
    """Tracks a synchronized update that expires after a timeout in ms."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self.active = False
        self.started = 0.0
        self.write_aborted = False

    def begin(self) -> None:
        self.started = self._clock()
        self.active = True

    def end(self) -> None:
        self.active = False

    def in_sync(self, timeout: float) -> bool:
        """Tell whether the update is still open; it ends after ``timeout`` ms."""
        if self.active and (self._clock() - self.started) * 1000 >= timeout:
            self.active = False
        return self.active

    @property
    def read_pending(self) -> bool:
        return self.write_aborted
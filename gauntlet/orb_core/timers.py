"""
Tick Timers
===========

Countdowns measured in simulation ticks rather than wall-clock time, so a
paused or restarted session can never be surprised by a callback scheduled
for an earlier one.
"""

from __future__ import annotations

from typing import Callable, Optional


class DelayTimer:
    """
    One-shot countdown that fires a callback after N ticks.

    Starting a timer that is already armed replaces the pending callback.
    cancel() disarms it without firing.
    """

    def __init__(self) -> None:
        self.remaining = 0
        self._callback: Optional[Callable[[], None]] = None

    @property
    def active(self) -> bool:
        return self._callback is not None

    def start(self, ticks: int, callback: Callable[[], None]) -> None:
        self.remaining = max(0, int(ticks))
        self._callback = callback

    def cancel(self) -> None:
        self.remaining = 0
        self._callback = None

    def tick(self) -> bool:
        """
        Count down one tick, firing the callback when it runs out.

        Returns:
            True if the callback fired on this tick.
        """
        if self._callback is None:
            return False
        if self.remaining > 0:
            self.remaining -= 1
        if self.remaining > 0:
            return False
        callback = self._callback
        self._callback = None
        callback()
        return True

"""A sorted queue of one-shot and periodic timers driven by explicit polling."""

from __future__ import annotations

import time
from bisect import insort
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, Optional

TimerCallback = Callable[[Any, int], None]

_MAX_TIMEOUT_SECS = 1
_USECS_PER_SEC = 1_000_000


def now_usecs() -> int:
    """Return the current monotonic time in microseconds."""
    return time.monotonic_ns() // 1000


@dataclass(eq=False)
class Timer:
    """A scheduled callback; ``time`` is its due time in microseconds."""

    callback: TimerCallback
    usecs: int
    periodic: bool = False
    client_data: Any = None
    time: int = field(default=0)


class TimerQueue:
    """Timers kept in order of their due time."""

    def __init__(self) -> None:
        self._timers: list[Timer] = []

    def __len__(self) -> int:
        return len(self._timers)

    def __iter__(self) -> Iterator[Timer]:
        return iter(list(self._timers))

    def __contains__(self, timer: object) -> bool:
        return any(t is timer for t in self._timers)

    def _add(self, timer: Timer) -> None:
        insort(self._timers, timer, key=lambda t: t.time)

    def _remove(self, timer: Timer) -> None:
        for position, queued in enumerate(self._timers):
            if queued is timer:
                del self._timers[position]
                return
        raise ValueError("timer is not scheduled in this queue")

    def _successor(self, timer: Timer) -> Optional[Timer]:
        found = False
        for queued in self._timers:
            if found:
                return queued
            if queued is timer:
                found = True
        return None

    def create(
        self,
        callback: TimerCallback,
        usecs: int,
        periodic: bool = False,
        client_data: Any = None,
        now: Optional[int] = None,
    ) -> Timer:
        """Schedule ``callback`` to run ``usecs`` microseconds after ``now``."""
        start = now_usecs() if now is None else now
        timer = Timer(callback, usecs, periodic, client_data, start + usecs)
        self._add(timer)
        return timer

    def timeout(self, now: Optional[int] = None) -> float:
        """Seconds to wait before the next timer is due.

        Without pending timers this is one second. Otherwise the whole-second
        part is capped at one second while the fractional part is kept.
        """
        if not self._timers:
            return float(_MAX_TIMEOUT_SECS)
        current = now_usecs() if now is None else now
        remaining = max(0, self._timers[0].time - current)
        secs, usecs = divmod(remaining, _USECS_PER_SEC)
        secs = min(secs, _MAX_TIMEOUT_SECS)
        return secs + usecs / _USECS_PER_SEC

    def run(self, now: Optional[int] = None) -> None:
        """Fire every timer that is due, rescheduling periodic ones."""
        current = now_usecs() if now is None else now
        timer = self._timers[0] if self._timers else None
        while timer is not None:
            following = self._successor(timer)
            if timer.time > current:
                break
            timer.callback(timer.client_data, current)
            if timer.periodic:
                timer.time += timer.usecs
                self._remove(timer)
                self._add(timer)
            elif timer in self:
                self._remove(timer)
            timer = following if following is not None and following in self else None

    def reset(self, timer: Timer, now: Optional[int] = None) -> None:
        """Restart ``timer`` so that it is due its interval after ``now``."""
        current = now_usecs() if now is None else now
        self._remove(timer)
        timer.time = current + timer.usecs
        self._add(timer)

    def cancel(self, timer: Timer) -> None:
        """Remove ``timer`` from the queue."""
        self._remove(timer)

    def destroy(self) -> None:
        """Cancel every pending timer."""
        self._timers.clear()
"""Signals, a simulated clock and timers that run on it."""

from __future__ import annotations

import heapq
import itertools
from dataclasses import dataclass, field
from typing import Any, Callable, Optional


class Signal:
    """A list of callables that are all invoked when the signal is emitted."""

    def __init__(self) -> None:
        self._slots: list[Callable[..., Any]] = []

    def connect(self, slot: Callable[..., Any]) -> None:
        """Call ``slot`` on every later emission."""
        self._slots.append(slot)

    def disconnect(self, slot: Callable[..., Any]) -> None:
        """Stop calling ``slot``; raise ValueError if it was never connected."""
        try:
            self._slots.remove(slot)
        except ValueError:
            raise ValueError("slot is not connected to this signal") from None

    def emit(self, *args: Any) -> None:
        """Call every connected slot, in connection order, with ``args``."""
        for slot in list(self._slots):
            slot(*args)

    def __len__(self) -> int:
        return len(self._slots)


@dataclass(order=True)
class _ScheduledCall:
    due: int
    seq: int
    callback: Callable[[], Any] = field(compare=False)
    cancelled: bool = field(default=False, compare=False)

    def cancel(self) -> None:
        self.cancelled = True


class Scheduler:
    """A millisecond clock that only moves when told to, running due callbacks."""

    def __init__(self) -> None:
        self._now = 0
        self._queue: list[_ScheduledCall] = []
        self._counter = itertools.count()

    @property
    def now(self) -> int:
        """Current simulated time in milliseconds."""
        return self._now

    @property
    def pending(self) -> int:
        """Number of callbacks still waiting to run."""
        return sum(1 for call in self._queue if not call.cancelled)

    def call_later(self, delay_ms: int, callback: Callable[[], Any]) -> _ScheduledCall:
        """Run ``callback`` once, ``delay_ms`` after the current time."""
        if delay_ms < 0:
            raise ValueError("delay must not be negative")
        call = _ScheduledCall(self._now + delay_ms, next(self._counter), callback)
        heapq.heappush(self._queue, call)
        return call

    def _next_call(self) -> Optional[_ScheduledCall]:
        while self._queue and self._queue[0].cancelled:
            heapq.heappop(self._queue)
        return self._queue[0] if self._queue else None

    def _run_next(self) -> None:
        call = heapq.heappop(self._queue)
        self._now = call.due
        call.callback()

    def advance(self, ms: int) -> None:
        """Move the clock forward by ``ms``, running everything that falls due."""
        if ms < 0:
            raise ValueError("cannot move the clock backwards")
        target = self._now + ms
        while (call := self._next_call()) is not None and call.due <= target:
            self._run_next()
        self._now = target

    def run_until(self, predicate: Callable[[], bool], timeout_ms: int) -> bool:
        """Run callbacks until ``predicate`` holds or ``timeout_ms`` has passed.

        Returns whether the predicate held in the end.
        """
        if timeout_ms < 0:
            raise ValueError("timeout must not be negative")
        deadline = self._now + timeout_ms
        while not predicate():
            call = self._next_call()
            if call is None or call.due > deadline:
                self._now = deadline
                return predicate()
            self._run_next()
        return True


class Timer:
    """A repeating timer on a :class:`Scheduler` that emits ``timeout``."""

    def __init__(
        self, scheduler: Scheduler, callback: Optional[Callable[[], Any]] = None
    ) -> None:
        self._scheduler = scheduler
        self.timeout = Signal()
        self.interval_ms: Optional[int] = None
        self._pending: Optional[_ScheduledCall] = None
        if callback is not None:
            self.timeout.connect(callback)

    @property
    def active(self) -> bool:
        return self._pending is not None

    def start(self, interval_ms: Optional[int] = None) -> None:
        """(Re)start the timer; without an interval the previous one is reused."""
        if interval_ms is None:
            interval_ms = self.interval_ms
        if interval_ms is None:
            raise ValueError("timer has no interval")
        if interval_ms <= 0:
            raise ValueError("interval must be positive")
        self.stop()
        self.interval_ms = interval_ms
        self._schedule()

    def stop(self) -> None:
        """Stop the timer; a stopped timer does nothing."""
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _schedule(self) -> None:
        assert self.interval_ms is not None
        self._pending = self._scheduler.call_later(self.interval_ms, self._fire)

    def _fire(self) -> None:
        self._schedule()
        self.timeout.emit()
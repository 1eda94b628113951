"""Polled software timers: periodic, one-shot and limited-run callbacks."""

from __future__ import annotations

import time
from dataclasses import dataclass
from enum import IntEnum
from typing import Callable

MAX_TIMERS = 16
RUN_FOREVER = 0
RUN_ONCE = 1

Callback = Callable[[], object]
Clock = Callable[[], int]


class _Deferred(IntEnum):
    DONT_RUN = 0
    RUN_ONLY = 1
    RUN_AND_DELETE = 2


@dataclass
class _Slot:
    prev_millis: int = 0
    callback: Callback | None = None
    delay: int = 0
    max_runs: int = RUN_FOREVER
    num_runs: int = 0
    enabled: bool = False
    to_be_called: _Deferred = _Deferred.DONT_RUN

    @property
    def in_use(self) -> bool:
        return self.callback is not None


def _monotonic_millis() -> int:
    return int(time.monotonic() * 1000)


class TimerHandle:
    """A reference to one timer slot; every operation is a no-op once invalid."""

    def __init__(self, timer: Timer | None = None, timer_id: int = -1) -> None:
        self._timer = timer
        self._id = timer_id

    def is_valid(self) -> bool:
        return self._timer is not None and self._id >= 0

    def __bool__(self) -> bool:
        return self.is_valid()

    def __int__(self) -> int:
        return self._id

    def __repr__(self) -> str:
        return f"TimerHandle(id={self._id})"

    def __call__(self) -> None:
        if self._timer is not None and self.is_valid():
            self._timer.execute_now(self._id)

    def change_interval(self, delay: int) -> None:
        if self._timer is not None and self.is_valid():
            self._timer.change_interval(self._id, delay)

    def remaining_time(self) -> int | None:
        if self._timer is None or not self.is_valid():
            return None
        return self._timer.remaining_time(self._id)

    def change_function(self, callback: Callback) -> bool:
        if self._timer is None or not self.is_valid():
            return False
        return self._timer.change_function(self._id, callback)

    def delete_timer(self) -> None:
        if self._timer is not None and self.is_valid():
            self._timer.delete_timer(self._id)
        self._timer = None
        self._id = -1

    def restart_timer(self) -> None:
        if self._timer is not None and self.is_valid():
            self._timer.restart_timer(self._id)

    def is_enabled(self) -> bool:
        return self._timer is not None and self.is_valid() and self._timer.is_enabled(self._id)

    def enable(self) -> None:
        if self._timer is not None and self.is_valid():
            self._timer.enable(self._id)

    def disable(self) -> None:
        if self._timer is not None and self.is_valid():
            self._timer.disable(self._id)

    def toggle(self) -> None:
        if self._timer is not None and self.is_valid():
            self._timer.toggle(self._id)


class Timer:
    """A fixed table of timers driven by calling :meth:`run` from a loop.

    ``clock`` returns the current time in milliseconds.
    """

    def __init__(self, clock: Clock | None = None, max_timers: int = MAX_TIMERS) -> None:
        if max_timers < 1:
            raise ValueError("max_timers must be at least 1")
        self._clock: Clock = clock or _monotonic_millis
        self._max_timers = max_timers
        now = self._clock()
        self._slots = [_Slot(prev_millis=now) for _ in range(max_timers)]
        self._count = 0

    @property
    def max_timers(self) -> int:
        return self._max_timers

    def _in_range(self, timer_id: int) -> bool:
        return 0 <= timer_id < self._max_timers

    def run(self) -> None:
        """Call every timer that is due; call this often."""
        now = self._clock()

        for slot in self._slots:
            slot.to_be_called = _Deferred.DONT_RUN
            if not slot.in_use or now - slot.prev_millis < slot.delay:
                continue
            if slot.delay:
                skip = (now - slot.prev_millis) // slot.delay
                slot.prev_millis += slot.delay * skip
            else:
                slot.prev_millis = now
            if not slot.enabled:
                continue
            if slot.max_runs == RUN_FOREVER:
                slot.to_be_called = _Deferred.RUN_ONLY
            elif slot.num_runs < slot.max_runs:
                slot.num_runs += 1
                slot.to_be_called = (
                    _Deferred.RUN_AND_DELETE
                    if slot.num_runs >= slot.max_runs
                    else _Deferred.RUN_ONLY
                )

        for index, slot in enumerate(self._slots):
            if slot.to_be_called == _Deferred.DONT_RUN or slot.callback is None:
                continue
            slot.callback()
            if self._slots[index].to_be_called == _Deferred.RUN_AND_DELETE:
                self.delete_timer(index)

    def _first_free_slot(self) -> int:
        if self._count >= self._max_timers:
            return -1
        return next(
            (index for index, slot in enumerate(self._slots) if not slot.in_use), -1
        )

    def _setup(self, delay: int, callback: Callback | None, runs: int) -> TimerHandle:
        index = self._first_free_slot()
        if index < 0 or callback is None:
            return TimerHandle()
        self._slots[index] = _Slot(
            prev_millis=self._clock(),
            callback=callback,
            delay=delay,
            max_runs=runs,
            enabled=True,
        )
        self._count += 1
        return TimerHandle(self, index)

    def set_interval(self, delay: int, callback: Callback | None) -> TimerHandle:
        """Call ``callback`` every ``delay`` ms; invalid handle if no slot is free."""
        return self._setup(delay, callback, RUN_FOREVER)

    def set_timeout(self, delay: int, callback: Callback | None) -> TimerHandle:
        """Call ``callback`` once after ``delay`` ms."""
        return self._setup(delay, callback, RUN_ONCE)

    def set_timer(self, delay: int, callback: Callback | None, runs: int) -> TimerHandle:
        """Call ``callback`` every ``delay`` ms, ``runs`` times (0 means forever)."""
        if runs < 0:
            raise ValueError("runs must not be negative")
        return self._setup(delay, callback, runs)

    def change_interval(self, timer_id: int, delay: int) -> bool:
        if not self._in_range(timer_id) or not self._slots[timer_id].in_use:
            return False
        slot = self._slots[timer_id]
        slot.delay = delay
        slot.prev_millis = self._clock()
        return True

    def change_function(self, timer_id: int, callback: Callback) -> bool:
        if callback is None:
            raise ValueError("callback must not be None")
        if not self._in_range(timer_id) or not self._slots[timer_id].in_use:
            return False
        self._slots[timer_id].callback = callback
        return True

    def delete_timer(self, timer_id: int) -> None:
        if not self._in_range(timer_id) or self._count == 0:
            return
        if self._slots[timer_id].in_use:
            self._slots[timer_id] = _Slot(prev_millis=self._clock())
            self._count -= 1

    def restart_timer(self, timer_id: int) -> None:
        if self._in_range(timer_id):
            self._slots[timer_id].prev_millis = self._clock()

    def execute_now(self, timer_id: int) -> None:
        """Make the timer due on the next :meth:`run`."""
        if self._in_range(timer_id):
            slot = self._slots[timer_id]
            slot.prev_millis = self._clock() - slot.delay

    def is_enabled(self, timer_id: int) -> bool:
        if not self._in_range(timer_id):
            return False
        slot = self._slots[timer_id]
        return slot.in_use and slot.enabled

    def remaining_time(self, timer_id: int) -> int | None:
        """Milliseconds until the next call, or None when the timer is not enabled."""
        if not self.is_enabled(timer_id):
            return None
        slot = self._slots[timer_id]
        return slot.prev_millis + slot.delay - self._clock()

    def enable(self, timer_id: int) -> None:
        if self._in_range(timer_id):
            self._slots[timer_id].enabled = True

    def disable(self, timer_id: int) -> None:
        if self._in_range(timer_id):
            self._slots[timer_id].enabled = False

    def _set_forever_enabled(self, enabled: bool) -> None:
        for slot in self._slots:
            if slot.in_use and slot.max_runs == RUN_FOREVER:
                slot.enabled = enabled

    def enable_all(self) -> None:
        """Enable every timer that runs forever."""
        self._set_forever_enabled(True)

    def disable_all(self) -> None:
        """Disable every timer that runs forever."""
        self._set_forever_enabled(False)

    def toggle(self, timer_id: int) -> None:
        if self._in_range(timer_id):
            slot = self._slots[timer_id]
            slot.enabled = not slot.enabled

    def num_timers(self) -> int:
        return self._count

    def num_available_timers(self) -> int:
        return self._max_timers - self._count
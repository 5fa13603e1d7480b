"""Timer queue holding fixed, "max" and "min" timers."""

from __future__ import annotations

import heapq
import itertools
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

TimerCallback = Callable[[Any], None]


class _Kind(Enum):
    FIXED = "fixed"
    MAX = "max"
    MIN = "min"


@dataclass(frozen=True)
class FixedTimerKey:
    """Key for a timer with a fixed expiry time."""

    id: int


@dataclass(frozen=True)
class MaxTimerKey:
    """Key for a timer that expires at the latest expiry time it has been given.

    Moving the expiry later is cheap; moving it earlier is ignored.
    """

    id: int


@dataclass(frozen=True)
class MinTimerKey:
    """Key for a timer that expires at the earliest expiry time it has been given.

    Moving the expiry earlier reschedules it; moving it later is ignored.
    """

    id: int


@dataclass
class _Timer:
    kind: _Kind
    expiry: Any
    callback: TimerCallback


class Timers:
    """A queue of timers ordered by expiry time.

    Times may be any mutually comparable values (typically float
    seconds).  Timers with equal expiry times fire in the order in which
    they were scheduled.
    """

    def __init__(self, now: Any) -> None:
        self._now = now
        self._ids = itertools.count(1)
        self._seq = itertools.count()
        self._timers: Dict[int, _Timer] = {}
        self._heap: List[Tuple[Any, int, int]] = []

    def _push(self, expiry: Any, timer_id: int) -> None:
        heapq.heappush(self._heap, (expiry, next(self._seq), timer_id))

    def _insert(self, kind: _Kind, expiry: Any, f: TimerCallback) -> int:
        if not callable(f):
            raise TypeError(f"timer callback must be callable, not {type(f).__name__}")
        timer_id = next(self._ids)
        self._timers[timer_id] = _Timer(kind, expiry, f)
        self._push(expiry, timer_id)
        return timer_id

    def _get(self, timer_id: int, kind: _Kind) -> Optional[_Timer]:
        timer = self._timers.get(timer_id)
        if timer is None or timer.kind is not kind:
            return None
        return timer

    def _remove(self, timer_id: int, kind: _Kind) -> bool:
        if self._get(timer_id, kind) is None:
            return False
        del self._timers[timer_id]
        return True

    def _settle_top(self) -> None:
        """Drop stale heap entries and reschedule postponed ones at the top."""
        while self._heap:
            expiry, _, timer_id = self._heap[0]
            timer = self._timers.get(timer_id)
            if timer is None or expiry > timer.expiry:
                heapq.heappop(self._heap)
            elif expiry < timer.expiry:
                heapq.heappop(self._heap)
                self._push(timer.expiry, timer_id)
            else:
                return

    # Fixed timers

    def add(self, expiry: Any, f: TimerCallback) -> FixedTimerKey:
        """Add a timer that fires ``f`` at ``expiry``."""
        return FixedTimerKey(self._insert(_Kind.FIXED, expiry, f))

    def delete(self, key: FixedTimerKey) -> bool:
        """Delete a fixed timer; False if it already expired or was deleted."""
        return self._remove(key.id, _Kind.FIXED)

    # Max timers

    def add_max(self, expiry: Any, f: TimerCallback) -> MaxTimerKey:
        """Add a timer that fires at the latest expiry time it is given."""
        return MaxTimerKey(self._insert(_Kind.MAX, expiry, f))

    def mod_max(self, key: MaxTimerKey, expiry: Any) -> bool:
        """Move the expiry later if ``expiry`` is later; False if the timer is gone."""
        timer = self._get(key.id, _Kind.MAX)
        if timer is None:
            return False
        if expiry > timer.expiry:
            timer.expiry = expiry
        return True

    def del_max(self, key: MaxTimerKey) -> bool:
        """Delete a max timer; False if it already expired or was deleted."""
        return self._remove(key.id, _Kind.MAX)

    def max_is_active(self, key: MaxTimerKey) -> bool:
        """True if the max timer exists and has not yet fired."""
        return self._get(key.id, _Kind.MAX) is not None

    # Min timers

    def add_min(self, expiry: Any, f: TimerCallback) -> MinTimerKey:
        """Add a timer that fires at the earliest expiry time it is given."""
        return MinTimerKey(self._insert(_Kind.MIN, expiry, f))

    def mod_min(self, key: MinTimerKey, expiry: Any) -> bool:
        """Move the expiry earlier if ``expiry`` is earlier; False if the timer is gone."""
        timer = self._get(key.id, _Kind.MIN)
        if timer is None:
            return False
        if expiry < timer.expiry:
            timer.expiry = expiry
            self._push(expiry, key.id)
        return True

    def del_min(self, key: MinTimerKey) -> bool:
        """Delete a min timer; False if it already expired or was deleted."""
        return self._remove(key.id, _Kind.MIN)

    def min_is_active(self, key: MinTimerKey) -> bool:
        """True if the min timer exists and has not yet fired."""
        return self._get(key.id, _Kind.MIN) is not None

    # Expiry

    def next_expiry(self) -> Optional[Any]:
        """Return the earliest pending expiry time, or None if no timers are pending."""
        self._settle_top()
        return self._heap[0][0] if self._heap else None

    def advance(self, now: Any) -> List[TimerCallback]:
        """Move time forward to ``now`` and return the callbacks of expired timers.

        Every timer whose expiry is at or before ``now`` is removed and
        its callback returned, in expiry order.  Time never moves back.
        """
        if now > self._now:
            self._now = now
        expired: List[TimerCallback] = []
        while True:
            self._settle_top()
            if not self._heap or self._heap[0][0] > self._now:
                return expired
            _, _, timer_id = heapq.heappop(self._heap)
            expired.append(self._timers.pop(timer_id).callback)
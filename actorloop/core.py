"""The runtime core: queues, timers, shutdown state and the external run loop interface."""

from __future__ import annotations

import time
from collections import deque
from typing import Any, Callable, Deque, Dict, Iterable, List, Optional, Type, TypeVar

from actorloop.deferrer import Deferrer
from actorloop.stopcause import StopCause
from actorloop.timers import FixedTimerKey, MaxTimerKey, MinTimerKey, Timers

T = TypeVar("T")
QueuedCall = Callable[["Stakker"], None]


def _check_callable(f: Any, what: str) -> None:
    if not callable(f):
        raise TypeError(f"{what} must be callable, not {type(f).__name__}")


class Core:
    """Operations available both to actors (through their context) and to the event loop.

    Times are monotonic float seconds and durations are float seconds.
    Every queued callable is later called with the :class:`Stakker`
    instance as its only argument.
    """

    def __init__(self, now: float) -> None:
        self._now = now
        self._start_instant = now
        self._deferrer = Deferrer()
        self._lazy_queue: List[QueuedCall] = []
        self._idle_queue: Deque[QueuedCall] = deque()
        self._timers = Timers(now)
        self._shutdown: Optional[StopCause] = None
        self._anymap: Dict[type, Any] = {}
        self._systime: Optional[float] = None

    def now(self) -> float:
        """The runtime's view of the current time, fixed for a batch of processing."""
        return self._now

    def systime(self) -> float:
        """Wall-clock time in seconds since the epoch, or the virtual value if one was set."""
        if self._systime is not None:
            return self._systime
        return time.time()

    def start_instant(self) -> float:
        """The time passed when this runtime was created."""
        return self._start_instant

    def defer(self, f: QueuedCall) -> None:
        """Queue ``f`` on the main queue, to run after everything already queued."""
        self._deferrer.defer(f)

    def lazy(self, f: QueuedCall) -> None:
        """Queue ``f`` to run once the main queue has been completely cleared."""
        _check_callable(f, "lazy item")
        self._lazy_queue.append(f)

    def idle(self, f: QueuedCall) -> None:
        """Queue ``f`` to run when the process next becomes idle."""
        _check_callable(f, "idle item")
        self._idle_queue.append(f)

    def after(self, dur: float, f: QueuedCall) -> FixedTimerKey:
        """Run ``f`` once ``dur`` seconds have passed from the current time."""
        return self._timers.add(self._now + dur, f)

    def timer_add(self, expiry: float, f: QueuedCall) -> FixedTimerKey:
        """Add a fixed timer expiring at ``expiry``."""
        return self._timers.add(expiry, f)

    def timer_del(self, key: FixedTimerKey) -> bool:
        """Delete a fixed timer; False if it already expired or was deleted."""
        return self._timers.delete(key)

    def timer_max_add(self, expiry: float, f: QueuedCall) -> MaxTimerKey:
        """Add a timer that expires at the latest expiry time it is given."""
        return self._timers.add_max(expiry, f)

    def timer_max_upd(self, key: MaxTimerKey, expiry: float) -> bool:
        """Move a max timer later if ``expiry`` is later; False if the timer is gone."""
        return self._timers.mod_max(key, expiry)

    def timer_max_del(self, key: MaxTimerKey) -> bool:
        """Delete a max timer; False if it already expired or was deleted."""
        return self._timers.del_max(key)

    def timer_max_active(self, key: MaxTimerKey) -> bool:
        """True if the max timer exists and has not yet fired."""
        return self._timers.max_is_active(key)

    def timer_min_add(self, expiry: float, f: QueuedCall) -> MinTimerKey:
        """Add a timer that expires at the earliest expiry time it is given."""
        return self._timers.add_min(expiry, f)

    def timer_min_upd(self, key: MinTimerKey, expiry: float) -> bool:
        """Move a min timer earlier if ``expiry`` is earlier; False if the timer is gone."""
        return self._timers.mod_min(key, expiry)

    def timer_min_del(self, key: MinTimerKey) -> bool:
        """Delete a min timer; False if it already expired or was deleted."""
        return self._timers.del_min(key)

    def timer_min_active(self, key: MinTimerKey) -> bool:
        """True if the min timer exists and has not yet fired."""
        return self._timers.min_is_active(key)

    def anymap_set(self, val: Any) -> None:
        """Store ``val`` under its own type, replacing any earlier value of that type."""
        self._anymap[type(val)] = val

    def anymap_unset(self, cls: type) -> None:
        """Remove the value stored for ``cls``, if any."""
        self._anymap.pop(cls, None)

    def anymap_get(self, cls: Type[T]) -> T:
        """Return the value stored for ``cls``; raise LookupError if there is none."""
        try:
            return self._anymap[cls]
        except KeyError:
            raise LookupError(f"No anymap entry found for {cls.__qualname__}") from None

    def anymap_try_get(self, cls: Type[T]) -> Optional[T]:
        """Return the value stored for ``cls``, or None if there is none."""
        return self._anymap.get(cls)

    def shutdown(self, cause: StopCause) -> None:
        """Ask the event loop to terminate, recording ``cause``."""
        self._shutdown = cause

    def not_shutdown(self) -> bool:
        """True while no shutdown has been requested."""
        return self._shutdown is None

    def shutdown_reason(self) -> Optional[StopCause]:
        """Return and clear the shutdown cause, if a shutdown was requested."""
        cause, self._shutdown = self._shutdown, None
        return cause

    def deferrer(self) -> Deferrer:
        """The main-queue deferrer, for code without access to the core."""
        return self._deferrer

    def log_check(self, level: Any) -> bool:
        """Whether records at ``level`` would be logged; no logger is supported, so never."""
        return False


class Stakker(Core):
    """The external interface to the runtime, driven by an event loop."""

    def __init__(self, now: float) -> None:
        super().__init__(now)

    def next_expiry(self) -> Optional[float]:
        """The next timer expiry time, or None if there are no timers."""
        return self._timers.next_expiry()

    def next_wait(self, now: float) -> Optional[float]:
        """How long until the next timer expires (never negative), or None."""
        expiry = self._timers.next_expiry()
        if expiry is None:
            return None
        return max(expiry - now, 0.0)

    def next_wait_max(self, now: float, maxdur: float, idle_pending: bool) -> float:
        """How long to wait for the next I/O poll.

        Zero if idle items are pending, otherwise the wait for the next
        timer limited to ``maxdur``, or ``maxdur`` if there is no timer.
        """
        if idle_pending:
            return 0.0
        wait = self.next_wait(now)
        return maxdur if wait is None else min(wait, maxdur)

    def _execute(self, calls: Iterable[QueuedCall]) -> None:
        for call in calls:
            call(self)

    def run(self, now: float, idle: bool) -> bool:
        """Advance time, expire timers, then run main and lazy queues until empty.

        If ``idle`` is true, one idle item is run first.  Returns True if
        idle items remain to be run.
        """
        if idle and self._idle_queue:
            self._idle_queue.popleft()(self)

        main = self._deferrer.take_queue()
        if now > self._now:
            self._now = now
            main.extend(self._timers.advance(now))
        self._execute(main)

        while True:
            main = self._deferrer.take_queue()
            if main:
                self._execute(main)
                continue
            lazy, self._lazy_queue = self._lazy_queue, []
            if lazy:
                self._execute(lazy)
                continue
            break

        return bool(self._idle_queue)

    def set_systime(self, systime: Optional[float]) -> None:
        """Set a virtual wall-clock time, or None to use the real clock."""
        self._systime = systime
"""Queue of deferred calls that can be fed without access to the runtime core."""

from __future__ import annotations

from collections import deque
from typing import Any, Callable, Deque

DeferredCall = Callable[[Any], None]


class Deferrer:
    """A shared main queue of deferred calls.

    Every holder of the same ``Deferrer`` instance pushes onto the same
    queue, so it can be handed to code that has no reference to the
    runtime, such as cleanup handlers.  Each queued callable is later
    called with the runtime instance as its only argument.

    Calls deferred after the runtime has stopped running its queues are
    accepted but never executed.
    """

    __slots__ = ("_queue",)

    def __init__(self) -> None:
        self._queue: Deque[DeferredCall] = deque()

    def defer(self, f: DeferredCall) -> None:
        """Queue ``f`` to run in the main loop at the next opportunity."""
        if not callable(f):
            raise TypeError(f"deferred item must be callable, not {type(f).__name__}")
        self._queue.append(f)

    def take_queue(self) -> Deque[DeferredCall]:
        """Remove and return everything queued so far, leaving an empty queue.

        Calls deferred while the returned items run go onto the fresh
        queue, not onto the one returned.
        """
        taken, self._queue = self._queue, deque()
        return taken

    def clear(self) -> None:
        """Discard all queued calls."""
        self._queue = deque()

    def __len__(self) -> int:
        return len(self._queue)

    def __repr__(self) -> str:
        return f"<Deferrer pending={len(self._queue)}>"
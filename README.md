# actorloop

A lightweight, single-threaded runtime of deferred-call queues and timers.
It does not own your main loop: you build a `Stakker`, feed it the current
time, and it runs every queued call, expired timer, lazy item and idle item
for you.

Every queued callable is called with the `Stakker` instance as its only
argument. Times are float seconds on a monotonic clock of your choosing,
and durations are float seconds.

## What is in the box

- `actorloop.core.Stakker` is the runtime as seen from the event loop.
  `next_expiry`, `next_wait` and `next_wait_max` tell the loop how long it
  may sleep; `run(now, idle)` advances time and runs everything due.
- `actorloop.core.Core` is the base class of `Stakker` and holds the
  operations that queued code uses:
  - `now()`: the runtime's current time, fixed for one batch of processing;
    `start_instant()`: the time given at creation; `systime()`: wall-clock
    seconds since the epoch, or the virtual value set with
    `Stakker.set_systime`.
  - `defer(f)`: put `f` on the main queue.
  - `lazy(f)`: run `f` once the main queue has been completely cleared,
    including anything deferred while clearing it.
  - `idle(f)`: run `f` when the loop reports that it is idle.
  - Fixed timers: `after(dur, f)`, `timer_add(expiry, f)`, `timer_del(key)`.
  - "Max" timers, which expire at the latest time they are given:
    `timer_max_add`, `timer_max_upd`, `timer_max_del`, `timer_max_active`.
  - "Min" timers, which expire at the earliest time they are given:
    `timer_min_add`, `timer_min_upd`, `timer_min_del`, `timer_min_active`.
  - `shutdown(cause)`, `not_shutdown()` and `shutdown_reason()` for asking
    the loop to stop.
  - `anymap_set`, `anymap_get`, `anymap_try_get`, `anymap_unset`: one value
    per type, for environment objects such as an I/O poller handle.
    `anymap_get` raises `LookupError` when nothing is stored.
  - `deferrer()`: the main-queue `Deferrer`, for code that has no reference
    to the core.
- `actorloop.deferrer.Deferrer` is the shared main queue itself: `defer`,
  `take_queue`, `clear` and `len()`.
- `actorloop.timers.Timers` is the timer queue behind the core, with the
  key types `FixedTimerKey`, `MaxTimerKey` and `MinTimerKey`. Timers with
  equal expiry times fire in the order they were added.
- `actorloop.stopcause.StopCause` describes why something ended:
  `stopped()`, `failed(error)`, `killed(error)`, `dropped()` or `lost()`,
  with `kind` (a `StopKind`), `error` and `has_error()`. A string error is
  wrapped in `ActorError`.

## Order of execution

`run(now, idle)` does the following:

1. If `idle` is true, runs one item from the idle queue.
2. If `now` is later than the current time, moves time forward and appends
   the callbacks of every expired timer, in expiry order, to what is on the
   main queue.
3. Runs the main queue, then keeps alternating between the main queue and
   the lazy queue until both are empty. Calls deferred while a queue runs
   go into the next round.
4. Returns `True` if idle items remain.

## A main loop

```python
from actorloop.core import Stakker
from actorloop.stopcause import StopCause

now = 0.0
stakker = Stakker(now)
stakker.after(5.0, lambda s: s.shutdown(StopCause.stopped()))

stakker.run(now, False)
while stakker.not_shutdown():
    now += stakker.next_wait_max(now, 60.0, False)
    stakker.run(now, False)

print(stakker.shutdown_reason())  # Actor stopped
```

For a real-time loop, sleep for the duration returned by `next_wait_max`
and then call `run` with the current monotonic time. If your loop also
polls for I/O, pass the value returned by the previous `run` as
`idle_pending`, and pass `idle=True` to `run` when a poll found nothing to
do.

## What this package does not do

- It has no actor types: there is no actor reference, ownership, context
  object or message forwarder here. `StopCause` is provided, but nothing
  in the package creates or terminates actors; build those on top of
  `Core.defer` and the timers.
- There is no logging: `Core.log_check` always returns `False`.
- It is single-threaded and offers nothing for waking the loop from other
  threads.
- It ships no command-line program.

## Tests

```
pip install -e ".[test]"
pytest
```
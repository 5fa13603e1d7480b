"""A lightweight single-threaded runtime of deferred-call queues and timers driven by an external main loop."""

__version__ = "0.2.12"

__all__ = ["core", "deferrer", "stopcause", "timers"]
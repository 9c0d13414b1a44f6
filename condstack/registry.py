# -*- coding: utf-8 -*-
"""Per-thread state of the condition system.

Each thread gets its own `Registry`, created the first time the thread
touches the condition system, and dropped when the thread exits. Nothing in
a registry is ever visible to another thread, so none of it is locked.
"""

__all__ = ["Registry", "current"]

import threading
from collections import deque

class Registry:
    """The scope stack, the restart stack, and the in-flight conditions of one thread.

    All three are `deque`s with the most recent entry at the left end (the head).
    """
    def __init__(self):
        self.scope = deque()     # HandlerFrame and FinalizerFrame instances
        self.restarts = deque()  # RestartEntry instances
        self.signaled = deque()  # conditions owned by a `signal` call still in progress
    def __repr__(self):  # pragma: no cover
        return (f"<Registry of {threading.current_thread().name}: "
                f"{len(self.scope)} frames, {len(self.restarts)} restarts, "
                f"{len(self.signaled)} in flight>")

_L = threading.local()

def current():
    """Return the registry of the calling thread, creating it on first use."""
    try:
        return _L.registry
    except AttributeError:
        registry = _L.registry = Registry()
        return registry

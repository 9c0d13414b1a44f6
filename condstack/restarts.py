# -*- coding: utf-8 -*-
"""Named recovery actions.

Restarts live in their own per-thread stack, independent of the handler
stack. A handler that wants to recover from a condition looks up a restart
by name and invokes it, then uses the restart's verdict to decide its own::

    def use_defaults(condition, settings):
        settings.update(DEFAULTS)
        return RestartResult.SUCCEED

    def on_missing(condition, payload):
        if invoke_restart(condition, "use_defaults") is RestartResult.SUCCEED:
            return HandlerResult.HANDLED
        return HandlerResult.PASS

    with restart("use_defaults", use_defaults, settings):
        with establish_handler("config-missing", on_missing):
            load_config(settings)  # may signal("config-missing", ...)

Unlike finalizers, restarts are never run automatically. Unregistering a
restart just removes it.
"""

__all__ = ["RestartResult", "RestartEntry",
           "register_restart", "unregister_restart",
           "find_restart", "invoke_restart",
           "available_restarts", "restart"]

from enum import Enum
from operator import itemgetter
import contextlib
import warnings

from .registry import current

class RestartResult(Enum):
    """What a restart callback reports back to whoever invoked it."""
    SUCCEED = "succeed"      # the restart did what needed to be done
    FAIL = "fail"            # the restart was unable to do it
    NOT_FOUND = "not found"  # no restart by that name is in scope

class RestartEntry:
    """A registered restart. `callback(condition, payload)` returns a `RestartResult`."""
    __slots__ = ("name", "callback", "payload")
    def __init__(self, name, callback, payload=None):
        if not isinstance(name, str):
            raise TypeError(f"Restart name must be str, got {type(name)} with value {repr(name)}")
        if not callable(callback):
            raise TypeError(f"Restart callback must be callable, got {type(callback)} with value {repr(callback)}")
        self.name = name
        self.callback = callback
        self.payload = payload
    def __repr__(self):
        return f"<RestartEntry {repr(self.name)} -> {repr(self.callback)}>"

def register_restart(name, callback, payload=None):
    """Make a restart available in the calling thread. Return its entry.

    The entry is what `unregister_restart` takes.
    """
    entry = RestartEntry(name, callback, payload)
    current().restarts.appendleft(entry)
    return entry

def unregister_restart(entry):
    """Remove a restart registered by `register_restart`. Its callback is not run."""
    entries = current().restarts
    if not any(e is entry for e in entries):
        warnings.warn(f"Cannot unregister {repr(entry)}: not registered in this thread", RuntimeWarning, stacklevel=2)
        return
    entries.remove(entry)

def find_restart(name):
    """Look up a restart by name. Return its entry, or `None`.

    The most recently registered restart of that name wins.
    """
    for entry in current().restarts:
        if entry.name == name:
            return entry
    return None

def invoke_restart(condition, name):
    """Call the restart named `name` with `condition` and return its verdict.

    If no such restart is registered, return `RestartResult.NOT_FOUND` without
    doing anything else. Shadowed restarts of the same name are not tried.
    """
    entry = find_restart(name)
    if entry is None:
        return RestartResult.NOT_FOUND
    return entry.callback(condition, entry.payload)

def available_restarts():
    """Return a sorted list of restarts currently in scope.

    Name shadowing is respected; for each unique name, the return value
    contains only the most recently registered restart.

    The return value format is `[(name, callable), ...]`.
    """
    out = []
    seen = set()
    for entry in current().restarts:
        if entry.name not in seen:
            seen.add(entry.name)
            out.append((entry.name, entry.callback))
    return list(sorted(out, key=itemgetter(0)))

@contextlib.contextmanager
def restart(name, callback, payload=None):
    """Provide a restart for the dynamic extent of a `with` block.

    The restart is unregistered when the block exits, by any path. The entry
    is bound by the `as` clause, if you want it.
    """
    entry = register_restart(name, callback, payload)
    try:
        yield entry
    finally:
        entries = current().restarts
        if any(e is entry for e in entries):
            entries.remove(entry)

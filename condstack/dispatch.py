# -*- coding: utf-8 -*-
"""Signaling conditions.

`signal` offers a condition to the handlers currently on the scope stack of
the calling thread, from dynamically innermost to dynamically outermost,
considering only handlers established for the condition's name. Each handler
returns a verdict:

  - `HandlerResult.HANDLED`: the condition is dealt with. `signal` returns
    normally, and the caller continues after the `signal` call.

  - `HandlerResult.PASS`: this handler declines. The next older handler for
    the same name gets its turn. The declining handler stays in place.

  - `HandlerResult.ABORT`: leave the protected region. The stack is unwound
    down to this handler, running the finalizers on the way, and execution
    resumes right after the `with establish_handler(...)` block that
    established the handler.

If no handler deals with the condition, the process is terminated with a
diagnostic. There is no default handling; an unhandled condition is fatal.

**Notes**

The handlers run *before* anything is unwound, on top of the call stack of
the `signal` call. So a handler sees the signaling context intact, and can
still decide between `HANDLED`, `PASS` and `ABORT`.

The `ABORT` transfer is implemented on top of exceptions. Once the target
handler is known and the finalizers between it and the `signal` call have run,
we raise an `Unwind` instance. Only the guard that owns the target frame
catches it.
"""

__all__ = ["HandlerResult", "Unwind", "signal", "warn", "active_conditions"]

from enum import Enum

from .condition import Condition, callsite
from .diagnostics import fatal, render
from .registry import current
from .scopestack import find_handlers, pop, push_finalizer, unwind

class HandlerResult(Enum):
    """The verdict of a handler callback."""
    ABORT = "abort"      # transfer control to where the handler was established
    HANDLED = "handled"  # return to where the condition was signaled from
    PASS = "pass"        # let the next older handler for the same name decide

class Unwind(BaseException):
    """The non-local transfer of an `ABORT`, on its way to the handler frame `target`.

    By the time this is raised, the scope stack has already been unwound; this
    only carries the Python call stack along.
    """
    def __init__(self, target):
        self.target = target
        # message when uncaught
        self.args = (f"condstack: uncaught Unwind to {repr(target)}; "
                     f"handlers that may ABORT must be established with `establish_handler`",)

def _release(condition):
    signaled = current().signaled
    if any(c is condition for c in signaled):
        signaled.remove(condition)

def signal(name, message, location=None):
    """Signal a condition named `name`.

    `location` is a `(filename, linenum)` pair; by default, the location of
    the caller.

    This returns `None` if a handler returns `HANDLED`. If a handler returns
    `ABORT`, this does not return; control is transferred to the handler's
    establishment point. If no handler handles the condition, or a handler
    returns an invalid verdict, this terminates the process.

    Exceptions raised by the handler callbacks propagate out of `signal` as usual.
    """
    if location is None:
        location = callsite(stacklevel=1)
    condition = Condition(name, message, location)

    # From here on, `condition` is owned by this call. The finalizer releases
    # it on every way out, including the unwind of an ABORT.
    current().signaled.appendleft(condition)
    owner = push_finalizer(_release, condition)
    try:
        for frame in find_handlers(name):
            verdict = frame.callback(condition, frame.payload)
            if verdict is HandlerResult.HANDLED:
                pop(owner)
                return
            elif verdict is HandlerResult.PASS:
                continue
            elif verdict is HandlerResult.ABORT:
                frame.condition = condition
                unwind(frame)
                raise Unwind(frame)
            else:
                fatal(f"Invalid handler verdict: {repr(verdict)} (from handler {repr(frame.callback)} for {repr(name)})")
        fatal(f"Fatal condition: {render(condition)}")
    finally:
        if owner.active:
            pop(owner)

def warn(message, location=None):
    """Signal a condition named `"warning"`.

    Same rules as for any other name; in particular, an unhandled warning is fatal.
    """
    if location is None:
        location = callsite(stacklevel=1)
    signal("warning", message, location)

def active_conditions():
    """Return the conditions currently being signaled in this thread, innermost first.

    A condition is listed from its creation in `signal` until that signal has
    been resolved (handled, aborted, or fatal). Nested signals happen when a
    handler or finalizer signals a condition of its own.
    """
    return list(current().signaled)

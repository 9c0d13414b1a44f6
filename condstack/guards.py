# -*- coding: utf-8 -*-
"""Scoped forms for establishing handlers and finalizers.

Usage::

    def bail(condition, payload):
        return HandlerResult.ABORT

    with establish_handler("disk-full", bail) as h:
        with establish_finalizer(close_file, f):
            write_report(f)  # may signal("disk-full", ...)
    if h.aborted:  # we got here via an ABORT
        print("gave up:", render(h.condition))

The `with` statement of `establish_handler` is the resumption point of the
handler. When the handler returns `ABORT`, the stack is unwound down to it,
and execution continues right after the `with` block, with `h.aborted` set.
This plays the role of the `if (setjmp(...))` branch of a C implementation:
the code after the block can tell a normal exit from an abort.

`establish_finalizer` is the `unwind-protect` of the system: its callback
runs exactly once, whichever way the block is left.

If you'd like to use a decorator and a `def` instead of a `with`, see
`with_handler`.
"""

__all__ = ["ScopedHandlerGuard", "ScopedFinalizerGuard",
           "establish_handler", "establish_finalizer",
           "with_handler"]

from .dispatch import Unwind
from .scopestack import pop, push_finalizer, push_handler

class ScopedHandlerGuard:
    """Context manager that keeps a handler frame on the stack while its block runs.

    Attributes, valid after the block exits:
      - `aborted`: whether the block was left by an `ABORT` to this handler.
      - `condition`: the condition that caused the abort, or `None`.

    A guard can be entered again after it has exited (e.g. to re-establish a
    handler after an abort), but not while it is already active.
    """
    def __init__(self, name, callback, payload=None):
        self.name = name
        self.callback = callback
        self.payload = payload
        self.frame = None
        self.aborted = False

    def __enter__(self):
        if self.frame is not None and self.frame.active:
            raise RuntimeError(f"Handler guard for {repr(self.name)} is already active")
        self.frame = push_handler(self.name, self.callback, self.payload)
        self.aborted = False
        return self

    def __exit__(self, exctype, excvalue, traceback):
        frame = self.frame
        if frame.active:  # normal exit, or an exception not meant for us
            pop(frame)
        if isinstance(excvalue, Unwind) and excvalue.target is frame:
            self.aborted = True
            return True  # transfer complete
        return False

    @property
    def condition(self):
        if self.frame is None:
            return None
        return self.frame.condition

def establish_handler(name, callback, payload=None):
    """Establish `callback` as a handler for conditions named `name`.

    `callback(condition, payload)` must return a `HandlerResult`.

    Return a `ScopedHandlerGuard`, to be used in a `with` statement.
    """
    return ScopedHandlerGuard(name, callback, payload)

class ScopedFinalizerGuard:
    """Context manager that runs `callback(payload)` exactly once.

    The callback runs at the first of:
      - an explicit `release()`,
      - exit from the `with` block, by any path,
      - an unwind passing the finalizer's frame.
    """
    def __init__(self, callback, payload=None):
        self.callback = callback
        self.payload = payload
        self.frame = None

    def __enter__(self):
        if self.frame is not None and self.frame.active:
            raise RuntimeError("Finalizer guard is already active")
        self.frame = push_finalizer(self.callback, self.payload)
        return self

    def release(self):
        """Run the finalizer now, unless it has already run."""
        if self.frame is not None and self.frame.active:
            pop(self.frame)

    def __exit__(self, exctype, excvalue, traceback):
        self.release()

def establish_finalizer(callback, payload=None):
    """Guarantee that `callback(payload)` runs when the `with` block ends.

    Return a `ScopedFinalizerGuard`, to be used in a `with` statement.
    """
    return ScopedFinalizerGuard(callback, payload)

def with_handler(name, callback, payload=None, on_abort=None):
    """Alternate syntax. Establish a handler around a `def` instead of a `with`.

    Parametric decorator. Returns a `call_with_handler` function that calls its
    argument while the handler is established.

    The def'd name is replaced by the result: the return value of the body
    if it completes, or `on_abort(condition)` if the handler aborted it
    (`None` if no `on_abort` was given).

    Usage::

        @with_handler("parse-error", lambda c, p: HandlerResult.ABORT,
                      on_abort=lambda c: [])
        def records():  # must take no parameters, essentially just a variable
            return parse(text)  # may signal("parse-error", ...)
        # now `records` is either the parse result or `[]`

    The returned function can also be kept and applied to several bodies::

        tolerant = with_handler("parse-error", skip_record)
        a = tolerant(lambda: parse(text1))
        b = tolerant(lambda: parse(text2))
    """
    def call_with_handler(f):
        """Call `f` with the handler established. Return its result, or the abort result."""
        guard = establish_handler(name, callback, payload)
        result = None
        with guard:
            result = f()
        if guard.aborted:
            return on_abort(guard.condition) if on_abort is not None else None
        return result
    return call_with_handler

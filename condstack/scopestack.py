# -*- coding: utf-8 -*-
"""The per-thread stack of handler and finalizer frames.

Handlers and finalizers share one stack, interleaved in registration order.
The head of the stack is the most recently pushed frame.

This is the low-level layer. Application code normally uses the scoped forms
`establish_handler` and `establish_finalizer` (see `condstack.guards`), which
pop their frames automatically.

The contract of `pop` is asymmetric on purpose:

  - Popping a *handler* frame just removes it.
  - Popping a *finalizer* frame runs its callback, exactly once. Removing a
    finalizer **is** running it.

A frame that is not on the stack cannot be popped. Trying to do so only emits
a `RuntimeWarning`; the stack is left as it was.
"""

__all__ = ["HandlerFrame", "FinalizerFrame",
           "push_handler", "push_finalizer", "pop", "unwind",
           "find_handlers", "available_handlers"]

from operator import itemgetter
import warnings

from .registry import current

class Frame:
    """Base class of scope stack frames.

    `active` is `True` exactly while the frame is on the stack of the thread
    that pushed it.
    """
    __slots__ = ("callback", "payload", "active")
    def __init__(self, callback, payload):
        if not callable(callback):
            raise TypeError(f"callback must be callable, got {type(callback)} with value {repr(callback)}")
        self.callback = callback
        self.payload = payload
        self.active = False

class HandlerFrame(Frame):
    """A handler for conditions named `name`.

    `callback(condition, payload)` must return a `HandlerResult`.

    When the handler decides to `ABORT`, the condition is stored in the
    `condition` attribute before the stack is unwound to this frame.
    """
    __slots__ = ("name", "condition")
    def __init__(self, name, callback, payload=None):
        if not isinstance(name, str):
            raise TypeError(f"Handler name must be str, got {type(name)} with value {repr(name)}")
        super().__init__(callback, payload)
        self.name = name
        self.condition = None
    def __repr__(self):
        return f"<HandlerFrame {repr(self.name)} -> {repr(self.callback)}{'' if self.active else ' (inactive)'}>"

class FinalizerFrame(Frame):
    """A cleanup action; `callback(payload)` runs exactly once, when the frame is removed."""
    __slots__ = ()
    def __repr__(self):
        return f"<FinalizerFrame {repr(self.callback)}{'' if self.active else ' (inactive)'}>"

def _push(frame):
    current().scope.appendleft(frame)
    frame.active = True
    return frame

def push_handler(name, callback, payload=None):
    """Push a handler frame for conditions named `name`. Return the frame."""
    return _push(HandlerFrame(name, callback, payload))

def push_finalizer(callback, payload=None):
    """Push a finalizer frame. Return the frame.

    The callback runs when the frame is popped, or when an unwind passes it.
    """
    return _push(FinalizerFrame(callback, payload))

def _contains(stack, frame):  # identity, not equality
    return any(f is frame for f in stack)

def pop(frame):
    """Remove `frame` from the stack of the calling thread.

    The frame does not need to be at the head. If it is a finalizer frame, its
    callback is run once it has been removed.
    """
    stack = current().scope
    if not _contains(stack, frame):
        warnings.warn(f"Cannot pop {repr(frame)}: not on the scope stack of this thread", RuntimeWarning, stacklevel=2)
        return
    stack.remove(frame)
    frame.active = False
    if isinstance(frame, FinalizerFrame):
        frame.callback(frame.payload)

def unwind(target):
    """Discard frames from the head of the stack down to and including `target`.

    The finalizers passed on the way run, innermost first, each exactly once.
    Each frame is removed before its callback runs, so a finalizer that raises
    is not run again by whoever cleans up after it.

    `target` itself is consumed too; it is up to the caller to transfer
    control to it.
    """
    stack = current().scope
    if not (isinstance(target, HandlerFrame) and _contains(stack, target)):
        raise ValueError(f"Cannot unwind to {repr(target)}: not a handler on the scope stack of this thread")
    while True:
        frame = stack.popleft()
        frame.active = False
        if frame is target:
            return
        if isinstance(frame, FinalizerFrame):
            frame.callback(frame.payload)

def find_handlers(name):
    """Yield the active handler frames for `name`, most recently pushed first.

    The handlers may push and pop frames while we iterate; we walk a snapshot,
    and skip frames that have been removed in the meantime.
    """
    for frame in list(current().scope):
        if frame.active and isinstance(frame, HandlerFrame) and frame.name == name:
            yield frame

def available_handlers():
    """Return a sorted list of handlers currently in scope.

    Name shadowing is respected; for each condition name, only the most
    recently pushed handler is listed.

    The return value format is `[(name, callable), ...]`.
    """
    out = []
    seen = set()
    for frame in current().scope:
        if isinstance(frame, HandlerFrame) and frame.name not in seen:
            seen.add(frame.name)
            out.append((frame.name, frame.callback))
    return list(sorted(out, key=itemgetter(0)))

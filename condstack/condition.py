# -*- coding: utf-8 -*-
"""The condition value, and where it was signaled from."""

__all__ = ["Condition", "Location", "callsite"]

import sys
from collections import namedtuple

Location = namedtuple("Location", ["filename", "linenum"])

def callsite(stacklevel=1):
    """Return the `Location` of a call site on the current call stack.

    `stacklevel` counts outward from the caller of `callsite`:
      - `0` means the line that called `callsite`,
      - `1` means the line that called the function that called `callsite`,
      - and so on.

    This is how `signal` fills in a location when none is given, much like a C
    macro would paste in `__FILE__` and `__LINE__`.

    **CAUTION**: Needs `sys._getframe`, which exists in CPython and PyPy3.
    """
    if not isinstance(stacklevel, int):
        raise TypeError(f"stacklevel must be int, got {type(stacklevel)} with value {repr(stacklevel)}")
    if stacklevel < 0:
        raise ValueError(f"stacklevel must be >= 0, got {repr(stacklevel)}")
    frame = sys._getframe(stacklevel + 1)  # +1 to skip callsite() itself
    return Location(frame.f_code.co_filename, frame.f_lineno)

class Condition:
    """An immutable value describing one signaled event.

    A condition is identified by its `name` only; there is no type hierarchy.
    The `message` is free-form text for humans, and `location` is a `Location`
    `(filename, linenum)`.

    Conditions compare by identity. Two signals with the same name and message
    are still two different events.
    """
    __slots__ = ("name", "message", "location")

    def __init__(self, name, message, location):
        if not isinstance(name, str):
            raise TypeError(f"Condition name must be str, got {type(name)} with value {repr(name)}")
        if not isinstance(message, str):
            raise TypeError(f"Condition message must be str, got {type(message)} with value {repr(message)}")
        try:
            filename, linenum = location
        except (TypeError, ValueError) as err:
            raise TypeError(f"location must be a (filename, linenum) pair, got {repr(location)}") from err
        if not (isinstance(filename, str) and isinstance(linenum, int)):
            raise TypeError(f"location must be a (str, int) pair, got {repr(location)}")
        object.__setattr__(self, "name", name)
        object.__setattr__(self, "message", message)
        object.__setattr__(self, "location", Location(filename, linenum))

    def __setattr__(self, name, value):
        raise AttributeError(f"Condition is immutable; cannot set {repr(name)}")
    def __delattr__(self, name):
        raise AttributeError(f"Condition is immutable; cannot delete {repr(name)}")

    @property
    def filename(self):
        return self.location.filename
    @property
    def linenum(self):
        return self.location.linenum

    def __repr__(self):
        return f"Condition({repr(self.name)}, {repr(self.message)}, {repr(tuple(self.location))})"

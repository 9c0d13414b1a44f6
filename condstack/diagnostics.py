# -*- coding: utf-8 -*-
"""Rendering conditions as text, and the fatal exit path."""

__all__ = ["render", "fprint_condition", "print_condition", "fatal"]

import os
import sys

from .config import config

def render(condition):
    """Return `condition` as one line of text: `"<file>:<line>: <name>:<message>"`."""
    return f"{condition.filename}:{condition.linenum}: {condition.name}:{condition.message}"

def fprint_condition(stream, condition):
    """Write `render(condition)` to `stream`. No newline is added."""
    stream.write(render(condition))

def print_condition(condition):
    """Write `render(condition)` to standard output. No newline is added."""
    fprint_condition(sys.stdout, condition)

def _diagnostic_stream():
    stream = config.diagnostic_stream
    return sys.stderr if stream is None else stream

def _terminate(status):
    terminate = config.terminate
    if terminate is not None:
        terminate(status)
    os._exit(status)

def fatal(message):
    """Write `message` to the diagnostic stream, and terminate the process.

    By default, termination is by `os._exit` with `config.fatal_status`, like
    `exit(1)` in C: the whole process ends at once, whichever thread we are in,
    and nothing on the way out (finalizers, `finally` blocks, handlers) gets
    a chance to run, let alone resume. See `config.terminate`.

    This function never returns normally.
    """
    stream = _diagnostic_stream()
    stream.write(f"{message}\n")
    stream.flush()
    if sys.stdout is not None:
        sys.stdout.flush()
    _terminate(config.fatal_status)

# -*- coding: utf-8 -*-
"""Dynamically scoped settings of the condition system.

Works like dynamic variables (Racket's `parameterize`, Common Lisp's
special variables), but the set of names is fixed::

    import io
    from condstack.config import config

    log = io.StringIO()
    with config.let(diagnostic_stream=log, fatal_status=3):
        ...  # a fatal condition in here writes to `log` and exits with status 3

Available settings:

  - `diagnostic_stream`: where fatal diagnostics are written. The default
    `None` means `sys.stderr`, looked up at the time of writing (so that
    redirections of `sys.stderr` are honored).

  - `fatal_status`: the process exit status on fatal termination. Default `1`.

  - `terminate`: called as `terminate(status)` to end the process after a
    fatal diagnostic. The default `None` means `os._exit`, which ends the
    whole process at once, from any thread, without running finalizers,
    `finally` blocks or `atexit` hooks. A replacement must not return; if
    it does, `os._exit` is called anyway. Tests bind a function that raises.

Each thread has its own stack of `let` bindings. When a thread first reads a
setting, it starts from a copy of the main thread's bindings at that moment.

Assigning `config.name = value` updates the innermost binding of `name` in
the calling thread. If no `let` binds it, the value is bound for the rest of
the calling thread only. Process-wide defaults change only via `set_defaults`.
"""

__all__ = ["config", "set_defaults"]

import threading

_defaults = {"diagnostic_stream": None,
             "fatal_status": 1,
             "terminate": None}

_L = threading.local()

_mainthread_stack = []
_mainthread_lock = threading.RLock()
def _getstack():
    if threading.current_thread() is threading.main_thread():
        return _mainthread_stack
    if not hasattr(_L, "_stack"):
        with _mainthread_lock:
            _L._stack = [scope.copy() for scope in _mainthread_stack]
    return _L._stack

def _check_names(bindings):
    unknown = [name for name in bindings if name not in _defaults]
    if unknown:
        raise AttributeError(f"Unknown setting(s) {unknown}; available settings: {list(sorted(_defaults))}")

class _BaseScope(dict):
    """Bindings made by assignment outside any `let`; bottom of a thread's stack."""

class _LetBlock:
    def __init__(self, bindings):
        self.bindings = bindings
    def __enter__(self):
        _getstack().append(self.bindings)
        return self
    def __exit__(self, exctype, excvalue, traceback):
        _getstack().pop()

class _Config:
    """Settings of the condition system. See the module docstring."""
    def _resolve(self, name):
        for scope in reversed(_getstack()):
            if name in scope:
                return scope
        if name in _defaults:
            return _defaults
        raise AttributeError(f"Unknown setting {repr(name)}; available settings: {list(sorted(_defaults))}")

    def __getattr__(self, name):
        return self._resolve(name)[name]

    def __setattr__(self, name, value):
        """Update the innermost binding of `name` in the calling thread.

        If `name` is not bound by any `let` in this thread, bind it in the
        thread's base scope. The process-wide defaults are not touched; for
        those, see `set_defaults`.
        """
        scope = self._resolve(name)
        stack = _getstack()
        def doit():
            if scope is not _defaults:
                scope[name] = value
            elif stack and isinstance(stack[0], _BaseScope):
                stack[0][name] = value
            else:
                stack.insert(0, _BaseScope({name: value}))
        # New threads copy the main thread's stack; make the update atomic.
        if threading.current_thread() is threading.main_thread():
            with _mainthread_lock:
                doit()
        else:
            doit()

    def let(self, **bindings):
        """Bind settings for the dynamic extent of a `with` block.

        Usage is ``with config.let(name=value, ...):``. Inner bindings shadow
        outer ones.
        """
        _check_names(bindings)
        return _LetBlock(dict(bindings))

    def asdict(self):
        """Return the settings currently in effect, as a new `dict`."""
        return {name: getattr(self, name) for name in _defaults}

    def __repr__(self):  # pragma: no cover
        bindings = ", ".join(f"{k}={repr(v)}" for k, v in self.asdict().items())
        return f"<config {{{bindings}}}>"
config = _Config()

def set_defaults(**bindings):
    """Change the process-wide default values of settings.

    The defaults are used outside the dynamic extent of any `config.let`,
    in every thread.
    """
    _check_names(bindings)
    with _mainthread_lock:
        _defaults.update(bindings)

# -*- coding: utf-8 -*-

import pytest

from ..dispatch import HandlerResult, signal
from ..guards import (ScopedHandlerGuard, ScopedFinalizerGuard,
                      establish_handler, establish_finalizer, with_handler)
from ..registry import current
from ..scopestack import available_handlers

def abort(condition, payload):
    return HandlerResult.ABORT

def handled(condition, payload):
    return HandlerResult.HANDLED

# --------------------------------------------------------------------------------
# establish_finalizer

def test_finalizer_runs_at_block_exit():
    log = []
    with establish_finalizer(log.append, "closed") as f:
        assert isinstance(f, ScopedFinalizerGuard)
        assert log == []
    assert log == ["closed"]
    assert list(current().scope) == []

def test_finalizer_release_is_once():
    log = []
    with establish_finalizer(log.append, "closed") as f:
        f.release()
        assert log == ["closed"]
        f.release()
    assert log == ["closed"]

def test_finalizer_runs_on_exception():
    log = []
    with pytest.raises(ValueError):
        with establish_finalizer(log.append, "closed"):
            raise ValueError("oops")
    assert log == ["closed"]

def test_finalizer_runs_once_on_unwind():
    log = []
    with establish_handler("x", abort):
        with establish_finalizer(log.append, "closed"):
            signal("x", "m")
    assert log == ["closed"]

def test_finalizer_guard_is_not_reentrant():
    f = establish_finalizer(lambda payload: None)
    with f:
        with pytest.raises(RuntimeError):
            with f:
                pass  # pragma: no cover
    with f:  # fine again once it has exited
        pass

# --------------------------------------------------------------------------------
# establish_handler

def test_handler_normal_exit():
    with establish_handler("x", handled, "payload") as h:
        assert isinstance(h, ScopedHandlerGuard)
        assert available_handlers() == [("x", handled)]
        assert h.frame.payload == "payload"
    assert not h.aborted
    assert h.condition is None
    assert available_handlers() == []

def test_handler_removed_on_exception():
    with pytest.raises(ValueError):
        with establish_handler("x", handled) as h:
            raise ValueError("oops")
    assert not h.aborted
    assert list(current().scope) == []

def test_handler_guard_is_not_reentrant():
    h = establish_handler("x", handled)
    with h:
        with pytest.raises(RuntimeError):
            with h:
                pass  # pragma: no cover
    assert list(current().scope) == []

def test_intermediate_guards_let_the_transfer_pass():
    with establish_handler("x", abort) as outer:
        with establish_handler("x", lambda c, p: HandlerResult.PASS) as middle:
            with establish_handler("y", handled) as inner:
                signal("x", "m")
    assert outer.aborted
    assert not middle.aborted
    assert not inner.aborted
    assert middle.condition is None
    assert outer.condition.message == "m"
    assert list(current().scope) == []

def test_condition_before_entry():
    h = establish_handler("x", handled)
    assert h.condition is None
    assert not h.aborted

# --------------------------------------------------------------------------------
# with_handler

def test_with_handler_normal_return():
    @with_handler("x", handled)
    def result():
        signal("x", "handled in place")
        return 42
    assert result == 42

def test_with_handler_abort():
    @with_handler("parse-error", abort, on_abort=lambda c: c.message)
    def result():
        signal("parse-error", "bad record")
        return 42  # pragma: no cover
    assert result == "bad record"

    @with_handler("parse-error", abort)
    def result():
        signal("parse-error", "bad record")
        return 42  # pragma: no cover
    assert result is None

def test_with_handler_reusable():
    tolerant = with_handler("x", abort, on_abort=lambda c: "fallback")
    assert tolerant(lambda: "fine") == "fine"
    assert tolerant(lambda: signal("x", "m")) == "fallback"
    assert tolerant(lambda: "fine again") == "fine again"
    assert list(current().scope) == []

# -*- coding: utf-8 -*
"""A condition system with handlers, finalizers and restarts.

Conditions are signaled by name with `signal`, and resolved by the handlers
that the calling code has established on the (per-thread) scope stack with
`establish_handler`. A handler may handle the condition in place, pass it on
to an older handler, or abort to its own establishment point, running the
finalizers established in between (see `establish_finalizer`). Restarts are
named recovery actions that handlers can invoke by name.

See ``dir(condstack)`` and the submodule docstrings for more.
"""

__version__ = '0.1.0'

from .condition import *  # noqa: F401, F403
from .config import *  # noqa: F401, F403
from .diagnostics import *  # noqa: F401, F403
from .dispatch import *  # noqa: F401, F403
from .guards import *  # noqa: F401, F403
from .restarts import *  # noqa: F401, F403
from .scopestack import *  # noqa: F401, F403

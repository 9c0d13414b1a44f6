# -*- coding: utf-8 -*-
"""Helpers for testing the fatal paths without ending the test session."""

import os
import subprocess
import sys
import textwrap

class Terminated(BaseException):
    """Raised instead of ending the process, by the `terminate` setting `raise_terminated`."""
    def __init__(self, status):
        self.status = status
        self.args = (f"terminated with status {status}",)

def raise_terminated(status):
    """A `config.terminate` for tests: raise `Terminated` instead of exiting."""
    raise Terminated(status)

_project_root = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

def run_script(source):
    """Run `source` in a fresh Python process that can import `condstack`.

    For checking what really happens when the process is terminated.
    Return the `subprocess.CompletedProcess`, with text output captured.
    """
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(p for p in (_project_root, env.get("PYTHONPATH")) if p)
    return subprocess.run([sys.executable, "-c", textwrap.dedent(source)],
                          env=env, capture_output=True, text=True, timeout=60)

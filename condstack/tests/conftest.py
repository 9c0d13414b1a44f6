# -*- coding: utf-8 -*-
"""Shared fixtures for the condstack tests."""

import pytest

from .. import registry

@pytest.fixture(autouse=True)
def fresh_registry():
    """Run each test on an empty registry, so that one broken test cannot leak frames into the next."""
    registry._L.registry = registry.Registry()
    yield registry._L.registry
    del registry._L.registry

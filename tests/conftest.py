"""Shared test fixtures."""

import pytest

from policy_store import PermissionRegistry, Store, default_registry


@pytest.fixture
def registry():
    return PermissionRegistry()


@pytest.fixture
def store(registry):
    return Store(registry=registry)


@pytest.fixture
def clean_default_registry():
    """Isolate tests that declare class-level permissions on the shared registry."""
    default_registry.clear()
    yield default_registry
    default_registry.clear()

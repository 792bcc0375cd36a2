"""Shared fixtures for gofer tests."""

import sys

import pytest

import gofer.core.registry as registry_module
from gofer.core.registry import TaskRegistry


@pytest.fixture
def registry() -> TaskRegistry:
    """A fresh, isolated registry."""
    return TaskRegistry()


@pytest.fixture
def default_registry(monkeypatch) -> TaskRegistry:
    """Replace the process-wide registry with an empty one for the test."""
    fresh = TaskRegistry()
    monkeypatch.setattr(registry_module, "_default_registry", fresh)
    return fresh


@pytest.fixture
def clean_imports(monkeypatch):
    """Forget task modules imported during the test and restore sys.path."""
    monkeypatch.setattr(sys, "path", list(sys.path))
    before = set(sys.modules)
    yield
    for name in set(sys.modules) - before:
        del sys.modules[name]

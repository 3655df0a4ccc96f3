"""Pytest fixtures for hookwire tests."""

import pytest

from hookwire import HookRegistry, HookSettings, reset_registry


@pytest.fixture(autouse=True)
def clean_shared_registry():
    """Drop the shared registry before and after each test."""
    reset_registry()
    yield
    reset_registry()


@pytest.fixture
def registry() -> HookRegistry:
    """A fresh registry with default settings."""
    return HookRegistry(HookSettings())

"""
Shared fixtures for the flow test suite.

Every test that registers classifiers or ignores exceptions gets its own
ClassifierRegistry, so the process-wide default registry stays untouched.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import pytest

from flow import ClassifierRegistry


@dataclass(frozen=True)
class Left:
    """Either-style failure variant used to exercise custom classification."""

    error: Any


@dataclass(frozen=True)
class Right:
    value: Any


class LeftClassifier:
    def is_failure(self, value: Any) -> bool:
        return True

    def to_failure(self, value: Any) -> Any:
        return value

    def caught(self, failure: Any) -> Any:
        return failure


@pytest.fixture()
def registry() -> ClassifierRegistry:
    """A fresh registry with only the built-in classifiers."""
    return ClassifierRegistry()


@pytest.fixture()
def either_registry(registry: ClassifierRegistry) -> ClassifierRegistry:
    """A fresh registry that also treats Left as a failure value."""
    registry.register(Left, LeftClassifier())
    return registry


class Counter:
    """Callable that records how many times it ran and returns a fixed value."""

    def __init__(self, value: Any = None) -> None:
        self.value = value
        self.calls = 0

    def __call__(self) -> Any:
        self.calls += 1
        return self.value

"""
Test assertions for failure values.

Expressive assert methods that produce clear messages when a pipeline ends
up on the wrong track.

Usage in tests:
    from flow import FailureAssertions

    def test_parse_user():
        value = FailureAssertions.assert_normal(parse_user(raw))
        assert value.name == "Alice"

    def test_invalid_email():
        err = FailureAssertions.assert_failure(parse_user(bad), ValueError)
        FailureAssertions.assert_failure_message_contains(err, "email")
"""

from __future__ import annotations

from typing import Any, TypeVar

from flow.classify import ClassifierRegistry, resolve
from flow.failure import Fail, fail_message

T = TypeVar("T")


class FailureAssertions:
    """Expressive test assertions for failure and normal values."""

    @staticmethod
    def assert_normal(
        value: T, message: str = "", registry: ClassifierRegistry | None = None
    ) -> T:
        """
        Assert value is a normal value and return it.

            user = FailureAssertions.assert_normal(result)
        """
        context = f" — {message}" if message else ""
        assert not resolve(registry).is_failure(value), (
            f"Expected normal value but got failure {value!r}{context}"
        )
        return value

    @staticmethod
    def assert_failure(
        value: Any,
        expected_type: type | None = None,
        message: str = "",
        registry: ClassifierRegistry | None = None,
    ) -> Any:
        """
        Assert value is a failure, optionally of a given type, and return it.

        expected_type matches the failure itself or, for a `Fail` captured
        from a raw exception, that exception.

            err = FailureAssertions.assert_failure(result, ZeroDivisionError)
        """
        context = f" — {message}" if message else ""
        assert resolve(registry).is_failure(value), (
            f"Expected failure but got normal value {value!r}{context}"
        )
        if expected_type is not None:
            captured = value.caught if isinstance(value, Fail) else None
            assert isinstance(value, expected_type) or isinstance(captured, expected_type), (
                f"Expected failure of type {expected_type.__name__} "
                f"but got {value!r}{context}"
            )
        return value

    @staticmethod
    def assert_failure_message_contains(value: Any, substring: str) -> None:
        """Assert that the failure message contains the given substring (case-insensitive)."""
        FailureAssertions.assert_failure(value)
        text = fail_message(value)
        assert substring.lower() in text.lower(), (
            f"Expected failure message to contain {substring!r} "
            f"but message was: {text!r}"
        )

    @staticmethod
    def assert_failure_message_equals(value: Any, expected_message: str) -> None:
        """Assert that the failure message exactly equals the expected message."""
        FailureAssertions.assert_failure(value)
        text = fail_message(value)
        assert text == expected_message, (
            f"Expected failure message {expected_message!r} but got {text!r}"
        )

    @staticmethod
    def assert_normal_value(value: Any, expected_value: Any) -> None:
        """Assert value is a normal value equal to expected_value."""
        FailureAssertions.assert_normal(value)
        assert value == expected_value, (
            f"Expected value {expected_value!r} but got {value!r}"
        )

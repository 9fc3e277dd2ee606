"""Tests for the classification layer and its registry."""

from __future__ import annotations

from typing import Any

import pytest

import flow
from flow import (
    ClassifierRegistry,
    ExceptionClassifier,
    Fail,
    FailureClassifier,
    NormalValueClassifier,
    fail_with,
)
from tests.conftest import Left, LeftClassifier, Right


class TestDefaultClassification:
    @pytest.mark.parametrize(
        "value",
        [ValueError("x"), RuntimeError(), KeyboardInterrupt(), fail_with("bad")],
    )
    def test_exceptions_are_failures(self, registry, value):
        assert registry.is_failure(value)

    @pytest.mark.parametrize(
        "value",
        [None, 0, "", "text", [], {}, object(), ValueError, Right(1), Left("e")],
    )
    def test_everything_else_is_normal(self, registry, value):
        assert not registry.is_failure(value)

    def test_exception_classes_are_not_failures(self, registry):
        # the class itself is a normal value, only instances are failures
        assert not registry.is_failure(ZeroDivisionError)

    def test_module_level_helpers_use_default_registry(self):
        assert flow.is_failure(ValueError("x"))
        assert not flow.is_failure(42)
        assert flow.get_registry() is flow.default_registry


class TestToFailure:
    def test_fail_passes_through(self, registry):
        err = fail_with("bad")
        assert registry.to_failure(err) is err

    def test_raw_exception_is_wrapped(self, registry):
        raw = RuntimeError("boom")
        failure = registry.to_failure(raw)
        assert isinstance(failure, Fail)
        assert failure.message == "boom"
        assert failure.data["caught"] is raw
        assert failure.caught is raw
        assert failure.__cause__ is raw

    def test_empty_message_uses_class_name(self, registry):
        assert registry.to_failure(KeyError()).message == "KeyError"

    def test_normal_value_is_coerced(self, registry):
        failure = registry.to_failure(42)
        assert isinstance(failure, Fail)
        assert failure.message == "42"
        assert failure.data["value"] == 42


class TestCaught:
    def test_default_handler_is_identity(self, registry):
        err = fail_with("bad")
        assert registry.caught(err) is err
        raw = ValueError("x")
        assert registry.caught(raw) is raw

    def test_ignored_exception_is_reraised(self, registry):
        registry.ignore(KeyError)
        with pytest.raises(KeyError):
            registry.caught(registry.to_failure(KeyError("k")))

    def test_returned_exception_of_ignored_type_passes_through(self, registry):
        registry.ignore(LookupError)
        returned = KeyError("k")
        assert registry.caught(returned) is returned
        assert not registry.ignored(returned)

    def test_ignored_exception_inside_fail_reraises_original(self, registry):
        registry.ignore(ZeroDivisionError)
        raw = ZeroDivisionError("division by zero")
        with pytest.raises(ZeroDivisionError) as info:
            registry.caught(registry.to_failure(raw))
        assert info.value is raw

    def test_ignore_respects_subclasses(self, registry):
        registry.ignore(LookupError)
        assert registry.ignored(registry.to_failure(KeyError("k")))
        assert not registry.ignored(registry.to_failure(ValueError("v")))

    def test_ignore_deduplicates(self, registry):
        registry.ignore(KeyError, KeyError)
        registry.ignore(KeyError)
        assert registry.ignored_exceptions == (KeyError,)

    def test_ignore_rejects_non_exception_types(self, registry):
        with pytest.raises(TypeError, match="exception types"):
            registry.ignore(int)  # type: ignore[arg-type]


class TestRegistration:
    def test_custom_variant_becomes_failure(self, either_registry):
        assert either_registry.is_failure(Left("nope"))
        assert not either_registry.is_failure(Right(1))

    def test_registration_does_not_leak_into_other_registries(self, either_registry):
        assert not ClassifierRegistry().is_failure(Left("nope"))
        assert not flow.is_failure(Left("nope"))

    def test_decorator_form(self, registry):
        @registry.register(Left)
        class DecoratedLeft(LeftClassifier):
            pass

        assert isinstance(registry.classifier_for(Left(1)), DecoratedLeft)
        assert registry.is_failure(Left(1))

    def test_lookup_follows_mro(self, registry):
        class Base:
            pass

        class Child(Base):
            pass

        registry.register(Base, LeftClassifier())
        assert registry.is_failure(Child())

    def test_more_specific_registration_wins(self, registry):
        class Expected(Exception):
            pass

        registry.register(Expected, NormalValueClassifier())
        assert not registry.is_failure(Expected("treated as a value"))
        assert registry.is_failure(ValueError("still a failure"))

    def test_rejects_non_type_key(self, registry):
        with pytest.raises(TypeError, match="per type"):
            registry.register(Left("x"), LeftClassifier())  # type: ignore[arg-type]

    def test_rejects_incomplete_classifier(self, registry):
        class OnlyPredicate:
            def is_failure(self, value: Any) -> bool:
                return True

        with pytest.raises(TypeError, match="does not implement"):
            registry.register(Left, OnlyPredicate())  # type: ignore[arg-type]

    def test_builtin_classifiers_satisfy_protocol(self):
        assert isinstance(ExceptionClassifier(), FailureClassifier)
        assert isinstance(NormalValueClassifier(), FailureClassifier)
        assert isinstance(LeftClassifier(), FailureClassifier)

    def test_copy_is_independent(self, either_registry):
        either_registry.ignore(KeyError)
        clone = either_registry.copy()
        assert clone.is_failure(Left(1))
        assert clone.ignored_exceptions == (KeyError,)

        clone.register(Right, LeftClassifier())
        assert clone.is_failure(Right(1))
        assert not either_registry.is_failure(Right(1))

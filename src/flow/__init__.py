"""
flow — functional error handling without wrapper types.

An exception instance is a first-class value: caught exceptions are
returned rather than raised, and small combinators build linear pipelines
that short-circuit on the first failure.

    from flow import CAUGHT, call, fail_with, flet, then

    def parse_age(raw: str) -> int | Exception:
        age = call(int, raw)
        return then(lambda a: a if a >= 0 else fail_with("Age must be non-negative", {"age": a}), age)

    flet(
        ["age", lambda: parse_age(form["age"]),
         "name", lambda: form.get("name") or fail_with("Name is required")],
        lambda age, name: f"{name}, {age}",
    )
"""

from flow.classify import (
    ClassifierRegistry,
    ExceptionClassifier,
    FailureClassifier,
    NormalValueClassifier,
    caught,
    default_registry,
    get_registry,
    is_failure,
    register,
    to_failure,
)
from flow.combinators import (
    call,
    call_with,
    chain,
    else_,
    else_call,
    else_if,
    raise_failure,
    then,
    then_call,
    thru,
)
from flow.config import FlowSettings, configure, get_settings
from flow.failure import (
    Fail,
    fail_cause,
    fail_data,
    fail_message,
    fail_trace,
    fail_with,
    fail_with_raise,
)
from flow.flet import CAUGHT, Flet, FletDefinitionError, flet
from flow.assertions import FailureAssertions

__all__ = [
    "CAUGHT",
    "ClassifierRegistry",
    "ExceptionClassifier",
    "Fail",
    "FailureAssertions",
    "FailureClassifier",
    "Flet",
    "FletDefinitionError",
    "FlowSettings",
    "NormalValueClassifier",
    "call",
    "call_with",
    "caught",
    "chain",
    "configure",
    "default_registry",
    "else_",
    "else_call",
    "else_if",
    "fail_cause",
    "fail_data",
    "fail_message",
    "fail_trace",
    "fail_with",
    "fail_with_raise",
    "flet",
    "get_registry",
    "get_settings",
    "is_failure",
    "raise_failure",
    "register",
    "then",
    "then_call",
    "thru",
    "to_failure",
]

__version__ = "1.0.0"

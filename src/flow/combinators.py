"""
Pipeline combinators — short-circuit on failure values without wrappers.

A value travels through plain functions. Each combinator looks at the value
itself to decide which track it is on:

    ┌──────────┐    then     ┌──────────┐    then     ┌──────────┐
    │  parse   │──normal─────│ validate │──normal─────│  store   │──→ value
    └────┬─────┘             └────┬─────┘             └────┬─────┘
         │ failure                │ failure                │ failure
         └────────────────────────┴────────────────────────┴──→ failure

    result = chain(
        call(parse, raw),
        validate,
        partial(then_call, store),
    )

Function-first argument order lets functools.partial pre-bind the step.
Every function accepts registry= to classify against a registry other than
the default one.
"""

from __future__ import annotations

from typing import Any, Callable, TypeVar

from flow.classify import ClassifierRegistry, Handler, resolve
from flow.failure import Fail
from flow.log import get_logger

T = TypeVar("T")
U = TypeVar("U")
log = get_logger()


# ──────────────────────── Capture ────────────────────────


def call_with(
    handler: Handler,
    f: Callable[..., T],
    *args: Any,
    registry: ClassifierRegistry | None = None,
    **kwargs: Any,
) -> Any:
    """
    Invoke f, returning a raised exception as a value passed through handler.

    Values f returns, failure or not, are returned as they are.

        call_with(lambda err: None, int, "forty-two")  # → None
    """
    registry = resolve(registry)
    try:
        return f(*args, **kwargs)
    except Exception as e:
        failure = registry.to_failure(e)
        log.debug("call.captured", function=getattr(f, "__name__", repr(f)), error=str(e))
    return handler(failure)


def call(
    f: Callable[..., T],
    *args: Any,
    registry: ClassifierRegistry | None = None,
    **kwargs: Any,
) -> Any:
    """
    Invoke f with the default failure handler of the registry.

        call(int, "42")          # → 42
        call(int, "forty-two")   # → Fail("invalid literal …", {"caught": ValueError(…)})
    """
    registry = resolve(registry)
    return call_with(registry.caught, f, *args, registry=registry, **kwargs)


# ──────────────────────── Track selection ────────────────────────


def then(f: Callable[[T], U], value: T, *, registry: ClassifierRegistry | None = None) -> U | T:
    """
    Apply f to a normal value; a failure passes through unchanged.

        then(lambda x: x + 1, 1)                 # → 2
        then(lambda x: x + 1, fail_with("bad"))  # → the same Fail
    """
    if resolve(registry).is_failure(value):
        return value
    return f(value)


def then_call(f: Callable[[T], U], value: T, *, registry: ClassifierRegistry | None = None) -> Any:
    """`then`, with f run under `call` so anything it raises comes back as a value."""
    if resolve(registry).is_failure(value):
        return value
    return call(f, value, registry=registry)


def else_(f: Callable[[Any], U], value: T, *, registry: ClassifierRegistry | None = None) -> U | T:
    """
    Apply f to a failure; a normal value passes through unchanged.

        else_(lambda err: 0, fail_with("bad"))  # → 0
    """
    if resolve(registry).is_failure(value):
        return f(value)
    return value


def else_call(f: Callable[[Any], U], value: T, *, registry: ClassifierRegistry | None = None) -> Any:
    """`else_`, with f run under `call`."""
    if resolve(registry).is_failure(value):
        return call(f, value, registry=registry)
    return value


def else_if(
    exc_type: type[BaseException] | tuple[type[BaseException], ...],
    f: Callable[[Any], U],
    value: T,
    *,
    registry: ClassifierRegistry | None = None,
) -> U | T:
    """
    Apply f only to failures of the given exception type.

    A `Fail` captured from a raw exception matches on that exception too, so
    else_if(ZeroDivisionError, …) recovers call(lambda: 1 / 0).
    """
    if not resolve(registry).is_failure(value):
        return value
    if isinstance(value, exc_type):
        return f(value)
    if isinstance(value, Fail) and isinstance(value.caught, exc_type):
        return f(value)
    return value


def thru(f: Callable[[T], Any], value: T) -> T:
    """
    Apply f to any value for its side effects and return the value.

        thru(print, result)
    """
    f(value)
    return value


def chain(value: Any, *fns: Callable[[Any], Any], registry: ClassifierRegistry | None = None) -> Any:
    """
    Thread value through fns with `then` semantics.

    Stops at the first failure; later functions are not called.
    """
    registry = resolve(registry)
    for fn in fns:
        if registry.is_failure(value):
            return value
        value = fn(value)
    return value


def raise_failure(value: T, *, registry: ClassifierRegistry | None = None) -> T:
    """
    Raise value if it is a failure, return it otherwise.

    A `Fail` captured from a raw exception raises the original exception.
    Non-exception failure variants are raised through the registry's
    to_failure coercion.
    """
    registry = resolve(registry)
    if not registry.is_failure(value):
        return value
    match value:
        case Fail() if isinstance(value.caught, BaseException):
            raise value.caught
        case BaseException():
            raise value
        case _:
            failure = registry.to_failure(value)
            if not isinstance(failure, BaseException):
                failure = Fail(str(value), {"value": value})
            raise failure

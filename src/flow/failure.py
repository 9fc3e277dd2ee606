"""
Fail — a lightweight failure carrier for the exception-as-value track.

Any exception instance is a failure value. `Fail` is the one the library
builds itself: it carries a human-readable message, a structured data
payload and an optional cause, so a raw exception captured by `call` or
`flet` can be returned with its original retrievable under `data["caught"]`.

    >>> err = fail_with("User not found", {"user_id": 42})
    >>> err.message
    'User not found'
    >>> err.data["user_id"]
    42

Building a `Fail` costs nothing beyond the object itself: no traceback is
attached until (and unless) it is raised.
"""

from __future__ import annotations

import traceback
from datetime import UTC, datetime
from types import MappingProxyType
from typing import Any, Mapping, NoReturn, Optional


class Fail(Exception):
    """
    Failure value with message, data payload and optional cause.

    The payload is stored as a read-only mapping. Equality is identity, as
    for every other exception.
    """

    def __init__(
        self,
        message: str = "",
        data: Optional[Mapping[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.data: Mapping[str, Any] = MappingProxyType(dict(data or {}))
        self.cause = cause
        self.timestamp = datetime.now(UTC)
        if cause is not None:
            self.__cause__ = cause

    @property
    def caught(self) -> Optional[BaseException]:
        """The raw exception this failure was captured from, if any."""
        return self.data.get("caught")

    def full_stack_trace(self) -> str:
        """
        Message followed by the formatted cause chain.

        Falls back to the bare message when there is nothing to format.
        """
        source = self.cause if self.cause is not None else self.caught
        if not isinstance(source, BaseException):
            return self.message
        tb = "".join(traceback.format_exception(type(source), source, source.__traceback__))
        return f"{self.message}\n{tb}"

    def __reduce__(self) -> tuple:
        # the read-only payload view cannot be pickled, so rebuild from a plain dict
        return (type(self), (self.message, dict(self.data), self.cause), {"timestamp": self.timestamp})

    def __repr__(self) -> str:
        if self.data:
            return f"Fail({self.message!r}, {dict(self.data)!r})"
        return f"Fail({self.message!r})"


def fail_with(
    message: str = "",
    data: Optional[Mapping[str, Any]] = None,
    cause: Optional[BaseException] = None,
) -> Fail:
    """Create a failure value without raising it."""
    return Fail(message, data, cause)


def fail_with_raise(
    message: str = "",
    data: Optional[Mapping[str, Any]] = None,
    cause: Optional[BaseException] = None,
    trace: bool = False,
) -> NoReturn:
    """
    Create a failure value and raise it.

    With trace=False the exception being handled at the raise site (if any)
    is not chained onto the failure, keeping reports down to the failure
    itself and its explicit cause.
    """
    failure = Fail(message, data, cause)
    if trace:
        raise failure
    failure.__suppress_context__ = True
    raise failure


# ──────────────────────── Accessors ────────────────────────


def fail_data(value: Any) -> Mapping[str, Any]:
    """Data payload of a `Fail`; an empty mapping for anything else."""
    if isinstance(value, Fail):
        return value.data
    return MappingProxyType({})


def fail_cause(value: Any) -> Optional[BaseException]:
    """Explicit cause of an exception value, None otherwise."""
    if isinstance(value, Fail):
        return value.cause
    if isinstance(value, BaseException):
        return value.__cause__
    return None


def fail_message(value: Any) -> str:
    match value:
        case Fail():
            return value.message
        case BaseException():
            return str(value)
        case _:
            return ""


def fail_trace(value: Any) -> list[str]:
    """Formatted traceback lines of a raised exception value."""
    if not isinstance(value, BaseException) or value.__traceback__ is None:
        return []
    return traceback.format_tb(value.__traceback__)

"""
Classification — decides, for any runtime value, failure or normal.

There is no wrapper type: a value is a failure because of what it is.
By default every exception instance is a failure and everything else is a
normal value. The decision is looked up by runtime type in a registry, so
new failure shapes are added by registration, never by editing this module:

    @dataclass(frozen=True)
    class Left:
        error: Any

    class LeftClassifier:
        def is_failure(self, value): return True
        def to_failure(self, value): return value
        def caught(self, failure): return failure

    registry = ClassifierRegistry()
    registry.register(Left, LeftClassifier())
    registry.is_failure(Left("nope"))  # → True

Lookup follows the MRO (functools.singledispatch), so a classifier bound to
a base class covers its subclasses unless a more specific one is registered.

The registry is meant to be configured once at startup and only read
afterwards. Tests build their own ClassifierRegistry() instead of touching
the module-level default.
"""

from __future__ import annotations

import functools
from typing import Any, Callable, Protocol, TypeVar, runtime_checkable

from flow.failure import Fail
from flow.log import get_logger

C = TypeVar("C")
Handler = Callable[[Any], Any]
log = get_logger()


# ──────────────────────── Protocol (Interface) ────────────────────────


@runtime_checkable
class FailureClassifier(Protocol):
    """
    Behaviour of one failure-value variant.

    Any object with these three methods satisfies the protocol through
    structural typing; no inheritance is needed.
    """

    def is_failure(self, value: Any) -> bool:
        """True when value belongs on the failure track."""
        ...

    def to_failure(self, value: Any) -> Any:
        """Coerce value (typically a raw captured exception) into a failure value."""
        ...

    def caught(self, failure: Any) -> Any:
        """Default failure handler for this variant."""
        ...


# ──────────────────────── Built-in classifiers ────────────────────────


class ExceptionClassifier:
    """
    Exceptions are failures.

    A `Fail` is already a failure value and passes through to_failure
    unchanged. Any other exception is wrapped so its original stays
    retrievable from the payload under "caught".
    """

    def is_failure(self, value: Any) -> bool:
        return True

    def to_failure(self, value: Any) -> Any:
        if isinstance(value, Fail):
            return value
        message = str(value) or type(value).__name__
        return Fail(message, {"caught": value}, cause=value)

    def caught(self, failure: Any) -> Any:
        return failure


class NormalValueClassifier:
    """Fallback for every type nothing else claims: a normal value."""

    def is_failure(self, value: Any) -> bool:
        return False

    def to_failure(self, value: Any) -> Any:
        return Fail(str(value), {"value": value})

    def caught(self, failure: Any) -> Any:
        return failure


# ──────────────────────── Registry ────────────────────────


class ClassifierRegistry:
    """
    Type-keyed table of FailureClassifiers.

    A fresh registry knows two variants: BaseException (failure) and
    object (normal). Raised exceptions whose types are marked ignored are
    never turned into values by `caught`; they are raised again instead.
    """

    def __init__(self) -> None:
        self._normal = NormalValueClassifier()
        self._dispatch = functools.singledispatch(self._fallback)
        self._classifiers: dict[type, FailureClassifier] = {}
        self._ignored: tuple[type[BaseException], ...] = ()
        self._bind(BaseException, ExceptionClassifier())

    def _fallback(self, value: Any) -> FailureClassifier:
        return self._normal

    def _bind(self, cls: type, classifier: FailureClassifier) -> None:
        self._dispatch.register(cls, lambda _value, _c=classifier: _c)
        self._classifiers[cls] = classifier

    # ──────────────────────── Configuration ────────────────────────

    def register(
        self, cls: type, classifier: FailureClassifier | None = None
    ) -> Any:
        """
        Bind a classifier to a runtime type.

        Usable directly, register(Left, LeftClassifier()), or as a class
        decorator on the classifier, @registry.register(Left), in which case
        the class is instantiated without arguments.
        """
        if not isinstance(cls, type):
            raise TypeError(f"Classifiers are registered per type, got {cls!r}")
        if classifier is None:
            def decorator(classifier_cls: type[C]) -> type[C]:
                self.register(cls, classifier_cls())
                return classifier_cls
            return decorator
        if not isinstance(classifier, FailureClassifier):
            raise TypeError(
                f"{type(classifier).__name__} does not implement "
                "is_failure / to_failure / caught"
            )
        self._bind(cls, classifier)
        log.debug("registry.registered", type=cls.__qualname__, classifier=type(classifier).__name__)
        return classifier

    def ignore(self, *exc_types: type[BaseException]) -> None:
        """Mark exception types that the default handler must re-raise."""
        for exc_type in exc_types:
            if not (isinstance(exc_type, type) and issubclass(exc_type, BaseException)):
                raise TypeError(f"Only exception types can be ignored, got {exc_type!r}")
        self._ignored = tuple(dict.fromkeys(self._ignored + exc_types))

    @property
    def ignored_exceptions(self) -> tuple[type[BaseException], ...]:
        return self._ignored

    def copy(self) -> ClassifierRegistry:
        """Independent registry with the same registrations and ignored types."""
        clone = ClassifierRegistry()
        for cls, classifier in self._classifiers.items():
            clone._bind(cls, classifier)
        clone._ignored = self._ignored
        return clone

    # ──────────────────────── Lookup ────────────────────────

    def classifier_for(self, value: Any) -> FailureClassifier:
        return self._dispatch(value)

    def is_failure(self, value: Any) -> bool:
        """Total predicate: every Python value is either failure or normal."""
        return self.classifier_for(value).is_failure(value)

    def to_failure(self, value: Any) -> Any:
        return self.classifier_for(value).to_failure(value)

    def ignored(self, failure: Any) -> bool:
        """True when failure was captured from a raised exception of an ignored type."""
        if not self._ignored or not isinstance(failure, Fail):
            return False
        return isinstance(failure.caught, self._ignored)

    def caught(self, failure: Any) -> Any:
        """
        Default failure handler: pass the failure through unchanged.

        A failure captured from a raised exception of an ignored type is
        raised again rather than returned. Exceptions that were returned as
        values, never raised, pass through like any other failure.
        """
        if self.ignored(failure):
            raise failure.caught
        return self.classifier_for(failure).caught(failure)


default_registry = ClassifierRegistry()


def get_registry() -> ClassifierRegistry:
    """The process-wide registry used when no registry is passed explicitly."""
    return default_registry


def is_failure(value: Any) -> bool:
    return default_registry.is_failure(value)


def to_failure(value: Any) -> Any:
    return default_registry.to_failure(value)


def caught(failure: Any) -> Any:
    return default_registry.caught(failure)


def register(cls: type, classifier: FailureClassifier | None = None) -> Any:
    """Register a classifier on the default registry (see ClassifierRegistry.register)."""
    return default_registry.register(cls, classifier)


def resolve(registry: ClassifierRegistry | None) -> ClassifierRegistry:
    return registry if registry is not None else default_registry

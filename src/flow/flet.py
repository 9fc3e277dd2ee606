"""
flet — sequential bindings that short-circuit on the first failure value.

    total = flet(
        [
            "user", lambda: load_user(user_id),
            "orders", lambda user: load_orders(user.id),
        ],
        lambda user, orders: summarize(user, orders),
    )

Bindings are a flat sequence of name, initializer pairs evaluated left to
right. Each initializer runs under capture: if it raises, the exception is
turned into a failure value; if it returns a failure value, that value is
taken as is. Either way the remaining bindings and the body are skipped and
the failure handler's result becomes the result of the whole form. The body
gets the same treatment.

An initializer is a callable or a constant. A callable receives the earlier
bindings its signature names as keyword arguments (every binding when it
takes **kwargs); naming a binding that is not yet bound is rejected when the
Flet is built, before anything runs.

A custom handler goes first, as a pseudo-binding:

    flet([CAUGHT, lambda err: f"handled:{err.message}", "a", 1, "b", fail_with("bad")],
         lambda a, b: a + b)
    # → "handled:bad"

Unwinding uses one internal signal per evaluation, raised at the failing
step and caught once at the top of `Flet.evaluate`, so a failure in the
last of n bindings costs a single jump rather than n checks on the way out.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional

from flow.classify import ClassifierRegistry, Handler, resolve
from flow.log import get_logger

log = get_logger()

BODY = "<body>"


class _Marker:
    __slots__ = ("_name",)

    def __init__(self, name: str) -> None:
        self._name = name

    def __repr__(self) -> str:
        return self._name


CAUGHT = _Marker("CAUGHT")
"""Leading pseudo-binding name that introduces a custom failure handler."""


class FletDefinitionError(ValueError):
    """A malformed flet: raised when it is built, never during evaluation."""


class _ShortCircuit(Exception):  # noqa: N818
    """Carries the first failure from the failing step to Flet.evaluate."""

    __slots__ = ("owner", "failure", "step")

    def __init__(self, owner: object, failure: Any, step: str) -> None:
        super().__init__(step)
        self.owner = owner
        self.failure = failure
        self.step = step


# ──────────────────────── Compiled steps ────────────────────────


@dataclass(frozen=True, slots=True)
class _Step:
    name: str
    init: Any
    params: tuple[str, ...] = ()
    pass_all: bool = False

    def run(self, scope: Mapping[str, Any]) -> Any:
        if not callable(self.init):
            return self.init
        if self.pass_all:
            return self.init(**scope)
        return self.init(**{p: scope[p] for p in self.params})


def _compile_step(name: str, init: Any, visible: Iterable[str]) -> _Step:
    """Work out which bound names a step receives, rejecting unbound references."""
    if not callable(init):
        return _Step(name, init)
    try:
        signature = inspect.signature(init)
    except (TypeError, ValueError):
        # builtins without introspectable signatures take no bindings
        return _Step(name, init)

    visible = set(visible)
    params: list[str] = []
    pass_all = False
    for param in signature.parameters.values():
        required = param.default is inspect.Parameter.empty
        match param.kind:
            case inspect.Parameter.VAR_KEYWORD:
                pass_all = True
            case inspect.Parameter.VAR_POSITIONAL:
                continue
            case inspect.Parameter.POSITIONAL_ONLY:
                if required:
                    raise FletDefinitionError(
                        f"{name}: positional-only parameter {param.name!r} cannot receive a binding"
                    )
            case _:
                if param.name in visible:
                    params.append(param.name)
                elif required:
                    raise FletDefinitionError(f"{name}: refers to unbound name {param.name!r}")
    return _Step(name, init, tuple(params), pass_all)


# ──────────────────────── Flet ────────────────────────


class Flet:
    """
    A compiled flet: validated bindings plus the failure handler.

    Building it validates the whole binding vector; evaluating it with a body
    runs the bindings. A Flet holds no evaluation state, so one instance can
    be evaluated any number of times, from any thread.
    """

    def __init__(
        self,
        bindings: Iterable[Any],
        *,
        caught: Optional[Handler] = None,
        registry: ClassifierRegistry | None = None,
    ) -> None:
        forms = list(bindings)
        if len(forms) % 2:
            raise FletDefinitionError("flet requires an even number of forms in binding vector")
        if forms and forms[0] is CAUGHT:
            if caught is not None:
                raise FletDefinitionError("flet handler given both as CAUGHT binding and caught=")
            caught, forms = forms[1], forms[2:]
            if not callable(caught):
                raise FletDefinitionError(f"flet handler must be callable, got {caught!r}")
        elif caught is not None and not callable(caught):
            raise FletDefinitionError(f"flet handler must be callable, got {caught!r}")

        plan: list[_Step] = []
        for name, init in zip(forms[::2], forms[1::2]):
            if not isinstance(name, str) or not name.isidentifier():
                raise FletDefinitionError(f"flet binding name must be an identifier, got {name!r}")
            plan.append(_compile_step(name, init, (step.name for step in plan)))

        self._plan = tuple(plan)
        self._caught = caught
        self._registry = resolve(registry)

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(step.name for step in self._plan)

    @property
    def handler(self) -> Handler:
        """The custom handler, or the registry's default one."""
        return self._caught if self._caught is not None else self._registry.caught

    def evaluate(self, body: Any) -> Any:
        """
        Run the bindings, then body, stopping at the first failure.

        Returns the body's value, or the handler's result for the first
        failure. The handler runs outside the capture region: whatever it
        raises propagates, and whatever it returns is final.
        """
        body_step = _compile_step(BODY, body, self.names)
        token = object()
        scope: dict[str, Any] = {}
        try:
            for step in self._plan:
                scope[step.name] = self._capture(step, scope, token)
            return self._capture(body_step, scope, token)
        except _ShortCircuit as signal:
            if signal.owner is not token:
                raise
            failure, failed_step = signal.failure, signal.step
        log.debug("flet.short_circuit", step=failed_step, failure=repr(failure))
        return self.handler(failure)

    __call__ = evaluate

    def _capture(self, step: _Step, scope: Mapping[str, Any], token: object) -> Any:
        try:
            value = step.run(scope)
        except _ShortCircuit:
            raise
        except Exception as e:
            raise _ShortCircuit(token, self._registry.to_failure(e), step.name) from None
        if self._registry.is_failure(value):
            raise _ShortCircuit(token, value, step.name)
        return value

    def __repr__(self) -> str:
        handler = "default" if self._caught is None else getattr(self._caught, "__name__", repr(self._caught))
        return f"Flet(names={list(self.names)!r}, caught={handler})"


def flet(
    bindings: Iterable[Any],
    body: Any,
    *,
    caught: Optional[Handler] = None,
    registry: ClassifierRegistry | None = None,
) -> Any:
    """
    Build and evaluate a flet in one call.

        flet(["a", 1, "b", 2], lambda a, b: a + b)  # → 3
    """
    return Flet(bindings, caught=caught, registry=registry).evaluate(body)

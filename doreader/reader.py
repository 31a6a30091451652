"""
Reader class for the doreader system.

This module contains the Reader wrapper that represents a deferred computation
over an environment. Nothing wrapped by a Reader runs until ``run`` is called;
every combinator returns a new Reader.

``map``, ``flat_map`` and ``local`` record their step as a ``_Step`` link
instead of nesting closures, and ``_evaluate`` walks those links with an
explicit stack, so run depth does not grow with chain length.
"""

from __future__ import annotations

import logging
import reprlib
from collections.abc import Callable, Hashable, Mapping
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from doreader._validators import (
    ensure_callable,
    ensure_env_mapping,
    ensure_hashable,
    ensure_reader,
    ensure_reader_result,
)
from doreader._vendor import Err, FrozenDict, Ok, Result
from doreader.errors import MissingEnvKeyError
from doreader.utils import CreationContext, callable_name, capture_creation_context

logger = logging.getLogger(__name__)

E = TypeVar("E")
A = TypeVar("A")
B = TypeVar("B")
C = TypeVar("C")


def _pair(left: Any, right: Any) -> tuple[Any, Any]:
    return (left, right)


class _Step:
    """One composition step over a parent function; callable like any ``func``."""

    __slots__ = ("parent", "kind", "fn")

    def __init__(self, parent: Callable[[Any], Any], kind: str, fn: Callable[..., Any]) -> None:
        self.parent = parent
        self.kind = kind
        self.fn = fn

    def __call__(self, environment: Any) -> Any:
        return _evaluate(self, environment)


def _evaluate(func: Callable[[Any], Any], environment: Any) -> Any:
    """Run a chain of steps iteratively against ``environment``."""

    pending: list[tuple[_Step, Any]] = []
    while True:
        while isinstance(func, _Step):
            pending.append((func, environment))
            if func.kind == "local":
                environment = func.fn(environment)
            func = func.parent

        value = func(environment)

        while pending:
            step, step_environment = pending.pop()
            if step.kind == "map":
                value = step.fn(value)
            elif step.kind == "flat_map":
                next_reader = ensure_reader_result(step.fn(value), name="binder")
                func = next_reader.func
                environment = step_environment
                break
        else:
            return value


@dataclass(frozen=True, repr=False)
class Reader(Generic[E, A]):
    """
    A computation that produces ``A`` once it is given an environment ``E``.

    The wrapped ``func`` is the only behavioral state. ``name`` and
    ``created_at`` are display metadata and take no part in equality.

    Example::

        get_user = Reader(lambda service: service.find_user(42))
        greeting = get_user.map(lambda user: f"hello {user.name}")
        greeting.run(service)
    """

    func: Callable[[E], A]
    name: str | None = field(default=None, compare=False)
    created_at: CreationContext | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        ensure_callable(self.func, name="func")
        if self.created_at is None:
            object.__setattr__(self, "created_at", capture_creation_context(skip_frames=3))

    def __repr__(self) -> str:
        label = self.name or callable_name(self.func)
        if self.created_at is not None:
            return f"Reader({label} @ {self.created_at.format_location()})"
        return f"Reader({label})"

    def run(self, environment: E) -> A:
        """Execute the computation against ``environment``.

        Each call re-executes the whole composed chain. Exceptions raised by
        wrapped functions reach the caller unchanged.
        """

        logger.debug("Running %r", self)
        return self.func(environment)

    def map(self, f: Callable[[A], B]) -> Reader[E, B]:
        """Map a function over this reader's result."""

        ensure_callable(f, name="mapper")

        return Reader(_Step(self.func, "map", f), name=f"map({callable_name(f)})")

    def flat_map(self, f: Callable[[A], Reader[E, B]]) -> Reader[E, B]:
        """Monadic bind: feed this reader's result into ``f`` and run the
        reader it returns against the same environment."""

        ensure_callable(f, name="binder")

        return Reader(_Step(self.func, "flat_map", f), name=f"flat_map({callable_name(f)})")

    def and_then_k(self, binder: Callable[[A], Reader[E, B]]) -> Reader[E, B]:
        """Alias for flat_map for Kleisli-style composition."""

        return self.flat_map(binder)

    def __rshift__(self, binder: Callable[[A], Reader[E, B]]) -> Reader[E, B]:
        return self.flat_map(binder)

    def zip(
        self,
        other: Reader[E, B],
        combine: Callable[[A, B], C] | None = None,
    ) -> Reader[E, C]:
        """Combine two readers evaluated against one shared environment.

        ``self`` runs first. Without ``combine`` the result is the pair.
        """

        ensure_reader(other, name="other")
        if combine is None:
            combine = _pair
        ensure_callable(combine, name="combine")

        return self.flat_map(lambda left: other.map(lambda right: combine(left, right)))

    def then(self, other: Reader[E, B]) -> Reader[E, B]:
        """Run ``self`` for its effects, then ``other``; keep ``other``'s result."""

        ensure_reader(other, name="other")
        return self.flat_map(lambda _: other)

    def local(self, modify: Callable[[E], Any]) -> Reader[E, A]:
        """Run this reader against ``modify(environment)`` instead."""

        ensure_callable(modify, name="modify")

        return Reader(_Step(self.func, "local", modify), name=f"local({callable_name(modify)})")

    def with_env(self, update: Mapping[Any, object]) -> Reader[Mapping[Any, object], A]:
        """Run against a mapping environment overlaid with ``update``.

        The caller's environment is left untouched; the reader sees a
        ``FrozenDict``.
        """

        ensure_env_mapping(update, name="update")
        frozen_update = FrozenDict(update)

        def overlay(environment: Mapping[Any, object]) -> FrozenDict:
            ensure_env_mapping(environment, name="environment")
            return FrozenDict({**environment, **frozen_update})

        return self.local(overlay)

    def attempt(self) -> Reader[E, Result[A]]:
        """Capture failures as values: ``Ok(value)`` or ``Err(exception)``."""

        def attempted(environment: E) -> Result[A]:
            try:
                return Ok(self.func(environment))
            except Exception as exc:
                logger.debug("%r failed with %s", self, type(exc).__name__)
                return Err(exc)

        return Reader(attempted, name="attempt")

    def attr(self, name: str) -> Reader[E, Any]:
        """Lazily project an attribute from the eventual result."""

        def project(value: Any) -> Any:
            return getattr(value, name)

        return Reader(_Step(self.func, "map", project), name=f"attr({name!r})")

    def __getitem__(self, key: Any) -> Reader[E, Any]:
        """Lazily project an item from the eventual result."""

        def project(value: Any) -> Any:
            return value[key]

        return Reader(_Step(self.func, "map", project), name=f"item({key!r})")

    @staticmethod
    def pure(value: A) -> Reader[Any, A]:
        """A reader that ignores its environment and returns ``value``."""

        return Reader(lambda _environment: value, name=f"pure({reprlib.repr(value)})")

    @staticmethod
    def of(value: A) -> Reader[Any, A]:
        return Reader.pure(value)

    @staticmethod
    def ask() -> Reader[E, E]:
        """A reader that returns the environment itself."""

        return Reader(lambda environment: environment, name="ask")

    @staticmethod
    def asks(f: Callable[[E], A]) -> Reader[E, A]:
        ensure_callable(f, name="f")
        return Reader(f, name=f"asks({callable_name(f)})")

    @staticmethod
    def ask_key(key: Hashable) -> Reader[Mapping[Any, object], Any]:
        """Look up ``key`` in a mapping environment.

        Raises ``MissingEnvKeyError`` at run time when the key is absent.
        """

        ensure_hashable(key, name="key")

        def lookup(environment: Mapping[Any, object]) -> Any:
            ensure_env_mapping(environment, name="environment")
            if key not in environment:
                raise MissingEnvKeyError(key)
            return environment[key]

        return Reader(lookup, name=f"ask_key({key!r})")


__all__ = ["Reader"]

"""
Kleisli arrow implementation for the doreader system.

This module contains the KleisliReader class: a function that returns a
Reader, with helpers to compose such functions without running anything.
"""

from __future__ import annotations

import inspect
import types
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from functools import wraps
from typing import Any, Generic, ParamSpec, TypeVar

from doreader._validators import ensure_callable, ensure_reader_result
from doreader.reader import Reader
from doreader.utils import callable_name

P = ParamSpec("P")
T = TypeVar("T")
U = TypeVar("U")


@dataclass
class KleisliReader(Generic[P, T]):
    """
    Thin wrapper around a callable representing a Kleisli arrow.

    The callable stored in ``func`` must return a Reader when invoked.
    Calling the wrapper checks that and hands the Reader back unchanged.
    """

    func: Callable[P, Reader[Any, T]]

    def __post_init__(self) -> None:
        ensure_callable(self.func, name="func")
        wrapped = getattr(self.func, "__wrapped__", self.func)

        signature = _safe_signature(wrapped) or _safe_signature(self.func)
        if signature is not None and not hasattr(self, "__signature__"):
            self.__signature__ = signature  # type: ignore[attr-defined]

        for attr in ("__name__", "__qualname__", "__doc__", "__module__"):
            value = getattr(wrapped, attr, getattr(self.func, attr, None))
            if value is not None:
                setattr(self, attr, value)

    def __get__(self, instance: Any, owner: type | None = None) -> Any:
        if instance is None:
            return self
        return types.MethodType(self, instance)

    def __call__(self, *args: P.args, **kwargs: P.kwargs) -> Reader[Any, T]:
        reader = self.func(*args, **kwargs)
        return ensure_reader_result(reader, name=getattr(self, "__name__", "Kleisli function"))

    def partial(
        self, /, *args: Any, **kwargs: Any
    ) -> "PartiallyAppliedKleisliReader[..., T]":
        return PartiallyAppliedKleisliReader(self, args, kwargs)

    def and_then_k(
        self,
        binder: Callable[[T], Reader[Any, U]],
    ) -> "KleisliReader[P, U]":
        ensure_callable(binder, name="binder")

        @wraps(self, updated=())
        def composed(*args: P.args, **kwargs: P.kwargs) -> Reader[Any, U]:
            return self(*args, **kwargs).flat_map(binder)

        return KleisliReader(composed)

    def __rshift__(
        self,
        binder: Callable[[T], Reader[Any, U]],
    ) -> "KleisliReader[P, U]":
        return self.and_then_k(binder)

    def fmap(
        self,
        mapper: Callable[[T], U],
    ) -> "KleisliReader[P, U]":
        ensure_callable(mapper, name="mapper")

        @wraps(self, updated=())
        def mapped(*args: P.args, **kwargs: P.kwargs) -> Reader[Any, U]:
            return self(*args, **kwargs).map(mapper)

        return KleisliReader(mapped)

    def many(self) -> Callable[[Iterable[Any]], Reader[Any, list[T]]]:
        """Lift this arrow over collections; see ``lift_to_many``."""

        from doreader.traverse import lift_to_many

        return lift_to_many(self)

    def __repr__(self) -> str:
        return f"KleisliReader({callable_name(self.func)})"


class PartiallyAppliedKleisliReader(KleisliReader[P, T]):
    """Lightweight wrapper returned by ``KleisliReader.partial``."""

    _base: KleisliReader[Any, T]
    _pre_args: tuple[Any, ...]
    _pre_kwargs: dict[str, Any]

    def __init__(
        self,
        base: KleisliReader[Any, T],
        pre_args: tuple[Any, ...],
        pre_kwargs: dict[str, Any],
    ) -> None:
        self._base = base
        self._pre_args = pre_args
        self._pre_kwargs = dict(pre_kwargs)
        for attr in ("__name__", "__qualname__", "__doc__", "__module__"):
            value = getattr(base, attr, None)
            if value is not None:
                setattr(self, attr, value)

    @property
    def func(self) -> Callable[..., Reader[Any, T]]:  # type: ignore[override]
        return self._base.func

    def __call__(self, *args: Any, **kwargs: Any) -> Reader[Any, T]:
        merged_args = self._pre_args + args
        merged_kwargs = {**self._pre_kwargs, **kwargs}
        return self._base(*merged_args, **merged_kwargs)

    def partial(
        self, /, *args: Any, **kwargs: Any
    ) -> "PartiallyAppliedKleisliReader[..., T]":
        merged_args = self._pre_args + args
        merged_kwargs = {**self._pre_kwargs, **kwargs}
        return PartiallyAppliedKleisliReader(self._base, merged_args, merged_kwargs)


def _safe_signature(target: Any) -> inspect.Signature | None:
    try:
        return inspect.signature(target)
    except (TypeError, ValueError):
        return None


__all__ = ["KleisliReader", "PartiallyAppliedKleisliReader"]

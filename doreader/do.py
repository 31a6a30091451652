"""
The do decorator for the doreader system.

This module provides the @do decorator that converts generator functions
into KleisliReaders, enabling do-notation for reader computations.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Generator
from typing import Any, ParamSpec, TypeVar

from doreader.kleisli import KleisliReader
from doreader.reader import Reader

logger = logging.getLogger(__name__)

P = ParamSpec("P")
T = TypeVar("T")

ReaderGenerator = Generator[Reader[Any, Any], Any, T]


def _drive(body: Any, environment: Any, function_name: str) -> Any:
    """Step a do-body against ``environment`` until it returns."""

    if not inspect.isgenerator(body):
        if isinstance(body, Reader):
            return body.func(environment)
        return body

    gen = body
    try:
        try:
            current = next(gen)
        except StopIteration as stop_exc:
            return stop_exc.value

        step = 0
        while True:
            if not isinstance(current, Reader):
                raise TypeError(
                    f"@do function {function_name} must yield Reader instances; "
                    f"got {type(current).__name__}"
                )
            step += 1
            logger.debug("%s step %d: %r", function_name, step, current)
            try:
                value = current.func(environment)
            except Exception as exc:
                # Let the body handle the failure at its yield point.
                try:
                    current = gen.throw(exc)
                except StopIteration as stop_exc:
                    return stop_exc.value
                except RuntimeError as runtime_exc:
                    # PEP 479 turns an uncaught StopIteration into RuntimeError.
                    if isinstance(exc, StopIteration) and runtime_exc.__cause__ is exc:
                        raise exc from None
                    raise
                continue
            try:
                current = gen.send(value)
            except StopIteration as stop_exc:
                return stop_exc.value
    finally:
        gen.close()


class DoReaderFunction(KleisliReader[P, T]):
    """Specialised KleisliReader for generator-based @do functions."""

    def __init__(self, func: Callable[P, ReaderGenerator[T]]) -> None:
        function_name = getattr(func, "__qualname__", getattr(func, "__name__", "<do>"))

        def reader_factory(*args: P.args, **kwargs: P.kwargs) -> Reader[Any, T]:
            def run_body(environment: Any) -> T:
                return _drive(func(*args, **kwargs), environment, function_name)

            return Reader(run_body, name=function_name)

        super().__init__(reader_factory)
        self.original_func = func

        for attr in ("__doc__", "__module__", "__name__", "__qualname__", "__annotations__"):
            value = getattr(func, attr, None)
            if value is not None:
                setattr(self, attr, value)

        try:
            signature = inspect.signature(func)
        except (TypeError, ValueError):
            signature = None
        if signature is not None:
            setattr(self, "__signature__", signature)

    @property
    def original_generator(self) -> Callable[P, ReaderGenerator[T]]:
        """Expose the user-defined generator for downstream tooling."""

        return self.original_func


def do(
    func: Callable[P, ReaderGenerator[T]],
) -> KleisliReader[P, T]:
    """
    Decorator that converts a generator function into a KleisliReader.

    Each ``yield`` hands a Reader to the driver, which runs it against the
    environment supplied to ``run`` and sends the result back in. The
    generator's return value becomes the Reader's result.

    Calling the decorated function builds a Reader without executing the
    body; the body only runs, from the top, on every ``run``.

    Exceptions raised by a yielded Reader are thrown back into the generator
    at that ``yield``, so ``try``/``except`` around it works as usual.

    Usage:
        @do
        def friends_of(user_id: int) -> ReaderGenerator[list[User]]:
            user = yield get_user(user_id)
            friends = yield get_friends(user)
            return friends

        friends_of(1).run(service)

    Args:
        func: A generator function that yields Readers and returns T

    Returns:
        KleisliReader wrapping the generator function.
    """

    return DoReaderFunction(func)


__all__ = ["do", "DoReaderFunction", "ReaderGenerator"]

"""
Collection combinators for readers.

These lift per-item steps (``A -> Reader[E, B]``) over sequences so that a
one-to-many step (user -> friends) can be chained with a per-item step
(friend -> age) through ordinary ``flat_map``.

Evaluation is left to right against a single shared environment. An empty
input yields ``[]``; the first exception aborts the remaining items.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from functools import wraps
from typing import TypeVar

from doreader._validators import ensure_callable, ensure_reader_result
from doreader.reader import Reader
from doreader.utils import callable_name

logger = logging.getLogger(__name__)

E = TypeVar("E")
A = TypeVar("A")
B = TypeVar("B")


def traverse(items: Iterable[A], f: Callable[[A], Reader[E, B]]) -> Reader[E, list[B]]:
    """Apply ``f`` to each item at run time and collect results in input order."""

    ensure_callable(f, name="f")
    # Materialized now so the reader can be run more than once.
    captured = tuple(items)

    def traversed(environment: E) -> list[B]:
        results: list[B] = []
        for index, item in enumerate(captured):
            reader = ensure_reader_result(f(item), name=callable_name(f))
            logger.debug("traverse item %d/%d", index + 1, len(captured))
            results.append(reader.func(environment))
        return results

    return Reader(traversed, name=f"traverse({callable_name(f)})")


def sequence(readers: Iterable[Reader[E, A]]) -> Reader[E, list[A]]:
    """Turn a collection of readers into one reader of a list."""

    captured = tuple(readers)
    for reader in captured:
        if not isinstance(reader, Reader):
            raise TypeError(f"sequence expects Reader items, got {type(reader).__name__}")

    def sequenced(environment: E) -> list[A]:
        return [reader.func(environment) for reader in captured]

    return Reader(sequenced, name=f"sequence[{len(captured)}]")


def lift_to_many(
    f: Callable[[A], Reader[E, B]],
) -> Callable[[Iterable[A]], Reader[E, list[B]]]:
    """
    Lift a per-item reader function to work on whole collections.

    Example::

        ages = get_friends(user).flat_map(lift_to_many(get_age))
    """

    ensure_callable(f, name="f")

    @wraps(f, updated=())
    def lifted(items: Iterable[A]) -> Reader[E, list[B]]:
        return traverse(items, f)

    return lifted


multiple = lift_to_many


__all__ = ["lift_to_many", "multiple", "sequence", "traverse"]

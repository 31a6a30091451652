"""Runtime validators for reader combinator arguments."""

from __future__ import annotations

from collections.abc import Hashable, Mapping
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from doreader.reader import Reader


def _type_name(value: object) -> str:
    return type(value).__name__


def ensure_callable(value: object, *, name: str) -> None:
    if not callable(value):
        raise TypeError(f"{name} must be callable, got {_type_name(value)}")


def ensure_hashable(value: object, *, name: str) -> None:
    if not isinstance(value, Hashable):
        raise TypeError(f"{name} must be hashable, got {_type_name(value)}")
    try:
        hash(value)
    except TypeError as exc:
        raise TypeError(f"{name} must be hashable, got {_type_name(value)}") from exc


def ensure_env_mapping(value: object, *, name: str) -> None:
    if not isinstance(value, Mapping):
        raise TypeError(f"{name} must be a Mapping, got {_type_name(value)}")


def ensure_reader(value: object, *, name: str) -> Reader:
    from doreader.reader import Reader

    if not isinstance(value, Reader):
        raise TypeError(f"{name} must be a Reader, got {_type_name(value)}")
    return value


def ensure_reader_result(value: object, *, name: str) -> Reader:
    from doreader.reader import Reader

    if not isinstance(value, Reader):
        raise TypeError(f"{name} must return a Reader; got {_type_name(value)}")
    return value


__all__ = [
    "ensure_callable",
    "ensure_env_mapping",
    "ensure_hashable",
    "ensure_reader",
    "ensure_reader_result",
]

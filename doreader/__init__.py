"""
doreader - Reader monad and do-notation for dependency injection in Python.

A Reader wraps a function from an environment (a service, a config mapping)
to a value. Readers compose with ``map``, ``flat_map`` and ``zip`` without
touching the environment; it is supplied once, at ``run``.

Example:
    >>> from doreader import Reader, do
    >>>
    >>> @do
    ... def greeting(user_id):
    ...     user = yield Reader(lambda service: service.find_user(user_id))
    ...     return f"hello {user.name}"
    >>>
    >>> greeting(42).run(service)  # doctest: +SKIP
"""

from doreader._vendor import Err, FrozenDict, Ok, Result
from doreader.do import DoReaderFunction, ReaderGenerator, do
from doreader.errors import MissingEnvKeyError
from doreader.kleisli import KleisliReader, PartiallyAppliedKleisliReader
from doreader.reader import Reader
from doreader.traverse import lift_to_many, multiple, sequence, traverse

__version__ = "0.1.0"

__all__ = [  # noqa: RUF022
    # Core
    "Reader",
    "KleisliReader",
    "PartiallyAppliedKleisliReader",
    "do",
    "DoReaderFunction",
    "ReaderGenerator",
    # Collections
    "lift_to_many",
    "multiple",
    "sequence",
    "traverse",
    # Values
    "Result",
    "Ok",
    "Err",
    "FrozenDict",
    # Errors
    "MissingEnvKeyError",
]

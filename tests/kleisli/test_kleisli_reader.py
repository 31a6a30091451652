"""
Test KleisliReader composition helpers.
"""

import inspect

import pytest

from doreader import KleisliReader, PartiallyAppliedKleisliReader, Reader, do


def scaled(x: int, factor: int = 1) -> Reader[int, int]:
    """Multiply by the factor, then add the environment."""
    return Reader(lambda e: x * factor + e)


def test_call_returns_reader() -> None:
    arrow = KleisliReader(scaled)
    reader = arrow(2, factor=3)

    assert isinstance(reader, Reader)
    assert reader.run(1) == 7


def test_metadata_copied_from_function() -> None:
    arrow = KleisliReader(scaled)

    assert arrow.__name__ == "scaled"
    assert arrow.__doc__ == scaled.__doc__
    assert list(inspect.signature(arrow).parameters) == ["x", "factor"]


def test_call_rejects_non_reader_result() -> None:
    arrow = KleisliReader(lambda x: x + 1)

    with pytest.raises(TypeError, match="must return a Reader"):
        arrow(1)


def test_requires_callable() -> None:
    with pytest.raises(TypeError, match="func must be callable"):
        KleisliReader(3)  # type: ignore[arg-type]


def test_and_then_k_composes_without_running() -> None:
    calls: list[str] = []

    def load(x: int) -> Reader[int, int]:
        def body(e: int) -> int:
            calls.append("load")
            return x + e

        return Reader(body)

    arrow = KleisliReader(load) >> (lambda value: Reader(lambda e: value * e))
    reader = arrow(2)

    assert calls == []
    assert reader.run(3) == 15
    assert calls == ["load"]
    assert arrow.__name__ == "load"


def test_fmap_maps_result() -> None:
    arrow = KleisliReader(scaled).fmap(str)

    assert arrow(4).run(0) == "4"


def test_partial_application() -> None:
    arrow = KleisliReader(scaled)
    triple = arrow.partial(factor=3)

    assert isinstance(triple, PartiallyAppliedKleisliReader)
    assert triple(5).run(0) == 15
    assert triple.partial(2)().run(1) == 7
    assert triple.__name__ == "scaled"


def test_many_lifts_over_collections() -> None:
    arrow = KleisliReader(scaled)

    assert arrow.many()([1, 2, 3]).run(10) == [11, 12, 13]


def test_kleisli_binds_as_method() -> None:
    class Repository:
        prefix = "user:"

        @do
        def key_for(self, user_id: int):
            suffix = yield Reader.ask()
            return f"{self.prefix}{user_id}{suffix}"

    assert Repository().key_for(7).run("!") == "user:7!"
    assert isinstance(Repository.key_for, KleisliReader)


def test_kleisli_as_flat_map_binder() -> None:
    arrow = KleisliReader(scaled)

    assert Reader.pure(2).flat_map(arrow).run(1) == 3

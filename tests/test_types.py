"""Unit tests for serdegen.serialization.types module."""

import pytest

from serdegen.serialization.types import (
    UNIT,
    Option,
    Slice,
    Unit,
    check_not_none,
    freeze,
)


class TestUnit:
    """Tests for Unit."""

    def test_all_instances_equal(self):
        assert Unit() == UNIT
        assert hash(Unit()) == hash(UNIT)

    def test_repr(self):
        assert repr(UNIT) == "UNIT"


class TestOption:
    """Tests for Option."""

    def test_some(self):
        option = Option.some(3)
        assert option.is_present is True
        assert option.value == 3

    def test_none(self):
        option = Option.none()
        assert option.is_present is False
        with pytest.raises(ValueError):
            option.value

    def test_present_requires_value(self):
        with pytest.raises(TypeError):
            Option(True, None)

    def test_falsy_value_is_present(self):
        assert Option.some(0) != Option.none()
        assert Option.some(UNIT).is_present is True

    def test_equality_and_hash(self):
        assert Option.some([1, 2]) == Option.some([1, 2])
        assert hash(Option.some([1, 2])) == hash(Option.some([1, 2]))
        assert Option.none() == Option.none()
        assert Option.some(1) != 1

    def test_nested(self):
        assert Option.some(Option.none()) != Option.none()

    def test_repr(self):
        assert repr(Option.some("a")) == "Option.some('a')"
        assert repr(Option.none()) == "Option.none()"


class TestFreeze:
    """Tests for freeze."""

    def test_lists_become_tuples(self):
        assert freeze([1, [2, 3]]) == (1, (2, 3))

    def test_dicts_ignore_order(self):
        assert freeze({"a": 1, "b": [2]}) == freeze({"b": [2], "a": 1})
        assert hash(freeze({"a": 1, "b": 2})) == hash(freeze({"b": 2, "a": 1}))

    def test_scalars_unchanged(self):
        assert freeze(b"ab") == b"ab"
        assert freeze(UNIT) is UNIT


class TestCheckNotNone:
    """Tests for check_not_none."""

    def test_passes(self):
        check_not_none(Slice(0, 1), ("start", "end"))

    def test_rejects_none(self):
        with pytest.raises(TypeError) as exc_info:
            check_not_none(Slice(0, None), ("start", "end"))
        assert "Slice.end must not be None" in str(exc_info.value)

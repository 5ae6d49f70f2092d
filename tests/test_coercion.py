"""Unit tests for scalar type coercion."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

import pytest

from simpledb.errors import CoercionError
from simpledb.execute.coercion import coerce, to_boolean, to_datetime, to_long, to_string


def test_none_passes_through_every_coercer():
    assert to_boolean(None) is None
    assert to_long(None) is None
    assert to_string(None) is None
    assert to_datetime(None) is None


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (True, True),
        (False, False),
        (0, False),
        (1, True),
        (2, True),
        (Decimal("0"), False),
        (b"\x00", False),
        (b"\x01", True),
    ],
)
def test_to_boolean(value, expected):
    assert to_boolean(value) is expected


def test_to_boolean_rejects_text():
    with pytest.raises(CoercionError) as exc_info:
        to_boolean("yes")
    assert exc_info.value.target == "bool"


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (7, 7),
        (True, 1),
        (Decimal("3"), 3),
        (Decimal("3.00"), 3),
        (4.0, 4),
        (b"\x01\x00", 256),
    ],
)
def test_to_long(value, expected):
    result = to_long(value)
    assert result == expected
    assert type(result) is int


@pytest.mark.parametrize("value", [Decimal("1.5"), 2.5, float("nan"), Decimal("Infinity"), "12"])
def test_to_long_rejects_non_integral(value):
    with pytest.raises(CoercionError):
        to_long(value)


def test_to_string():
    assert to_string("제목1") == "제목1"
    assert to_string("제목1".encode()) == "제목1"


@pytest.mark.parametrize("value", [1, 1.5, datetime(2024, 1, 1), b"\xff\xfe"])
def test_to_string_rejects_other_types(value):
    with pytest.raises(CoercionError):
        to_string(value)


def test_to_datetime():
    now = datetime(2024, 5, 6, 7, 8, 9)
    assert to_datetime(now) is now
    assert to_datetime(date(2024, 5, 6)) == datetime(2024, 5, 6)
    assert to_datetime("2024-05-06 07:08:09") == now
    assert to_datetime(b"2024-05-06T07:08:09") == now


@pytest.mark.parametrize("value", ["not a date", 1700000000, True])
def test_to_datetime_rejects_other_values(value):
    with pytest.raises(CoercionError):
        to_datetime(value)


def test_coerce_dispatches_on_target_type():
    assert coerce(1, bool) is True
    assert coerce(Decimal("5"), int) == 5
    assert coerce("x", str) == "x"


def test_coerce_unknown_target():
    with pytest.raises(CoercionError):
        coerce(1, list)

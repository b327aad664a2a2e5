from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from expense_system.common.datetime_utils import parse_optional_date
from expense_system.common.validators import (
    require_max_length,
    require_non_empty,
    require_not_in_future,
    require_positive_int,
    require_valid_amount,
)
from expense_system.core.exceptions import ValidationError


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("0.01", Decimal("0.01")),
        ("99999999.99", Decimal("99999999.99")),
        (12.3, Decimal("12.30")),
        ("5", Decimal("5.00")),
        ("1.50", Decimal("1.50")),
    ],
)
def test_valid_amounts(raw, expected):
    assert require_valid_amount(raw) == expected


@pytest.mark.parametrize(
    "raw,message",
    [
        (None, "required"),
        (True, "required"),
        ("", "number"),
        ("NaN", "number"),
        ("Infinity", "number"),
        ("0", "greater than zero"),
        ("-0.01", "greater than zero"),
        ("0.001", "decimal places"),
        ("100000000", "integer digits"),
    ],
)
def test_invalid_amounts(raw, message):
    with pytest.raises(ValidationError, match=message):
        require_valid_amount(raw)


def test_max_length_strips_and_blanks_to_none():
    assert require_max_length("  hi ", "Notes", 5) == "hi"
    assert require_max_length("   ", "Notes", 5) is None
    assert require_max_length(None, "Notes", 5) is None
    with pytest.raises(ValidationError, match="must not exceed 5"):
        require_max_length("toolong", "Notes", 5)


def test_not_in_future():
    today = date(2026, 3, 10)
    assert require_not_in_future(today, today) == today
    with pytest.raises(ValidationError, match="future"):
        require_not_in_future(date(2026, 3, 11), today)


@pytest.mark.parametrize("raw", ["x", None, "0", "-3"])
def test_positive_int_rejects(raw):
    with pytest.raises(ValidationError):
        require_positive_int(raw, "Category ID")


def test_parse_optional_date():
    assert parse_optional_date("2026-03-01", "Start date") == date(2026, 3, 1)
    assert parse_optional_date("", "Start date") is None
    with pytest.raises(ValidationError, match="YYYY-MM-DD"):
        parse_optional_date("03/01/2026", "Start date")


@pytest.mark.parametrize("raw", [123, 1.5, ["a"], {"a": 1}])
def test_string_fields_reject_other_json_types(raw):
    with pytest.raises(ValidationError, match="must be a string"):
        require_max_length(raw, "Description", 10)
    with pytest.raises(ValidationError, match="must be a string"):
        require_non_empty(raw, "Email")
    with pytest.raises(ValidationError, match="must be a string"):
        parse_optional_date(raw, "Expense date")

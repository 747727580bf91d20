from datetime import datetime, timedelta

import pytest

from libranet.duration import BorrowDuration
from libranet.exceptions import InvalidInputError

T = datetime(2024, 3, 1, 9, 30)


@pytest.mark.parametrize("text, hours", [
    ("2 weeks", 336),
    ("1 w", 168),
    ("10 days", 240),
    ("1 DAY", 24),
    ("3d", 72),
    ("12 Hours", 12),
    ("5h", 5),
    ("P14D", 336),
    ("p2d", 48),
    ("PT48H", 48),
    ("P6H", 6),
    ("  7 days  ", 168),
])
def test_relative_durations_add_exact_hours(text, hours):
    assert BorrowDuration.parse(text).compute_due_at(T) == T + timedelta(hours=hours)


def test_iso_and_natural_language_agree():
    assert BorrowDuration.parse("P14D").compute_due_at(T) == BorrowDuration.parse("14 days").compute_due_at(T)


def test_date_range_ignores_borrow_start():
    duration = BorrowDuration.parse("2024-01-01 to 2024-01-10")
    assert duration.is_explicit_range
    assert duration.compute_due_at(T) == datetime(2024, 1, 10)
    assert duration.compute_due_at(datetime(2030, 5, 5)) == datetime(2024, 1, 10)


def test_date_range_is_case_and_whitespace_tolerant():
    duration = BorrowDuration.parse("  2024-01-01   TO   2024-01-10 ")
    assert duration.compute_due_at(T) == datetime(2024, 1, 10)


@pytest.mark.parametrize("text", [
    "2024-01-10 to 2024-01-01",
    "2024-01-10 to 2024-01-10",
])
def test_non_positive_range_is_rejected(text):
    with pytest.raises(InvalidInputError, match="End date must be after start date"):
        BorrowDuration.parse(text)


def test_impossible_calendar_date_is_rejected():
    with pytest.raises(InvalidInputError, match="Invalid date format"):
        BorrowDuration.parse("2024-02-30 to 2024-03-10")


@pytest.mark.parametrize("text", ["", "   ", "abc", "5 fortnights", "PT14D", "-3 days", "days 3"])
def test_unsupported_input_fails(text):
    with pytest.raises(InvalidInputError):
        BorrowDuration.parse(text)


def test_empty_input_message():
    with pytest.raises(InvalidInputError, match="Empty duration string"):
        BorrowDuration.parse(None)


def test_unknown_unit_falls_through_to_error():
    with pytest.raises(InvalidInputError, match="Unsupported duration unit"):
        BorrowDuration._natural_length(3, "fortnight")


def test_zero_length_parses_but_is_not_in_the_future():
    assert BorrowDuration.parse("0 days").compute_due_at(T) == T


@pytest.mark.parametrize("text", ["99999999999 days", "P9999999999D", "99999999999999 w", "9" * 5000 + " h"])
def test_oversized_length_is_invalid_input(text):
    with pytest.raises(InvalidInputError, match="Duration too large"):
        BorrowDuration.parse(text)


def test_due_date_past_calendar_limit_is_invalid_input():
    duration = BorrowDuration.parse("P99999999D")
    with pytest.raises(InvalidInputError, match="Duration too large"):
        duration.compute_due_at(T)

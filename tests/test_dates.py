from datetime import date

import pytest

from septa_crawler.dates import find_dates, parse_date


@pytest.mark.parametrize("text", ["02/15/2024", "2024-02-15", "Feb 15, 2024", "15 Feb 2024"])
def test_common_formats_agree(text):
    assert parse_date(text) == date(2024, 2, 15)


@pytest.mark.parametrize("text, expected", [
    ("02-15-2024", date(2024, 2, 15)),
    ("2024/02/15", date(2024, 2, 15)),
    ("February 15, 2024", date(2024, 2, 15)),
    ("15 February 2024", date(2024, 2, 15)),
    ("Sept 3 2025", date(2025, 9, 3)),
    ("  3/7/2025 ", date(2025, 3, 7)),
])
def test_variants(text, expected):
    assert parse_date(text) == expected


def test_two_digit_year_pivot():
    assert parse_date("02/15/24") == date(2024, 2, 15)
    assert parse_date("02/15/49") == date(2049, 2, 15)
    assert parse_date("02/15/50") == date(1950, 2, 15)
    assert parse_date("02/15/99") == date(1999, 2, 15)


@pytest.mark.parametrize("text", ["01/01/1900", "2100-01-01", "Jan 1, 1850"])
def test_out_of_range_years_are_no_date(text):
    assert parse_date(text) is None


@pytest.mark.parametrize("text", ["", "   ", None, "not a date", "02/30/2024"])
def test_unparseable_is_no_date(text):
    assert parse_date(text) is None


def test_generic_fallback():
    assert parse_date("March 4th 2025") == date(2025, 3, 4)


def test_find_dates_sorted_across_formats():
    text = "due 02/15/2024 posted 01/15/2024 amended Jan 20, 2024"
    assert find_dates(text) == [date(2024, 1, 15), date(2024, 1, 20), date(2024, 2, 15)]


def test_iso_date_not_double_counted():
    assert find_dates("Closing 2024-02-15") == [date(2024, 2, 15)]


def test_identifiers_are_not_dates():
    assert find_dates("RFP-2024-001 IT Services") == []

from datetime import date

import pytest

from deskbook.utils.dates import is_weekend, month_bounds, parse_day, unique_days


def test_parse_day_accepts_iso():
    assert parse_day("2026-02-10") == date(2026, 2, 10)


@pytest.mark.parametrize("value", ["10-02-2026", "20260210", "2026-2-10", "15/01/2026", "", None, 20260210])
def test_parse_day_rejects_other_formats(value):
    with pytest.raises(ValueError):
        parse_day(value)


def test_parse_day_rejects_impossible_date():
    with pytest.raises(ValueError):
        parse_day("2026-02-30")


def test_weekend():
    assert is_weekend(date(2026, 2, 14))
    assert is_weekend(date(2026, 2, 15))
    assert not is_weekend(date(2026, 2, 13))


def test_month_bounds_wraps_year():
    assert month_bounds(2026, 12) == (date(2026, 12, 1), date(2027, 1, 1))


def test_unique_days_keeps_order():
    d1, d2 = date(2026, 2, 11), date(2026, 2, 10)
    assert unique_days([d1, d2, d1]) == [d1, d2]

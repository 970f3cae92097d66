from datetime import date

import pytest

from acutrace.analytics.dates import UNKNOWN_MONTH, MonthKey, month_key, parse_date


class TestParseDate:
    """Statement date parsing."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("05/01/2025", date(2025, 1, 5)),
            ("2025-01-05", date(2025, 1, 5)),
            ("05-01-2025", date(2025, 1, 5)),
            ("05/01/25", date(2025, 1, 5)),
            ("05 Jan 2025", date(2025, 1, 5)),
            ("05-Jan-2025", date(2025, 1, 5)),
            ("2025-01-05T10:30:00", date(2025, 1, 5)),
            ("  05/01/2025  ", date(2025, 1, 5)),
        ],
    )
    def test_supported_layouts(self, value, expected):
        assert parse_date(value) == expected

    def test_day_first(self):
        assert parse_date("10/12/2025") == date(2025, 12, 10)

    @pytest.mark.parametrize("value", ["", None, "not a date", "31/02/2025", "12/2024"])
    def test_unparseable_returns_none(self, value):
        assert parse_date(value) is None


class TestMonthKey:
    """Month bucketing keys."""

    def test_parsed_date(self):
        assert month_key("15/03/2025") == MonthKey("2025-03", "Mar 25")

    def test_iso_date(self):
        assert month_key("2024-12-01") == MonthKey("2024-12", "Dec 24")

    def test_fallback_month_and_year(self):
        assert month_key("12/2024") == MonthKey("2024-12", "Dec 24")

    def test_fallback_invalid_day_keeps_month(self):
        assert month_key("31/02/2025") == MonthKey("2025-02", "Feb 25")

    def test_fallback_year_first(self):
        assert month_key("2025-02-31") == MonthKey("2025-02", "Feb 25")

    def test_fallback_two_digit_year(self):
        assert month_key("07-23") == MonthKey("2023-07", "Jul 23")

    @pytest.mark.parametrize("value", ["", None, "garbage", "13/2024", "Q1/2025", "2025"])
    def test_unknown(self, value):
        assert month_key(value) == UNKNOWN_MONTH

    def test_keys_sort_chronologically_across_years(self):
        keys = [month_key(d).key for d in ["01/01/2025", "15/12/2024", "03/02/2024"]]
        assert sorted(keys) == ["2024-02", "2024-12", "2025-01"]

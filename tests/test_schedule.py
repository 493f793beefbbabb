"""Tests for recurrence step arithmetic."""

from datetime import datetime

import pytest

from services.schedule import advance, anchor_day_for, occurrences


class TestAdvance:
    """One frequency step at a time."""

    def test_daily_crosses_month_end(self):
        assert advance(datetime(2024, 1, 31, 12), "daily") == datetime(2024, 2, 1, 12)

    def test_weekly_adds_seven_days(self):
        assert advance(datetime(2024, 1, 1), "weekly") == datetime(2024, 1, 8)

    def test_monthly_keeps_day_and_time(self):
        assert advance(datetime(2024, 1, 15, 9, 45), "monthly") == datetime(2024, 2, 15, 9, 45)

    def test_monthly_rolls_over_year(self):
        assert advance(datetime(2024, 12, 15), "monthly") == datetime(2025, 1, 15)

    def test_monthly_clamps_to_leap_february(self):
        """Jan 31 must land in February, not skip to March."""
        assert advance(datetime(2024, 1, 31), "monthly") == datetime(2024, 2, 29)

    def test_monthly_clamps_to_common_february(self):
        assert advance(datetime(2023, 1, 31), "monthly") == datetime(2023, 2, 28)

    def test_monthly_clamps_into_thirty_day_month(self):
        assert advance(datetime(2024, 3, 31), "monthly") == datetime(2024, 4, 30)

    def test_monthly_anchor_restores_day(self):
        assert advance(datetime(2024, 2, 29), "monthly", anchor_day=31) == datetime(2024, 3, 31)

    def test_monthly_without_anchor_keeps_clamped_day(self):
        assert advance(datetime(2024, 2, 29), "monthly") == datetime(2024, 3, 29)

    def test_yearly_leap_day_clamps(self):
        assert advance(datetime(2024, 2, 29), "yearly") == datetime(2025, 2, 28)

    def test_yearly_anchor_returns_to_leap_day(self):
        assert advance(datetime(2027, 2, 28), "yearly", anchor_day=29) == datetime(2028, 2, 29)

    @pytest.mark.parametrize("frequency", ["fortnightly", None, "none", ""])
    def test_unknown_frequency_steps_one_day(self, frequency):
        assert advance(datetime(2024, 3, 1, 8), frequency) == datetime(2024, 3, 2, 8)

    @pytest.mark.parametrize("frequency", ["daily", "weekly", "monthly", "yearly"])
    def test_always_strictly_later(self, frequency):
        for start in (datetime(2024, 1, 31), datetime(2024, 2, 29), datetime(2023, 12, 31, 23, 59)):
            assert advance(start, frequency) > start


class TestAnchorDay:
    """Which day-of-month month-based steps aim for."""

    def test_clamped_pointer_uses_start_day(self, make_definition):
        d = make_definition(datetime(2024, 1, 31), datetime(2024, 2, 29))
        assert anchor_day_for(d) == 31

    def test_pointer_on_start_day(self, make_definition):
        d = make_definition(datetime(2024, 1, 31), datetime(2024, 3, 31))
        assert anchor_day_for(d) == 31

    def test_moved_pointer_keeps_its_own_day(self, make_definition):
        d = make_definition(datetime(2024, 1, 15), datetime(2024, 3, 20))
        assert anchor_day_for(d) == 20

    def test_day_based_frequencies_have_no_anchor(self, make_definition):
        d = make_definition(datetime(2024, 1, 31), datetime(2024, 2, 7), frequency="weekly")
        assert anchor_day_for(d) is None


class TestOccurrences:
    def test_includes_until_boundary(self):
        dates = list(occurrences(datetime(2024, 1, 1), "weekly", datetime(2024, 1, 22)))
        assert dates == [
            datetime(2024, 1, 1),
            datetime(2024, 1, 8),
            datetime(2024, 1, 15),
            datetime(2024, 1, 22),
        ]

    def test_first_after_until_yields_nothing(self):
        assert list(occurrences(datetime(2024, 2, 1), "daily", datetime(2024, 1, 31))) == []

    def test_anchor_keeps_month_end(self):
        dates = list(occurrences(datetime(2024, 1, 31), "monthly", datetime(2024, 4, 30), anchor_day=31))
        assert dates == [
            datetime(2024, 1, 31),
            datetime(2024, 2, 29),
            datetime(2024, 3, 31),
            datetime(2024, 4, 30),
        ]

"""
Unit tests for dates module.
"""

from datetime import date
import pytest

from capletlib.conventions import BusinessDayConvention
from capletlib.dates import Calendar, Period, generate_schedule


class TestPeriod:
    """Tests for tenor parsing and arithmetic."""

    def test_parse_tenor(self):
        """Test parsing tenors of every unit."""
        assert Period.parse("3M") == Period(3, "M")
        assert Period.parse("10y") == Period(10, "Y")
        assert Period.parse("2W") == Period(2, "W")
        assert Period.parse("30D") == Period(30, "D")

    def test_parse_tenor_invalid(self):
        """Test invalid tenor raises error."""
        with pytest.raises(ValueError):
            Period.parse("invalid")
        with pytest.raises(ValueError):
            Period.parse("3X")

    def test_months_and_years_are_comparable(self):
        assert Period.parse("12M") == Period.parse("1Y")
        assert hash(Period.parse("12M")) == hash(Period.parse("1Y"))
        assert Period.parse("18M") > Period.parse("1Y")
        assert Period.parse("2Y") >= Period.parse("24M")
        assert Period.parse("6M") < "1Y"

    def test_addition(self):
        assert Period.parse("3M") + Period.parse("3M") == Period.parse("6M")
        assert Period.parse("1Y") + Period.parse("3M") == Period.parse("15M")
        assert Period.parse("1Y") + Period.parse("1Y") == Period(2, "Y")
        assert Period.parse("1W") + Period.parse("1D") == Period.parse("8D")
        assert Period.parse("3M") * 4 == Period.parse("1Y")

    def test_mixed_units_rejected(self):
        with pytest.raises(ValueError):
            Period.parse("3M") + Period.parse("10D")
        with pytest.raises(ValueError):
            Period.parse("3M") < Period.parse("90D")

    def test_add_to_date(self):
        """Month arithmetic clamps to month end."""
        assert Period.parse("3M").add_to(date(2024, 1, 15)) == date(2024, 4, 15)
        assert Period.parse("1M").add_to(date(2024, 1, 31)) == date(2024, 2, 29)
        assert Period.parse("1Y").add_to(date(2024, 2, 29)) == date(2025, 2, 28)
        assert Period.parse("2W").add_to(date(2024, 1, 15)) == date(2024, 1, 29)

    def test_end_of_month_roll(self):
        assert Period.parse("2M").add_to(date(2024, 2, 29), end_of_month=True) == date(2024, 4, 30)

    def test_years(self):
        assert Period.parse("6M").years() == 0.5
        assert Period.parse("2Y").years() == 2.0


class TestCalendar:
    """Tests for the business day calendar."""

    def test_advance_months_adjusts(self):
        cal = Calendar()
        # 13 Apr 2024 is a Saturday
        assert cal.advance(date(2024, 1, 13), "3M") == date(2024, 4, 15)

    def test_advance_days_counts_business_days(self):
        cal = Calendar(holidays=[date(2024, 1, 16)])
        assert cal.advance(date(2024, 1, 15), "2D") == date(2024, 1, 18)


class TestSchedule:
    """Tests for coupon schedule generation."""

    def test_quarterly_schedule(self):
        schedule = generate_schedule(
            date(2024, 1, 17), date(2025, 1, 17), "3M", Calendar(),
            BusinessDayConvention.MODIFIED_FOLLOWING
        )
        assert len(schedule) == 4
        assert schedule[0].accrual_start == date(2024, 1, 17)
        assert schedule[1].accrual_end == date(2024, 7, 17)
        assert schedule[-1].accrual_end == date(2025, 1, 17)
        for a, b in zip(schedule[:-1], schedule[1:]):
            assert a.accrual_end == b.accrual_start

    def test_short_back_stub(self):
        schedule = generate_schedule(date(2024, 1, 17), date(2024, 9, 17), "3M", Calendar())
        assert len(schedule) == 3
        assert schedule[-1].accrual_start == date(2024, 7, 17)

    def test_invalid_schedule(self):
        with pytest.raises(ValueError):
            generate_schedule(date(2024, 1, 17), date(2024, 1, 17), "3M", Calendar())

"""
Day count conventions and business day adjustments.

Supported Day Counts:
- ACT/360: Actual days / 360 (Ibor accruals)
- ACT/365: Actual days / 365 (option time, vol surfaces)
- ACT/ACT: ISDA actual/actual
- 30/360: 30 days per month / 360

Business Day Conventions:
- Modified Following: next business day unless it falls in the next month
- Following: next business day
- Preceding: previous business day
- Unadjusted: no adjustment
"""

import calendar
from datetime import date, timedelta
from enum import Enum
from typing import Optional, Set


class DayCount(Enum):
    """Day count convention enumeration."""
    ACT_360 = "ACT/360"
    ACT_365 = "ACT/365"
    ACT_ACT = "ACT/ACT"
    THIRTY_360 = "30/360"

    @classmethod
    def from_string(cls, s: str) -> "DayCount":
        """Parse day count from string representation."""
        mapping = {
            "ACT/360": cls.ACT_360,
            "ACT360": cls.ACT_360,
            "ACT/365": cls.ACT_365,
            "ACT/365F": cls.ACT_365,
            "ACT365": cls.ACT_365,
            "ACT/ACT": cls.ACT_ACT,
            "ACTACT": cls.ACT_ACT,
            "30/360": cls.THIRTY_360,
            "30360": cls.THIRTY_360,
        }
        key = s.upper().replace(" ", "")
        if key in mapping:
            return mapping[key]
        raise ValueError(f"Unknown day count convention: {s}")


class BusinessDayConvention(Enum):
    """Business day adjustment convention."""
    MODIFIED_FOLLOWING = "ModifiedFollowing"
    FOLLOWING = "Following"
    PRECEDING = "Preceding"
    UNADJUSTED = "Unadjusted"


def year_fraction(start: date, end: date, day_count: DayCount) -> float:
    """
    Year fraction between two dates under a day count convention.

    Returns 0.0 when end is not after start.
    """
    if start >= end:
        return 0.0

    actual_days = (end - start).days

    if day_count == DayCount.ACT_360:
        return actual_days / 360.0

    if day_count == DayCount.ACT_365:
        return actual_days / 365.0

    if day_count == DayCount.ACT_ACT:
        if start.year == end.year:
            return actual_days / _days_in_year(start.year)
        total = (date(start.year + 1, 1, 1) - start).days / _days_in_year(start.year)
        total += end.year - start.year - 1
        total += (end - date(end.year, 1, 1)).days / _days_in_year(end.year)
        return total

    if day_count == DayCount.THIRTY_360:
        # 30/360 US (bond basis)
        d1 = min(start.day, 30)
        d2 = end.day
        if d2 == 31 and d1 == 30:
            d2 = 30
        return (360 * (end.year - start.year)
                + 30 * (end.month - start.month)
                + (d2 - d1)) / 360.0

    raise ValueError(f"Unknown day count: {day_count}")


def is_business_day(d: date, holidays: Optional[Set[date]] = None) -> bool:
    """
    Check if a date is a business day.

    Saturdays and Sundays are never business days; holidays are optional.
    """
    if d.weekday() >= 5:
        return False
    if holidays and d in holidays:
        return False
    return True


def adjust_business_day(
    d: date,
    convention: BusinessDayConvention,
    holidays: Optional[Set[date]] = None
) -> date:
    """
    Adjust a date according to a business day convention.

    Args:
        d: Date to adjust
        convention: Business day adjustment rule
        holidays: Optional set of holiday dates

    Returns:
        Adjusted date
    """
    if convention == BusinessDayConvention.UNADJUSTED or is_business_day(d, holidays):
        return d

    if convention == BusinessDayConvention.PRECEDING:
        return _roll(d, -1, holidays)

    following = _roll(d, 1, holidays)
    if convention == BusinessDayConvention.MODIFIED_FOLLOWING and following.month != d.month:
        return _roll(d, -1, holidays)
    return following


def advance_business_days(
    d: date,
    n: int,
    holidays: Optional[Set[date]] = None
) -> date:
    """
    Move n business days forward (n > 0) or backward (n < 0).

    With n == 0 the date is rolled forward to a business day.
    """
    if n == 0:
        return adjust_business_day(d, BusinessDayConvention.FOLLOWING, holidays)

    step = 1 if n > 0 else -1
    remaining = abs(n)
    result = d
    while remaining > 0:
        result += timedelta(days=step)
        if is_business_day(result, holidays):
            remaining -= 1
    return result


def _roll(d: date, step: int, holidays: Optional[Set[date]]) -> date:
    adjusted = d
    while not is_business_day(adjusted, holidays):
        adjusted += timedelta(days=step)
    return adjusted


def _days_in_year(year: int) -> int:
    return 366 if calendar.isleap(year) else 365


__all__ = [
    "DayCount",
    "BusinessDayConvention",
    "year_fraction",
    "is_business_day",
    "adjust_business_day",
    "advance_business_days",
]

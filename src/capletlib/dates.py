"""
Date utilities for cap/floor schedules.

Provides:
- Period: tenor arithmetic ("3M" + "3M" == "6M", "12M" == "1Y")
- Calendar: weekend + holiday business-day calendar
- Schedule generation for Ibor coupon legs
"""

import re
from dataclasses import dataclass
from datetime import date, timedelta
from functools import total_ordering
from typing import Iterable, List, Optional, Set, Tuple, Union

from .conventions import (
    BusinessDayConvention,
    adjust_business_day,
    advance_business_days,
    is_business_day,
)


@total_ordering
class Period:
    """
    A tenor such as 3M or 2Y.

    Months and years compare and add with each other, as do days and weeks.
    Mixing the two families raises ValueError since the relation depends on
    the start date.
    """

    # Tenor regex pattern: number + unit (D/W/M/Y)
    TENOR_PATTERN = re.compile(r'^(\d+)([DWMY])$', re.IGNORECASE)
    UNITS = ("D", "W", "M", "Y")

    __slots__ = ("amount", "unit")

    def __init__(self, amount: int, unit: str):
        unit = unit.upper()
        if unit not in self.UNITS:
            raise ValueError(f"Unknown tenor unit: {unit}")
        if amount < 0:
            raise ValueError(f"Negative period not supported: {amount}{unit}")
        self.amount = int(amount)
        self.unit = unit

    @classmethod
    def parse(cls, tenor: Union[str, "Period"]) -> "Period":
        """
        Parse a tenor string like "1D", "3M", "2Y".

        Raises:
            ValueError: If tenor format is invalid
        """
        if isinstance(tenor, Period):
            return tenor
        match = cls.TENOR_PATTERN.match(str(tenor).upper().strip())
        if not match:
            raise ValueError(f"Invalid tenor format: {tenor}. Expected format like '3M', '2Y'")
        return cls(int(match.group(1)), match.group(2))

    @property
    def is_monthly(self) -> bool:
        return self.unit in ("M", "Y")

    def _key(self) -> Tuple[str, int]:
        if self.unit == "Y":
            return ("M", self.amount * 12)
        if self.unit == "W":
            return ("D", self.amount * 7)
        return (self.unit, self.amount)

    def _check_family(self, other: "Period") -> None:
        if self.is_monthly != other.is_monthly:
            raise ValueError(f"Cannot relate {self} and {other}: incompatible units")

    def __add__(self, other: Union[str, "Period"]) -> "Period":
        other = Period.parse(other)
        if self.amount == 0:
            return other
        if other.amount == 0:
            return self
        if self.unit == other.unit:
            return Period(self.amount + other.amount, self.unit)
        self._check_family(other)
        family, total = self._key()[0], self._key()[1] + other._key()[1]
        return Period(total, family)

    __radd__ = __add__

    def __mul__(self, n: int) -> "Period":
        return Period(self.amount * n, self.unit)

    __rmul__ = __mul__

    def __eq__(self, other) -> bool:
        if isinstance(other, str):
            other = Period.parse(other)
        if not isinstance(other, Period):
            return NotImplemented
        if self.amount == 0 and other.amount == 0:
            return True
        return self._key() == other._key()

    def __lt__(self, other: Union[str, "Period"]) -> bool:
        other = Period.parse(other)
        self._check_family(other)
        return self._key()[1] < other._key()[1]

    def __hash__(self) -> int:
        if self.amount == 0:
            return hash(0)
        return hash(self._key())

    def __str__(self) -> str:
        return f"{self.amount}{self.unit}"

    def __repr__(self) -> str:
        return f"Period('{self}')"

    def years(self) -> float:
        """Approximate length in years."""
        if self.unit == "D":
            return self.amount / 365.0
        if self.unit == "W":
            return self.amount * 7 / 365.0
        if self.unit == "M":
            return self.amount / 12.0
        return float(self.amount)

    def add_to(self, start: date, end_of_month: bool = False) -> date:
        """
        Add this period to a date, unadjusted.

        Months and years keep the day of month where possible and clamp
        to month end otherwise.
        """
        if self.unit == "D":
            return start + timedelta(days=self.amount)
        if self.unit == "W":
            return start + timedelta(weeks=self.amount)

        months = self.amount * (12 if self.unit == "Y" else 1)
        year = start.year + (start.month + months - 1) // 12
        month = (start.month + months - 1) % 12 + 1
        last_day = _days_in_month(year, month)
        if end_of_month and start.day == _days_in_month(start.year, start.month):
            return date(year, month, last_day)
        return date(year, month, min(start.day, last_day))


class Calendar:
    """
    Business day calendar: weekends plus an optional holiday set.

    Attributes:
        name: Calendar name for display
        holidays: Set of non-business weekdays
    """

    def __init__(self, name: str = "WeekendsOnly", holidays: Optional[Iterable[date]] = None):
        self.name = name
        self.holidays: Set[date] = set(holidays or ())

    def is_business_day(self, d: date) -> bool:
        return is_business_day(d, self.holidays)

    def adjust(
        self,
        d: date,
        convention: BusinessDayConvention = BusinessDayConvention.FOLLOWING
    ) -> date:
        return adjust_business_day(d, convention, self.holidays)

    def advance_days(self, d: date, n: int) -> date:
        """Move n business days (negative n moves backward)."""
        return advance_business_days(d, n, self.holidays)

    def advance(
        self,
        d: date,
        period: Union[str, Period],
        convention: BusinessDayConvention = BusinessDayConvention.FOLLOWING,
        end_of_month: bool = False
    ) -> date:
        """
        Advance a date by a period.

        Day periods count business days; other units move the calendar
        date and then adjust with the given convention.
        """
        period = Period.parse(period)
        if period.unit == "D":
            return self.advance_days(d, period.amount)
        return self.adjust(period.add_to(d, end_of_month), convention)

    def __repr__(self) -> str:
        return f"Calendar({self.name}, holidays={len(self.holidays)})"


@dataclass
class AccrualPeriod:
    """One coupon period of an Ibor leg."""
    accrual_start: date
    accrual_end: date
    payment_date: date


def generate_schedule(
    start: date,
    end: date,
    tenor: Union[str, Period],
    calendar: Calendar,
    convention: BusinessDayConvention = BusinessDayConvention.MODIFIED_FOLLOWING,
    end_of_month: bool = False
) -> List[AccrualPeriod]:
    """
    Generate a forward schedule of coupon periods from start to end.

    Unadjusted dates are rolled from the start date by whole multiples of
    the tenor; the final period is a short back stub when the tenor does not
    divide the schedule. Accrual and payment dates are adjusted with the
    business day convention.

    Args:
        start: Schedule start (unadjusted effective date)
        end: Schedule end (unadjusted maturity)
        tenor: Coupon frequency as a period
        calendar: Business day calendar
        convention: Business day adjustment
        end_of_month: Keep month-end rolls on month end

    Returns:
        List of accrual periods, in order
    """
    tenor = Period.parse(tenor)
    if tenor.amount == 0:
        raise ValueError("Schedule tenor must be positive")
    if end <= start:
        raise ValueError("Schedule end must be after start")

    unadjusted = [start]
    k = 1
    while True:
        next_date = (tenor * k).add_to(start, end_of_month)
        if next_date >= end:
            break
        unadjusted.append(next_date)
        k += 1
    unadjusted.append(end)

    adjusted = [calendar.adjust(d, convention) for d in unadjusted]
    return [
        AccrualPeriod(accrual_start=s, accrual_end=e, payment_date=e)
        for s, e in zip(adjusted[:-1], adjusted[1:])
    ]


def _days_in_month(year: int, month: int) -> int:
    """Return number of days in a month."""
    if month in (1, 3, 5, 7, 8, 10, 12):
        return 31
    elif month in (4, 6, 9, 11):
        return 30
    elif month == 2:
        if (year % 4 == 0 and year % 100 != 0) or (year % 400 == 0):
            return 29
        return 28
    raise ValueError(f"Invalid month: {month}")


__all__ = [
    "Period",
    "Calendar",
    "AccrualPeriod",
    "generate_schedule",
]

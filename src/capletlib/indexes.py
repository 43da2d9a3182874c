"""
Ibor-style interest rate index.

The index knows its tenor, fixing calendar, fixing lag and accrual day
count, and forecasts fixings off a linked forecasting curve:

    L(fixing) = (P(value) / P(maturity) - 1) / tau(value, maturity)

Relinking the forecast curve publishes a change; so does any change of
the curve itself, through the combined state token.
"""

from datetime import date
from typing import Iterable, Optional, Tuple, Union

from .conventions import BusinessDayConvention, DayCount, year_fraction
from .curves.curve import Curve
from .dates import Calendar, Period
from .observable import Observable


class IborIndex(Observable):
    """
    Interest rate index with a fixed tenor.

    Attributes:
        name: Index name (e.g. "USD-LIBOR-3M")
        fixing_days: Business days between fixing and value date
        business_day: Adjustment for maturity dates
        end_of_month: Month-end roll rule
    """

    def __init__(
        self,
        name: str,
        tenor: Union[str, Period],
        forecast_curve: Optional[Curve] = None,
        fixing_days: int = 2,
        day_count: DayCount = DayCount.ACT_360,
        holidays: Optional[Iterable[date]] = None,
        business_day: BusinessDayConvention = BusinessDayConvention.MODIFIED_FOLLOWING,
        end_of_month: bool = False
    ):
        super().__init__()
        self.name = name
        self._tenor = Period.parse(tenor)
        if self._tenor.amount == 0:
            raise ValueError("Index tenor must be positive")
        self.fixing_days = fixing_days
        self._day_count = day_count
        self._calendar = Calendar(f"{name} fixing", holidays)
        self.business_day = business_day
        self.end_of_month = end_of_month
        self._forecast_curve = forecast_curve

    def tenor(self) -> Period:
        return self._tenor

    def fixing_calendar(self) -> Calendar:
        return self._calendar

    def day_count(self) -> DayCount:
        return self._day_count

    def forecast_curve(self) -> Optional[Curve]:
        return self._forecast_curve

    def link_to(self, curve: Curve) -> None:
        """Relink the forecasting curve."""
        with self.changing():
            self._forecast_curve = curve

    def state_token(self) -> Tuple[int, ...]:
        curve_token = self._forecast_curve.state_token() if self._forecast_curve else (-1,)
        return (self._sequence, id(self._forecast_curve)) + curve_token

    def is_changing(self) -> bool:
        curve = self._forecast_curve
        return super().is_changing() or (curve is not None and curve.is_changing())

    def wait_for_writers(self) -> None:
        super().wait_for_writers()
        if self._forecast_curve is not None:
            self._forecast_curve.wait_for_writers()

    def value_date(self, fixing_date: date) -> date:
        """Start of the accrual period fixed on fixing_date."""
        return self._calendar.advance_days(fixing_date, self.fixing_days)

    def fixing_date(self, value_date: date) -> date:
        """Fixing date of a period starting on value_date."""
        return self._calendar.advance_days(value_date, -self.fixing_days)

    def maturity_date(self, value_date: date) -> date:
        """End of the accrual period starting on value_date."""
        return self._calendar.advance(
            value_date, self._tenor, self.business_day, self.end_of_month
        )

    def forecast_fixing(self, fixing_date: date) -> float:
        """
        Forecast the index fixing on a given date off the forecast curve.

        Raises:
            RuntimeError: If no forecast curve is linked
        """
        if self._forecast_curve is None:
            raise RuntimeError(f"{self.name}: no forecasting curve linked")
        start = self.value_date(fixing_date)
        end = self.maturity_date(start)
        tau = year_fraction(start, end, self._day_count)
        df_start = self._forecast_curve.discount_factor(start)
        df_end = self._forecast_curve.discount_factor(end)
        return (df_start / df_end - 1.0) / tau

    def __repr__(self) -> str:
        return f"IborIndex({self.name}, tenor={self._tenor}, fixing_days={self.fixing_days})"


__all__ = ["IborIndex"]

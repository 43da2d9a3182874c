"""
Pricing adapter between the optionlet bootstrap and cap/floor pricing.

Wraps instrument construction and flat-volatility Black pricing behind a
single call, so the bootstrap only deals with lengths, strikes and
volatilities.
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional, Union

from ..conventions import DayCount
from ..curves.curve import Curve
from ..dates import Period
from ..indexes import IborIndex
from ..instruments.capfloor import (
    BlackCapFloorEngine,
    CapFloor,
    CapFloorType,
    make_capfloor,
)


@dataclass
class PricedCapFloor:
    """Result from cap/floor pricing."""
    capfloor: CapFloor
    npv: float
    discount_at_fixing: float
    discount_at_payment: float


class CapFloorPricingAdapter:
    """
    Prices cap/floors of a given length on one index.

    A new flat-volatility Black engine is built for every price call.

    Attributes:
        index: Underlying index
        day_count: Day count for option times (the surface's)
        discount_curve: Discounting curve; defaults to the index forecast curve
        reference_date: Option time origin
        displacement: Shift for shifted-lognormal pricing
    """

    def __init__(
        self,
        index: IborIndex,
        day_count: DayCount = DayCount.ACT_365,
        discount_curve: Optional[Curve] = None,
        reference_date: Optional[date] = None,
        displacement: float = 0.0
    ):
        self.index = index
        self.day_count = day_count
        self.discount_curve = discount_curve
        self.reference_date = reference_date
        self.displacement = displacement

    def engine(self, volatility: float) -> BlackCapFloorEngine:
        return BlackCapFloorEngine(
            volatility,
            self.day_count,
            discount_curve=self.discount_curve,
            displacement=self.displacement,
            reference_date=self.reference_date,
        )

    def make(
        self,
        length: Union[str, Period],
        strike: float,
        volatility: float,
        cap_floor_type: Union[CapFloorType, str] = CapFloorType.CAP
    ) -> CapFloor:
        """Build a spot-starting cap/floor with its engine attached."""
        return make_capfloor(
            cap_floor_type, length, self.index, strike,
            engine=self.engine(volatility),
            evaluation_date=self.reference_date,
        )

    def price(
        self,
        length: Union[str, Period],
        strike: float,
        volatility: float,
        cap_floor_type: Union[CapFloorType, str]
    ) -> PricedCapFloor:
        """
        Price a cap/floor.

        Args:
            length: Cap/floor length
            strike: Strike rate
            volatility: Flat Black volatility
            cap_floor_type: CAP or FLOOR

        Returns:
            PricedCapFloor with NPV and discount factors at the last
            optionlet's fixing and payment dates
        """
        capfloor = self.make(length, strike, volatility, cap_floor_type)
        curve = capfloor.discount_curve()
        last = capfloor.last_coupon()
        return PricedCapFloor(
            capfloor=capfloor,
            npv=capfloor.npv(),
            discount_at_fixing=curve.discount_factor(last.fixing_date),
            discount_at_payment=curve.discount_factor(last.payment_date),
        )

    def last_fixing_date(self, length: Union[str, Period]) -> date:
        """Fixing date of the last optionlet of a cap/floor of this length."""
        return self.make(length, 0.0, 0.0).last_fixing_date()

    def forecast_fixing(self, fixing_date: date) -> float:
        return self.index.forecast_fixing(fixing_date)

    def discount(self, d: date) -> float:
        curve = self.discount_curve or self.index.forecast_curve()
        if curve is None:
            raise RuntimeError("No discount curve available")
        return curve.discount_factor(d)


__all__ = [
    "PricedCapFloor",
    "CapFloorPricingAdapter",
]

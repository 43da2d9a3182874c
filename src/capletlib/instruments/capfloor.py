"""
Cap/Floor instruments and Black pricing engine.

A cap is a strip of caplets (calls on successive Ibor fixings), a floor a
strip of floorlets (puts). With a flat Black volatility sigma:

    V = sum_i tau_i * DF(pay_i) * Black(F_i, K, sigma * sqrt(t_i))

where:
    - tau_i = accrual period of coupon i (index day count)
    - DF(pay_i) = discount factor to the payment date
    - F_i = index forecast for the fixing date of coupon i
    - t_i = year fraction from the reference date to the fixing date
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import List, Optional, Union

from ..conventions import DayCount, year_fraction
from ..curves.curve import Curve
from ..dates import Period, generate_schedule
from ..indexes import IborIndex
from ..options.base_models import OptionType, black_formula
from ..settings import Settings


class CapFloorType(Enum):
    """Cap (strip of calls) or floor (strip of puts)."""
    CAP = "CAP"
    FLOOR = "FLOOR"

    @property
    def option_type(self) -> OptionType:
        return OptionType.CALL if self is CapFloorType.CAP else OptionType.PUT

    def __str__(self) -> str:
        return self.value


@dataclass
class FloatingCoupon:
    """One Ibor coupon period underlying a caplet/floorlet."""
    fixing_date: date
    accrual_start: date
    accrual_end: date
    payment_date: date
    accrual_period: float


class BlackCapFloorEngine:
    """
    Flat-volatility Black engine for caps and floors.

    Attributes:
        volatility: Flat Black volatility applied to every optionlet
        day_count: Day count turning fixing dates into option times
        discount_curve: Curve for discounting; defaults to the index
            forecasting curve
        displacement: Shift for shifted-lognormal pricing
        reference_date: Option time origin; defaults to the evaluation date
    """

    def __init__(
        self,
        volatility: float,
        day_count: DayCount = DayCount.ACT_365,
        discount_curve: Optional[Curve] = None,
        displacement: float = 0.0,
        reference_date: Optional[date] = None
    ):
        if volatility < 0:
            raise ValueError(f"Negative volatility: {volatility}")
        self.volatility = volatility
        self.day_count = day_count
        self.discount_curve = discount_curve
        self.displacement = displacement
        self.reference_date = reference_date

    def discounting_curve(self, capfloor: "CapFloor") -> Curve:
        curve = self.discount_curve or capfloor.index.forecast_curve()
        if curve is None:
            raise RuntimeError("No discount curve: set one on the engine or link the index")
        return curve

    def optionlet_prices(self, capfloor: "CapFloor") -> List[float]:
        """Price each optionlet of the instrument."""
        reference = self.reference_date or Settings.instance().evaluation_date
        curve = self.discounting_curve(capfloor)
        option_type = capfloor.cap_floor_type.option_type

        prices = []
        for coupon in capfloor.coupons:
            t = year_fraction(reference, coupon.fixing_date, self.day_count)
            forward = capfloor.index.forecast_fixing(coupon.fixing_date)
            df = curve.discount_factor(coupon.payment_date)
            std_dev = self.volatility * t ** 0.5
            prices.append(
                coupon.accrual_period * black_formula(
                    option_type, capfloor.strike, forward, std_dev, df, self.displacement
                )
            )
        return prices

    def calculate(self, capfloor: "CapFloor") -> float:
        return float(sum(self.optionlet_prices(capfloor)))


@dataclass
class CapFloor:
    """
    Cap or floor on an Ibor index.

    Attributes:
        cap_floor_type: CAP or FLOOR
        index: Underlying index
        strike: Strike rate
        coupons: Optionlet periods, in fixing order
        engine: Pricing engine (required for npv)
    """
    cap_floor_type: CapFloorType
    index: IborIndex
    strike: float
    coupons: List[FloatingCoupon]
    engine: Optional[BlackCapFloorEngine] = field(default=None, repr=False)

    def __post_init__(self):
        if not self.coupons:
            raise ValueError("CapFloor needs at least one optionlet")

    def npv(self) -> float:
        if self.engine is None:
            raise RuntimeError("No pricing engine set")
        return self.engine.calculate(self)

    def optionlet_prices(self) -> List[float]:
        if self.engine is None:
            raise RuntimeError("No pricing engine set")
        return self.engine.optionlet_prices(self)

    def discount_curve(self) -> Curve:
        if self.engine is None:
            raise RuntimeError("No pricing engine set")
        return self.engine.discounting_curve(self)

    def start_date(self) -> date:
        return self.coupons[0].accrual_start

    def maturity_date(self) -> date:
        return self.coupons[-1].accrual_end

    def last_fixing_date(self) -> date:
        return self.coupons[-1].fixing_date

    def last_coupon(self) -> FloatingCoupon:
        return self.coupons[-1]


def make_capfloor(
    cap_floor_type: Union[CapFloorType, str],
    length: Union[str, Period],
    index: IborIndex,
    strike: float,
    forward_start: Union[str, Period] = "0D",
    engine: Optional[BlackCapFloorEngine] = None,
    first_caplet_excluded: Optional[bool] = None,
    evaluation_date: Optional[date] = None
) -> CapFloor:
    """
    Build a cap/floor of a given length on an index.

    The instrument starts at the index spot date of the evaluation date
    (plus forward_start) and pays at the index frequency. For spot-starting
    instruments the first optionlet is excluded by default, since its rate
    fixes today: a length of two index tenors holds a single optionlet.

    Args:
        cap_floor_type: CAP or FLOOR
        length: Instrument length from the start date
        index: Underlying index (provides tenor, calendar and fixing lag)
        strike: Strike rate
        forward_start: Delay between spot date and start date
        engine: Pricing engine
        first_caplet_excluded: Override of the first-optionlet rule
        evaluation_date: Defaults to the global evaluation date

    Returns:
        CapFloor
    """
    cap_floor_type = CapFloorType(cap_floor_type)
    length = Period.parse(length)
    forward_start = Period.parse(forward_start)
    if length.amount == 0:
        raise ValueError("CapFloor length must be positive")

    calendar = index.fixing_calendar()
    today = evaluation_date or Settings.instance().evaluation_date
    spot = calendar.advance_days(calendar.adjust(today), index.fixing_days)
    start = calendar.advance(spot, forward_start, index.business_day) \
        if forward_start.amount else spot
    end = length.add_to(start, index.end_of_month)

    schedule = generate_schedule(
        start, end, index.tenor(), calendar, index.business_day, index.end_of_month
    )
    coupons = [
        FloatingCoupon(
            fixing_date=index.fixing_date(p.accrual_start),
            accrual_start=p.accrual_start,
            accrual_end=p.accrual_end,
            payment_date=p.payment_date,
            accrual_period=year_fraction(p.accrual_start, p.accrual_end, index.day_count()),
        )
        for p in schedule
    ]

    if first_caplet_excluded is None:
        first_caplet_excluded = forward_start.amount == 0
    if first_caplet_excluded:
        coupons = coupons[1:]

    return CapFloor(cap_floor_type, index, strike, coupons, engine)


__all__ = [
    "CapFloorType",
    "FloatingCoupon",
    "BlackCapFloorEngine",
    "CapFloor",
    "make_capfloor",
]

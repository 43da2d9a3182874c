"""
Discount / forecasting curve.

The Curve class provides:
- Discount factor P(0,t)
- Zero rate z(t) (continuously compounded)
- Simple forward rate f(t1, t2) under a day count

Times are year fractions from the anchor date. The curve is an Observable:
adding nodes publishes a change so that dependent indexes and strippers
recompute.
"""

from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Tuple, Union
import numpy as np

from ..conventions import DayCount, year_fraction
from ..observable import Observable
from .interpolation import Interpolator, create_interpolator


@dataclass
class CurveNode:
    """A single point on the curve."""
    time: float  # Year fraction from anchor
    discount_factor: float

    @property
    def zero_rate(self) -> float:
        if self.time <= 0:
            return 0.0
        return float(-np.log(self.discount_factor) / self.time)


class Curve(Observable):
    """
    Yield curve with interpolation.

    Attributes:
        anchor_date: Valuation date (time 0)
        day_count: Day count for time calculations
        interpolation_method: "linear" (zero rates) or "log_linear" (DFs)

    Conventions:
        - Zero rates are continuously compounded
        - Discount factor at t=0 is 1.0
    """

    def __init__(
        self,
        anchor_date: date,
        day_count: DayCount = DayCount.ACT_365,
        interpolation_method: str = "log_linear"
    ):
        super().__init__()
        self.anchor_date = anchor_date
        self.day_count = day_count
        self.interpolation_method = interpolation_method

        self._nodes: List[CurveNode] = [CurveNode(time=0.0, discount_factor=1.0)]
        self._interpolator: Optional[Interpolator] = None

    def add_node(self, time: float, discount_factor: float) -> None:
        """
        Add or replace a discount factor node.

        Args:
            time: Year fraction from anchor date
            discount_factor: Discount factor P(0,t)
        """
        if time < 0:
            raise ValueError("Time must be non-negative")
        if discount_factor <= 0:
            raise ValueError(f"Invalid discount factor: {discount_factor}")

        node = CurveNode(time=time, discount_factor=discount_factor)
        with self.changing():
            nodes = [n for n in self._nodes if abs(n.time - time) >= 1e-10]
            nodes.append(node)
            nodes.sort(key=lambda n: n.time)
            self._nodes = nodes
            self._interpolator = None

    def add_node_from_date(self, d: date, discount_factor: float) -> None:
        """Add a node using a date instead of year fraction."""
        self.add_node(self.time_from_date(d), discount_factor)

    def time_from_date(self, d: date) -> float:
        return year_fraction(self.anchor_date, d, self.day_count)

    def _ensure_fitted(self) -> Interpolator:
        if self._interpolator is None:
            if len(self._nodes) < 2:
                raise RuntimeError("Curve not fitted - add more nodes")
            interp = create_interpolator(self.interpolation_method)
            times = np.array([n.time for n in self._nodes])
            if self.interpolation_method == "linear":
                values = np.array([n.zero_rate for n in self._nodes])
                values[0] = values[1]
            else:
                values = np.array([n.discount_factor for n in self._nodes])
            interp.fit(times, values)
            self._interpolator = interp
        return self._interpolator

    def discount_factor(self, t: Union[float, date]) -> float:
        """
        Get discount factor P(0,t).

        Args:
            t: Year fraction or date
        """
        if isinstance(t, date):
            t = self.time_from_date(t)
        if t <= 0:
            return 1.0
        return self._ensure_fitted().discount_factor(t)

    # Short alias
    discount = discount_factor

    def zero_rate(self, t: Union[float, date]) -> float:
        """Continuously compounded zero rate to t."""
        if isinstance(t, date):
            t = self.time_from_date(t)
        if t <= 0:
            t = 1e-4
        return float(-np.log(self.discount_factor(t)) / t)

    def forward_rate(
        self,
        start: date,
        end: date,
        day_count: Optional[DayCount] = None
    ) -> float:
        """
        Simply compounded forward rate between two dates.

        Args:
            start: Accrual start
            end: Accrual end
            day_count: Accrual day count (defaults to the curve's)
        """
        tau = year_fraction(start, end, day_count or self.day_count)
        if tau <= 0:
            raise ValueError("End must be greater than start")
        return (self.discount_factor(start) / self.discount_factor(end) - 1.0) / tau

    def get_nodes(self) -> List[Tuple[float, float]]:
        """List of (time, discount_factor) tuples."""
        return [(n.time, n.discount_factor) for n in self._nodes]

    def __repr__(self) -> str:
        return (f"Curve(anchor={self.anchor_date}, nodes={len(self._nodes)}, "
                f"method={self.interpolation_method})")


def create_flat_curve(
    anchor_date: date,
    rate: float,
    max_tenor_years: float = 30.0,
    day_count: DayCount = DayCount.ACT_365
) -> Curve:
    """
    Create a flat continuously compounded curve.

    Args:
        anchor_date: Valuation date
        rate: Flat continuously compounded rate
        max_tenor_years: Last node
        day_count: Curve day count
    """
    curve = Curve(anchor_date, day_count, interpolation_method="log_linear")
    for t in [0.25, 0.5, 1, 2, 5, 10, 20, max_tenor_years]:
        if t <= max_tenor_years:
            curve.add_node(t, float(np.exp(-rate * t)))
    return curve


__all__ = [
    "Curve",
    "CurveNode",
    "create_flat_curve",
]

"""
Cap/floor term volatility surface.

Flat (term) Black volatilities quoted by cap/floor length and strike. Each
quote is the single volatility that prices the whole cap/floor of that
length with the Black engine.

Provides:
- CapFloorTermVolSurface: grid of quotes, linear in option time and strike
- Loading quotes from a long-format DataFrame or CSV
"""

from datetime import date
from typing import Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from ..conventions import BusinessDayConvention, DayCount, year_fraction
from ..dates import Calendar, Period
from ..observable import Observable
from ..settings import Settings


class CapFloorTermVolSurface(Observable):
    """
    Cap/floor term volatility surface.

    Rows are cap/floor lengths (option tenors), columns are strikes.
    Queries at a quoted (length, strike) node return the quote exactly;
    in between, volatilities are linear in option time and in strike.

    Attributes:
        calendar: Calendar used to turn lengths into option dates
        business_day: Adjustment applied to option dates
    """

    def __init__(
        self,
        option_tenors: Sequence[Union[str, Period]],
        strikes: Sequence[float],
        volatilities: Union[np.ndarray, Sequence[Sequence[float]]],
        day_count: DayCount = DayCount.ACT_365,
        reference_date: Optional[date] = None,
        calendar: Optional[Calendar] = None,
        business_day: BusinessDayConvention = BusinessDayConvention.FOLLOWING
    ):
        super().__init__()
        tenors = tuple(Period.parse(t) for t in option_tenors)
        strikes = tuple(float(k) for k in strikes)

        if not tenors:
            raise ValueError("Need at least one option tenor")
        if not strikes:
            raise ValueError("Need at least one strike")
        if any(b <= a for a, b in zip(tenors[:-1], tenors[1:])):
            raise ValueError("Option tenors must be strictly increasing")
        if any(b <= a for a, b in zip(strikes[:-1], strikes[1:])):
            raise ValueError("Strikes must be strictly increasing")

        self._option_tenors = tenors
        self._strikes = strikes
        self._day_count = day_count
        self._reference_date = reference_date
        self.calendar = calendar or Calendar()
        self.business_day = business_day
        self._vols = self._check_vols(volatilities)

    def _check_vols(self, volatilities) -> np.ndarray:
        vols = np.array(volatilities, dtype=float)
        expected = (len(self._option_tenors), len(self._strikes))
        if vols.shape != expected:
            raise ValueError(f"Volatility matrix shape {vols.shape} != {expected}")
        if np.any(~np.isfinite(vols)) or np.any(vols < 0):
            raise ValueError("Volatilities must be finite and non-negative")
        vols.setflags(write=False)
        return vols

    # Read accessors

    def strikes(self) -> Tuple[float, ...]:
        return self._strikes

    def option_tenors(self) -> Tuple[Period, ...]:
        return self._option_tenors

    @property
    def max_tenor(self) -> Period:
        return self._option_tenors[-1]

    def day_count(self) -> DayCount:
        return self._day_count

    def reference_date(self) -> date:
        """Fixed reference date, or the evaluation date when floating."""
        if self._reference_date is not None:
            return self._reference_date
        return Settings.instance().evaluation_date

    def volatilities(self) -> np.ndarray:
        return self._vols

    def state_token(self) -> Tuple[int, ...]:
        if self._reference_date is None:
            return (self._sequence,) + Settings.instance().state_token()
        return (self._sequence,)

    def option_date(self, length: Union[str, Period]) -> date:
        return self.calendar.advance(
            self.reference_date(), Period.parse(length), self.business_day
        )

    def option_time(self, length: Union[str, Period]) -> float:
        return year_fraction(self.reference_date(), self.option_date(length), self._day_count)

    def option_times(self) -> np.ndarray:
        return np.array([self.option_time(t) for t in self._option_tenors])

    def volatility(
        self,
        length: Union[str, Period, float],
        strike: float,
        extrapolate: bool = False
    ) -> float:
        """
        Flat cap/floor volatility for a length and strike.

        Args:
            length: Cap/floor length as a period, or an option time in years
            strike: Strike rate
            extrapolate: Allow flat extrapolation outside the quoted grid

        Raises:
            ValueError: If the point is outside the grid and extrapolate is False
        """
        t = float(length) if isinstance(length, (int, float)) else self.option_time(length)
        times = self.option_times()

        if not extrapolate:
            if not times[0] - 1e-12 <= t <= times[-1] + 1e-12:
                raise ValueError(
                    f"Length {length} outside surface range "
                    f"[{self._option_tenors[0]}, {self._option_tenors[-1]}]"
                )
            if not self._strikes[0] - 1e-12 <= strike <= self._strikes[-1] + 1e-12:
                raise ValueError(
                    f"Strike {strike} outside surface range "
                    f"[{self._strikes[0]}, {self._strikes[-1]}]"
                )

        # np.interp clamps, which is the flat extrapolation
        by_tenor = np.array([np.interp(strike, self._strikes, row) for row in self._vols])
        return float(np.interp(t, times, by_tenor))

    # Mutators (publish a change)

    def set_volatilities(self, volatilities) -> None:
        """Replace the whole volatility matrix."""
        vols = self._check_vols(volatilities)
        with self.changing():
            self._vols = vols

    def set_volatility(self, tenor_index: int, strike_index: int, vol: float) -> None:
        """Replace a single quote."""
        vols = self._vols.copy()
        vols[tenor_index, strike_index] = vol
        self.set_volatilities(vols)

    # Conversions

    def to_frame(self) -> pd.DataFrame:
        """Quotes as a DataFrame indexed by tenor, one column per strike."""
        return pd.DataFrame(
            self._vols,
            index=pd.Index([str(t) for t in self._option_tenors], name="tenor"),
            columns=pd.Index(list(self._strikes), name="strike"),
        )

    @classmethod
    def from_frame(
        cls,
        quotes: pd.DataFrame,
        **kwargs
    ) -> "CapFloorTermVolSurface":
        """
        Build a surface from long-format quotes.

        Expected columns (case-insensitive): tenor, strike, vol.
        Every (tenor, strike) pair must be quoted exactly once.

        Args:
            quotes: Quotes DataFrame
            **kwargs: Passed to the constructor (day_count, reference_date, ...)
        """
        df = quotes.copy()
        df.columns = [str(c).strip().lower() for c in df.columns]
        missing = {"tenor", "strike", "vol"} - set(df.columns)
        if missing:
            raise ValueError(f"Cap/floor vol quotes missing columns: {sorted(missing)}")

        df["tenor"] = df["tenor"].map(lambda t: str(Period.parse(str(t).strip())))
        df["strike"] = df["strike"].astype(float)
        df["vol"] = df["vol"].astype(float)
        if df.duplicated(["tenor", "strike"]).any():
            raise ValueError("Duplicate (tenor, strike) quotes")

        grid = df.pivot(index="tenor", columns="strike", values="vol")
        if grid.isna().any().any():
            raise ValueError("Cap/floor vol quotes do not form a full tenor x strike grid")

        tenors = sorted(grid.index, key=Period.parse)
        grid = grid.loc[tenors].sort_index(axis=1)
        return cls(tenors, list(grid.columns), grid.to_numpy(), **kwargs)


def load_capfloor_vols(filepath: str, **kwargs) -> CapFloorTermVolSurface:
    """
    Load a cap/floor term vol surface from a CSV file.

    Expected CSV format:
    tenor, strike, vol

    Args:
        filepath: Path to CSV file
        **kwargs: Passed to the surface constructor
    """
    return CapFloorTermVolSurface.from_frame(pd.read_csv(filepath), **kwargs)


__all__ = [
    "CapFloorTermVolSurface",
    "load_capfloor_vols",
]

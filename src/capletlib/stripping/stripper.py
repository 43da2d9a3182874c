"""
Optionlet stripping from cap/floor term volatilities.

For every strike the bootstrap walks the tenor ladder in increasing order:

    1. pick a floor when strike < switch strike of the row, else a cap
       (out-of-the-money instruments invert better)
    2. read the flat vol of the cap/floor of that length and strike
    3. price the cap/floor with the flat vol
    4. optionlet price = cap/floor price - previous cap/floor price
    5. annuity = accrual period * discount factor
    6. invert Black for the std dev, starting from the previous row's
    7. optionlet vol = std dev / sqrt(time to fixing)

Each column is a fold over the rows carrying (previous price, previous std
dev); columns are independent and may run in parallel.

Results are computed lazily on first read and cached against the versions
of the surface, the index and the global evaluation date. A change in any
of them makes the cache stale; the next read recomputes everything.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from ..config import StripperConfig
from ..conventions import year_fraction
from ..curves.curve import Curve
from ..dates import Period
from ..exceptions import BootstrapInversionError
from ..indexes import IborIndex
from ..instruments.capfloor import CapFloor, CapFloorType
from ..observable import Observable
from ..options.base_models import OptionType, implied_std_dev
from ..settings import Settings
from ..vol.capfloor_surface import CapFloorTermVolSurface
from .adapter import CapFloorPricingAdapter
from .ladder import TenorLadder, build_tenor_ladder, normalize_switch_strikes

logger = logging.getLogger(__name__)

GRID_NAMES = (
    "capfloor_prices",
    "optionlet_prices",
    "capfloor_vols",
    "optionlet_std_devs",
    "optionlet_vols",
)


@dataclass(frozen=True)
class OptionletRow:
    """Per-tenor quantities, independent across rows."""
    optionlet_tenor: Period
    capfloor_length: Period
    fixing_date: date
    payment_date: date
    accrual_period: float
    fixing_time: float
    atm_rate: float
    switch_strike: float


@dataclass
class ColumnResult:
    """Bootstrap output for one strike; failure set when a cell did not invert."""
    capfloor_prices: List[float] = field(default_factory=list)
    optionlet_prices: List[float] = field(default_factory=list)
    capfloor_vols: List[float] = field(default_factory=list)
    std_devs: List[float] = field(default_factory=list)
    vols: List[float] = field(default_factory=list)
    capfloors: List[CapFloor] = field(default_factory=list)
    option_types: List[OptionType] = field(default_factory=list)
    failure: Optional[BootstrapInversionError] = None


@dataclass(frozen=True)
class StrippingResults:
    """A complete, consistent snapshot of all stripped quantities."""
    rows: Tuple[OptionletRow, ...]
    strikes: Tuple[float, ...]
    capfloor_prices: np.ndarray
    optionlet_prices: np.ndarray
    capfloor_vols: np.ndarray
    optionlet_std_devs: np.ndarray
    optionlet_vols: np.ndarray
    capfloors: Tuple[Tuple[CapFloor, ...], ...]
    option_types: Tuple[Tuple[OptionType, ...], ...]


def _read_only(values) -> np.ndarray:
    arr = np.array(values, dtype=float)
    arr.setflags(write=False)
    return arr


class OptionletStripper:
    """
    Strips optionlet volatilities from a cap/floor term vol surface.

    Grids are N x M numpy arrays: rows follow the tenor ladder, columns the
    surface strikes. All read accessors trigger the (lazy) calculation.

    Attributes:
        ladder: Optionlet tenors and cap/floor lengths
        config: Numerical configuration
        discount_curve: Optional discounting curve (index curve otherwise)
        displacement: Shift for shifted-lognormal pricing and inversion
    """

    def __init__(
        self,
        surface: CapFloorTermVolSurface,
        index: IborIndex,
        switch_strikes: Optional[Union[float, Sequence[float]]] = None,
        config: Optional[StripperConfig] = None,
        discount_curve: Optional[Curve] = None,
        displacement: float = 0.0
    ):
        self._surface = surface
        self._index = index
        self.config = config or StripperConfig()
        self.discount_curve = discount_curve
        self.displacement = displacement

        self.ladder: TenorLadder = build_tenor_ladder(index.tenor(), surface.option_tenors()[-1])
        self._strikes = tuple(surface.strikes())
        self._switch_strikes = normalize_switch_strikes(
            switch_strikes, len(self.ladder), self.config.default_switch_strike
        )

        self._lock = threading.RLock()
        self._results: Optional[StrippingResults] = None
        self._token: Optional[tuple] = None

    # Lazy recompute cache

    def _inputs(self) -> List[Observable]:
        inputs = [self._surface, self._index, Settings.instance()]
        if self.discount_curve is not None:
            inputs.append(self.discount_curve)
        return inputs

    def _current_token(self) -> tuple:
        curve_token = self.discount_curve.state_token() if self.discount_curve else ()
        return (
            self._surface.state_token(),
            self._index.state_token(),
            Settings.instance().state_token(),
            curve_token,
        )

    def is_fresh(self) -> bool:
        """True when cached results match the current inputs."""
        return self._results is not None and self._token == self._current_token()

    def update(self) -> None:
        """Force the next read to recompute."""
        with self._lock:
            self._token = None

    invalidate = update

    def calculate(self) -> StrippingResults:
        """
        Return the stripped results, recomputing when stale.

        A pass does not start while an input is being changed, and a pass
        whose inputs changed while it ran is discarded and restarted. A
        failing pass leaves the cache stale.

        Raises:
            BootstrapInversionError: If any cell cannot be inverted
        """
        with self._lock:
            while True:
                token = self._current_token()
                if self._results is not None and token == self._token:
                    return self._results
                # Checked after taking the token: a change begun earlier is
                # either still open here or moves the token by the end
                changing = [o for o in self._inputs() if o.is_changing()]
                if changing:
                    for observable in changing:
                        observable.wait_for_writers()
                    continue
                self._results, self._token = None, None
                results = self.perform_calculations()
                if self._current_token() == token:
                    self._results, self._token = results, token
                    return results
                logger.warning("Optionlet stripping inputs changed during calculation; restarting")

    def perform_calculations(self) -> StrippingResults:
        """Run the full bootstrap on the current inputs (no caching)."""
        logger.info(
            "Stripping %d optionlet tenors x %d strikes on %s",
            len(self.ladder), len(self._strikes), self._index.name
        )
        adapter = CapFloorPricingAdapter(
            self._index,
            self._surface.day_count(),
            discount_curve=self.discount_curve,
            reference_date=self._surface.reference_date(),
            displacement=self.displacement,
        )
        rows = tuple(self._optionlet_row(i, adapter) for i in range(len(self.ladder)))

        if self.config.max_workers > 1 and len(self._strikes) > 1:
            with ThreadPoolExecutor(max_workers=self.config.max_workers) as pool:
                columns = list(pool.map(
                    lambda k: self._strip_column(k, rows, adapter), self._strikes
                ))
        else:
            columns = [self._strip_column(k, rows, adapter) for k in self._strikes]

        for column in columns:
            if column.failure is not None:
                logger.error("%s", column.failure)
                raise column.failure

        def grid(name: str) -> np.ndarray:
            return _read_only([getattr(c, name) for c in columns]).T

        results = StrippingResults(
            rows=rows,
            strikes=self._strikes,
            capfloor_prices=grid("capfloor_prices"),
            optionlet_prices=grid("optionlet_prices"),
            capfloor_vols=grid("capfloor_vols"),
            optionlet_std_devs=grid("std_devs"),
            optionlet_vols=grid("vols"),
            capfloors=tuple(zip(*(c.capfloors for c in columns))),
            option_types=tuple(zip(*(c.option_types for c in columns))),
        )
        logger.info("Optionlet stripping done for %s", self._index.name)
        return results

    def _optionlet_row(self, i: int, adapter: CapFloorPricingAdapter) -> OptionletRow:
        optionlet_tenor, length = self.ladder[i]
        last = adapter.make(length, 0.04, 0.20).last_coupon()
        accrual = self.config.accrual_period_override
        if accrual is None:
            accrual = last.accrual_period
        return OptionletRow(
            optionlet_tenor=optionlet_tenor,
            capfloor_length=length,
            fixing_date=last.fixing_date,
            payment_date=last.payment_date,
            accrual_period=accrual,
            fixing_time=year_fraction(
                self._surface.reference_date(), last.fixing_date, self._surface.day_count()
            ),
            atm_rate=adapter.forecast_fixing(last.fixing_date),
            switch_strike=self._switch_strikes[i],
        )

    def _strip_column(
        self,
        strike: float,
        rows: Sequence[OptionletRow],
        adapter: CapFloorPricingAdapter
    ) -> ColumnResult:
        """Fold over the tenor ladder for one strike."""
        cfg = self.config
        column = ColumnResult()
        previous_price = 0.0
        std_dev = cfg.first_guess

        for row in rows:
            cap_floor_type = CapFloorType.FLOOR if strike < row.switch_strike else CapFloorType.CAP
            option_type = cap_floor_type.option_type

            vol = self._surface.volatility(row.capfloor_length, strike, True)
            priced = adapter.price(row.capfloor_length, strike, vol, cap_floor_type)
            optionlet_price = priced.npv - previous_price
            previous_price = priced.npv

            if cfg.annuity_discount == "fixing":
                annuity = row.accrual_period * priced.discount_at_fixing
            else:
                annuity = row.accrual_period * priced.discount_at_payment

            inverted = implied_std_dev(
                option_type, strike, row.atm_rate, optionlet_price, annuity,
                guess=std_dev,
                displacement=self.displacement,
                accuracy=cfg.accuracy,
                max_iterations=cfg.max_iterations,
                lower=cfg.std_dev_lower,
                upper=cfg.std_dev_upper,
            )
            if not inverted.converged:
                column.failure = BootstrapInversionError(
                    fixing_date=row.fixing_date,
                    option_type=str(option_type),
                    strike=strike,
                    atm_rate=row.atm_rate,
                    price=optionlet_price,
                    annuity=annuity,
                    reason=inverted.message,
                )
                return column

            std_dev = inverted.std_dev
            column.capfloor_prices.append(priced.npv)
            column.optionlet_prices.append(optionlet_price)
            column.capfloor_vols.append(vol)
            column.std_devs.append(std_dev)
            column.vols.append(std_dev / np.sqrt(row.fixing_time))
            column.capfloors.append(priced.capfloor)
            column.option_types.append(option_type)
            logger.debug(
                "%s K=%.4f %s: price=%.10g std_dev=%.8f (%d its)",
                row.optionlet_tenor, strike, option_type,
                optionlet_price, std_dev, inverted.iterations
            )

        return column

    # Read accessors

    def surface(self) -> CapFloorTermVolSurface:
        return self._surface

    def index(self) -> IborIndex:
        return self._index

    def strikes(self) -> Tuple[float, ...]:
        return self._strikes

    def switch_strikes(self) -> Tuple[float, ...]:
        return self._switch_strikes

    def optionlet_tenors(self) -> Tuple[Period, ...]:
        return self.ladder.optionlet_tenors

    def capfloor_lengths(self) -> Tuple[Period, ...]:
        return self.ladder.capfloor_lengths

    def capfloor_prices(self) -> np.ndarray:
        return self.calculate().capfloor_prices

    def optionlet_prices(self) -> np.ndarray:
        return self.calculate().optionlet_prices

    def capfloor_vols(self) -> np.ndarray:
        return self.calculate().capfloor_vols

    def optionlet_std_devs(self) -> np.ndarray:
        return self.calculate().optionlet_std_devs

    def optionlet_vols(self) -> np.ndarray:
        return self.calculate().optionlet_vols

    def optionlet_fixing_dates(self) -> List[date]:
        return [r.fixing_date for r in self.calculate().rows]

    def optionlet_payment_dates(self) -> List[date]:
        return [r.payment_date for r in self.calculate().rows]

    def optionlet_accrual_periods(self) -> np.ndarray:
        return _read_only([r.accrual_period for r in self.calculate().rows])

    def optionlet_fixing_times(self) -> np.ndarray:
        return _read_only([r.fixing_time for r in self.calculate().rows])

    def atm_optionlet_rates(self) -> np.ndarray:
        return _read_only([r.atm_rate for r in self.calculate().rows])

    def capfloors(self) -> Tuple[Tuple[CapFloor, ...], ...]:
        return self.calculate().capfloors

    def option_types(self) -> Tuple[Tuple[OptionType, ...], ...]:
        return self.calculate().option_types

    # Reporting

    def to_frame(self, grid: str = "optionlet_vols") -> pd.DataFrame:
        """
        One grid as a DataFrame: index = optionlet tenors, columns = strikes.

        Args:
            grid: One of GRID_NAMES
        """
        if grid not in GRID_NAMES:
            raise ValueError(f"Unknown grid {grid!r}; expected one of {GRID_NAMES}")
        values = getattr(self.calculate(), grid)
        return pd.DataFrame(
            values,
            index=pd.Index([str(t) for t in self.optionlet_tenors()], name="optionlet_tenor"),
            columns=pd.Index(list(self._strikes), name="strike"),
        )

    def summary(self) -> pd.DataFrame:
        """Long-format table with one line per (tenor, strike) cell."""
        res = self.calculate()
        records = []
        for i, row in enumerate(res.rows):
            for j, strike in enumerate(res.strikes):
                records.append({
                    "optionlet_tenor": str(row.optionlet_tenor),
                    "capfloor_length": str(row.capfloor_length),
                    "fixing_date": row.fixing_date,
                    "strike": strike,
                    "type": str(res.option_types[i][j]),
                    "atm_rate": row.atm_rate,
                    "capfloor_vol": res.capfloor_vols[i, j],
                    "capfloor_price": res.capfloor_prices[i, j],
                    "optionlet_price": res.optionlet_prices[i, j],
                    "optionlet_std_dev": res.optionlet_std_devs[i, j],
                    "optionlet_vol": res.optionlet_vols[i, j],
                })
        return pd.DataFrame(records)

    def __repr__(self) -> str:
        return (f"OptionletStripper(index={self._index.name}, tenors={len(self.ladder)}, "
                f"strikes={len(self._strikes)})")


__all__ = [
    "OptionletStripper",
    "OptionletRow",
    "StrippingResults",
    "GRID_NAMES",
]

"""
capletlib: Optionlet volatility stripping from cap/floor term volatilities

A modular library for:
- Building Ibor cap/floor instruments and pricing them with flat Black vols
- Holding cap/floor term volatility surfaces (quotes by length x strike)
- Bootstrapping optionlet (caplet/floorlet) volatilities by sequential
  price differencing and Black inversion, recomputed lazily when the
  surface, the index or the evaluation date change

Scope: lognormal (optionally shifted) Black volatilities; no smile fitting.
"""

__version__ = "0.1.0"

# Core modules
from .conventions import DayCount, BusinessDayConvention, year_fraction
from .dates import Period, Calendar, generate_schedule
from .settings import Settings
from .observable import Observable
from .config import StripperConfig
from .exceptions import CapletLibError, ConfigurationError, BootstrapInversionError

# Curves and indexes
from .curves import Curve, create_flat_curve
from .indexes import IborIndex

# Options and instruments
from .options import (
    OptionType,
    ImpliedStdDevResult,
    black_formula,
    implied_std_dev,
    black_formula_implied_std_dev,
)
from .instruments import (
    CapFloorType,
    CapFloor,
    BlackCapFloorEngine,
    make_capfloor,
)

# Volatility
from .vol import CapFloorTermVolSurface, load_capfloor_vols

# Stripping
from .stripping import (
    TenorLadder,
    build_tenor_ladder,
    normalize_switch_strikes,
    CapFloorPricingAdapter,
    OptionletStripper,
)

__all__ = [
    # Version
    "__version__",
    # Conventions
    "DayCount",
    "BusinessDayConvention",
    "year_fraction",
    # Dates
    "Period",
    "Calendar",
    "generate_schedule",
    # Settings / config / errors
    "Settings",
    "Observable",
    "StripperConfig",
    "CapletLibError",
    "ConfigurationError",
    "BootstrapInversionError",
    # Curves
    "Curve",
    "create_flat_curve",
    "IborIndex",
    # Options
    "OptionType",
    "ImpliedStdDevResult",
    "black_formula",
    "implied_std_dev",
    "black_formula_implied_std_dev",
    # Instruments
    "CapFloorType",
    "CapFloor",
    "BlackCapFloorEngine",
    "make_capfloor",
    # Volatility
    "CapFloorTermVolSurface",
    "load_capfloor_vols",
    # Stripping
    "TenorLadder",
    "build_tenor_ladder",
    "normalize_switch_strikes",
    "CapFloorPricingAdapter",
    "OptionletStripper",
]

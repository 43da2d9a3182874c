"""
Stripping module - optionlet volatilities from cap/floor term volatilities.

Provides:
- Tenor ladder construction and switch-strike normalisation
- Pricing adapter for cap/floors of a given length
- OptionletStripper: sequential bootstrap with lazy recomputation
"""

from .ladder import TenorLadder, build_tenor_ladder, normalize_switch_strikes
from .adapter import CapFloorPricingAdapter, PricedCapFloor
from .stripper import OptionletStripper, OptionletRow, StrippingResults, GRID_NAMES

__all__ = [
    "TenorLadder",
    "build_tenor_ladder",
    "normalize_switch_strikes",
    "CapFloorPricingAdapter",
    "PricedCapFloor",
    "OptionletStripper",
    "OptionletRow",
    "StrippingResults",
    "GRID_NAMES",
]

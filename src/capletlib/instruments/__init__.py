"""
Instruments module - caps and floors on Ibor indexes.
"""

from .capfloor import (
    CapFloorType,
    FloatingCoupon,
    BlackCapFloorEngine,
    CapFloor,
    make_capfloor,
)

__all__ = [
    "CapFloorType",
    "FloatingCoupon",
    "BlackCapFloorEngine",
    "CapFloor",
    "make_capfloor",
]

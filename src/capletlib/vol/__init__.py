"""
Volatility module - cap/floor term volatility surfaces.
"""

from .capfloor_surface import CapFloorTermVolSurface, load_capfloor_vols

__all__ = [
    "CapFloorTermVolSurface",
    "load_capfloor_vols",
]

"""
Curves package - discounting and forecasting curves.
"""

from .curve import Curve, CurveNode, create_flat_curve
from .interpolation import (
    Interpolator,
    LinearInterpolator,
    LogLinearInterpolator,
    create_interpolator,
)

__all__ = [
    "Curve",
    "CurveNode",
    "create_flat_curve",
    "Interpolator",
    "LinearInterpolator",
    "LogLinearInterpolator",
    "create_interpolator",
]

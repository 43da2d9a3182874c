"""
Interpolation methods for discount curves.

Provides:
- LinearInterpolator: linear on continuously compounded zero rates
- LogLinearInterpolator: linear on log discount factors (piecewise flat forwards)

Both extrapolate flat beyond the last node.
"""

from abc import ABC, abstractmethod
from typing import Optional
import numpy as np


class Interpolator(ABC):
    """Abstract base class for curve interpolation."""

    def __init__(self):
        self.times: Optional[np.ndarray] = None
        self.values: Optional[np.ndarray] = None

    def fit(self, times: np.ndarray, values: np.ndarray) -> None:
        """
        Fit the interpolator to data points.

        Args:
            times: Array of year fractions
            values: Array of node values (meaning depends on subclass)
        """
        times = np.asarray(times, dtype=float)
        values = np.asarray(values, dtype=float)
        if len(times) != len(values):
            raise ValueError("Times and values must have same length")
        if len(times) < 2:
            raise ValueError("Need at least 2 points for interpolation")

        idx = np.argsort(times)
        self.times = times[idx]
        self.values = self._transform(values[idx])

    def _transform(self, values: np.ndarray) -> np.ndarray:
        return values

    def interpolate(self, t: float) -> float:
        if self.times is None:
            raise RuntimeError("Interpolator not fitted")
        return float(np.interp(t, self.times, self.values))

    def __call__(self, t: float) -> float:
        return self.interpolate(t)

    @abstractmethod
    def discount_factor(self, t: float) -> float:
        """Discount factor implied by the fitted node values at t."""


class LinearInterpolator(Interpolator):
    """Linear interpolation on zero rates; fit with zero rates."""

    def discount_factor(self, t: float) -> float:
        return float(np.exp(-self.interpolate(t) * t))


class LogLinearInterpolator(Interpolator):
    """Linear interpolation on log discount factors; fit with discount factors."""

    def _transform(self, values: np.ndarray) -> np.ndarray:
        if np.any(values <= 0):
            raise ValueError("Discount factors must be positive")
        return np.log(values)

    def interpolate(self, t: float) -> float:
        if self.times is None:
            raise RuntimeError("Interpolator not fitted")
        if t <= self.times[-1]:
            return float(np.interp(t, self.times, self.values))
        # Flat forward beyond the last node
        t0, t1 = self.times[-2], self.times[-1]
        slope = (self.values[-1] - self.values[-2]) / (t1 - t0)
        return float(self.values[-1] + slope * (t - t1))

    def discount_factor(self, t: float) -> float:
        return float(np.exp(self.interpolate(t)))


def create_interpolator(method: str) -> Interpolator:
    """Create an interpolator by name ("linear" or "log_linear")."""
    method = method.lower()
    if method == "linear":
        return LinearInterpolator()
    if method in ("log_linear", "loglinear"):
        return LogLinearInterpolator()
    raise ValueError(f"Unknown interpolation method: {method}")


__all__ = [
    "Interpolator",
    "LinearInterpolator",
    "LogLinearInterpolator",
    "create_interpolator",
]

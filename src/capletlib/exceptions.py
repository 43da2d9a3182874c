"""
Exception hierarchy for optionlet stripping.

- ConfigurationError: invalid stripper inputs (surface too short for a
  single optionlet, switch strikes that do not match the tenor ladder)
- BootstrapInversionError: an optionlet price could not be inverted into an
  implied standard deviation; the whole stripping pass is unusable
"""

from datetime import date
from typing import Optional


class CapletLibError(Exception):
    """Base class for library errors."""


class ConfigurationError(CapletLibError, ValueError):
    """Raised when stripper inputs are inconsistent."""


class BootstrapInversionError(CapletLibError, RuntimeError):
    """
    Raised when a single (tenor, strike) cell cannot be bootstrapped.

    Carries everything needed to reproduce the failing inversion in
    isolation with :func:`capletlib.options.black_formula_implied_std_dev`.

    Attributes:
        fixing_date: Optionlet fixing date
        option_type: "CALL" or "PUT"
        strike: Optionlet strike
        atm_rate: Forward (ATM) rate for the period
        price: Optionlet price obtained by differencing
        annuity: Accrual period times discount factor
        reason: Message from the underlying solver
    """

    def __init__(
        self,
        fixing_date: date,
        option_type: str,
        strike: float,
        atm_rate: float,
        price: float,
        annuity: float,
        reason: Optional[str] = None,
    ):
        self.fixing_date = fixing_date
        self.option_type = option_type
        self.strike = strike
        self.atm_rate = atm_rate
        self.price = price
        self.annuity = annuity
        self.reason = reason
        super().__init__(
            "could not bootstrap the optionlet:"
            f"\n date: {fixing_date.isoformat()}"
            f"\n type: {option_type}"
            f"\n strike: {strike * 100:.6f} %"
            f"\n atm: {atm_rate * 100:.6f} %"
            f"\n price: {price!r}"
            f"\n annuity: {annuity!r}"
            f"\n error message: {reason}"
        )


__all__ = [
    "CapletLibError",
    "ConfigurationError",
    "BootstrapInversionError",
]

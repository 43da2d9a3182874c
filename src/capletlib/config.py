"""
Stripper configuration.

Numerical knobs for the optionlet bootstrap. The market inputs (surface,
index, switch strikes) are constructor arguments of the stripper itself.
"""

from dataclasses import dataclass
from typing import Optional

ANNUITY_DISCOUNT_DATES = ("fixing", "payment")


@dataclass(frozen=True)
class StripperConfig:
    """
    Configuration for :class:`capletlib.stripping.OptionletStripper`.

    Attributes:
        first_guess: Seed standard deviation for the first row of each strike
        default_switch_strike: Switch strike used when none is supplied
        accrual_period_override: Fixed accrual period for every optionlet
            (e.g. 0.5 for a fixed semiannual accrual); None uses the index day
            count on the actual accrual dates
        annuity_discount: Date at which the optionlet annuity is discounted,
            "fixing" or "payment"
        std_dev_lower: Lower bracket for the implied standard deviation
        std_dev_upper: Upper bracket for the implied standard deviation
        accuracy: Absolute price tolerance of the inversion
        max_iterations: Iteration cap of the inversion
        max_workers: Strike columns bootstrapped concurrently (1 = serial)
    """
    first_guess: float = 0.14
    default_switch_strike: float = 0.04
    accrual_period_override: Optional[float] = None
    annuity_discount: str = "fixing"
    std_dev_lower: float = 1e-12
    std_dev_upper: float = 5.0
    accuracy: float = 1e-12
    max_iterations: int = 100
    max_workers: int = 1

    def __post_init__(self) -> None:
        if self.first_guess <= 0:
            raise ValueError("first_guess must be > 0")
        if self.accrual_period_override is not None and self.accrual_period_override <= 0:
            raise ValueError("accrual_period_override must be > 0")
        if self.annuity_discount not in ANNUITY_DISCOUNT_DATES:
            raise ValueError(
                f"annuity_discount must be one of {ANNUITY_DISCOUNT_DATES}, "
                f"got {self.annuity_discount!r}"
            )
        if self.std_dev_lower < 0 or self.std_dev_upper <= self.std_dev_lower:
            raise ValueError("need 0 <= std_dev_lower < std_dev_upper")
        if self.accuracy <= 0:
            raise ValueError("accuracy must be > 0")
        if self.max_iterations <= 0:
            raise ValueError("max_iterations must be > 0")
        if self.max_workers < 1:
            raise ValueError("max_workers must be >= 1")


__all__ = ["StripperConfig", "ANNUITY_DISCOUNT_DATES"]

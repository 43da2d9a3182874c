"""
Black'76 option pricing and implied standard deviation.

Implements:
- Black'76 call/put in volatility form (F, K, T, sigma)
- Black formula in standard-deviation form (F, K, sigma * sqrt(T)), with an
  optional displacement for shifted-lognormal pricing
- Implied standard deviation inversion, warm-started from a guess

The standard-deviation form is what the optionlet bootstrap inverts: the
optionlet price carries the annuity (accrual x discount) and the time to
fixing only enters through sigma * sqrt(T).
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

import numpy as np
from scipy.optimize import brentq
from scipy.stats import norm


# Standard normal CDF and PDF
N = norm.cdf
n = norm.pdf


class OptionType(Enum):
    """Call or put on a forward rate."""
    CALL = "CALL"
    PUT = "PUT"

    @property
    def sign(self) -> int:
        return 1 if self is OptionType.CALL else -1

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ImpliedStdDevResult:
    """
    Outcome of an implied standard deviation inversion.

    Attributes:
        converged: True when std_dev reproduces the target price
        std_dev: Implied standard deviation (nan on failure)
        iterations: Solver iterations used
        message: Failure reason, empty on success
    """
    converged: bool
    std_dev: float
    iterations: int = 0
    message: str = ""


def black76_call(
    F: float,
    K: float,
    T: float,
    sigma_b: float,
    df: float = 1.0
) -> float:
    """
    Black'76 call price.

    Args:
        F: Forward rate
        K: Strike
        T: Time to expiry
        sigma_b: Black (lognormal) volatility
        df: Discount factor
    """
    if T <= 0:
        return max(F - K, 0) * df
    return black_formula(OptionType.CALL, K, F, sigma_b * np.sqrt(T), df)


def black76_put(
    F: float,
    K: float,
    T: float,
    sigma_b: float,
    df: float = 1.0
) -> float:
    """Black'76 put price. Arguments as in black76_call."""
    if T <= 0:
        return max(K - F, 0) * df
    return black_formula(OptionType.PUT, K, F, sigma_b * np.sqrt(T), df)


def black_formula(
    option_type: Union[OptionType, str],
    strike: float,
    forward: float,
    std_dev: float,
    discount: float = 1.0,
    displacement: float = 0.0
) -> float:
    """
    Black formula in standard-deviation form.

    Args:
        option_type: CALL or PUT
        strike: Strike
        forward: Forward
        std_dev: sigma * sqrt(T)
        discount: Discount factor or annuity multiplying the payoff
        displacement: Shift applied to forward and strike

    Returns:
        Option price
    """
    option_type = OptionType(option_type)
    if std_dev < 0:
        raise ValueError(f"Negative standard deviation: {std_dev}")
    if discount <= 0:
        raise ValueError(f"Discount must be positive: {discount}")

    w = option_type.sign
    F = forward + displacement
    K = strike + displacement
    if F <= 0 or K < 0:
        raise ValueError(
            f"Forward ({F}) must be positive and strike ({K}) non-negative for Black model"
        )

    # Zero strike: the call is the discounted forward, the put is worthless
    if K == 0.0:
        return F * discount if option_type is OptionType.CALL else 0.0

    if std_dev == 0.0:
        return max(w * (F - K), 0.0) * discount

    d1 = np.log(F / K) / std_dev + 0.5 * std_dev
    d2 = d1 - std_dev
    price = discount * w * (F * N(w * d1) - K * N(w * d2))
    return float(max(price, 0.0))


def black_formula_std_dev_derivative(
    strike: float,
    forward: float,
    std_dev: float,
    discount: float = 1.0,
    displacement: float = 0.0
) -> float:
    """Derivative of the Black price with respect to std_dev (call = put)."""
    F = forward + displacement
    K = strike + displacement
    if std_dev <= 0 or K <= 0:
        return 0.0
    d1 = np.log(F / K) / std_dev + 0.5 * std_dev
    return float(discount * F * n(d1))


def implied_std_dev(
    option_type: Union[OptionType, str],
    strike: float,
    forward: float,
    black_price: float,
    discount: float = 1.0,
    guess: Optional[float] = None,
    displacement: float = 0.0,
    accuracy: float = 1e-12,
    max_iterations: int = 100,
    lower: float = 1e-12,
    upper: float = 5.0
) -> ImpliedStdDevResult:
    """
    Invert the Black formula for the standard deviation.

    Newton iterations start from the guess (the previous solution when
    bootstrapping); if they leave the bracket or stall, a Brent search on
    [lower, upper] takes over. Prices outside the no-arbitrage range
    [intrinsic, upper bound] are reported as failures rather than raised.

    Args:
        option_type: CALL or PUT
        strike: Strike
        forward: Forward
        black_price: Target price (already multiplied by discount)
        discount: Discount factor or annuity
        guess: Starting standard deviation
        displacement: Shift applied to forward and strike
        accuracy: Absolute price tolerance
        max_iterations: Iteration cap for each solver stage
        lower: Lower bracket
        upper: Upper bracket

    Returns:
        ImpliedStdDevResult
    """
    option_type = OptionType(option_type)
    F = forward + displacement
    K = strike + displacement

    if discount <= 0:
        return ImpliedStdDevResult(False, float("nan"), 0, f"non-positive annuity ({discount})")
    if F <= 0 or K < 0:
        return ImpliedStdDevResult(
            False, float("nan"), 0,
            f"forward ({F}) must be positive and strike ({K}) non-negative"
        )
    if K == 0:
        return ImpliedStdDevResult(
            False, float("nan"), 0,
            "zero strike: the price does not depend on the standard deviation"
        )
    if not np.isfinite(black_price):
        return ImpliedStdDevResult(False, float("nan"), 0, f"non-finite price ({black_price})")

    w = option_type.sign
    intrinsic = max(w * (F - K), 0.0) * discount
    upper_bound = (F if option_type is OptionType.CALL else K) * discount

    if black_price < intrinsic - accuracy:
        return ImpliedStdDevResult(
            False, float("nan"), 0,
            f"price ({black_price}) below intrinsic value ({intrinsic})"
        )
    if black_price >= upper_bound:
        return ImpliedStdDevResult(
            False, float("nan"), 0,
            f"price ({black_price}) above upper bound ({upper_bound})"
        )
    if black_price - intrinsic <= accuracy:
        return ImpliedStdDevResult(True, 0.0, 0)

    def objective(sd: float) -> float:
        return black_formula(option_type, strike, forward, sd, discount, displacement) - black_price

    # Newton from the guess
    sd = guess if guess is not None and guess > 0 else 0.2
    sd = min(max(sd, lower), upper)
    iterations = 0
    for iterations in range(1, max_iterations + 1):
        diff = objective(sd)
        if abs(diff) <= accuracy:
            return ImpliedStdDevResult(True, sd, iterations)
        vega = black_formula_std_dev_derivative(strike, forward, sd, discount, displacement)
        if vega < 1e-15:
            break
        sd_next = sd - diff / vega
        if not (lower <= sd_next <= upper):
            break
        sd = sd_next

    # Bracketed fallback
    f_lo, f_hi = objective(lower), objective(upper)
    if f_lo * f_hi > 0:
        return ImpliedStdDevResult(
            False, float("nan"), iterations,
            f"root not bracketed: f[{lower}, {upper}] -> [{f_lo}, {f_hi}]"
        )
    try:
        root, info = brentq(
            objective, lower, upper,
            xtol=1e-15, maxiter=max_iterations, full_output=True
        )
    except RuntimeError as e:
        return ImpliedStdDevResult(False, float("nan"), iterations + max_iterations, str(e))

    return ImpliedStdDevResult(True, float(root), iterations + info.iterations)


def black_formula_implied_std_dev(
    option_type: Union[OptionType, str],
    strike: float,
    forward: float,
    black_price: float,
    discount: float = 1.0,
    guess: Optional[float] = None,
    **kwargs
) -> float:
    """
    Implied standard deviation, raising on failure.

    Raises:
        ValueError: If no standard deviation reproduces the price
    """
    result = implied_std_dev(option_type, strike, forward, black_price, discount, guess, **kwargs)
    if not result.converged:
        raise ValueError(result.message)
    return result.std_dev


__all__ = [
    "OptionType",
    "ImpliedStdDevResult",
    "black76_call",
    "black76_put",
    "black_formula",
    "black_formula_std_dev_derivative",
    "implied_std_dev",
    "black_formula_implied_std_dev",
]

"""
Options module - Black'76 pricing and implied standard deviation.
"""

from .base_models import (
    OptionType,
    ImpliedStdDevResult,
    black76_call,
    black76_put,
    black_formula,
    black_formula_std_dev_derivative,
    implied_std_dev,
    black_formula_implied_std_dev,
)

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

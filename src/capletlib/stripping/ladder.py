"""
Optionlet tenor ladder.

For an index of tenor P and a surface quoted up to length T:

    optionlet tenors:  P, 2P, 3P, ...
    cap/floor lengths: 2P, 3P, 4P, ... <= T

The first cap/floor holds a single optionlet (the spot-starting period is
excluded), so each further length adds exactly one optionlet, which price
differencing then isolates.
"""

from dataclasses import dataclass
from typing import Iterator, Optional, Sequence, Tuple, Union

from ..dates import Period
from ..exceptions import ConfigurationError


@dataclass(frozen=True)
class TenorLadder:
    """
    Ordered (optionlet tenor, cap/floor length) pairs.

    Attributes:
        index_tenor: Tenor of the underlying index
        optionlet_tenors: Start of each optionlet period from spot
        capfloor_lengths: Length of the cap/floor whose last optionlet is it
    """
    index_tenor: Period
    optionlet_tenors: Tuple[Period, ...]
    capfloor_lengths: Tuple[Period, ...]

    def __len__(self) -> int:
        return len(self.optionlet_tenors)

    def __iter__(self) -> Iterator[Tuple[Period, Period]]:
        return iter(zip(self.optionlet_tenors, self.capfloor_lengths))

    def __getitem__(self, i: int) -> Tuple[Period, Period]:
        return self.optionlet_tenors[i], self.capfloor_lengths[i]


def build_tenor_ladder(
    index_tenor: Union[str, Period],
    max_tenor: Union[str, Period]
) -> TenorLadder:
    """
    Build the optionlet tenor ladder.

    Args:
        index_tenor: Index tenor P
        max_tenor: Longest quoted cap/floor length T

    Returns:
        TenorLadder with lengths 2P, 3P, ... up to T

    Raises:
        ConfigurationError: If T < 2P, or if P and T cannot be compared
            (day or week tenors against month or year tenors)
    """
    index_tenor = Period.parse(index_tenor)
    max_tenor = Period.parse(max_tenor)
    if index_tenor.amount == 0:
        raise ConfigurationError("Index tenor must be positive")
    if index_tenor.is_monthly != max_tenor.is_monthly:
        raise ConfigurationError(
            f"index tenor {index_tenor} cannot be laddered up to surface tenor {max_tenor}"
        )

    optionlet_tenors = [index_tenor]
    capfloor_lengths = [index_tenor + index_tenor]
    if max_tenor < capfloor_lengths[-1]:
        raise ConfigurationError(
            f"too short cap/floor term vol surface: max tenor {max_tenor} "
            f"< first cap/floor length {capfloor_lengths[-1]}"
        )

    while capfloor_lengths[-1] + index_tenor <= max_tenor:
        optionlet_tenors.append(optionlet_tenors[-1] + index_tenor)
        capfloor_lengths.append(optionlet_tenors[-1] + index_tenor)

    return TenorLadder(index_tenor, tuple(optionlet_tenors), tuple(capfloor_lengths))


def normalize_switch_strikes(
    switch_strikes: Optional[Union[float, Sequence[float]]],
    n_tenors: int,
    default: float = 0.04
) -> Tuple[float, ...]:
    """
    Expand switch strikes to one per optionlet tenor.

    None or empty -> default for every tenor; a scalar or single value is
    broadcast; otherwise the length must match the ladder.

    Raises:
        ConfigurationError: On a length mismatch
    """
    if switch_strikes is None:
        values = []
    elif isinstance(switch_strikes, (int, float)):
        values = [float(switch_strikes)]
    else:
        values = [float(k) for k in switch_strikes]

    if not values:
        return (float(default),) * n_tenors
    if len(values) == 1:
        return (values[0],) * n_tenors
    if len(values) != n_tenors:
        raise ConfigurationError(
            f"{len(values)} switch strikes given for {n_tenors} optionlet tenors"
        )
    return tuple(values)


__all__ = [
    "TenorLadder",
    "build_tenor_ladder",
    "normalize_switch_strikes",
]

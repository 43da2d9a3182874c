"""
Shared fixtures: evaluation date, curves, index and cap/floor surfaces.
"""

from datetime import date

import numpy as np
import pytest

from capletlib.conventions import DayCount
from capletlib.curves import create_flat_curve
from capletlib.indexes import IborIndex
from capletlib.settings import Settings
from capletlib.vol import CapFloorTermVolSurface


EVALUATION_DATE = date(2024, 1, 15)


@pytest.fixture(autouse=True)
def evaluation_date():
    """Pin the global evaluation date for every test."""
    settings = Settings.instance()
    settings.evaluation_date = EVALUATION_DATE
    yield EVALUATION_DATE
    settings.reset()


@pytest.fixture
def forecast_curve():
    """Flat 4% continuously compounded curve."""
    return create_flat_curve(EVALUATION_DATE, 0.04)


@pytest.fixture
def index_3m(forecast_curve):
    """3M Ibor index with 2 fixing days, ACT/360."""
    return IborIndex("USD-LIBOR-3M", "3M", forecast_curve, fixing_days=2,
                     day_count=DayCount.ACT_360)


@pytest.fixture
def flat_surface():
    """Flat 20% cap/floor vols up to 2Y, strikes 2%/4%/6%."""
    strikes = [0.02, 0.04, 0.06]
    tenors = ["1Y", "18M", "2Y"]
    return CapFloorTermVolSurface(tenors, strikes, np.full((3, 3), 0.20))

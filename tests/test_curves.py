"""
Unit tests for curves module.
"""

from datetime import date
import numpy as np
import pytest

from capletlib.conventions import DayCount
from capletlib.curves import (
    Curve,
    LinearInterpolator,
    LogLinearInterpolator,
    create_flat_curve,
)


class TestInterpolators:
    """Tests for interpolation methods."""

    @pytest.fixture
    def sample_data(self):
        x = np.array([0.0, 0.5, 1.0, 2.0])
        y = np.array([0.030, 0.032, 0.035, 0.040])
        return x, y

    def test_linear_interpolator(self, sample_data):
        x, y = sample_data
        interp = LinearInterpolator()
        interp.fit(x, y)

        assert abs(interp(1.0) - 0.035) < 1e-12
        assert abs(interp(1.5) - 0.0375) < 1e-12
        # Flat beyond the last node
        assert abs(interp(5.0) - 0.040) < 1e-12

    def test_log_linear_interpolator(self, sample_data):
        x, y = sample_data
        dfs = np.exp(-y * x)
        interp = LogLinearInterpolator()
        interp.fit(x, dfs)

        np.testing.assert_allclose(interp.discount_factor(1.0), np.exp(-0.035), rtol=1e-12)

    def test_fit_validation(self):
        with pytest.raises(ValueError):
            LinearInterpolator().fit(np.array([0.0]), np.array([0.01]))
        with pytest.raises(ValueError):
            LogLinearInterpolator().fit(np.array([0.0, 1.0]), np.array([1.0, -0.5]))
        with pytest.raises(RuntimeError):
            LinearInterpolator().interpolate(1.0)


class TestCurve:
    """Tests for Curve class."""

    @pytest.fixture
    def anchor(self):
        return date(2024, 1, 15)

    def test_flat_curve_discount_factors(self, anchor):
        curve = create_flat_curve(anchor, 0.04)
        for t in [0.1, 0.25, 1.0, 3.7, 40.0]:
            np.testing.assert_allclose(curve.discount_factor(t), np.exp(-0.04 * t), rtol=1e-12)
        assert curve.discount_factor(0.0) == 1.0

    def test_discount_from_date(self, anchor):
        curve = create_flat_curve(anchor, 0.04)
        d = date(2025, 1, 15)
        t = 366 / 365
        np.testing.assert_allclose(curve.discount_factor(d), np.exp(-0.04 * t), rtol=1e-12)
        assert curve.discount(d) == curve.discount_factor(d)

    def test_zero_rate(self, anchor):
        curve = create_flat_curve(anchor, 0.03)
        np.testing.assert_allclose(curve.zero_rate(2.0), 0.03, rtol=1e-10)

    def test_forward_rate(self, anchor):
        curve = create_flat_curve(anchor, 0.04)
        start, end = date(2024, 4, 17), date(2024, 7, 17)
        tau = (end - start).days / 360
        expected = (np.exp(0.04 * (end - start).days / 365) - 1) / tau
        np.testing.assert_allclose(
            curve.forward_rate(start, end, DayCount.ACT_360), expected, rtol=1e-10
        )
        with pytest.raises(ValueError):
            curve.forward_rate(end, start)

    def test_add_node_publishes_change(self, anchor):
        curve = Curve(anchor)
        curve.add_node(1.0, 0.96)
        version = curve.version
        curve.add_node(2.0, 0.92)
        assert curve.version == version + 1
        assert len(curve.get_nodes()) == 3

    def test_add_node_replaces_existing(self, anchor):
        curve = Curve(anchor)
        curve.add_node(1.0, 0.96)
        curve.add_node(1.0, 0.95)
        assert curve.get_nodes() == [(0.0, 1.0), (1.0, 0.95)]

    def test_invalid_nodes(self, anchor):
        curve = Curve(anchor)
        with pytest.raises(ValueError):
            curve.add_node(-1.0, 0.99)
        with pytest.raises(ValueError):
            curve.add_node(1.0, 0.0)

    def test_linear_zero_interpolation(self, anchor):
        curve = Curve(anchor, interpolation_method="linear")
        curve.add_node(1.0, np.exp(-0.03))
        curve.add_node(2.0, np.exp(-0.05 * 2))
        np.testing.assert_allclose(curve.zero_rate(1.5), 0.04, rtol=1e-10)

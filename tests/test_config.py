"""
Tests for configuration, settings and error types.
"""

from datetime import date
import pytest

from capletlib.config import StripperConfig
from capletlib.exceptions import BootstrapInversionError, CapletLibError, ConfigurationError
from capletlib.observable import Observable
from capletlib.settings import Settings


class TestStripperConfig:
    """Tests for config validation."""

    def test_defaults(self):
        config = StripperConfig()
        assert config.first_guess == 0.14
        assert config.default_switch_strike == 0.04
        assert config.accrual_period_override is None
        assert config.annuity_discount == "fixing"
        assert config.max_workers == 1

    @pytest.mark.parametrize("kwargs", [
        {"first_guess": 0.0},
        {"accrual_period_override": -0.5},
        {"annuity_discount": "start"},
        {"std_dev_lower": 1.0, "std_dev_upper": 0.5},
        {"accuracy": 0.0},
        {"max_iterations": 0},
        {"max_workers": 0},
    ])
    def test_invalid(self, kwargs):
        with pytest.raises(ValueError):
            StripperConfig(**kwargs)

    def test_frozen(self):
        with pytest.raises(AttributeError):
            StripperConfig().max_workers = 4


class TestSettings:
    """Tests for the global evaluation date."""

    def test_singleton(self):
        assert Settings.instance() is Settings.instance()

    def test_change_bumps_version(self, evaluation_date):
        settings = Settings.instance()
        version = settings.version
        settings.evaluation_date = evaluation_date
        assert settings.version == version
        settings.evaluation_date = date(2024, 3, 1)
        assert settings.version == version + 1

    def test_reset_falls_back_to_today(self):
        settings = Settings.instance()
        settings.reset()
        assert settings.evaluation_date == date.today()


class TestObservable:

    def test_state_token(self):
        obs = Observable()
        token = obs.state_token()
        obs.notify_observers()
        assert obs.state_token() != token
        assert obs.version == 1

    def test_changing_block(self):
        obs = Observable()
        token = obs.state_token()
        with obs.changing():
            assert obs.is_changing()
            assert obs.state_token() != token
            with obs.changing():
                assert obs.is_changing()
        assert not obs.is_changing()
        assert obs.version == 1

    def test_wait_for_writers_from_writer_thread(self):
        obs = Observable()
        obs.wait_for_writers()
        with obs.changing():
            with pytest.raises(RuntimeError):
                obs.wait_for_writers()


class TestErrors:
    """Tests for the exception hierarchy."""

    def test_hierarchy(self):
        assert issubclass(ConfigurationError, ValueError)
        assert issubclass(BootstrapInversionError, RuntimeError)
        assert issubclass(BootstrapInversionError, CapletLibError)

    def test_inversion_error_message(self):
        err = BootstrapInversionError(
            fixing_date=date(2024, 7, 15),
            option_type="CALL",
            strike=0.04,
            atm_rate=0.0397,
            price=-1.5e-4,
            annuity=0.25,
            reason="price below intrinsic value",
        )
        text = str(err)
        assert text.startswith("could not bootstrap the optionlet:")
        assert "date: 2024-07-15" in text
        assert "strike: 4.000000 %" in text
        assert "atm: 3.970000 %" in text
        assert "error message: price below intrinsic value" in text
        assert err.price == -1.5e-4

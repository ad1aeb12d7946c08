import pytest
from hypothesis import given, strategies as st

from tensormeta.config import DEFAULT_MAX_RANK, Settings, load_settings


class TestSettings:
    def test_default_values(self):
        """Test that Settings has sensible defaults."""
        settings = Settings()
        assert settings.max_rank == DEFAULT_MAX_RANK == 6
        assert settings.bounds_checks is True

    def test_custom_values(self):
        """Test that Settings accepts custom values."""
        settings = Settings(max_rank=8, bounds_checks=False)
        assert settings.max_rank == 8
        assert settings.bounds_checks is False

    def test_zero_rank_rejected(self):
        """A capacity of zero can never hold a shape."""
        with pytest.raises(ValueError):
            Settings(max_rank=0)


class TestLoadSettings:
    def test_empty_environment_gives_defaults(self):
        assert load_settings({}) == Settings()

    def test_max_rank_from_environment(self):
        settings = load_settings({"TENSORMETA_MAX_RANK": "8"})
        assert settings.max_rank == 8

    def test_invalid_max_rank_falls_back(self):
        """Non-integer ranks are ignored with a warning."""
        settings = load_settings({"TENSORMETA_MAX_RANK": "eight"})
        assert settings.max_rank == DEFAULT_MAX_RANK

    def test_non_positive_max_rank_rejected(self):
        with pytest.raises(ValueError):
            load_settings({"TENSORMETA_MAX_RANK": "0"})

    @pytest.mark.parametrize("raw,expected", [
        ("0", False), ("off", False), ("FALSE", False), ("no", False),
        ("1", True), ("on", True), ("True", True), ("yes", True),
    ])
    def test_bounds_checks_flag(self, raw, expected):
        settings = load_settings({"TENSORMETA_BOUNDS_CHECKS": raw})
        assert settings.bounds_checks is expected

    def test_unrecognised_bounds_checks_falls_back(self):
        settings = load_settings({"TENSORMETA_BOUNDS_CHECKS": "maybe"})
        assert settings.bounds_checks is True

    @given(rank=st.integers(min_value=1, max_value=64))
    def test_any_positive_rank_is_accepted(self, rank):
        """For any positive rank, the environment value is used as-is."""
        settings = load_settings({"TENSORMETA_MAX_RANK": str(rank)})
        assert settings.max_rank == rank

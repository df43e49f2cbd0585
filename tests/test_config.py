"""
Tests for ScrubConfig and the process-wide default configuration.
"""

from scrub import ScrubConfig, get_default_config, set_default_config


class TestScrubConfigFromEnv:
    """Test suite for reading configuration from the environment."""

    def test_defaults_without_env(self):
        """Unset variables keep the built-in defaults."""
        config = ScrubConfig.from_env()

        assert config == ScrubConfig()
        assert config.default_fields == frozenset({"password"})
        assert config.default_symbol == "*"
        assert config.mask_len == 8
        assert config.mask_len_vary is False

    def test_env_overrides(self, monkeypatch):
        """Should read every setting from its variable."""
        monkeypatch.setenv("SCRUB_DEFAULT_FIELDS", "Password, apiKey ,")
        monkeypatch.setenv("SCRUB_MASK_SYMBOL", "#")
        monkeypatch.setenv("SCRUB_MASK_LEN", "12")
        monkeypatch.setenv("SCRUB_MASK_LEN_VARY", "true")

        config = ScrubConfig.from_env()

        assert config.default_fields == frozenset({"password", "apikey"})
        assert config.default_symbol == "#"
        assert config.mask_len == 12
        assert config.mask_len_vary is True

    def test_invalid_values_fall_back(self, monkeypatch):
        """Malformed values are ignored."""
        monkeypatch.setenv("SCRUB_MASK_SYMBOL", "##")
        monkeypatch.setenv("SCRUB_MASK_LEN", "eight")
        monkeypatch.setenv("SCRUB_MASK_LEN_VARY", "maybe")

        config = ScrubConfig.from_env()

        assert config.default_symbol == "*"
        assert config.mask_len == 8
        assert config.mask_len_vary is False


class TestDefaultConfig:
    """Test suite for the process-wide configuration."""

    def test_set_and_reset(self):
        """set_default_config replaces the default; None restores the built-in one."""
        custom = ScrubConfig(mask_len_vary=True)

        set_default_config(custom)
        assert get_default_config() is custom

        set_default_config(None)
        assert get_default_config() == ScrubConfig()

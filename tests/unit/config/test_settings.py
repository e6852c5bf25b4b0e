"""Tests for SynthPanelSettings — environment-based configuration."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from synthpanel.config.settings import SynthPanelSettings, get_settings


class TestDefaults:
    """Test default values when no env vars are set."""

    def test_default_log_level(self):
        with patch.dict(os.environ, {}, clear=True):
            settings = get_settings()
        assert settings.log_level == "INFO"
        assert settings.json_logs is True

    def test_default_data_dir(self):
        with patch.dict(os.environ, {}, clear=True):
            settings = get_settings()
        assert settings.data_dir == Path("data")

    def test_default_run_parameters(self):
        with patch.dict(os.environ, {}, clear=True):
            settings = get_settings()
        assert settings.default_persona_count == 100
        assert settings.max_persona_count == 150
        assert settings.run_timeout_seconds == 300.0
        assert settings.test_price_usd == 29.0

    def test_default_fan_out_is_unbounded(self):
        with patch.dict(os.environ, {}, clear=True):
            settings = get_settings()
        assert settings.max_concurrency == 0
        assert settings.concurrency_limit is None

    def test_default_feature_flags(self):
        with patch.dict(os.environ, {}, clear=True):
            settings = get_settings()
        assert settings.persist_storage is True
        assert settings.enforce_paywall is False


class TestEnvOverrides:
    """Test that environment variables override defaults."""

    def test_log_level_override(self):
        with patch.dict(os.environ, {"SYNTHPANEL_LOG_LEVEL": "debug"}):
            settings = get_settings()
        assert settings.log_level == "DEBUG"

    def test_data_dir_override(self):
        with patch.dict(os.environ, {"SYNTHPANEL_DATA_DIR": "/tmp/synth"}):
            settings = get_settings()
        assert settings.data_dir == Path("/tmp/synth")

    def test_concurrency_override(self):
        with patch.dict(os.environ, {"SYNTHPANEL_MAX_CONCURRENCY": "8"}):
            settings = get_settings()
        assert settings.concurrency_limit == 8

    def test_timeout_override(self):
        with patch.dict(os.environ, {"SYNTHPANEL_RUN_TIMEOUT": "12.5"}):
            settings = get_settings()
        assert settings.run_timeout_seconds == 12.5

    def test_model_override(self):
        with patch.dict(os.environ, {"SYNTHPANEL_LLM_MODEL": "claude-test"}):
            settings = get_settings()
        assert settings.llm_model == "claude-test"

    @pytest.mark.parametrize("value,expected", [("1", True), ("yes", True), ("false", False), ("0", False)])
    def test_enforce_paywall_values(self, value, expected):
        with patch.dict(os.environ, {"SYNTHPANEL_ENFORCE_PAYWALL": value}):
            settings = get_settings()
        assert settings.enforce_paywall is expected

    def test_unrecognized_bool_falls_back_to_default(self):
        with patch.dict(os.environ, {"SYNTHPANEL_PERSIST_STORAGE": "maybe"}):
            settings = get_settings()
        assert settings.persist_storage is True


class TestImmutability:
    def test_frozen(self):
        settings = SynthPanelSettings()
        with pytest.raises(AttributeError):
            settings.log_level = "DEBUG"

    def test_anthropic_key_detection(self):
        with patch.dict(os.environ, {"ANTHROPIC_API_KEY": "sk-test"}):
            assert SynthPanelSettings().has_anthropic_key() is True
        with patch.dict(os.environ, {}, clear=True):
            assert SynthPanelSettings().has_anthropic_key() is False

"""Tests for client configuration."""

import json
import logging

import pytest

from playtrace.config import AnalyticsConfig
from playtrace.errors import ConfigurationError


class TestAnalyticsConfig:
    def test_defaults(self, monkeypatch):
        for name in ("SERVER_URL", "API_KEY", "FLUSH_INTERVAL", "BATCH_SIZE", "MAX_QUEUE_SIZE", "ENABLE_LOGGING"):
            monkeypatch.delenv(f"PLAYTRACE_{name}", raising=False)

        config = AnalyticsConfig()
        assert config.server_url == "http://localhost"
        assert config.api_key == ""
        assert config.flush_interval == 10.0
        assert config.batch_size == 25
        assert config.max_queue_size == 500
        assert config.enable_logging is True
        assert config.delivery_timeout == 15.0

    def test_environment(self, monkeypatch):
        monkeypatch.setenv("PLAYTRACE_SERVER_URL", "https://env.test/")
        monkeypatch.setenv("PLAYTRACE_API_KEY", "env-key")
        monkeypatch.setenv("PLAYTRACE_BATCH_SIZE", "40")
        monkeypatch.setenv("PLAYTRACE_ENABLE_LOGGING", "false")

        config = AnalyticsConfig()
        assert config.server_url == "https://env.test"
        assert config.api_key == "env-key"
        assert config.batch_size == 40
        assert config.enable_logging is False

    def test_endpoint_strips_trailing_slashes(self):
        config = AnalyticsConfig(server_url="https://collector.test//", api_key="k")
        assert config.endpoint == "https://collector.test/v1/events"

    def test_missing_api_key(self):
        with pytest.raises(ConfigurationError, match="API key"):
            AnalyticsConfig(api_key="").validate()

    @pytest.mark.parametrize("changes", [
        {"batch_size": 0},
        {"max_queue_size": 0},
        {"flush_interval": 0},
        {"delivery_timeout": -1},
        {"batch_size": 50, "max_queue_size": 10},
    ])
    def test_invalid_values(self, changes):
        config = AnalyticsConfig(api_key="k", **changes)
        with pytest.raises(ConfigurationError):
            config.validate()

    @pytest.mark.parametrize("changes", [
        {"batch_size": "ten"},
        {"flush_interval": "soon"},
        {"max_queue_size": 12.5},
        {"delivery_timeout": "nan"},
        {"batch_size": True},
        {"api_key": 12345},
        {"enable_logging": "maybe"},
    ])
    def test_mistyped_values(self, changes):
        config = AnalyticsConfig.from_dict({"api_key": "k", **changes})
        with pytest.raises(ConfigurationError):
            config.validate()

    def test_numeric_strings_converted(self):
        config = AnalyticsConfig.from_dict({"api_key": "k", "batch_size": "40", "flush_interval": "7.5"})
        assert config.batch_size == 40
        assert config.flush_interval == 7.5
        config.validate()

    def test_bad_environment_number(self, monkeypatch):
        monkeypatch.setenv("PLAYTRACE_BATCH_SIZE", "lots")
        config = AnalyticsConfig(api_key="k")
        with pytest.raises(ConfigurationError, match="batch_size"):
            config.validate()

    def test_out_of_range_only_warns(self, caplog):
        config = AnalyticsConfig(api_key="k", batch_size=2, max_queue_size=5, flush_interval=1.0)
        with caplog.at_level(logging.WARNING):
            config.validate()

        assert "batch_size=2 is outside the supported range" in caplog.text
        assert "max_queue_size=5" in caplog.text
        assert "flush_interval=1.0" in caplog.text

    def test_replace_ignores_none(self):
        config = AnalyticsConfig(server_url="https://a.test", api_key="k")
        updated = config.replace(server_url=None, api_key="new")
        assert updated.server_url == "https://a.test"
        assert updated.api_key == "new"
        assert config.api_key == "k"

    def test_to_dict_redacts_key(self):
        config = AnalyticsConfig(api_key="secret-key")
        assert config.to_dict()["api_key"] == "secr..."
        assert config.to_dict(redact=False)["api_key"] == "secret-key"


class TestConfigFiles:
    def test_from_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "server_url: https://collector.test/\n"
            "api_key: abc\n"
            "flush_interval: 30\n"
            "batch_size: 50\n"
            "max_queue_size: 1000\n"
            "enable_logging: false\n"
        )
        config = AnalyticsConfig.from_file(str(path))

        assert config.server_url == "https://collector.test"
        assert config.flush_interval == 30
        assert config.batch_size == 50
        assert config.max_queue_size == 1000
        assert config.enable_logging is False

    def test_from_json(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"api_key": "abc", "batch_size": 10}))
        config = AnalyticsConfig.from_file(str(path))
        assert config.batch_size == 10

    def test_empty_yaml(self, tmp_path, monkeypatch):
        monkeypatch.delenv("PLAYTRACE_BATCH_SIZE", raising=False)
        path = tmp_path / "config.yml"
        path.write_text("")
        assert AnalyticsConfig.from_file(str(path)).batch_size == 25

    def test_unknown_keys_rejected(self):
        with pytest.raises(ConfigurationError, match="bogus"):
            AnalyticsConfig.from_dict({"api_key": "k", "bogus": 1})

    def test_unsupported_extension(self):
        with pytest.raises(ConfigurationError):
            AnalyticsConfig.from_file("config.toml")

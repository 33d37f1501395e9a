"""Configuration loading and typed settings."""

import pytest

from market_reaction.core.config import AISettings, Settings, Timeouts, load_config
from market_reaction.core.errors import ConfigurationError


class TestLoadConfig:
    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.yaml")

    def test_empty_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("", encoding="utf-8")
        with pytest.raises(ValueError):
            load_config(path)

    def test_reads_mapping(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("tickers: [AAPL, RELIANCE.NS]\nthreshold: 2.5\n", encoding="utf-8")
        assert load_config(path) == {"tickers": ["AAPL", "RELIANCE.NS"], "threshold": 2.5}


class TestSettings:
    def test_defaults(self):
        settings = Settings.from_config({"use_trending": True})
        assert settings.tickers == []
        assert settings.threshold == 3.0
        assert settings.max_news_per_ticker == 3
        assert settings.discord_webhook is None
        assert settings.send_email is False
        assert settings.timeouts == Timeouts()
        assert settings.timeouts.article == 8.0
        assert settings.ai.openai_model == "gpt-4o-mini"

    def test_values_from_yaml(self):
        settings = Settings.from_config({
            "tickers": ["XYZ", " ", "ABC.L"],
            "threshold": 4,
            "max_news_per_ticker": 5,
            "timeouts": {"reasoning": 30},
            "ai": {"gemini_api_key": "g", "gemini_model": "gemini-pro"},
        })
        assert settings.tickers == ["XYZ", "ABC.L"]
        assert settings.threshold == 4.0
        assert settings.max_news_per_ticker == 5
        assert settings.timeouts.reasoning == 30.0
        assert settings.timeouts.feed == 15.0
        assert settings.ai.gemini_api_key == "g"
        assert settings.ai.gemini_model == "gemini-pro"

    def test_keys_fall_back_to_environment(self, monkeypatch):
        monkeypatch.setenv("OPENROUTER_API_KEY", "env-key")
        monkeypatch.setenv("DISCORD_WEBHOOK_URL", "https://discord.example/hook")
        settings = Settings.from_config({"ai": {}})
        assert settings.ai.openrouter_api_key == "env-key"
        assert settings.discord_webhook == "https://discord.example/hook"

    def test_yaml_wins_over_environment(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "env")
        assert AISettings.from_dict({"openai_api_key": "yaml"}).openai_api_key == "yaml"

    def test_invalid_values(self):
        with pytest.raises(ConfigurationError):
            Settings.from_config({"threshold": -1})
        with pytest.raises(ConfigurationError):
            Settings.from_config({"max_news_per_ticker": 0})

    @pytest.mark.parametrize(
        "config",
        [
            {"threshold": None},
            {"max_news_per_ticker": None},
            {"threshold": "three"},
            {"timeouts": {"feed": None}},
            {"smtp": {"port": "smtp"}},
        ],
    )
    def test_unusable_numbers_are_configuration_errors(self, config):
        with pytest.raises(ConfigurationError):
            Settings.from_config(config)

    def test_require_reasoning_credentials(self):
        with pytest.raises(ConfigurationError):
            Settings().require_reasoning_credentials()
        Settings(ai=AISettings(anthropic_api_key="a")).require_reasoning_credentials()

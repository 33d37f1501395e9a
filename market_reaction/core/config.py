"""Configuration module for loading run settings and environment variables."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from dotenv import load_dotenv

from market_reaction.core.errors import ConfigurationError

# Load environment variables from .env file
load_dotenv()

DEFAULT_THRESHOLD = 3.0
DEFAULT_MAX_NEWS = 3


def load_config(config_path: str | Path = "config.yaml") -> Dict[str, Any]:
    """
    Load configuration from the specified YAML file.

    Args:
        config_path (str | Path): Path to the configuration file. Defaults to "config.yaml".

    Returns:
        Dict[str, Any]: A dictionary containing the configuration settings.
    """
    config_file = Path(config_path)
    if not config_file.exists():
        raise FileNotFoundError(f"Configuration file not found at {config_path}")

    with open(config_file, "r", encoding="utf-8") as file:
        config_data = yaml.safe_load(file)

    if not config_data:
        raise ValueError(f"Configuration file {config_path} is empty or invalid.")
    if not isinstance(config_data, dict):
        raise ValueError(f"Configuration file {config_path} must contain a mapping.")

    return config_data


def _pick(section: Dict[str, Any], key: str, env_var: str, default: Any = None) -> Any:
    """YAML value first, then the environment, then ``default``."""
    value = section.get(key)
    if value in (None, ""):
        value = os.getenv(env_var) or default
    return value


@dataclass(frozen=True)
class AISettings:
    """Credentials and model identifiers for the reasoning backends."""

    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-4o-mini"
    anthropic_api_key: Optional[str] = None
    anthropic_model: str = "claude-3-haiku-20240307"
    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-2.5-flash-lite"
    openrouter_api_key: Optional[str] = None
    openrouter_model: str = "google/gemma-3-27b-it:free"

    @classmethod
    def from_dict(cls, section: Dict[str, Any]) -> "AISettings":
        return cls(
            openai_api_key=_pick(section, "openai_api_key", "OPENAI_API_KEY"),
            openai_model=_pick(section, "openai_model", "OPENAI_MODEL", cls.openai_model),
            anthropic_api_key=_pick(section, "anthropic_api_key", "ANTHROPIC_API_KEY"),
            anthropic_model=_pick(section, "anthropic_model", "ANTHROPIC_MODEL", cls.anthropic_model),
            gemini_api_key=_pick(section, "gemini_api_key", "GEMINI_API_KEY"),
            gemini_model=_pick(section, "gemini_model", "GEMINI_MODEL", cls.gemini_model),
            openrouter_api_key=_pick(section, "openrouter_api_key", "OPENROUTER_API_KEY"),
            openrouter_model=_pick(section, "openrouter_model", "OPENROUTER_MODEL", cls.openrouter_model),
        )

    def has_any_key(self) -> bool:
        return any(
            (self.openai_api_key, self.anthropic_api_key, self.gemini_api_key, self.openrouter_api_key)
        )


@dataclass(frozen=True)
class SMTPSettings:
    """Outbound mail relay used for email notifications."""

    host: Optional[str] = None
    port: int = 587
    username: Optional[str] = None
    password: Optional[str] = None
    sender: Optional[str] = None
    use_tls: bool = True

    @classmethod
    def from_dict(cls, section: Dict[str, Any]) -> "SMTPSettings":
        return cls(
            host=_pick(section, "host", "SMTP_HOST"),
            port=int(_pick(section, "port", "SMTP_PORT", 587)),
            username=_pick(section, "username", "SMTP_USERNAME"),
            password=_pick(section, "password", "SMTP_PASSWORD"),
            sender=_pick(section, "sender", "SMTP_SENDER"),
            use_tls=bool(section.get("use_tls", True)),
        )


@dataclass(frozen=True)
class Timeouts:
    """Per-call deadlines in seconds for every external collaborator."""

    feed: float = 15.0
    article: float = 8.0
    quote: float = 15.0
    reasoning: float = 60.0
    notify: float = 10.0

    @classmethod
    def from_dict(cls, section: Dict[str, Any]) -> "Timeouts":
        defaults = cls()
        return cls(**{
            name: float(section.get(name, getattr(defaults, name)))
            for name in ("feed", "article", "quote", "reasoning", "notify")
        })


@dataclass(frozen=True)
class Settings:
    """Typed view of config.yaml for one pipeline run."""

    tickers: List[str] = field(default_factory=list)
    use_trending: bool = True
    threshold: float = DEFAULT_THRESHOLD
    max_news_per_ticker: int = DEFAULT_MAX_NEWS
    discord_webhook: Optional[str] = None
    send_email: bool = False
    recipient_email: Optional[str] = None
    proxy_url: Optional[str] = None
    output_dir: str = "output"
    ai: AISettings = field(default_factory=AISettings)
    smtp: SMTPSettings = field(default_factory=SMTPSettings)
    timeouts: Timeouts = field(default_factory=Timeouts)

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "Settings":
        """
        Build settings from a parsed config dict, applying defaults.

        Args:
            config (Dict[str, Any]): Output of :func:`load_config`.

        Returns:
            Settings: Frozen settings for the run.
        """
        tickers = [str(t).strip() for t in (config.get("tickers") or []) if str(t).strip()]
        try:
            threshold = float(config.get("threshold", DEFAULT_THRESHOLD))
            max_news = int(config.get("max_news_per_ticker", DEFAULT_MAX_NEWS))
            smtp = SMTPSettings.from_dict(config.get("smtp") or {})
            timeouts = Timeouts.from_dict(config.get("timeouts") or {})
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"invalid numeric setting in config: {exc}") from exc
        if threshold < 0:
            raise ConfigurationError(f"threshold must be non-negative, got {threshold}")
        if max_news < 1:
            raise ConfigurationError(f"max_news_per_ticker must be at least 1, got {max_news}")

        return cls(
            tickers=tickers,
            use_trending=bool(config.get("use_trending", True)),
            threshold=threshold,
            max_news_per_ticker=max_news,
            discord_webhook=_pick(config, "discord_webhook", "DISCORD_WEBHOOK_URL"),
            send_email=bool(config.get("send_email", False)),
            recipient_email=config.get("recipient_email") or None,
            proxy_url=_pick(config, "proxy_url", "PROXY_URL"),
            output_dir=config.get("output_dir", "output"),
            ai=AISettings.from_dict(config.get("ai") or {}),
            smtp=smtp,
            timeouts=timeouts,
        )

    def require_reasoning_credentials(self) -> None:
        """Raise ConfigurationError unless at least one backend key is set."""
        if not self.ai.has_any_key():
            raise ConfigurationError(
                "No AI API key provided. Set an OpenAI, Anthropic, Gemini, or OpenRouter key."
            )

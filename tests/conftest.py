"""Shared fixtures. No test touches the network or the real output/ dir."""

import os
import tempfile

import pytest

# Must be set before market_reaction.core.logger is first imported.
os.environ.setdefault(
    "PIPELINE_LOG_FILE", os.path.join(tempfile.gettempdir(), "market_reaction_tests.log")
)

from market_reaction.models.datatypes import EventClass, Instrument, NewsItem, Verdict  # noqa: E402

AI_ENV_VARS = (
    "OPENAI_API_KEY",
    "ANTHROPIC_API_KEY",
    "GEMINI_API_KEY",
    "OPENROUTER_API_KEY",
    "DISCORD_WEBHOOK_URL",
    "PROXY_URL",
    "SMTP_HOST",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in AI_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def instrument():
    return Instrument(symbol="XYZ", last_price=101.5, pct_change=5.2)


@pytest.fixture
def verdict():
    return Verdict(reason_summary="Shares rose after an earnings beat.", event_class=EventClass.EARNINGS)


@pytest.fixture
def long_snippet_item():
    return NewsItem(
        title="XYZ jumps on earnings",
        link="",
        snippet="XYZ reported quarterly revenue well above analyst expectations on Tuesday.",
    )

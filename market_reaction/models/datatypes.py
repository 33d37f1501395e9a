"""Data structures for the market reaction pipeline."""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional


class EventClass(str, Enum):
    """Category a backend assigns to the cause of a price move."""

    EARNINGS = "EARNINGS"
    MERGER = "MERGER"
    MACRO = "MACRO"
    MARKET_DRIFT = "MARKET_DRIFT"
    VOLATILITY = "VOLATILITY"
    UNKNOWN = "UNKNOWN"
    ERROR = "ERROR"

    @classmethod
    def parse(cls, value: Any) -> "EventClass":
        """Map a free-form label onto a member; anything unrecognised is UNKNOWN."""
        label = str(value or "").strip().upper()
        try:
            return cls(label)
        except ValueError:
            return cls.UNKNOWN


@dataclass(frozen=True)
class Instrument:
    """
    A quoted symbol as read from the quote source for this run.
    """
    symbol: str
    last_price: Optional[float]
    pct_change: float


@dataclass(frozen=True)
class RegionConfig:
    """
    Google News edition parameters (``gl``, ``hl``, ``ceid``) for a symbol.
    """
    geo_code: str
    language_hint: str
    country_language: str


@dataclass
class NewsItem:
    """
    One entry from a news feed search.
    """
    title: str
    link: str
    snippet: str


@dataclass
class ExtractedArticle:
    """
    Readable main content of a news page, flattened to markdown-like text.
    """
    title: str
    text: str


@dataclass(frozen=True)
class Verdict:
    """
    Structured explanation of a move returned by the reasoning step.
    """
    reason_summary: str
    event_class: EventClass

    @classmethod
    def error(cls, message: str) -> "Verdict":
        return cls(reason_summary=f"AI Error: {message}", event_class=EventClass.ERROR)


@dataclass(frozen=True)
class ResultRecord:
    """
    Terminal output row: one per analyzed volatile instrument.
    """
    symbol: str
    last_price: Optional[float]
    pct_change: float
    reason_summary: str
    event_class: EventClass
    timestamp: datetime

    @classmethod
    def build(cls, instrument: Instrument, verdict: Verdict, timestamp: Optional[datetime] = None) -> "ResultRecord":
        return cls(
            symbol=instrument.symbol,
            last_price=instrument.last_price,
            pct_change=instrument.pct_change,
            reason_summary=verdict.reason_summary,
            event_class=verdict.event_class,
            timestamp=timestamp or datetime.now(timezone.utc),
        )

    @property
    def instrument(self) -> Instrument:
        return Instrument(self.symbol, self.last_price, self.pct_change)

    @property
    def verdict(self) -> Verdict:
        return Verdict(self.reason_summary, self.event_class)

    def to_dict(self) -> Dict[str, Any]:
        """Dataset row in the published field naming."""
        return {
            "ticker": self.symbol,
            "pctChange": self.pct_change,
            "price": self.last_price,
            "reason_summary": self.reason_summary,
            "event_class": self.event_class.value,
            "timestamp": self.timestamp.isoformat(),
        }

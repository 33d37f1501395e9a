"""Abstract base classes for data providers and reasoning backends."""

from abc import ABC, abstractmethod
from typing import List

from market_reaction.models.datatypes import Instrument, NewsItem


class QuoteProvider(ABC):
    """Abstract interface for last-price / percent-change lookups."""

    @abstractmethod
    def fetch_quote(self, symbol: str) -> Instrument:
        """
        Fetch the current quote for a symbol.

        Args:
            symbol (str): Ticker symbol, optionally with an exchange suffix.

        Returns:
            Instrument: Symbol with last price and signed percent change.
        """
        pass

    @abstractmethod
    def trending_symbols(self, count: int = 5) -> List[str]:
        """
        Return up to ``count`` currently trending symbols.

        Implementations fall back to a fixed list instead of raising.
        """
        pass


class NewsProvider(ABC):
    """Abstract interface for fetching candidate headlines for a symbol."""

    @abstractmethod
    def fetch_news(self, symbol: str, max_items: int) -> List[NewsItem]:
        """
        Fetch recent news items for a symbol.

        Args:
            symbol (str): Ticker symbol.
            max_items (int): Upper bound on returned items.

        Returns:
            List[NewsItem]: Possibly empty; never raises for network or parse errors.
        """
        pass


class ReasoningBackend(ABC):
    """A text-generation service that answers one system + user prompt."""

    name: str = "backend"

    @abstractmethod
    def generate(self, system: str, user: str) -> str:
        """
        Return the raw completion text for the given prompts.

        Errors (network, auth, quota) propagate to the caller.
        """
        pass

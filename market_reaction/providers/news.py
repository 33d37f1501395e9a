"""Google News RSS provider with per-exchange regional routing.

Per symbol:
  1. Resolve the news edition from the exchange suffix (``resolve_region``).
  2. Search ``"<symbol> stock news" when:1d`` in that edition.
  3. Keep the first ``max_items`` entries as :class:`NewsItem` with the
     description reduced to plain text.

Any network or parse failure yields an empty list so one symbol's feed
outage never blocks the others.
"""

import urllib.parse
from typing import List, Optional

import feedparser
from bs4 import BeautifulSoup

from market_reaction.core.errors import NetworkError
from market_reaction.core.http import BROWSER_HEADERS, http_get
from market_reaction.core.logger import logger
from market_reaction.core.region import resolve_region
from market_reaction.models.datatypes import NewsItem, RegionConfig
from market_reaction.providers.base import NewsProvider

_GOOGLE_RSS_BASE = "https://news.google.com/rss/search"

NO_TITLE = "No Title"


def build_search_url(symbol: str, region: RegionConfig) -> str:
    """Return the Google News RSS search URL for ``symbol`` in ``region``.

    ``when:1d`` restricts results to the last day server-side.
    """
    query = urllib.parse.quote(f"{symbol} stock news")
    return (
        f"{_GOOGLE_RSS_BASE}?q={query}+when:1d"
        f"&hl={region.language_hint}&gl={region.geo_code}&ceid={region.country_language}"
    )


def html_to_text(fragment: str) -> str:
    """Parse an HTML fragment and return its text content, trimmed."""
    if not fragment:
        return ""
    return BeautifulSoup(fragment, "html.parser").get_text().strip()


class GoogleNewsProvider(NewsProvider):
    """Google News RSS search, routed to the symbol's regional edition."""

    def __init__(self, proxy_url: Optional[str] = None, timeout: float = 15.0) -> None:
        """Args:
            proxy_url: Optional HTTP(S) proxy for the feed request.
            timeout: Request deadline in seconds.
        """
        self.proxy_url = proxy_url
        self.timeout = timeout

    def fetch_news(self, symbol: str, max_items: int) -> List[NewsItem]:
        """Return up to ``max_items`` recent items for ``symbol``; ``[]`` on failure."""
        region = resolve_region(symbol)
        url = build_search_url(symbol, region)
        logger.info(f"GoogleNewsProvider: searching region {region.geo_code} for {symbol}")

        try:
            resp = http_get(
                url, headers=BROWSER_HEADERS, proxy_url=self.proxy_url, timeout=self.timeout
            )
            feed = feedparser.parse(resp.content)
        except NetworkError as exc:
            logger.warning(f"GoogleNewsProvider: news fetch failed for {symbol}: {exc}")
            return []
        except Exception as exc:
            logger.warning(f"GoogleNewsProvider: feed parse failed for {symbol}: {exc}")
            return []

        if feed.bozo and not feed.entries:
            logger.warning(
                f"GoogleNewsProvider: unreadable feed for {symbol}: "
                f"{getattr(feed, 'bozo_exception', 'unknown error')}"
            )
            return []

        items = [self._to_item(entry) for entry in feed.entries[:max_items]]
        logger.info(f"GoogleNewsProvider: {len(items)} items for {symbol}")
        return items

    @staticmethod
    def _to_item(entry) -> NewsItem:
        """Map one feedparser entry onto a NewsItem."""
        title = (entry.get("title") or "").strip() or NO_TITLE
        return NewsItem(
            title=title,
            link=(entry.get("link") or "").strip(),
            snippet=html_to_text(entry.get("description") or entry.get("summary") or ""),
        )

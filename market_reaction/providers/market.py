"""Quote lookups and trending-symbol discovery via Yahoo Finance."""

from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeout
from typing import List, Optional

import yfinance as yf

from market_reaction.core.errors import ErrorKind, NetworkError, QuoteNotFoundError
from market_reaction.core.http import BROWSER_HEADERS, http_get
from market_reaction.core.logger import logger
from market_reaction.core.retry import with_retries
from market_reaction.models.datatypes import Instrument
from market_reaction.providers.base import QuoteProvider

_TRENDING_URL = "https://query1.finance.yahoo.com/v1/finance/trending/{region}"

DEFAULT_TRENDING = ["NVDA", "TSLA", "AAPL", "AMD", "INTC"]


def _worth_retrying(exc: BaseException) -> bool:
    """An unknown symbol stays unknown; anything else may be a transport hiccup."""
    return not isinstance(exc, QuoteNotFoundError)


class YFinanceProvider(QuoteProvider):
    """Yahoo Finance implementation of the quote source."""

    def __init__(self, timeout: float = 15.0, region: str = "US") -> None:
        """
        Args:
            timeout (float): Deadline in seconds for each quote and trending lookup.
            region (str): Yahoo region code for the trending list.
        """
        self.timeout = timeout
        self.region = region

    @with_retries(max_retries=2, initial_delay=1, retry_if=_worth_retrying)
    def fetch_quote(self, symbol: str) -> Instrument:
        """
        Fetch last price and percent change for ``symbol``.

        A missing change value is read as 0.0 (no move). A quote without a
        price and without a change is treated as an unknown symbol and is
        not retried.

        Raises:
            QuoteNotFoundError: If Yahoo returned no quote fields for the symbol.
            NetworkError: If the lookup did not finish within ``timeout``.
        """
        logger.info(f"YFinanceProvider: fetching quote for {symbol}")
        info = self._read_info(symbol)

        price: Optional[float] = info.get("regularMarketPrice")
        change = info.get("regularMarketChangePercent")
        if price is None and change is None:
            raise QuoteNotFoundError(f"no quote data returned for {symbol}")

        return Instrument(
            symbol=symbol,
            last_price=float(price) if price is not None else None,
            pct_change=float(change or 0.0),
        )

    def _read_info(self, symbol: str) -> dict:
        # yfinance exposes no per-call deadline for .info, so the lookup runs
        # on a worker and is abandoned once the timeout passes.
        pool = ThreadPoolExecutor(max_workers=1, thread_name_prefix="quote")
        future = pool.submit(lambda: yf.Ticker(symbol).info or {})
        try:
            return future.result(timeout=self.timeout)
        except FuturesTimeout:
            raise NetworkError(
                f"quote lookup for {symbol} exceeded {self.timeout}s", kind=ErrorKind.TRANSIENT
            ) from None
        finally:
            pool.shutdown(wait=False)

    def trending_symbols(self, count: int = 5) -> List[str]:
        """
        Return the first ``count`` trending symbols for the configured region.

        Any lookup failure, or an empty list, yields ``DEFAULT_TRENDING``.
        """
        url = _TRENDING_URL.format(region=self.region)
        try:
            resp = http_get(url, headers=BROWSER_HEADERS, timeout=self.timeout)
            result = resp.json()["finance"]["result"]
            quotes = result[0].get("quotes", []) if result else []
            symbols = [q["symbol"] for q in quotes if q.get("symbol")][:count]
        except (NetworkError, ValueError, KeyError, IndexError, TypeError) as exc:
            logger.warning(f"YFinanceProvider: trending lookup failed ({exc}); using defaults")
            return list(DEFAULT_TRENDING)

        if not symbols:
            logger.warning("YFinanceProvider: trending lookup returned no symbols; using defaults")
            return list(DEFAULT_TRENDING)

        logger.info(f"YFinanceProvider: trending {self.region}: {', '.join(symbols)}")
        return symbols

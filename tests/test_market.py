"""YFinanceProvider — quote mapping and trending discovery."""

import threading
from unittest.mock import MagicMock, patch

import pytest

from market_reaction.core.errors import ErrorKind, NetworkError, QuoteNotFoundError
from market_reaction.providers import market as market_module
from market_reaction.providers.market import DEFAULT_TRENDING, YFinanceProvider


@pytest.fixture(autouse=True)
def _no_sleep():
    with patch("market_reaction.core.retry.time.sleep"):
        yield


def _ticker(info):
    ticker = MagicMock()
    ticker.info = info
    return ticker


def _trending_response(symbols):
    resp = MagicMock()
    resp.json.return_value = {"finance": {"result": [{"quotes": [{"symbol": s} for s in symbols]}]}}
    return resp


class TestFetchQuote:
    def test_maps_price_and_change(self):
        info = {"regularMarketPrice": 101.5, "regularMarketChangePercent": 5.2}
        with patch.object(market_module.yf, "Ticker", return_value=_ticker(info)) as mock_ticker:
            instrument = YFinanceProvider().fetch_quote("XYZ")

        mock_ticker.assert_called_once_with("XYZ")
        assert instrument.symbol == "XYZ"
        assert instrument.last_price == 101.5
        assert instrument.pct_change == 5.2

    def test_missing_change_means_no_move(self):
        with patch.object(market_module.yf, "Ticker", return_value=_ticker({"regularMarketPrice": 20})):
            instrument = YFinanceProvider().fetch_quote("XYZ")
        assert instrument.pct_change == 0.0
        assert instrument.last_price == 20.0

    def test_missing_price_kept_as_none(self):
        with patch.object(market_module.yf, "Ticker", return_value=_ticker({"regularMarketChangePercent": -4})):
            instrument = YFinanceProvider().fetch_quote("XYZ")
        assert instrument.last_price is None
        assert instrument.pct_change == -4.0

    def test_unknown_symbol_not_retried(self):
        with patch.object(market_module.yf, "Ticker", return_value=_ticker({})) as mock_ticker:
            with pytest.raises(QuoteNotFoundError):
                YFinanceProvider().fetch_quote("NOPE")
        assert mock_ticker.call_count == 1

    def test_transport_failure_retried(self):
        good = _ticker({"regularMarketPrice": 5.0, "regularMarketChangePercent": 3.5})
        with patch.object(market_module.yf, "Ticker", side_effect=[ConnectionError("reset"), good]) as mock_ticker:
            instrument = YFinanceProvider().fetch_quote("XYZ")
        assert mock_ticker.call_count == 2
        assert instrument.pct_change == 3.5

    def test_hung_lookup_hits_deadline(self):
        release = threading.Event()

        class _SlowTicker:
            @property
            def info(self):
                release.wait(5)
                return {}

        try:
            with patch.object(market_module.yf, "Ticker", side_effect=lambda symbol: _SlowTicker()):
                with pytest.raises(NetworkError) as info:
                    YFinanceProvider(timeout=0.05).fetch_quote("SLOW")
        finally:
            release.set()
        assert info.value.kind is ErrorKind.TRANSIENT
        assert "0.05s" in str(info.value)


class TestTrendingSymbols:
    def test_first_n_symbols(self):
        resp = _trending_response(["AAA", "BBB", "CCC"])
        with patch.object(market_module, "http_get", return_value=resp) as mock_get:
            assert YFinanceProvider(timeout=4).trending_symbols(2) == ["AAA", "BBB"]
        assert mock_get.call_args.args[0].endswith("/trending/US")
        assert mock_get.call_args.kwargs["timeout"] == 4

    def test_network_failure_falls_back(self):
        err = NetworkError("boom", kind=ErrorKind.TRANSIENT)
        with patch.object(market_module, "http_get", side_effect=err):
            assert YFinanceProvider().trending_symbols() == DEFAULT_TRENDING

    def test_empty_result_falls_back(self):
        with patch.object(market_module, "http_get", return_value=_trending_response([])):
            assert YFinanceProvider().trending_symbols() == DEFAULT_TRENDING

    def test_malformed_body_falls_back(self):
        resp = MagicMock()
        resp.json.return_value = {"finance": None}
        with patch.object(market_module, "http_get", return_value=resp):
            assert YFinanceProvider().trending_symbols() == DEFAULT_TRENDING

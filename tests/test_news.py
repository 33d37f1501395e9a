"""Google News RSS search."""

from types import SimpleNamespace
from unittest.mock import patch

from market_reaction.core.errors import ErrorKind, NetworkError
from market_reaction.core.region import resolve_region
from market_reaction.providers import news as news_module
from market_reaction.providers.news import GoogleNewsProvider, build_search_url, html_to_text

RSS = b"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0"><channel><title>"RELIANCE.NS stock news" - Google News</title>
<item>
  <title>Reliance shares jump 5% on retail unit listing talk</title>
  <link>https://news.example.com/reliance-1</link>
  <description>&lt;a href="https://news.example.com/reliance-1"&gt;Reliance shares jump 5%&lt;/a&gt;&amp;nbsp;&lt;font color="#6f6f6f"&gt;Mint&lt;/font&gt;</description>
</item>
<item>
  <title>Sensex ends higher</title>
  <link>https://news.example.com/sensex</link>
  <description>Plain description</description>
</item>
<item>
  <title>Third story</title>
  <link>https://news.example.com/third</link>
  <description>Third</description>
</item>
</channel></rss>"""


def _response(body: bytes):
    return SimpleNamespace(content=body, status_code=200)


class TestBuildSearchUrl:
    def test_query_and_region_params(self):
        url = build_search_url("RELIANCE.NS", resolve_region("RELIANCE.NS"))
        assert url.startswith("https://news.google.com/rss/search?q=RELIANCE.NS%20stock%20news+when:1d")
        assert "&hl=en-IN&gl=IN&ceid=IN:en" in url

    def test_us_default(self):
        url = build_search_url("AAPL", resolve_region("AAPL"))
        assert "&hl=en-US&gl=US&ceid=US:en" in url


class TestHtmlToText:
    def test_strips_markup_and_trims(self):
        assert html_to_text("  <b>Hello</b> <i>world</i>  ") == "Hello world"

    def test_empty(self):
        assert html_to_text("") == ""


class TestGoogleNewsProvider:
    def test_parses_items_up_to_max(self):
        provider = GoogleNewsProvider()
        with patch.object(news_module, "http_get", return_value=_response(RSS)) as mock_get:
            items = provider.fetch_news("RELIANCE.NS", max_items=2)

        assert len(items) == 2
        first = items[0]
        assert first.title == "Reliance shares jump 5% on retail unit listing talk"
        assert first.link == "https://news.example.com/reliance-1"
        assert first.snippet.startswith("Reliance shares jump 5%")
        assert "Mint" in first.snippet
        assert "<" not in first.snippet
        assert items[1].snippet == "Plain description"

        called_url = mock_get.call_args.args[0]
        assert "gl=IN" in called_url

    def test_proxy_and_timeout_forwarded(self):
        provider = GoogleNewsProvider(proxy_url="http://proxy:8080", timeout=7)
        with patch.object(news_module, "http_get", return_value=_response(RSS)) as mock_get:
            provider.fetch_news("AAPL", max_items=1)

        kwargs = mock_get.call_args.kwargs
        assert kwargs["proxy_url"] == "http://proxy:8080"
        assert kwargs["timeout"] == 7

    def test_network_error_returns_empty(self):
        provider = GoogleNewsProvider()
        err = NetworkError("boom", kind=ErrorKind.TRANSIENT)
        with patch.object(news_module, "http_get", side_effect=err):
            assert provider.fetch_news("AAPL", max_items=3) == []

    def test_garbage_feed_returns_empty(self):
        provider = GoogleNewsProvider()
        with patch.object(news_module, "http_get", return_value=_response(b"<html><body>not a feed")):
            assert provider.fetch_news("AAPL", max_items=3) == []

    def test_missing_title_and_link(self):
        body = b"""<?xml version="1.0"?><rss version="2.0"><channel>
        <item><description>Only a description here</description></item>
        </channel></rss>"""
        provider = GoogleNewsProvider()
        with patch.object(news_module, "http_get", return_value=_response(body)):
            items = provider.fetch_news("AAPL", max_items=3)

        assert len(items) == 1
        assert items[0].title == "No Title"
        assert items[0].link == ""
        assert items[0].snippet == "Only a description here"

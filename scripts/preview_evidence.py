"""
Evidence preview — runs region resolution, news gathering, article
extraction and context assembly for the given symbols and prints what the
reasoning backend would receive. No backend is called.

Run with:
    PYTHONPATH=. python scripts/preview_evidence.py RELIANCE.NS AAPL
"""

import sys

from dotenv import load_dotenv

load_dotenv()

from market_reaction.core.config import Settings, load_config  # noqa: E402
from market_reaction.core.region import resolve_region  # noqa: E402
from market_reaction.pipeline.evidence import assemble_context, has_usable_evidence  # noqa: E402
from market_reaction.providers.article import ArticleExtractor  # noqa: E402
from market_reaction.providers.news import GoogleNewsProvider  # noqa: E402

DIVIDER = "=" * 70


def main(symbols: list[str]) -> int:
    try:
        settings = Settings.from_config(load_config())
    except FileNotFoundError:
        settings = Settings()
    symbols = symbols or settings.tickers
    if not symbols:
        print("Usage: python scripts/preview_evidence.py SYMBOL [SYMBOL ...]")
        return 1

    news = GoogleNewsProvider(proxy_url=settings.proxy_url, timeout=settings.timeouts.feed)
    extractor = ArticleExtractor(proxy_url=settings.proxy_url, timeout=settings.timeouts.article)

    for symbol in symbols:
        region = resolve_region(symbol)
        print(f"\n{DIVIDER}")
        print(f"  {symbol}  |  region={region.geo_code} hl={region.language_hint} ceid={region.country_language}")
        print(DIVIDER)

        entries = []
        for item in news.fetch_news(symbol, settings.max_news_per_ticker):
            article = extractor.extract(item.link) if item.link else None
            source = "article" if article else "snippet"
            print(f"  [{source:7}] {item.title[:80]}")
            entries.append((item, article))

        context = assemble_context(entries)
        if not has_usable_evidence(context):
            print("  (no usable evidence — reasoning would be skipped)")
            continue
        print(f"\n  context: {len(context)} chars")
        print(context)
    print()
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))

"""Pipeline engine — screens quotes for movers and explains each one.

Flow per run:
  1. Targets    — configured tickers, else trending symbols when enabled
  2. Screen     — fetch_quote → keep |pct_change| >= threshold
  3. Per mover  — fetch_news → extract each article → assemble_context
                  → ReasoningAdapter.analyze → ResultRecord
  4. Deliver    — dataset append + Discord/email per record
  5. Publish    — OUTPUT (JSON) and dashboard (HTML) in the record store,
                  mirrored to output/results.json and output/dashboard.html

Everything runs sequentially, one symbol and one article at a time, so
records come out in target-list order. A failure on one symbol is logged
and the engine moves on to the next.
"""

import json
import os
import sqlite3
from datetime import datetime
from typing import List, Optional, Sequence

from market_reaction.core.config import Settings
from market_reaction.core.logger import logger
from market_reaction.core.store import RecordStore
from market_reaction.models.datatypes import Instrument, ResultRecord
from market_reaction.pipeline.dashboard import render_dashboard
from market_reaction.pipeline.evidence import assemble_context, has_usable_evidence
from market_reaction.pipeline.notify import DiscordNotifier, EmailNotifier
from market_reaction.providers.article import ArticleExtractor
from market_reaction.providers.base import NewsProvider, QuoteProvider
from market_reaction.providers.market import YFinanceProvider
from market_reaction.providers.news import GoogleNewsProvider
from market_reaction.providers.reasoning import ReasoningAdapter, build_backend

TRENDING_COUNT = 5
RESULTS_FILE = "results.json"
DASHBOARD_FILE = "dashboard.html"


def is_volatile(pct_change: float, threshold: float) -> bool:
    """True when the absolute move meets or exceeds ``threshold``."""
    return abs(pct_change) >= threshold


class PipelineEngine:
    """Orchestrates one market reaction run.

    Collaborators default to the production implementations built from
    ``settings``; pass them explicitly to substitute fakes.

    Args:
        settings: Parsed run settings.
        output_dir: Directory for the record store and exported files.

    Raises:
        ConfigurationError: If no reasoning backend credential is configured
            and no ``reasoning`` adapter is supplied.
    """

    def __init__(
        self,
        settings: Settings,
        output_dir: Optional[str] = None,
        *,
        quotes: Optional[QuoteProvider] = None,
        news: Optional[NewsProvider] = None,
        extractor: Optional[ArticleExtractor] = None,
        reasoning: Optional[ReasoningAdapter] = None,
        store: Optional[RecordStore] = None,
        notifiers: Optional[Sequence] = None,
    ) -> None:
        self.settings = settings
        self.output_dir = output_dir or settings.output_dir
        timeouts = settings.timeouts

        if reasoning is None:
            settings.require_reasoning_credentials()
            reasoning = ReasoningAdapter(build_backend(settings.ai, timeout=timeouts.reasoning))

        self.reasoning = reasoning
        self.quotes = quotes or YFinanceProvider(timeout=timeouts.quote)
        self.news = news or GoogleNewsProvider(proxy_url=settings.proxy_url, timeout=timeouts.feed)
        self.extractor = extractor or ArticleExtractor(proxy_url=settings.proxy_url, timeout=timeouts.article)
        self.store = store or RecordStore(os.path.join(self.output_dir, "store.db"))
        self.notifiers = list(notifiers) if notifiers is not None else self._default_notifiers()

    def _default_notifiers(self) -> list:
        notifiers: list = []
        if self.settings.discord_webhook:
            notifiers.append(DiscordNotifier(self.settings.discord_webhook, timeout=self.settings.timeouts.notify))
        if self.settings.send_email:
            notifiers.append(
                EmailNotifier(self.settings.smtp, self.settings.recipient_email, timeout=self.settings.timeouts.notify)
            )
        return notifiers

    # ── public ────────────────────────────────────────────────────────────────

    def run(self) -> List[ResultRecord]:
        """Run the pipeline once.

        Returns:
            The result records in the order their symbols were processed.
        """
        targets = self.resolve_targets()
        logger.info(f"PipelineEngine: monitoring {', '.join(targets) or '(nothing)'}")

        movers = self.screen(targets)
        if not movers:
            logger.info("PipelineEngine: no significant moves")

        records: List[ResultRecord] = []
        for instrument in movers:
            record = self.analyze(instrument)
            if record is None:
                continue
            try:
                self.store.push_record(record.to_dict())
            except sqlite3.Error as exc:
                logger.error(f"PipelineEngine: could not store record for {record.symbol}: {exc}")
            records.append(record)
            self._notify(record)

        self._publish(records)
        logger.info(f"PipelineEngine: finished with {len(records)} records")
        return records

    def resolve_targets(self) -> List[str]:
        """Configured tickers, else trending symbols when auto-discovery is on."""
        if self.settings.tickers:
            return list(self.settings.tickers)
        if self.settings.use_trending:
            logger.info("PipelineEngine: auto-discovering trending symbols")
            return self.quotes.trending_symbols(TRENDING_COUNT)
        return []

    def screen(self, symbols: Sequence[str]) -> List[Instrument]:
        """Quote each symbol and keep the volatile ones; lookup failures skip the symbol."""
        movers: List[Instrument] = []
        for symbol in symbols:
            try:
                instrument = self.quotes.fetch_quote(symbol)
            except Exception as exc:
                logger.error(f"PipelineEngine: skipping {symbol}: {exc}")
                continue

            logger.info(f"PipelineEngine: {symbol}: {instrument.pct_change:.2f}%")
            if is_volatile(instrument.pct_change, self.settings.threshold):
                movers.append(instrument)
        return movers

    def analyze(self, instrument: Instrument) -> Optional[ResultRecord]:
        """Gather evidence and ask the backend about one mover.

        Returns None when no usable evidence was found.
        """
        logger.info(f"PipelineEngine: analyzing {instrument.symbol}")
        items = self.news.fetch_news(instrument.symbol, self.settings.max_news_per_ticker)

        entries = []
        for item in items:
            article = self.extractor.extract(item.link) if item.link else None
            entries.append((item, article))

        context = assemble_context(entries)
        if not has_usable_evidence(context):
            logger.warning(f"PipelineEngine: no news found for {instrument.symbol}")
            return None

        verdict = self.reasoning.analyze(instrument.symbol, instrument.pct_change, context)
        logger.info(f"PipelineEngine: {instrument.symbol} reason: {verdict.reason_summary}")
        return ResultRecord.build(instrument, verdict)

    # ── internal ──────────────────────────────────────────────────────────────

    def _notify(self, record: ResultRecord) -> None:
        for notifier in self.notifiers:
            try:
                notifier.send(record.instrument, record.verdict)
            except Exception as exc:
                logger.error(f"PipelineEngine: {type(notifier).__name__} raised for {record.symbol}: {exc}")

    def _publish(self, records: List[ResultRecord]) -> None:
        """Store OUTPUT and dashboard, and mirror both to output_dir."""
        rows = [r.to_dict() for r in records]
        html = render_dashboard(records, generated_at=datetime.now())

        self.store.set_value("OUTPUT", rows)
        self.store.set_value("dashboard", html, content_type="text/html")

        os.makedirs(self.output_dir, exist_ok=True)
        results_path = os.path.join(self.output_dir, RESULTS_FILE)
        with open(results_path, "w", encoding="utf-8") as f:
            json.dump(rows, f, indent=2, ensure_ascii=False)
        dashboard_path = os.path.join(self.output_dir, DASHBOARD_FILE)
        with open(dashboard_path, "w", encoding="utf-8") as f:
            f.write(html)
        logger.info(f"PipelineEngine: saved {results_path} and {dashboard_path}")


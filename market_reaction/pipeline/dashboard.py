"""Static HTML brief: one styled card per result record."""

from datetime import datetime
from html import escape
from typing import Iterable, Optional

from market_reaction.models.datatypes import ResultRecord

_STYLE = """
        body { font-family: -apple-system, system-ui, sans-serif; max-width: 800px; margin: 40px auto; padding: 20px; line-height: 1.6; }
        h1 { border-bottom: 2px solid #eee; padding-bottom: 10px; }
        .card { border: 1px solid #ddd; border-radius: 8px; padding: 20px; margin-bottom: 20px; box-shadow: 0 2px 4px rgba(0,0,0,0.05); }
        .green { border-left: 5px solid #2ecc71; }
        .red { border-left: 5px solid #e74c3c; }
        .ticker { font-weight: bold; font-size: 1.2em; }
        .meta { color: #666; font-size: 0.9em; margin-bottom: 10px; }"""


def render_card(record: ResultRecord) -> str:
    rising = record.pct_change > 0
    sign = "+" if rising else ""
    return f"""
    <div class="card {'green' if rising else 'red'}">
        <div class="ticker">{escape(record.symbol)} ({sign}{record.pct_change:.2f}%)</div>
        <div class="meta">Price: ${record.last_price} • Type: <span class="event">{escape(record.event_class.value)}</span></div>
        <div class="reason">{escape(record.reason_summary)}</div>
    </div>"""


def render_dashboard(records: Iterable[ResultRecord], generated_at: Optional[datetime] = None) -> str:
    """Render the full HTML document for ``records`` in the given order."""
    generated = (generated_at or datetime.now()).strftime("%Y-%m-%d %H:%M:%S")
    cards = "".join(render_card(r) for r in records)
    return f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="UTF-8"><title>Market Intelligence Brief</title>
    <style>{_STYLE}
    </style>
</head>
<body>
    <h1>📉 Market Intelligence Brief</h1>
    <p>Generated: {generated}</p>{cards}
</body>
</html>"""

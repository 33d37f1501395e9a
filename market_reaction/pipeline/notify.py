"""Per-instrument notifications: Discord webhook embed and HTML email.

Both are fire-and-forget. Delivery failures are logged and never reach
the dataset or the run's outcome.
"""

import smtplib
from datetime import datetime, timezone
from email.message import EmailMessage
from html import escape
from typing import Any, Dict, Optional

from market_reaction.core.config import SMTPSettings
from market_reaction.core.errors import NetworkError
from market_reaction.core.http import http_post
from market_reaction.core.logger import logger
from market_reaction.models.datatypes import Instrument, Verdict

GREEN = 5763719
RED = 15548997
FOOTER_BRAND = "Market Reaction Intelligence"


def _signed_pct(pct_change: float) -> str:
    return f"{'+' if pct_change > 0 else ''}{pct_change:.2f}%"


def build_discord_payload(instrument: Instrument, verdict: Verdict, now: Optional[datetime] = None) -> Dict[str, Any]:
    """Embed payload: green for a rise, red otherwise."""
    rising = instrument.pct_change > 0
    return {
        "embeds": [{
            "title": f"{instrument.symbol} {'🚀' if rising else '🔻'} {instrument.pct_change:.2f}%",
            "description": (
                f"**Price:** ${instrument.last_price}\n"
                f"**Reason:** {verdict.reason_summary}"
            ),
            "color": GREEN if rising else RED,
            "footer": {"text": f"Event: {verdict.event_class.value} • {FOOTER_BRAND}"},
            "timestamp": (now or datetime.now(timezone.utc)).isoformat(),
        }]
    }


class DiscordNotifier:
    """Posts one embed per analyzed instrument to a Discord webhook."""

    def __init__(self, webhook_url: str, timeout: float = 10.0) -> None:
        self.webhook_url = webhook_url
        self.timeout = timeout

    def send(self, instrument: Instrument, verdict: Verdict) -> bool:
        """Return True when the webhook accepted the message."""
        try:
            http_post(
                self.webhook_url,
                json=build_discord_payload(instrument, verdict),
                timeout=self.timeout,
            )
        except NetworkError as exc:
            logger.error(f"DiscordNotifier: webhook failed for {instrument.symbol}: {exc}")
            return False
        logger.info(f"DiscordNotifier: posted {instrument.symbol}")
        return True


def build_email_html(instrument: Instrument, verdict: Verdict) -> str:
    return f"""
<h2>{escape(instrument.symbol)} ({_signed_pct(instrument.pct_change)})</h2>
<p><strong>Price:</strong> ${instrument.last_price}</p>
<p><strong>Event Type:</strong> {verdict.event_class.value}</p>
<hr/>
<h3>Why?</h3>
<p>{escape(verdict.reason_summary)}</p>
<br/>
<small>Generated by {FOOTER_BRAND}</small>
"""


class EmailNotifier:
    """Sends an HTML summary per analyzed instrument through an SMTP relay."""

    def __init__(self, smtp: SMTPSettings, recipient: Optional[str], timeout: float = 10.0) -> None:
        self.smtp = smtp
        self.recipient = recipient
        self.timeout = timeout

    def build_message(self, instrument: Instrument, verdict: Verdict) -> EmailMessage:
        msg = EmailMessage()
        msg["Subject"] = f"📢 {instrument.symbol} Moved {instrument.pct_change:.2f}%"
        msg["From"] = self.smtp.sender or self.smtp.username or "market-reaction@localhost"
        msg["To"] = self.recipient
        msg.set_content(f"{instrument.symbol} {_signed_pct(instrument.pct_change)}: {verdict.reason_summary}")
        msg.add_alternative(build_email_html(instrument, verdict), subtype="html")
        return msg

    def send(self, instrument: Instrument, verdict: Verdict) -> bool:
        """Return True when the relay accepted the message."""
        if not self.recipient:
            logger.warning("EmailNotifier: email enabled but 'recipient_email' is empty")
            return False
        if not self.smtp.host:
            logger.warning("EmailNotifier: email enabled but no SMTP host is configured")
            return False

        logger.info(f"EmailNotifier: sending {instrument.symbol} to {self.recipient}")
        try:
            with smtplib.SMTP(self.smtp.host, self.smtp.port, timeout=self.timeout) as server:
                if self.smtp.use_tls:
                    server.starttls()
                if self.smtp.username and self.smtp.password:
                    server.login(self.smtp.username, self.smtp.password)
                server.send_message(self.build_message(instrument, verdict))
        except (smtplib.SMTPException, OSError) as exc:
            logger.error(f"EmailNotifier: failed to send email for {instrument.symbol}: {exc}")
            return False
        return True

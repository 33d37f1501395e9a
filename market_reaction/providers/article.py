"""Main-content extraction for news article pages.

trafilatura does the readability-style work (boilerplate, navigation and
comment removal) and hands back its structured XML with formatting kept;
that tree is then flattened into markdown-like text for the evidence
context. Pages whose readable text is too short, or that are access-denial
walls, are rejected so the caller falls back to the feed snippet.
"""

from typing import List, Optional

import lxml.html
import trafilatura
from lxml import etree

from market_reaction.core.errors import NetworkError
from market_reaction.core.http import BROWSER_HEADERS, http_get
from market_reaction.core.logger import logger
from market_reaction.models.datatypes import ExtractedArticle

MIN_ARTICLE_CHARS = 500
ACCESS_DENIED_MARKER = "Access Denied"
ARTICLE_TIMEOUT = 8.0


class ArticleExtractor:
    """Fetch a page and return its readable body, or None."""

    def __init__(self, proxy_url: Optional[str] = None, timeout: float = ARTICLE_TIMEOUT) -> None:
        self.proxy_url = proxy_url
        self.timeout = timeout

    def extract(self, url: str) -> Optional[ExtractedArticle]:
        """Return the article at ``url`` or None when it is unreachable or rejected.

        Never raises: fetch and parse failures are logged at debug level.
        """
        try:
            resp = http_get(
                url, headers=BROWSER_HEADERS, proxy_url=self.proxy_url, timeout=self.timeout
            )
        except NetworkError as exc:
            logger.debug(f"ArticleExtractor: fetch failed for {url}: {exc}")
            return None

        try:
            return parse_article(resp.text, url=url)
        except Exception as exc:
            logger.debug(f"ArticleExtractor: extraction failed for {url}: {exc}")
            return None


def parse_article(html: str, url: Optional[str] = None) -> Optional[ExtractedArticle]:
    """Run main-content extraction on ``html`` and apply the acceptance rules.

    Accepted only when the readable text is longer than ``MIN_ARTICLE_CHARS``
    and neither the extracted title nor the page <title> carries the
    access-denial marker.
    """
    xml = trafilatura.extract(
        html,
        url=url,
        output_format="xml",
        include_formatting=True,
        include_comments=False,
        include_tables=True,
        with_metadata=True,
    )
    if not xml:
        return None

    doc = etree.fromstring(xml.encode("utf-8"))
    main = doc.find("main")
    if main is None:
        main = doc

    title = (doc.get("title") or "").strip()
    plain_text = "".join(main.itertext()).strip()
    if len(plain_text) <= MIN_ARTICLE_CHARS:
        logger.debug(f"ArticleExtractor: {url} too short ({len(plain_text)} chars)")
        return None
    if ACCESS_DENIED_MARKER in title or ACCESS_DENIED_MARKER in page_title(html):
        logger.debug(f"ArticleExtractor: {url} is an access-denial page")
        return None

    return ExtractedArticle(title=title, text=to_markdown(main))


def page_title(html: str) -> str:
    """Text of the document's own <title>; trafilatura may prefer an <h1> or og:title."""
    try:
        root = lxml.html.fromstring(html)
    except (etree.ParserError, ValueError):
        return ""
    node = root.find(".//title")
    return node.text_content().strip() if node is not None else ""


# ── XML → markdown-like text ──────────────────────────────────────────────────

def to_markdown(element: etree._Element) -> str:
    """Flatten a trafilatura XML body into markdown-like plain text."""
    return "\n\n".join(block for block in _blocks(element) if block.strip()).strip()


def _blocks(element: etree._Element) -> List[str]:
    blocks: List[str] = []
    if element.text and element.text.strip():
        blocks.append(element.text.strip())

    for child in element:
        tag = child.tag if isinstance(child.tag, str) else ""
        if tag == "head":
            level = _heading_level(child.get("rend", ""))
            blocks.append(f"{'#' * level} {_inline(child).strip()}")
        elif tag == "p":
            blocks.append(_inline(child).strip())
        elif tag == "list":
            blocks.append(_list(child))
        elif tag == "quote":
            quoted = "\n\n".join(_blocks(child)) or _inline(child).strip()
            blocks.append("\n".join(f"> {line}" if line else ">" for line in quoted.splitlines()))
        elif tag == "code":
            blocks.append(f"```\n{''.join(child.itertext()).strip()}\n```")
        elif tag == "table":
            blocks.append(_table(child))
        elif tag in ("graphic", "lb"):
            pass
        elif tag:
            blocks.extend(_blocks(child))

        if child.tail and child.tail.strip():
            blocks.append(child.tail.strip())
    return blocks


def _heading_level(rend: str) -> int:
    if len(rend) == 2 and rend[0] == "h" and rend[1].isdigit():
        return max(1, min(6, int(rend[1])))
    return 2


def _inline(element: etree._Element) -> str:
    """Text of ``element`` with inline formatting rendered, excluding its tail."""
    parts: List[str] = [element.text or ""]
    for child in element:
        tag = child.tag if isinstance(child.tag, str) else ""
        inner = _inline(child)
        if tag == "hi":
            parts.append(_emphasis(inner, child.get("rend", "")))
        elif tag == "ref":
            target = child.get("target")
            parts.append(f"[{inner}]({target})" if target and inner.strip() else inner)
        elif tag == "lb":
            parts.append("\n")
        elif tag == "list":
            parts.append("\n" + _list(child))
        else:
            parts.append(inner)
        parts.append(child.tail or "")
    return "".join(parts)


def _emphasis(text: str, rend: str) -> str:
    if not text.strip():
        return text
    if "#b" in rend:
        return f"**{text}**"
    if "#i" in rend:
        return f"*{text}*"
    if "#t" in rend:
        return f"`{text}`"
    return text


def _list(element: etree._Element) -> str:
    ordered = element.get("rend", "") == "ol"
    lines = []
    for index, item in enumerate(element.findall("item"), start=1):
        marker = f"{index}." if ordered else "-"
        text = _inline(item).strip()
        lines.append(f"{marker} {text}")
    return "\n".join(lines)


def _table(element: etree._Element) -> str:
    rows = []
    for row in element.iter("row"):
        cells = [" ".join("".join(cell.itertext()).split()) for cell in row.findall("cell")]
        if cells:
            rows.append("| " + " | ".join(cells) + " |")
    return "\n".join(rows)

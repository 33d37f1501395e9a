"""Evidence context assembly — one bounded string per instrument."""

from typing import Iterable, Optional, Tuple

from market_reaction.models.datatypes import ExtractedArticle, NewsItem

MIN_ITEM_CHARS = 50
MIN_CONTEXT_CHARS = 50
MAX_ITEM_CHARS = 1500
MAX_CONTEXT_CHARS = 12000


def item_content(item: NewsItem, article: Optional[ExtractedArticle]) -> str:
    """Extracted article text when there is some, else the feed snippet."""
    if article is not None and article.text.strip():
        return article.text
    return item.snippet


def format_block(title: str, content: str) -> str:
    """Header line followed by at most ``MAX_ITEM_CHARS`` of ``content``."""
    return f"\n\n--- NEWS: {title} ---\n{content[:MAX_ITEM_CHARS]}"


def assemble_context(entries: Iterable[Tuple[NewsItem, Optional[ExtractedArticle]]]) -> str:
    """Concatenate one block per usable news item.

    Items whose content is not longer than ``MIN_ITEM_CHARS`` are dropped as
    noise. The result never exceeds ``MAX_CONTEXT_CHARS``.
    """
    context = ""
    for item, article in entries:
        content = item_content(item, article)
        if len(content) <= MIN_ITEM_CHARS:
            continue
        context += format_block(item.title, content)
    return context[:MAX_CONTEXT_CHARS]


def has_usable_evidence(context: str) -> bool:
    return len(context) >= MIN_CONTEXT_CHARS

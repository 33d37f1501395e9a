"""EvidenceAssembler — bounded per-instrument context."""

from market_reaction.models.datatypes import ExtractedArticle, NewsItem
from market_reaction.pipeline.evidence import (
    MAX_CONTEXT_CHARS,
    MAX_ITEM_CHARS,
    assemble_context,
    format_block,
    has_usable_evidence,
    item_content,
)


def _item(title="Headline", snippet="s" * 80, link="https://x.example"):
    return NewsItem(title=title, link=link, snippet=snippet)


class TestItemContent:
    def test_prefers_article_text(self):
        article = ExtractedArticle(title="t", text="full article body")
        assert item_content(_item(), article) == "full article body"

    def test_falls_back_to_snippet(self):
        assert item_content(_item(snippet="snip"), None) == "snip"

    def test_blank_article_falls_back(self):
        article = ExtractedArticle(title="t", text="   ")
        assert item_content(_item(snippet="snip"), article) == "snip"


class TestAssembleContext:
    def test_long_article_truncated_to_exact_prefix(self):
        text = "".join(chr(ord("a") + i % 26) for i in range(4000))
        article = ExtractedArticle(title="t", text=text)

        context = assemble_context([(_item(title="Big news"), article)])

        header = "\n\n--- NEWS: Big news ---\n"
        assert context == header + text[:MAX_ITEM_CHARS]
        assert len(context) == len(header) + 1500

    def test_short_items_skipped(self):
        entries = [
            (_item(title="noise", snippet="x" * 50), None),
            (_item(title="kept", snippet="y" * 51), None),
        ]
        context = assemble_context(entries)
        assert "noise" not in context
        assert context == format_block("kept", "y" * 51)

    def test_blocks_in_item_order(self):
        entries = [(_item(title=f"T{i}"), None) for i in range(3)]
        context = assemble_context(entries)
        assert context.index("T0") < context.index("T1") < context.index("T2")

    def test_never_exceeds_ceiling(self):
        article = ExtractedArticle(title="t", text="z" * 5000)
        entries = [(_item(title=f"T{i}"), article) for i in range(20)]
        assert len(assemble_context(entries)) == MAX_CONTEXT_CHARS

    def test_empty(self):
        assert assemble_context([]) == ""


class TestHasUsableEvidence:
    def test_threshold(self):
        assert not has_usable_evidence("")
        assert not has_usable_evidence("x" * 49)
        assert has_usable_evidence("x" * 50)

"""Unit tests for core/render.py"""

import pytest

from chatmark.core.export import iter_links
from chatmark.core.models import (
    Blockquote,
    Bold,
    Document,
    FencedBlock,
    Heading,
    InlineContent,
    Link,
    ListContent,
    Paragraph,
    Text,
    UnorderedList,
)
from chatmark.core.navigation import NavigationContext
from chatmark.core.payloads import BudgetSummary, InvalidPayload, Unrecognized
from chatmark.core.render import render


def _all_links(doc: Document) -> list[Link]:
    links = []
    for entry in doc.entries:
        if isinstance(entry.rendered, InlineContent):
            links.extend(iter_links(entry.rendered.nodes))
        elif isinstance(entry.rendered, ListContent):
            for item in entry.rendered.items:
                links.extend(iter_links(item))
    return links


def test_empty_input():
    """The empty string renders an empty document."""
    assert render("") == Document()
    assert render("").entries == ()


def test_plain_text_is_one_paragraph():
    """Input with no markup is exactly one paragraph with the same text."""
    doc = render("\n\nJust a reply\nover two lines\n\n")
    assert doc.blocks == (Paragraph(text="Just a reply\nover two lines"),)
    assert doc.entries[0].rendered == InlineContent(nodes=(Text(content="Just a reply\nover two lines"),))


def test_sample_message_structure(sample_msg):
    """Each block kind is rendered through the matching path."""
    doc = render(sample_msg)
    kinds = [entry.rendered.kind for entry in doc.entries]
    assert kinds == ["inline", "inline", "list_items", "budget_summary", "raw_code", "inline"]

    heading, para, items, budget, code, quote = doc.entries
    assert heading.anchor == "budget"
    assert isinstance(para.rendered.nodes[1], Bold)
    assert items.rendered.items[0][0] == Text(content="Deposit ")
    assert items.block == UnorderedList(items=("Deposit `30%`\ndue at signature", "Balance"))
    assert budget.rendered == BudgetSummary(ttc=12000, hint="Two quotes linked")
    assert code.rendered == Unrecognized(code='print("hello")', tag="python")
    assert quote.block == Blockquote(text="Keep a reserve\nfor surprises.")


def test_bold_with_link():
    """A well-formed bold span keeps its sanitized link child."""
    (entry,) = render("**bold [label](https://x) more**").entries
    (bold,) = entry.rendered.nodes
    assert isinstance(bold, Bold)
    assert Link(href="https://x", children=(Text(content="label"),)) in bold.children


@pytest.mark.parametrize("href", ["javascript:alert%281%29", "data:text/html,x", "JAVASCRIPT:x", "chrome://settings"])
def test_dangerous_schemes_never_link(href):
    """Links with disallowed schemes degrade to their label in every block kind."""
    text = f"[a]({href})\n\n# [b]({href})\n\n- [c]({href})\n\n> [d]({href})"
    doc = render(text)
    assert _all_links(doc) == []
    assert doc.entries[0].rendered.nodes[0] == Text(content="a")


def test_unrecognized_fence_round_trip():
    """An unknown tag passes the body through byte for byte."""
    body = "print(1)\n\n  indented\t\n"
    (entry,) = render(f"```foo\n{body}\n```").entries
    assert entry.block == FencedBlock(body=body, tag="foo")
    assert entry.rendered == Unrecognized(code=body, tag="foo")


def test_invalid_recognized_payload_does_not_raise():
    """A recognized tag with a broken body renders the notice payload."""
    (entry,) = render("```budget-summary\n{not json\n```").entries
    assert entry.rendered == InvalidPayload(tag="budget-summary")


def test_empty_payload_fields_absent():
    """{} gives the variant with every field absent."""
    (entry,) = render("```budget-summary\n{}\n```").entries
    assert entry.rendered == BudgetSummary()
    assert entry.rendered.ttc is None
    assert entry.rendered.payments is None


def test_list_items_tokenized_independently():
    """Each list item gets its own inline tree."""
    (entry,) = render("- a\n  cont\n- **b**").entries
    assert entry.block == UnorderedList(items=("a\ncont", "**b**"))
    assert entry.rendered == ListContent(items=(
        (Text(content="a\ncont"),),
        (Bold(children=(Text(content="b"),)),),
    ))


def test_heading_like_quote_line():
    """A quoted heading-like line stays blockquote text."""
    (entry,) = render("> # x").entries
    assert entry.block == Blockquote(text="# x")
    assert entry.rendered.nodes == (Text(content="# x"),)
    assert entry.anchor is None


def test_heading_anchors_are_unique():
    """Repeated headings get numbered anchors."""
    doc = render("## Details\n\n## Détails\n\n# **Details**")
    assert [e.anchor for e in doc.entries] == ["details", "details-1", "details-2"]
    assert doc.blocks[0] == Heading(level=2, text="Details")


def test_heading_without_sluggable_text():
    """Headings made only of symbols have no anchor."""
    (entry,) = render("# ✓ ⚠").entries
    assert entry.anchor is None


def test_guide_links_rewritten():
    """Guide pseudo-links are sent to the caller's place."""
    nav = NavigationContext.for_guide("/dashboard/projects/42?tab=guide")
    (entry,) = render("[Lexicon](#/guide?section=lexique&terme=IPN)", nav).entries
    (link,) = entry.rendered.nodes
    assert link.href == "/dashboard/projects/42?tab=guide&section=lexique&terme=IPN"


def test_guide_links_kept_without_navigation():
    """With no navigation context, sanitized hrefs pass through unchanged."""
    (entry,) = render("[Lexicon](#/guide?section=lexique)").entries
    assert entry.rendered.nodes[0].href == "#/guide?section=lexique"


def test_rewrite_only_sees_guide_links():
    """Other hrefs never reach the rewrite callback."""
    calls = []

    def rewrite(href):
        calls.append(href)
        return "/help"

    nav = NavigationContext(place="p", rewrite=rewrite)
    doc = render("[a](/x) [b](https://e.com) [c](#top) [d](#/guide?section=x) [e](javascript:x)", nav)
    assert calls == ["#/guide?section=x"]
    assert [link.href for link in _all_links(doc)] == ["/x", "https://e.com", "#top", "/help"]


def test_unsafe_rewrite_degrades_link():
    """A rewrite producing an unsafe target leaves only the label."""
    nav = NavigationContext(rewrite=lambda href: "javascript:alert(1)")
    (entry,) = render("[Guide](#/guide?section=x)", nav).entries
    assert entry.rendered.nodes == (Text(content="Guide"),)


def test_render_is_deterministic(sample_msg):
    """Same input and context give structurally equal trees."""
    nav = NavigationContext.for_guide("/g")
    assert render(sample_msg, nav) == render(sample_msg, nav)


def test_document_json_round_trip(sample_msg):
    """A rendered document survives JSON serialization."""
    doc = render(sample_msg)
    assert Document.model_validate_json(doc.model_dump_json()) == doc

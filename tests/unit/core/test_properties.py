"""Property-based tests for render: total, deterministic, and link-safe"""

from hypothesis import given, settings, strategies as st

from chatmark.core.export import iter_links
from chatmark.core.href import sanitize_href
from chatmark.core.models import Document, InlineContent, ListContent
from chatmark.core.navigation import NavigationContext
from chatmark.core.render import render


MARKUP = st.lists(
    st.sampled_from(list("#>-*`[]()!:/. \n\tab1") + ["javascript:", "https://", "```budget-summary\n", "{}"]),
    max_size=80,
).map("".join)


def _links(doc: Document):
    for entry in doc.entries:
        if isinstance(entry.rendered, InlineContent):
            yield from iter_links(entry.rendered.nodes)
        elif isinstance(entry.rendered, ListContent):
            for item in entry.rendered.items:
                yield from iter_links(item)


@given(st.text())
def test_render_never_raises(text):
    assert isinstance(render(text), Document)


@settings(max_examples=300)
@given(MARKUP)
def test_markup_heavy_input_renders(text):
    """Dense markup renders without error and the same way twice."""
    assert render(text) == render(text)


@given(MARKUP, st.sampled_from(["/g", "/p/1?tab=guide", "javascript:x"]))
def test_every_link_is_sanitized(text, place):
    """No Link in the tree carries a target that fails sanitization."""
    doc = render(text, NavigationContext.for_guide(place))
    for link in _links(doc):
        assert sanitize_href(link.href) == link.href


@given(st.text(alphabet=st.sampled_from(list("abcxyz ,.'éü€")), min_size=1).map(str.strip).filter(bool))
def test_plain_text_is_single_paragraph(text):
    """Text without block or inline markup is exactly one paragraph."""
    doc = render(text)
    assert len(doc.entries) == 1
    assert doc.blocks[0].text == text

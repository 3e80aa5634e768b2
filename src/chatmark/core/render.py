"""Tree assembly: scan blocks, tokenize text, dispatch payloads"""

from typing import Optional

from chatmark.core.dispatch import dispatch
from chatmark.core.href import sanitize_href
from chatmark.core.inline import HrefResolver, plain_text, tokenize_inline
from chatmark.core.models import (
    Block,
    Document,
    DocumentEntry,
    FencedBlock,
    Heading,
    InlineContent,
    ListContent,
    OrderedList,
    UnorderedList,
)
from chatmark.core.navigation import NavigationContext
from chatmark.core.scan import scan_blocks
from chatmark.core.utils.slug import anchor_for


def make_resolver(navigation: Optional[NavigationContext] = None) -> HrefResolver:
    """Sanitize hrefs, then let the navigation context rewrite guide links."""
    if navigation is None:
        return sanitize_href

    def resolve(raw: str):
        safe = sanitize_href(raw)
        return navigation.resolve(safe) if safe is not None else None
    return resolve


def render_block(block: Block, resolve: HrefResolver = sanitize_href) -> DocumentEntry:
    """Render a single block into its document entry."""
    if isinstance(block, FencedBlock):
        return DocumentEntry(block=block, rendered=dispatch(block))

    if isinstance(block, (UnorderedList, OrderedList)):
        items = tuple(tokenize_inline(item, resolve) for item in block.items)
        return DocumentEntry(block=block, rendered=ListContent(items=items))

    nodes = tokenize_inline(block.text, resolve)
    anchor = anchor_for(plain_text(nodes)) if isinstance(block, Heading) else None
    return DocumentEntry(block=block, rendered=InlineContent(nodes=nodes), anchor=anchor)


def render(text: str, navigation: Optional[NavigationContext] = None) -> Document:
    """Render a message into a Document. Pure; never raises on any input string.

    Repeated heading anchors get a numeric suffix ("details", "details-1").
    """
    if not text:
        return Document()

    resolve = make_resolver(navigation)
    entries: list[DocumentEntry] = []
    seen: dict[str, int] = {}
    for block in scan_blocks(text):
        entry = render_block(block, resolve)
        if entry.anchor:
            count = seen.get(entry.anchor, 0)
            seen[entry.anchor] = count + 1
            if count:
                entry = entry.model_copy(update={"anchor": f"{entry.anchor}-{count}"})
        entries.append(entry)
    return Document(entries=tuple(entries))

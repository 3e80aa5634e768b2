"""Document serialization: JSON for consumers, a plain outline for reading"""

from typing import Iterable, Iterator

from chatmark.core.inline import plain_text
from chatmark.core.models import (
    Bold,
    Document,
    Heading,
    InlineContent,
    InlineNode,
    Link,
    ListContent,
    UnorderedList,
)


def to_json(doc: Document, indent: int = 2) -> str:
    """Serialize a Document with wire-format (camelCase) payload keys."""
    return doc.model_dump_json(indent=indent or None, by_alias=True)


def iter_links(nodes: Iterable[InlineNode]) -> Iterator[Link]:
    """Yield every Link in an inline tree, depth first."""
    for node in nodes:
        if isinstance(node, Link):
            yield node
            yield from iter_links(node.children)
        elif isinstance(node, Bold):
            yield from iter_links(node.children)


def _flat(text: str) -> str:
    return " ".join(text.split())


def _link_lines(nodes: Iterable[InlineNode], indent: str) -> list[str]:
    return [f"{indent}-> {link.href}" for link in iter_links(nodes)]


def to_outline(doc: Document) -> list[str]:
    """One line per block (plus list items and link targets), for terminal display."""
    lines: list[str] = []
    for entry in doc.entries:
        block, rendered = entry.block, entry.rendered
        if isinstance(rendered, ListContent):
            lines.append(f"{block.kind} ({len(rendered.items)} items)")
            for number, item in enumerate(rendered.items, 1):
                bullet = "-" if isinstance(block, UnorderedList) else f"{number}."
                lines.append(f"  {bullet} {_flat(plain_text(item))}")
                lines.extend(_link_lines(item, "     "))
        elif isinstance(rendered, InlineContent):
            label = f"heading{block.level}" if isinstance(block, Heading) else block.kind
            anchor = f" #{entry.anchor}" if entry.anchor else ""
            lines.append(f"{label}{anchor}: {_flat(plain_text(rendered.nodes))}")
            lines.extend(_link_lines(rendered.nodes, "  "))
        else:
            tag = f"[{block.tag}]" if block.tag else ""
            lines.append(f"fenced{tag}: {rendered.kind}")
    return lines

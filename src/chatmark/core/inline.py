"""Inline span tokenizer: code spans, bold, and links within a block's text"""

from typing import Callable, Iterable, Optional

from chatmark.core.href import SafeHref, sanitize_href
from chatmark.core.models import Bold, InlineCode, InlineNode, Link, Text


HrefResolver = Callable[[str], Optional[SafeHref]]

CODE, BOLD, LINK = 'code', 'bold', 'link'

# On a tie for the earliest position, earlier entries win.
MARKERS: tuple[tuple[str, str], ...] = (
    (CODE, '`'),
    (BOLD, '**'),
    (LINK, '['),
)


class InlineScanner:
    """Cursor-driven state machine over one block of text.

    Literal text collects in a pending buffer and is flushed as a single Text
    node whenever a span node is emitted, so plain runs and unmatched markers
    coalesce. An unmatched marker is emitted literally and scanning resumes
    right after it.
    """

    def __init__(self, text: str, resolve_href: HrefResolver = sanitize_href):
        self.text = text
        self.resolve_href = resolve_href
        self.cursor = 0
        self.pending: list[str] = []
        self.nodes: list[InlineNode] = []

    def tokenize(self) -> tuple[InlineNode, ...]:
        handlers = {CODE: self._code, BOLD: self._bold, LINK: self._link}
        while self.cursor < len(self.text):
            found = self._next_marker()
            if found is None:
                self._literal(self.text[self.cursor:])
                break
            index, kind = found
            if index > self.cursor:
                self._literal(self.text[self.cursor:index])
                self.cursor = index
            handlers[kind]()
        self._flush()
        return tuple(self.nodes)

    def _next_marker(self) -> Optional[tuple[int, str]]:
        """Earliest (index, kind) at or after the cursor, or None."""
        best = None
        for kind, marker in MARKERS:
            index = self.text.find(marker, self.cursor)
            if index != -1 and (best is None or index < best[0]):
                best = (index, kind)
        return best

    def _literal(self, value: str) -> None:
        if value:
            self.pending.append(value)

    def _flush(self) -> None:
        if self.pending:
            self.nodes.append(Text(content=''.join(self.pending)))
            self.pending = []

    def _emit(self, node: InlineNode) -> None:
        self._flush()
        self.nodes.append(node)

    def _splice(self, nodes: Iterable[InlineNode]) -> None:
        for node in nodes:
            if isinstance(node, Text):
                self._literal(node.content)
            else:
                self._emit(node)

    def _nested(self, text: str) -> tuple[InlineNode, ...]:
        return InlineScanner(text, self.resolve_href).tokenize()

    def _code(self) -> None:
        end = self.text.find('`', self.cursor + 1)
        if end == -1:
            self._literal('`')
            self.cursor += 1
            return
        self._emit(InlineCode(content=self.text[self.cursor + 1:end]))
        self.cursor = end + 1

    def _bold(self) -> None:
        end = self.text.find('**', self.cursor + 2)
        if end == -1:
            self._literal('**')
            self.cursor += 2
            return
        self._emit(Bold(children=self._nested(self.text[self.cursor + 2:end])))
        self.cursor = end + 2

    def _link(self) -> None:
        start = self.cursor
        close_bracket = self.text.find(']', start + 1)
        close_paren = -1
        if close_bracket != -1 and self.text.startswith('(', close_bracket + 1):
            close_paren = self.text.find(')', close_bracket + 2)
        if close_paren == -1:
            self._literal('[')
            self.cursor += 1
            return

        label = self._nested(self.text[start + 1:close_bracket])
        href = self.resolve_href(self.text[close_bracket + 2:close_paren])
        # A resolver may rewrite the target; whatever it returns is checked again.
        safe = sanitize_href(href) if href is not None else None
        self.cursor = close_paren + 1
        if safe is None:
            self._splice(label)
        else:
            self._emit(Link(href=safe, children=label))


def tokenize_inline(text: str, resolve_href: HrefResolver = sanitize_href) -> tuple[InlineNode, ...]:
    """Tokenize one block of text into inline nodes."""
    return InlineScanner(text, resolve_href).tokenize()


def plain_text(nodes: Iterable[InlineNode]) -> str:
    """Concatenate the visible text of an inline tree."""
    parts = []
    for node in nodes:
        if isinstance(node, (Text, InlineCode)):
            parts.append(node.content)
        else:
            parts.append(plain_text(node.children))
    return ''.join(parts)

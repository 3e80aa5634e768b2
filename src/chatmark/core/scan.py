"""Line-driven block scanner: raw message text to an ordered list of Blocks"""

import re
from typing import Optional

from chatmark.core.models import (
    Block,
    Blockquote,
    FencedBlock,
    Heading,
    OrderedList,
    Paragraph,
    UnorderedList,
)


FENCE_OPEN_RE  = re.compile(r'^\s*`{3,}([^\s`]*)\s*$')
FENCE_CLOSE_RE = re.compile(r'^\s*`{3,}\s*$')
HEADING_RE     = re.compile(r'^\s{0,3}(#{1,6})\s+(\S.*?)\s*$')
QUOTE_RE       = re.compile(r'^\s*>\s?')
BULLET_RE      = re.compile(r'^\s*[-*]\s+(.*)$')
ORDERED_RE     = re.compile(r'^\s*\d+\.\s+(.*)$')
INDENT_RE      = re.compile(r'^\s+')

# Checked in this order; the first match decides what a line starts.
STARTERS: tuple[tuple[str, re.Pattern], ...] = (
    ('fence',     FENCE_OPEN_RE),
    ('heading',   HEADING_RE),
    ('quote',     QUOTE_RE),
    ('bullet',    BULLET_RE),
    ('ordered',   ORDERED_RE),
)


def normalize_newlines(text: str) -> str:
    """Fold CRLF line endings into LF."""
    return text.replace('\r\n', '\n')


def starter_kind(line: str) -> Optional[str]:
    """Return the kind of block this line would start, or None for plain text."""
    for kind, pattern in STARTERS:
        if pattern.match(line):
            return kind
    return None


def _is_blank(line: str) -> bool:
    return not line.strip()


class BlockScanner:
    """Greedy, lookahead-free accumulation of lines into blocks.

    Never raises: unterminated fences run to end of input and every other
    line falls back to paragraph text.
    """

    def __init__(self, text: str):
        self.lines = normalize_newlines(text).split('\n')
        self.index = 0
        self.blocks: list[Block] = []

    def scan(self) -> list[Block]:
        while self.index < len(self.lines):
            line = self.lines[self.index]
            if _is_blank(line):
                self.index += 1
                continue

            kind = starter_kind(line)
            if kind == 'fence':
                self._fence(FENCE_OPEN_RE.match(line).group(1))
            elif kind == 'heading':
                self._heading(HEADING_RE.match(line))
            elif kind == 'quote':
                self._blockquote()
            elif kind == 'bullet':
                self._list(kind, BULLET_RE, UnorderedList)
            elif kind == 'ordered':
                self._list(kind, ORDERED_RE, OrderedList)
            else:
                self._paragraph()
        return self.blocks

    def _fence(self, tag: str) -> None:
        self.index += 1
        body: list[str] = []
        while self.index < len(self.lines):
            line = self.lines[self.index]
            self.index += 1
            if FENCE_CLOSE_RE.match(line):
                break
            body.append(line)
        self.blocks.append(FencedBlock(body='\n'.join(body), tag=tag or None))

    def _heading(self, match: re.Match) -> None:
        self.index += 1
        self.blocks.append(Heading(level=len(match.group(1)), text=match.group(2)))

    def _blockquote(self) -> None:
        quoted: list[str] = []
        while self.index < len(self.lines):
            line = self.lines[self.index]
            if _is_blank(line) or not QUOTE_RE.match(line):
                break
            quoted.append(QUOTE_RE.sub('', line, count=1))
            self.index += 1
        self.blocks.append(Blockquote(text='\n'.join(quoted)))

    def _list(self, kind: str, item_re: re.Pattern, model: type) -> None:
        items: list[str] = []
        current: Optional[str] = None
        while self.index < len(self.lines):
            line = self.lines[self.index]
            if _is_blank(line):
                break

            line_kind = starter_kind(line)
            if line_kind == kind:
                if current is not None:
                    items.append(current.rstrip())
                current = item_re.match(line).group(1)
            elif current is not None and INDENT_RE.match(line):
                # indented lines continue the item, other starters included
                current += '\n' + line.strip()
            else:
                break
            self.index += 1

        if current is not None:
            items.append(current.rstrip())
        self.blocks.append(model(items=tuple(items)))

    def _paragraph(self) -> None:
        text_lines = [self.lines[self.index]]
        self.index += 1
        while self.index < len(self.lines):
            line = self.lines[self.index]
            if _is_blank(line) or starter_kind(line) is not None:
                break
            text_lines.append(line)
            self.index += 1
        self.blocks.append(Paragraph(text='\n'.join(text_lines)))


def scan_blocks(text: str) -> list[Block]:
    """Split raw message text into ordered Blocks; blank lines only separate."""
    return BlockScanner(text).scan()

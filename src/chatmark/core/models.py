"""Typed block, inline, and document models for the rendering pipeline"""

from __future__ import annotations

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from chatmark.core.href import SafeHref, is_external, sanitize_href
from chatmark.core.payloads import (
    BudgetSummary,
    ExampleNote,
    InvalidPayload,
    LexiconQuery,
    QuoteDigest,
    RiskGroups,
    Timeline,
    Unrecognized,
)


class Node(BaseModel):
    """Immutable base for every tree model."""
    model_config = ConfigDict(frozen=True)


# --- blocks ---

class Paragraph(Node):
    kind: Literal["paragraph"] = "paragraph"
    text: str


class Heading(Node):
    kind:  Literal["heading"] = "heading"
    level: int = Field(..., ge=1, le=6)
    text:  str


class UnorderedList(Node):
    kind:  Literal["unordered_list"] = "unordered_list"
    items: tuple[str, ...] = ()


class OrderedList(Node):
    kind:  Literal["ordered_list"] = "ordered_list"
    items: tuple[str, ...] = ()


class Blockquote(Node):
    kind: Literal["blockquote"] = "blockquote"
    text: str                       # quote lines, markers stripped, newline-joined


class FencedBlock(Node):
    kind: Literal["fenced"] = "fenced"
    body: str                       # verbatim, closer line excluded
    tag:  Optional[str] = None      # info string after the opening backticks


Block = Annotated[
    Union[Paragraph, Heading, UnorderedList, OrderedList, Blockquote, FencedBlock],
    Field(discriminator="kind"),
]


# --- inline nodes ---

class Text(Node):
    kind:    Literal["text"] = "text"
    content: str


class InlineCode(Node):
    kind:    Literal["code"] = "code"
    content: str


class Bold(Node):
    kind:     Literal["bold"] = "bold"
    children: tuple[InlineNode, ...] = ()


class Link(Node):
    """Hyperlink whose target has passed href sanitization."""
    kind:     Literal["link"] = "link"
    href:     SafeHref
    children: tuple[InlineNode, ...] = ()

    @field_validator("href")
    @classmethod
    def _href_is_safe(cls, value: str) -> str:
        safe = sanitize_href(value)
        if safe is None:
            raise ValueError(f"unsafe link target: {value!r}")
        return safe

    @property
    def external(self) -> bool:
        """True when the target leaves the application (open with noreferrer noopener)."""
        return is_external(self.href)


InlineNode = Annotated[Union[Text, InlineCode, Bold, Link], Field(discriminator="kind")]

Bold.model_rebuild()
Link.model_rebuild()


# --- rendered output ---

class InlineContent(Node):
    """Inline tree of a paragraph, heading, or blockquote."""
    kind:  Literal["inline"] = "inline"
    nodes: tuple[InlineNode, ...] = ()


class ListContent(Node):
    """One inline tree per list item, in item order."""
    kind:  Literal["list_items"] = "list_items"
    items: tuple[tuple[InlineNode, ...], ...] = ()


Rendered = Annotated[
    Union[
        InlineContent,
        ListContent,
        LexiconQuery,
        BudgetSummary,
        Timeline,
        RiskGroups,
        QuoteDigest,
        ExampleNote,
        InvalidPayload,
        Unrecognized,
    ],
    Field(discriminator="kind"),
]


class DocumentEntry(Node):
    block:    Block
    rendered: Rendered
    anchor:   Optional[str] = None  # heading slug for "#anchor" links


class Document(Node):
    """Root of a rendered message: ordered (block, rendered) entries."""
    entries: tuple[DocumentEntry, ...] = ()

    @property
    def blocks(self) -> tuple:
        return tuple(e.block for e in self.entries)

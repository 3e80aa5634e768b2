"""Fenced-block payload dispatch: a closed tag table mapped to typed payloads"""

import json
from enum import Enum
from typing import Optional, Union

from pydantic import ValidationError

from chatmark.core.models import FencedBlock
from chatmark.core.payloads import (
    BudgetSummary,
    ExampleNote,
    InvalidPayload,
    LexiconQuery,
    PayloadModel,
    QuoteDigest,
    RiskGroups,
    Timeline,
    Unrecognized,
)
from chatmark.core.utils.logger import get_logger


logger = get_logger(__name__)


class PayloadTag(str, Enum):
    """Restrict structured fenced blocks to a fixed set of tags"""
    lexicon_query  = "lexicon-query"
    budget_summary = "budget-summary"
    timeline       = "timeline"
    risk_groups    = "risk-groups"
    quote_digest   = "quote-digest"
    example_note   = "example-note"


PAYLOAD_TABLE: dict[PayloadTag, type[PayloadModel]] = {
    PayloadTag.lexicon_query:  LexiconQuery,
    PayloadTag.budget_summary: BudgetSummary,
    PayloadTag.timeline:       Timeline,
    PayloadTag.risk_groups:    RiskGroups,
    PayloadTag.quote_digest:   QuoteDigest,
    PayloadTag.example_note:   ExampleNote,
}

# Tags written by earlier assistant replies
LEGACY_TAGS: dict[str, PayloadTag] = {
    "devis-terms":        PayloadTag.lexicon_query,
    "assistant-budget":   PayloadTag.budget_summary,
    "assistant-timeline": PayloadTag.timeline,
    "assistant-risks":    PayloadTag.risk_groups,
    "assistant-devis":    PayloadTag.quote_digest,
    "assistant-example":  PayloadTag.example_note,
}

Payload = Union[
    LexiconQuery, BudgetSummary, Timeline, RiskGroups, QuoteDigest, ExampleNote,
    InvalidPayload, Unrecognized,
]


def normalize_tag(tag: Optional[str]) -> Optional[PayloadTag]:
    """Map a fence tag (case-insensitive, trimmed) to its PayloadTag, else None."""
    if not tag:
        return None
    key = tag.strip().lower()
    if key in LEGACY_TAGS:
        return LEGACY_TAGS[key]
    try:
        return PayloadTag(key)
    except ValueError:
        return None


def is_recognized(tag: Optional[str]) -> bool:
    """True if a fenced block with this tag carries a structured payload."""
    return normalize_tag(tag) is not None


def coerce_payload(tag: PayloadTag, body: str) -> Payload:
    """Parse a JSON body into the tag's payload; unusable bodies give InvalidPayload."""
    try:
        data = json.loads(body)
    except (ValueError, RecursionError) as e:
        logger.debug("Invalid JSON in %s block: %s", tag.value, e)
        return InvalidPayload(tag=tag.value)
    if not isinstance(data, dict):
        logger.debug("Expected a JSON object in %s block, got %s", tag.value, type(data).__name__)
        return InvalidPayload(tag=tag.value)

    data.pop("kind", None)
    try:
        return PAYLOAD_TABLE[tag].model_validate(data)
    except ValidationError as e:
        logger.debug("Unusable %s payload: %s", tag.value, e)
        return InvalidPayload(tag=tag.value)


def dispatch(block: FencedBlock) -> Payload:
    """Resolve a fenced block to its payload; unknown or missing tags pass through as code."""
    tag = normalize_tag(block.tag)
    if tag is None:
        return Unrecognized(code=block.body, tag=block.tag)
    return coerce_payload(tag, block.body)

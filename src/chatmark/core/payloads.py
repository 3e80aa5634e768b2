"""Structured payload shapes carried inside recognized fenced blocks

Every field is optional. Unknown keys are ignored and a value of the wrong
type leaves its field absent (None) instead of failing the whole payload, so
a consumer can always tell "not provided" apart from zero or empty.
"""

from typing import Annotated, Any, Literal, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictFloat,
    StrictStr,
    ValidationError,
    WrapValidator,
)


INVALID_PAYLOAD_MESSAGE = "Invalid formatted response"


def _absent_on_mismatch(value: Any, handler) -> Any:
    try:
        return handler(value)
    except ValidationError:
        return None


# Optional field types whose mismatches validate to None. The "kind"
# discriminator stays a plain Literal.
AbsentOnMismatch = WrapValidator(_absent_on_mismatch)
OptStr = Annotated[Optional[StrictStr], AbsentOnMismatch]
OptNum = Annotated[Optional[StrictFloat], AbsentOnMismatch]


class PayloadModel(BaseModel):
    """Permissive, immutable base for payload shapes and their rows."""
    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)


# --- row shapes ---

class PaymentLine(PayloadModel):
    label:   OptStr = None
    percent: OptNum = None
    amount:  OptNum = None
    note:    OptStr = None


class TimelinePhase(PayloadModel):
    title:       OptStr = None
    duration:    OptStr = None
    description: OptStr = None
    dates:       OptStr = None
    warnings:    OptStr = None


class RiskGroup(PayloadModel):
    icon:        OptStr = None
    title:       OptStr = None
    variant:     Annotated[Optional[Literal["info", "warning", "danger", "success"]], AbsentOnMismatch] = None
    description: OptStr = None
    actions:     Annotated[Optional[tuple[StrictStr, ...]], AbsentOnMismatch] = None


class SafetyLine(PayloadModel):
    label: OptStr = None
    value: OptStr = None


class QuoteLine(PayloadModel):
    id:         OptStr = None
    title:      OptStr = None
    status:     OptStr = None
    total_ttc:  OptNum = Field(default=None, alias="totalTtc")
    updated_at: OptStr = Field(default=None, alias="updatedAt")


# --- payload variants ---

class LexiconQuery(PayloadModel):
    """Open the technical-terms lexicon, optionally on a query or a term."""
    kind:  Literal["lexicon_query"] = "lexicon_query"
    query: OptStr = None
    term:  OptStr = None


class BudgetSummary(PayloadModel):
    """Totals (excl. tax, tax, incl. tax) and a payment schedule."""
    kind:     Literal["budget_summary"] = "budget_summary"
    ht:       OptNum = None
    tva:      OptNum = None
    ttc:      OptNum = None
    hint:     OptStr = None
    payments: Annotated[Optional[tuple[PaymentLine, ...]], AbsentOnMismatch] = None


class Timeline(PayloadModel):
    kind:           Literal["timeline"] = "timeline"
    title:          OptStr = None
    total_duration: OptStr = Field(default=None, alias="totalDuration")
    phases:         Annotated[Optional[tuple[TimelinePhase, ...]], AbsentOnMismatch] = None


class RiskGroups(PayloadModel):
    kind:          Literal["risk_groups"] = "risk_groups"
    groups:        Annotated[Optional[tuple[RiskGroup, ...]], AbsentOnMismatch] = None
    safety_budget: Annotated[Optional[tuple[SafetyLine, ...]], AbsentOnMismatch] = Field(default=None, alias="safetyBudget")


class QuoteDigest(PayloadModel):
    kind:      Literal["quote_digest"] = "quote_digest"
    total_ttc: OptNum = Field(default=None, alias="totalTtc")
    quotes:    Annotated[Optional[tuple[QuoteLine, ...]], AbsentOnMismatch] = None


class ExampleNote(PayloadModel):
    kind:  Literal["example_note"] = "example_note"
    title: OptStr = None
    text:  OptStr = None


class InvalidPayload(PayloadModel):
    """Notice shown in place of a recognized block whose body is unusable."""
    kind:    Literal["invalid"] = "invalid"
    tag:     OptStr = None
    message: StrictStr = INVALID_PAYLOAD_MESSAGE


class Unrecognized(PayloadModel):
    """Verbatim code from a fenced block with no recognized tag."""
    kind: Literal["raw_code"] = "raw_code"
    code: StrictStr = ""
    tag:  OptStr = None

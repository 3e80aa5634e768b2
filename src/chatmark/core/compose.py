"""Assistant reply composition: a heading, one payload fence, and the reply details

Composed messages are plain chat text; rendering them yields the matching
payload variant for the fence.
"""

import json
import math
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field

from chatmark.core.dispatch import PayloadTag
from chatmark.core.payloads import QuoteLine


DEFAULT_MAX_CHARS = 4000

# Share of the total due at each stage of the payment schedule
PAYMENT_SCHEDULE: tuple[tuple[str, int], ...] = (
    ("Deposit at signature", 30),
    ("Mid-project", 40),
    ("Balance at handover", 30),
)


class AssistantMode(str, Enum):
    """Presentation modes a reply can be composed in"""
    quotes = "quotes"
    steps  = "steps"
    budget = "budget"
    terms  = "terms"
    delays = "delays"
    risks  = "risks"


class ReplyContext(BaseModel):
    """Project facts available when composing a reply."""
    project_name:     Optional[str] = None
    project_type:     Optional[str] = None
    total_budget_ttc: Optional[float] = None
    quotes:           list[QuoteLine] = Field(default_factory=list)


def to_json_fence(tag: "PayloadTag | str", payload: Any) -> str:
    """Serialize payload as an indented JSON fence under the given tag."""
    name = tag.value if isinstance(tag, PayloadTag) else tag
    body = json.dumps(payload, indent=2, ensure_ascii=False)
    return f"\n```{name}\n{body}\n```\n"


def clamp_text(value: Optional[str], max_chars: int = DEFAULT_MAX_CHARS) -> str:
    """Trim and cut text to max_chars, marking the cut with an ellipsis."""
    v = (value or "").strip()
    if len(v) <= max_chars:
        return v
    return f"{v[:max_chars]}…"


def format_currency(amount: float) -> str:
    return f"{amount:,.2f} €"


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def generic_phases(project_type: Optional[str] = None) -> list[dict[str, str]]:
    label = f" ({project_type})" if project_type else ""
    return [
        {
            "title": f"Preparation & surveys{label}",
            "duration": "1-3 days",
            "description": "Site visit, protections, network surveys, site organisation.",
            "warnings": "If diagnostics are needed (asbestos/lead), allow extra time.",
        },
        {
            "title": "Removal / demolition",
            "duration": "2-7 days",
            "description": "Removal of existing fittings and disposal of rubble.",
        },
        {
            "title": "Networks (electrical / plumbing)",
            "duration": "3-10 days",
            "description": "Running networks, bringing them up to standard, tests before closing.",
            "warnings": "Validate before closing walls and floors to avoid costly rework.",
        },
        {
            "title": "Substrates (partitions, floors, waterproofing)",
            "duration": "1-2 weeks",
            "description": "Partitions, screed or levelling, bathroom waterproofing if needed.",
        },
        {
            "title": "Finishes",
            "duration": "1-3 weeks",
            "description": "Floor and wall coverings, paint, joinery, fixtures.",
        },
        {
            "title": "Handover & snag list",
            "duration": "1-5 days",
            "description": "Acceptance report, reservations, corrections, handover of documents.",
        },
    ]


def risk_groups() -> list[dict[str, Any]]:
    return [
        {
            "icon": "🏗️",
            "title": "Structure / hidden (load-bearing walls, cracks, damp, asbestos)",
            "variant": "danger",
            "description": "Without a survey before opening up, a discovery mid-project can add cost and delay.",
            "actions": [
                "If a wall may be load-bearing: get a structural opinion before opening.",
                "For older buildings: check asbestos/lead diagnostics before demolition.",
                "Keep a contingency reserve (10-15%) and schedule margin.",
            ],
        },
        {
            "icon": "⚡",
            "title": "Hidden services (electrical, plumbing, ducts)",
            "variant": "warning",
            "description": "Networks are a frequent source of surprises (compliance, old pipes, undersized cables).",
            "actions": [
                "Ask for the number of electrical points and the compliance work included.",
                "Validate waterproofing and tests before partitions are closed.",
                "Clarify who supplies what (materials vs labour).",
            ],
        },
        {
            "icon": "📋",
            "title": "Paperwork / insurance / neighbours",
            "variant": "info",
            "description": "Some changes need approvals and insurance must be checked before signing.",
            "actions": [
                "Ask for up-to-date liability insurance certificates before work starts.",
                "Check permits for facade, structure or extension changes.",
                "Warn neighbours or the building manager about nuisance or shared areas.",
            ],
        },
    ]


def budget_payload(total: Optional[float]) -> dict[str, Any]:
    if total is not None:
        payments = [
            {"label": label, "percent": percent, "amount": _round_half_up(total * percent / 100)}
            for label, percent in PAYMENT_SCHEDULE
        ]
    else:
        payments = [{"label": "Deposit / instalments / balance", "note": "Schedule to be set from the quote"}]
    if total:
        hint = f"Estimated total incl. tax across linked quotes: {format_currency(total)}."
    else:
        hint = "Add a quote for a reliable total."
    return {"ttc": total, "hint": hint, "payments": payments}


def quote_payload(quotes: list[QuoteLine], total: Optional[float]) -> dict[str, Any]:
    return {
        "totalTtc": total,
        "quotes": [q.model_dump(by_alias=True) for q in quotes],
    }


def format_assistant_reply(
    mode: AssistantMode,
    reply: str,
    context: Optional[ReplyContext] = None,
    max_chars: int = DEFAULT_MAX_CHARS,
    ) -> str:
    """Compose a chat message for mode: heading, payload fence, then the clamped reply."""
    ctx = context or ReplyContext()
    safe_reply = clamp_text(reply, max_chars)
    project = f" - {ctx.project_name}" if ctx.project_name else ""
    details = f"### Details\n{safe_reply}\n"

    if mode == AssistantMode.terms:
        return (
            f"## ❓ Technical terms{project}\n"
            "Here is a lexicon of common terms. Name a specific word if you want it explained.\n"
            + to_json_fence(PayloadTag.lexicon_query, {"query": ""})
            + (details if safe_reply else "")
        )

    if mode == AssistantMode.budget:
        fence = to_json_fence(PayloadTag.budget_summary, budget_payload(ctx.total_budget_ttc))
        return f"## 💰 Budget{project}\n" + fence + details

    if mode == AssistantMode.steps:
        fence = to_json_fence(PayloadTag.timeline, {
            "totalDuration": "6-10 weeks (depending on trades, access, and contingencies)",
            "phases": generic_phases(ctx.project_type),
        })
        return f"## ✓ Main steps{project}\n" + fence + details

    if mode == AssistantMode.delays:
        fence = to_json_fence(PayloadTag.timeline, {
            "title": "Recommended milestones",
            "totalDuration": "Varies with trades and contingencies",
            "phases": [
                {"title": "Before start", "duration": "1-2 weeks", "description": "Quote approval, insurance, orders."},
                {"title": "Works", "duration": "4-10 weeks", "description": "Main works, checks, finishes."},
                {"title": "Handover", "duration": "1-5 days", "description": "Acceptance report, reservations, corrections."},
            ],
        })
        return f"## ⏰ Timelines & milestones{project}\n" + fence + details

    if mode == AssistantMode.risks:
        fence = to_json_fence(PayloadTag.risk_groups, {
            "groups": risk_groups(),
            "safetyBudget": [
                {"label": "Contingency reserve (10-15%)", "value": "Recommended"},
                {"label": "Schedule margin", "value": "1-2 weeks"},
            ],
        })
        return f"## ⚠ Points of attention{project}\n" + fence + details

    fence = to_json_fence(PayloadTag.quote_digest, quote_payload(ctx.quotes, ctx.total_budget_ttc))
    return f"## 📄 Quotes{project}\n" + fence + details

"""Navigation context and guide deep links for rendered messages

Assistant replies point into the contextual help guide with pseudo-links of
the form ``#/guide?section=...``. The caller decides where those land by
passing a NavigationContext whose ``rewrite`` maps them onto a real route.
"""

from dataclasses import dataclass
from typing import Callable, Optional
from urllib.parse import quote, urlencode

from chatmark.core.href import SafeHref, sanitize_href


GUIDE_PREFIX = "#/guide"

GUIDE_SECTIONS: dict[str, tuple[str, str]] = {
    "lexique":          ("📚", "See the lexicon"),
    "delais-types":     ("⏰", "Typical timelines"),
    "points-attention": ("⚠️", "Points of attention"),
    "mon-devis":        ("📄", "Explain my quote"),
    "mon-budget":       ("💰", "See my budget"),
}
DEFAULT_GUIDE_LABEL = ("📚", "Open the guide")


def is_internal_link(href: str) -> bool:
    """True for guide pseudo-links reserved for caller-side rewriting."""
    return href == GUIDE_PREFIX or href.startswith((GUIDE_PREFIX + "?", GUIDE_PREFIX + "/"))


def guide_link(section: str, query: Optional[str] = None) -> str:
    """Build a guide pseudo-link; lexicon lookups carry the query as ``terme``."""
    params = [("section", section)]
    if query:
        params.append(("terme" if section == "lexique" else "q", query))
    return f"{GUIDE_PREFIX}?{urlencode(params, quote_via=quote)}"


def append_guide_link(text: str, section: str, query: Optional[str] = None) -> str:
    """Append a "Learn more" guide link unless the text already has one."""
    if f"{GUIDE_PREFIX}?section=" in text:
        return text
    emoji, label = GUIDE_SECTIONS.get(section, DEFAULT_GUIDE_LABEL)
    return f"{text}\n\nLearn more: [{emoji} {label}]({guide_link(section, query)})"


def guide_rewriter(place: str) -> Callable[[str], str]:
    """Return a pure rewrite sending ``#/guide?a=b`` to ``place`` with ``a=b`` appended."""
    def rewrite(href: str) -> str:
        if not is_internal_link(href):
            return href
        _, _, query = href.partition("?")
        if not query:
            return place
        sep = "&" if "?" in place else "?"
        return f"{place}{sep}{query}"
    return rewrite


@dataclass(frozen=True)
class NavigationContext:
    """Read-only caller context: the current place and an optional link rewrite."""
    place:   Optional[str] = None
    rewrite: Optional[Callable[[str], str]] = None

    @classmethod
    def for_guide(cls, place: str) -> "NavigationContext":
        """Context that sends guide pseudo-links to ``place``."""
        return cls(place=place, rewrite=guide_rewriter(place))

    def resolve(self, href: SafeHref) -> Optional[SafeHref]:
        """Rewrite internal guide links; the rewritten target must sanitize again."""
        if self.rewrite is None or not is_internal_link(href):
            return href
        return sanitize_href(self.rewrite(href))

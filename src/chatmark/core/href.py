"""Link target validation: the only place hrefs become SafeHref"""

from typing import NewType, Optional
from urllib.parse import urlsplit


SafeHref = NewType("SafeHref", str)

SAFE_PREFIXES = ("/", "#", "mailto:", "tel:")
WEB_SCHEMES = frozenset({"http", "https"})


def sanitize_href(href: str) -> Optional[SafeHref]:
    """Return the trimmed href if it is safe to link to, else None.

    Relative paths, fragments, mailto: and tel: are accepted as-is. Anything
    else must be an absolute http(s) URL with a host; every other scheme,
    scheme-relative ("//host") and malformed target is rejected. Host-less
    web URLs such as "http:foo" are rejected too, although browsers would
    resolve them to "http://foo/".
    """
    if not isinstance(href, str):
        return None
    trimmed = href.strip()
    if not trimmed:
        return None

    # "//evil.example" would otherwise pass the "/" prefix check
    if trimmed.startswith("//"):
        return None
    if trimmed.startswith(SAFE_PREFIXES):
        return SafeHref(trimmed)

    try:
        parts = urlsplit(trimmed)
        host = parts.hostname
    except ValueError:
        return None
    if parts.scheme not in WEB_SCHEMES or not host:
        return None
    if any(ch.isspace() or ord(ch) < 0x20 for ch in parts.netloc):
        return None
    return SafeHref(trimmed)


def is_external(href: str) -> bool:
    """True for absolute web targets that leave the application."""
    return href.startswith(("http://", "https://"))

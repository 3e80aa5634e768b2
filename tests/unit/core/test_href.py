"""Unit tests for core/href.py"""

import pytest

from chatmark.core.href import is_external, sanitize_href


@pytest.mark.parametrize("href", [
    "/dashboard/projects/7",
    "#details",
    "#/guide?section=lexique",
    "mailto:site@example.com",
    "tel:+33123456789",
    "http://example.com",
    "https://example.com/path?q=1#frag",
    "HTTPS://EXAMPLE.COM",
])
def test_accepted(href):
    """Allowed prefixes and absolute http(s) URLs pass unchanged."""
    assert sanitize_href(href) == href


def test_trimmed():
    """Surrounding whitespace is removed from accepted targets."""
    assert sanitize_href("  https://example.com  ") == "https://example.com"


@pytest.mark.parametrize("href", [
    "",
    "   ",
    "javascript:alert(1)",
    "JavaScript:alert(1)",
    " javascript:alert(1)",
    "data:text/html;base64,PHNjcmlwdD4=",
    "vbscript:msgbox",
    "file:///etc/passwd",
    "ftp://example.com",
    "//evil.example.com",
    "http://",
    "https:example.com",
    "http:foo",
    "http://[::1",
    "example.com",
    "relative/path",
])
def test_rejected(href):
    """Every other scheme, scheme-relative, and malformed target is rejected."""
    assert sanitize_href(href) is None


def test_non_string_rejected():
    """Non-string values never sanitize."""
    assert sanitize_href(None) is None


def test_is_external():
    """Web URLs are external; local targets are not."""
    assert is_external("https://example.com")
    assert not is_external("/local")
    assert not is_external("mailto:a@b.c")

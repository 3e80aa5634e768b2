"""Slug generation for heading anchors"""

import re
import unicodedata
from typing import Optional


def slugify(text: str) -> str:
    """Convert text to a lowercase, hyphen-separated ASCII slug ("Délais types" -> "delais-types")."""
    text = unicodedata.normalize('NFKD', text).encode('ascii', 'ignore').decode('ascii')
    text = text.lower()
    text = re.sub(r'[^\w\s-]', '', text)
    text = re.sub(r'[\s_]+', '-', text)
    return re.sub(r'-+', '-', text).strip('-')


def anchor_for(text: str) -> Optional[str]:
    """Anchor id for a heading, or None when nothing sluggable remains."""
    return slugify(text) or None

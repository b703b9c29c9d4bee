"""Text helpers shared by the detectors."""

from __future__ import annotations

import html
import re

_WHITESPACE_RE = re.compile(r"\s+")

# Shops often append a separator to the product name in the page title:
# "The Product Name, SiteName.com" or "The Product Name | Shop".
TRAILING_PUNCTUATION = ",.;:|-–—"


def normalize_text(raw: str | None) -> str:
    """Decode HTML entities, collapse whitespace runs and trim."""
    if not raw:
        return ""
    return _WHITESPACE_RE.sub(" ", html.unescape(raw)).strip()


def strip_trailing_punctuation(text: str) -> str:
    """Drop trailing separators (and the spaces around them)."""
    return text.rstrip(TRAILING_PUNCTUATION + " ")

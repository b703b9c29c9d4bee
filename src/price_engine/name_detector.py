"""Product name detection.

The product name is assumed to be a prefix of the page title ("Wireless
Mouse - Acme Store") that is also printed somewhere in the page body.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .document import DocumentTree
from .rules import DEFAULT_RULES, ExtractionRules
from .text import normalize_text, strip_trailing_punctuation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DetectedName:
    name: str
    title: str  # page title as found in the document


class NameDetector:
    """Correlates the page title with short body texts to find the product name.

    Usage:
        detected = NameDetector().detect(tree)
        if detected:
            print(detected.name)
    """

    def __init__(self, rules: ExtractionRules = DEFAULT_RULES) -> None:
        self.rules = rules

    def find_title(self, tree: DocumentTree) -> str | None:
        value = tree.first_content(self.rules.title_sources)
        if not value or not value.strip():
            return None
        return value

    def name_candidates(self, tree: DocumentTree) -> list[str]:
        """Short leaf texts that could print the product name."""
        candidates = []
        for _, raw in tree.leaf_texts():
            text = strip_trailing_punctuation(normalize_text(raw))
            if text and len(text) <= self.rules.name_max_length:
                candidates.append(text.lower())
        return candidates

    def detect(self, tree: DocumentTree) -> DetectedName | None:
        title = self.find_title(tree)
        if title is None:
            logger.info("Page title not found")
            return None

        page_title = normalize_text(title)
        if not page_title:
            return None

        candidates = self.name_candidates(tree)
        pieces = page_title.split(" ")

        # Shrink the title one word at a time; keep the prefix that
        # occurs in the body more often than any longer prefix did.
        name = page_title
        best_count = 0
        for i in range(len(pieces), 0, -1):
            prefix = strip_trailing_punctuation(" ".join(pieces[:i]))
            if not prefix:
                continue
            count = candidates.count(prefix.lower())
            if count > best_count:
                name = prefix
                best_count = count

        logger.info("Product name detected: %s (%d occurrences)", name, best_count)
        return DetectedName(name=name, title=title)

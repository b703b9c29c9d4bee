"""Website locale detection.

Three strategies, tried in order until one succeeds:

1. Currency declared in metadata (schema.org / OpenGraph).
2. Currency symbols used by the price-like texts of the page (voting).
3. Language declaration of the document. Least accurate: the website
   language does not necessarily match the currency.

The declared language is also used by the first two strategies to choose
among locales sharing a currency (``€`` on a French page is fr-FR).
"""

from __future__ import annotations

import logging

from .currency import extract_currency_symbol, find_locale, resolve_by_currency_symbol
from .document import DocumentTree
from .models import Locale
from .rules import DEFAULT_RULES, ExtractionRules
from .text import normalize_text

logger = logging.getLogger(__name__)

# Longest currency marker (5) plus room for separators.
MAX_PRICE_NON_DIGITS = 10


def is_price_shaped(text: str) -> bool:
    """At least one digit and 1-10 other non-whitespace characters."""
    if not any(c.isdigit() for c in text):
        return False
    others = sum(1 for c in text if not c.isspace() and not c.isdigit())
    return 1 <= others <= MAX_PRICE_NON_DIGITS


class CultureDetector:
    """Determines the locale used to read prices of a document.

    Usage:
        locale = CultureDetector().detect(tree)
    """

    def __init__(self, rules: ExtractionRules = DEFAULT_RULES) -> None:
        self.rules = rules

    def detect(self, tree: DocumentTree) -> Locale | None:
        language = self.declared_language(tree)
        strategies = (
            ("currency metadata", lambda: self.by_currency_meta(tree, language)),
            ("price texts", lambda: self.by_price_texts(tree, language)),
            ("language declaration", lambda: self.by_language(tree)),
        )
        for strategy_name, strategy in strategies:
            locale = strategy()
            if locale is not None:
                logger.info(
                    "Culture detected by %s: %s (%s)",
                    strategy_name, locale.display_name, locale.identifier,
                )
                return locale

        logger.info("Culture could not be detected")
        return None

    def declared_language(self, tree: DocumentTree) -> str | None:
        """First non-blank language declaration of the document, as written."""
        for selector, attributes in self.rules.lang_sources:
            node = tree.select_one(selector)
            if node is None:
                continue
            for attribute in attributes:
                value = tree.attribute(node, attribute)
                if value and value.strip():
                    return value.strip()
        return None

    def by_currency_meta(self, tree: DocumentTree, language: str | None = None) -> Locale | None:
        """Locale of the currency declared in metadata.

        ``language`` picks among locales sharing the currency (EUR on a
        French page is fr-FR, not de-DE).
        """
        value = tree.first_content(self.rules.currency_sources)
        if not value or not value.strip():
            return None
        return resolve_by_currency_symbol(normalize_text(value), language)

    def by_price_texts(self, tree: DocumentTree, language: str | None = None) -> Locale | None:
        """Most frequent locale among currency symbols of price-like texts.

        Ties go to the locale encountered first.
        """
        votes: dict[str, int] = {}
        locales: dict[str, Locale] = {}

        for _, raw in tree.leaf_texts():
            text = normalize_text(raw)
            if not text or not is_price_shaped(text):
                continue
            locale, _ = extract_currency_symbol(text, language)
            if locale is None:
                continue
            votes[locale.identifier] = votes.get(locale.identifier, 0) + 1
            locales.setdefault(locale.identifier, locale)

        if not votes:
            return None

        logger.debug("Currency votes: %s", votes)
        best = max(votes, key=votes.__getitem__)
        return locales[best]

    def by_language(self, tree: DocumentTree) -> Locale | None:
        for selector, attributes in self.rules.lang_sources:
            node = tree.select_one(selector)
            if node is None:
                continue

            value = next(
                (v for v in (tree.attribute(node, a) for a in attributes) if v and v.strip()),
                None,
            )
            if value is None:
                continue

            locale = find_locale(value)
            if locale is not None:
                return locale
            logger.debug("Unknown language declaration: %s", value)

        return None

"""Structural queries and patterns used by the detectors.

Everything here is immutable and handed to the detectors through an
:class:`ExtractionRules` instance, so two passes never share mutable state.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from ..common.config import ExtractionSettings
from .document import StructuralQuery

# Where the page title lives, most specific first.
TITLE_SOURCES = (
    StructuralQuery("meta[property='og:title']", "content"),
    StructuralQuery("head > title"),
    StructuralQuery("title"),
)

# Trusted price declarations. Some sites put these on tags other than
# <meta>, hence no tag name in the selectors.
PRICE_SOURCES = (
    StructuralQuery("[itemprop='price']", "content"),
    StructuralQuery("[property='og:price:amount']", "content"),
    StructuralQuery("[property='product:price:amount']", "content"),
    StructuralQuery("[name='twitter:data1']", "content"),  # Twitter product card
)

CURRENCY_SOURCES = (
    StructuralQuery("[itemprop='priceCurrency' i]", "content"),
    StructuralQuery("[property='og:price:currency']", "content"),
    StructuralQuery("[property='product:price:currency']", "content"),
)

# https://www.w3.org/International/questions/qa-html-language-declarations
LANG_SOURCES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("html", ("lang", "xml:lang")),
    ("meta[http-equiv='content-language' i]", ("content",)),
)

PRICE_ATTRIBUTE_NAMES = ("price", "prize", "cost")

# "price": 123.45 / 'itemCost': '99' / "data-prize":"1,5"
# A quoted value has to be closed by the same quote right after the
# number: "1,299.00" is skipped whole instead of being read as 1.
SCRIPT_PRICE_PATTERN = re.compile(
    r"""["']+(?P<key>(?:[\w\-]+)?(?:price|cost|prize)(?:[\w\-]+)?)["']+\s?:\s?"""
    r"""(?P<quote>["']?)(?P<value>[-+]?\d{0,6}(?:[.,]\d{1,2})?)(?P=quote)"""
    r"""(?=\s*[,}\]]|\s*$)""",
    re.IGNORECASE | re.MULTILINE,
)


@dataclass(frozen=True)
class ExtractionRules:
    """Configuration of one extraction engine."""

    title_sources: tuple[StructuralQuery, ...] = TITLE_SOURCES
    price_sources: tuple[StructuralQuery, ...] = PRICE_SOURCES
    currency_sources: tuple[StructuralQuery, ...] = CURRENCY_SOURCES
    lang_sources: tuple[tuple[str, tuple[str, ...]], ...] = LANG_SOURCES
    price_attribute_names: tuple[str, ...] = PRICE_ATTRIBUTE_NAMES
    script_price_pattern: re.Pattern = SCRIPT_PRICE_PATTERN
    manual_meta_attribute: str = "content"
    max_name_distance: int = 7
    name_max_length: int = 96
    symbol_bonus: int = 15

    def __post_init__(self) -> None:
        if self.max_name_distance <= 0:
            raise ValueError(
                f"max_name_distance must be positive, got {self.max_name_distance}"
            )

    @classmethod
    def from_settings(cls, settings: ExtractionSettings) -> ExtractionRules:
        return cls(
            max_name_distance=settings.max_name_distance,
            name_max_length=settings.name_max_length,
            symbol_bonus=settings.symbol_bonus,
        )


DEFAULT_RULES = ExtractionRules()

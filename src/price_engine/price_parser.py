"""Locale-aware price parsing.

Malformed input is an ordinary outcome here: every function returns an
invalid :class:`PriceValue` instead of raising.
"""

from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation
from functools import lru_cache

from .currency import find_currency_marker
from .models import INVALID_PRICE, Locale, PriceValue
from .text import normalize_text

# Machine formatted amounts ("19.99") show up in attributes and script
# code even on sites whose locale uses a decimal comma.
_MACHINE_NUMBER_RE = re.compile(r"^[-+]?\d+(?:\.\d{1,2})?$")


@lru_cache(maxsize=None)
def _locale_pattern(decimal_sep: str, group_sep: str) -> re.Pattern:
    d, g = re.escape(decimal_sep), re.escape(group_sep)
    return re.compile(rf"^[-+]?(?:\d{{1,3}}(?:{g}\d{{3}})+|\d+)(?:{d}\d{{1,2}})?$")


def _separators(locale: Locale) -> tuple[str, str]:
    # normalize_text() turns non-breaking spaces into plain ones
    group = " " if locale.group_separator.isspace() else locale.group_separator
    return locale.decimal_separator, group


def read_amount(text: str, locale: Locale) -> Decimal | None:
    """Interpret a bare number (no currency marker) in ``locale``."""
    decimal_sep, group_sep = _separators(locale)
    number: str | None = None
    if _locale_pattern(decimal_sep, group_sep).match(text):
        number = text.replace(group_sep, "").replace(decimal_sep, ".")
    elif _MACHINE_NUMBER_RE.match(text):
        number = text
    if number is None:
        return None
    try:
        return Decimal(number)
    except InvalidOperation:
        return None


def parse_price(raw: str | None, locale: Locale) -> PriceValue:
    """Parse ``raw`` into a price under ``locale``.

    A leading or trailing currency marker is recorded on the result but is
    not required. The remaining text must be a number with at most two
    fractional digits.

    Examples:
        parse_price("$1,234.50", en_us)  -> PriceValue(Decimal("1234.50"), "$", True)
        parse_price("19,99 €", de_de)    -> PriceValue(Decimal("19.99"), "€", True)
        parse_price("Sold out", en_us)   -> PriceValue(valid=False)
    """
    text = normalize_text(raw)
    if not text:
        return INVALID_PRICE

    symbol: str | None = None
    found = find_currency_marker(text)
    if found:
        _, match = found
        symbol = match.group(0)
        text = (text[: match.start()] + text[match.end():]).strip()

    if not text or not any(c.isdigit() for c in text):
        return INVALID_PRICE

    amount = read_amount(text, locale)
    if amount is None or amount <= 0:
        return INVALID_PRICE

    return PriceValue(decimal=amount, currency_symbol=symbol, valid=True)

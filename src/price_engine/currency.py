"""Currency symbol / ISO code to locale resolution.

The locale table is ordered: when a currency marker is shared by several
locales (``€``, ``EUR``, ``kr``, ``¥`` ...) the one matching the page's
declared language wins, otherwise the first entry. Longer markers are
always tried before shorter ones, so ``R$`` is never read as ``$``.
"""

from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal

from .models import Locale

_NBSP = "\u00a0"

LOCALES: tuple[Locale, ...] = (
    Locale("en-US", ".", ",", "$", "USD", "English (United States)"),
    Locale("en-GB", ".", ",", "£", "GBP", "English (United Kingdom)"),
    Locale("de-DE", ",", ".", "€", "EUR", "German (Germany)", symbol_first=False),
    Locale("fr-FR", ",", _NBSP, "€", "EUR", "French (France)", symbol_first=False),
    Locale("it-IT", ",", ".", "€", "EUR", "Italian (Italy)", symbol_first=False),
    Locale("es-ES", ",", ".", "€", "EUR", "Spanish (Spain)", symbol_first=False),
    Locale("nl-NL", ",", ".", "€", "EUR", "Dutch (Netherlands)"),
    Locale("pl-PL", ",", _NBSP, "zł", "PLN", "Polish (Poland)", symbol_first=False),
    Locale("cs-CZ", ",", _NBSP, "Kč", "CZK", "Czech (Czechia)", symbol_first=False),
    Locale("ja-JP", ".", ",", "¥", "JPY", "Japanese (Japan)"),
    Locale("zh-CN", ".", ",", "¥", "CNY", "Chinese (China)"),
    Locale("ko-KR", ".", ",", "₩", "KRW", "Korean (Korea)"),
    Locale("en-IN", ".", ",", "₹", "INR", "English (India)"),
    Locale("ru-RU", ",", _NBSP, "₽", "RUB", "Russian (Russia)", symbol_first=False),
    Locale("uk-UA", ",", _NBSP, "₴", "UAH", "Ukrainian (Ukraine)", symbol_first=False),
    Locale("tr-TR", ",", ".", "₺", "TRY", "Turkish (Turkey)"),
    Locale("sv-SE", ",", _NBSP, "kr", "SEK", "Swedish (Sweden)", symbol_first=False),
    Locale("da-DK", ",", ".", "kr", "DKK", "Danish (Denmark)", symbol_first=False),
    Locale("nb-NO", ",", _NBSP, "kr", "NOK", "Norwegian Bokmål (Norway)", symbol_first=False),
    Locale("de-CH", ".", "'", "CHF", "CHF", "German (Switzerland)"),
    Locale("pt-BR", ",", ".", "R$", "BRL", "Portuguese (Brazil)"),
    Locale("en-CA", ".", ",", "CA$", "CAD", "English (Canada)"),
    Locale("en-AU", ".", ",", "A$", "AUD", "English (Australia)"),
    Locale("es-MX", ".", ",", "MX$", "MXN", "Spanish (Mexico)"),
    Locale("hu-HU", ",", _NBSP, "Ft", "HUF", "Hungarian (Hungary)", symbol_first=False),
    Locale("ro-RO", ",", ".", "lei", "RON", "Romanian (Romania)", symbol_first=False),
    Locale("bg-BG", ",", _NBSP, "лв.", "BGN", "Bulgarian (Bulgaria)", symbol_first=False),
    Locale("he-IL", ".", ",", "₪", "ILS", "Hebrew (Israel)"),
    Locale("th-TH", ".", ",", "฿", "THB", "Thai (Thailand)"),
    Locale("vi-VN", ",", ".", "₫", "VND", "Vietnamese (Vietnam)", symbol_first=False),
)


def _marker_pattern(marker: str) -> re.Pattern:
    # Markers made of letters must stand alone, otherwise "kr" would
    # match inside "kraken" and "EUR" inside "EUROPE". Case matters:
    # "ft" is a unit, not forints, and "try" is a word, not TRY.
    if any(c.isalpha() for c in marker):
        return re.compile(rf"(?<![^\W\d_]){re.escape(marker)}(?![^\W\d_])")
    return re.compile(re.escape(marker))


def _build_markers(
    locales: tuple[Locale, ...],
) -> tuple[tuple[re.Pattern, tuple[Locale, ...]], ...]:
    sharing: dict[str, list[Locale]] = {}
    for locale in locales:
        for marker in (locale.iso_code, locale.currency_symbol):
            users = sharing.setdefault(marker, [])
            if locale not in users:
                users.append(locale)
    # sorted() is stable: equal lengths keep table order
    ordered = sorted(sharing.items(), key=lambda item: len(item[0]), reverse=True)
    return tuple((_marker_pattern(marker), tuple(users)) for marker, users in ordered)


_MARKERS = _build_markers(LOCALES)


def _language_key(language: str | None) -> str:
    return (language or "").strip().replace("_", "-").lower()


def _prefer_language(locales: tuple[Locale, ...], language: str | None) -> Locale:
    """Pick the locale matching a declared language, else the first one."""
    key = _language_key(language)
    if key:
        for locale in locales:
            if locale.identifier.lower() == key:
                return locale
        bare = key.split("-")[0]
        for locale in locales:
            if locale.language == bare:
                return locale
    return locales[0]


def find_currency_marker(
    text: str, language: str | None = None
) -> tuple[Locale, re.Match] | None:
    """Find the first known currency marker in ``text``.

    When several locales share the marker, the one matching ``language``
    (a declaration such as ``fr`` or ``fr-FR``) is preferred.

    Returns:
        The implied locale and the regex match of the marker, or None.
    """
    if not text:
        return None
    for pattern, locales in _MARKERS:
        match = pattern.search(text)
        if match:
            return _prefer_language(locales, language), match
    return None


def resolve_by_currency_symbol(text: str, language: str | None = None) -> Locale | None:
    """Resolve a locale from a currency symbol or ISO code found in ``text``.

    Metadata values such as ``content="usd"`` are accepted in any case.
    """
    if text and len(text.strip()) == 3 and text.strip().isalpha():
        text = text.strip().upper()
    found = find_currency_marker(text, language)
    return found[0] if found else None


def extract_currency_symbol(
    text: str, language: str | None = None
) -> tuple[Locale | None, str | None]:
    """Scan a price-like string for an embedded currency marker.

    Returns:
        ``(locale, symbol)`` where ``symbol`` is the marker as written in
        ``text``; ``(None, None)`` when no marker is present.
    """
    found = find_currency_marker(text, language)
    if not found:
        return None, None
    locale, match = found
    return locale, match.group(0)


def find_locale(identifier: str | None) -> Locale | None:
    """Find a locale by identifier (``en-US``, ``en_us``) or bare language (``en``)."""
    if not identifier:
        return None
    key = identifier.strip().replace("_", "-").lower()
    if not key:
        return None
    for locale in LOCALES:
        if locale.identifier.lower() == key:
            return locale
    if "-" not in key:
        for locale in LOCALES:
            if locale.language == key:
                return locale
    return None


def format_price(value: Decimal, locale: Locale, with_symbol: bool = True) -> str:
    """Render ``value`` with two fractional digits in ``locale``'s convention."""
    quantized = value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sign = "-" if quantized < 0 else ""
    integer, _, fraction = f"{abs(quantized):f}".partition(".")

    groups = []
    while len(integer) > 3:
        groups.insert(0, integer[-3:])
        integer = integer[:-3]
    groups.insert(0, integer)

    number = f"{sign}{locale.group_separator.join(groups)}{locale.decimal_separator}{fraction}"
    if not with_symbol:
        return number
    symbol = locale.currency_symbol
    if locale.symbol_first:
        spacer = " " if symbol[-1].isalpha() else ""
        return f"{symbol}{spacer}{number}"
    return f"{number} {symbol}"

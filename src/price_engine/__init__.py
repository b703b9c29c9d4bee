"""Price Engine - culture, name and price detection for product pages."""

from .currency import (
    LOCALES,
    extract_currency_symbol,
    find_locale,
    format_price,
    resolve_by_currency_symbol,
)
from .document import DocumentTree, StructuralQuery
from .extractor import ManualParams, PriceExtractor, extract_auto, extract_manual
from .models import (
    ExtractionResult,
    FailureReason,
    Locale,
    PriceGroup,
    PriceInfo,
    PriceSourceType,
    PriceValue,
    ResultStatus,
)
from .page_loader import PageLoader, PageLoadResult
from .price_parser import parse_price
from .rules import DEFAULT_RULES, ExtractionRules
from .text import normalize_text

__all__ = [
    "DEFAULT_RULES",
    "DocumentTree",
    "ExtractionResult",
    "ExtractionRules",
    "FailureReason",
    "LOCALES",
    "Locale",
    "ManualParams",
    "PageLoadResult",
    "PageLoader",
    "PriceExtractor",
    "PriceGroup",
    "PriceInfo",
    "PriceSourceType",
    "PriceValue",
    "ResultStatus",
    "StructuralQuery",
    "extract_auto",
    "extract_currency_symbol",
    "extract_manual",
    "find_locale",
    "format_price",
    "normalize_text",
    "parse_price",
    "resolve_by_currency_symbol",
]

"""Data models for price extraction."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum


class PriceSourceType(str, Enum):
    """Where in the document a price candidate was read from."""
    ATTRIBUTE = "attribute"
    TEXT = "text"
    SCRIPT = "script"


class FailureReason(str, Enum):
    """Terminal failure reasons of an extraction pass."""
    NO_RESPONSE = "no_response"
    INVALID_RESPONSE = "invalid_response"
    NO_PRODUCT_DETECTED = "no_product_detected"
    UNKNOWN_NAME = "unknown_name"
    UNKNOWN_PRICE = "unknown_price"
    UNKNOWN_CULTURE = "unknown_culture"
    MISSING_MANUAL_PARAM = "missing_manual_param"
    INVALID_MANUAL_PRICE = "invalid_manual_price"


class ResultStatus(str, Enum):
    """Tag of an ExtractionResult."""
    SUCCESS = "success"
    AMBIGUOUS = "ambiguous"
    FAILED = "failed"


@dataclass(frozen=True)
class Locale:
    """Number formatting and currency convention of a website."""

    identifier: str          # e.g. "en-US"
    decimal_separator: str
    group_separator: str
    currency_symbol: str     # e.g. "$"
    iso_code: str            # e.g. "USD"
    display_name: str
    symbol_first: bool = True

    @property
    def language(self) -> str:
        return self.identifier.split("-")[0].lower()

    def to_dict(self) -> dict:
        return {
            "identifier": self.identifier,
            "display_name": self.display_name,
            "currency_symbol": self.currency_symbol,
            "iso_code": self.iso_code,
            "decimal_separator": self.decimal_separator,
            "group_separator": self.group_separator,
        }


@dataclass(frozen=True)
class PriceValue:
    """A parsed price. ``valid`` is never True for a non-positive amount."""

    decimal: Decimal = Decimal(0)
    currency_symbol: str | None = None
    valid: bool = False

    def __post_init__(self) -> None:
        if self.valid and self.decimal <= 0:
            object.__setattr__(self, "valid", False)


INVALID_PRICE = PriceValue()


@dataclass(frozen=True)
class PriceInfo:
    """A successfully parsed price candidate and where it came from.

    ``source_node`` is the id of the originating node inside the
    DocumentTree of the same pass. It is only meaningful together with
    that tree and is never dereferenced once the pass is over.
    """

    price: PriceValue
    source: PriceSourceType
    attribute_name: str | None = None
    source_node: int | None = None

    def to_dict(self) -> dict:
        return {
            "price": str(self.price.decimal),
            "currency_symbol": self.price.currency_symbol,
            "source": self.source.value,
            "attribute_name": self.attribute_name,
        }


@dataclass
class PriceGroup:
    """Price candidates sharing one decimal value, scored together."""

    price: Decimal
    prices: list[PriceInfo] = field(default_factory=list)
    score: int = 0
    attr_count: int = 0
    js_count: int = 0
    text_count: int = 0
    has_symbol: bool = False
    name_distance: int | None = None

    @property
    def total(self) -> int:
        return len(self.prices)

    def to_dict(self) -> dict:
        return {
            "price": str(self.price),
            "score": self.score,
            "total": self.total,
            "attr_count": self.attr_count,
            "js_count": self.js_count,
            "text_count": self.text_count,
            "has_symbol": self.has_symbol,
            "name_distance": self.name_distance,
            "prices": [info.to_dict() for info in self.prices],
        }


@dataclass(frozen=True)
class ExtractionResult:
    """Tagged outcome of an extraction pass.

    Build with :meth:`success`, :meth:`ambiguous` or :meth:`failed`.
    """

    status: ResultStatus
    price_info: PriceInfo | None = None
    name: str | None = None
    locale: Locale | None = None
    title: str | None = None
    groups: tuple[PriceGroup, ...] = ()
    reason: FailureReason | None = None

    @classmethod
    def success(
        cls,
        price_info: PriceInfo,
        name: str,
        locale: Locale,
        title: str | None = None,
    ) -> ExtractionResult:
        return cls(
            status=ResultStatus.SUCCESS,
            price_info=price_info,
            name=name,
            locale=locale,
            title=title,
        )

    @classmethod
    def ambiguous(
        cls,
        groups: list[PriceGroup],
        name: str | None = None,
        locale: Locale | None = None,
        title: str | None = None,
    ) -> ExtractionResult:
        return cls(
            status=ResultStatus.AMBIGUOUS,
            groups=tuple(groups),
            name=name,
            locale=locale,
            title=title,
        )

    @classmethod
    def failed(cls, reason: FailureReason) -> ExtractionResult:
        return cls(status=ResultStatus.FAILED, reason=reason)

    @property
    def is_success(self) -> bool:
        return self.status is ResultStatus.SUCCESS

    @property
    def is_ambiguous(self) -> bool:
        return self.status is ResultStatus.AMBIGUOUS

    @property
    def candidate_prices(self) -> list[PriceInfo]:
        """All candidates of an ambiguous result, best group first."""
        return [info for group in self.groups for info in group.prices]

    def to_dict(self) -> dict:
        d: dict = {"status": self.status.value}
        if self.status is ResultStatus.FAILED:
            d["reason"] = self.reason.value if self.reason else None
            return d
        d["name"] = self.name
        d["title"] = self.title
        d["locale"] = self.locale.to_dict() if self.locale else None
        if self.price_info is not None:
            d["price"] = self.price_info.to_dict()
        if self.groups:
            d["groups"] = [group.to_dict() for group in self.groups]
        return d

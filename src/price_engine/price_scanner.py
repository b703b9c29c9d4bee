"""Price candidate extraction.

Trusted metadata declarations (schema.org, OpenGraph, Twitter cards) are
checked first; when any of them holds a price, nothing else is scanned.
Otherwise candidates are collected from three sources:

1. Script code: object values whose key mentions price/cost/prize, e.g.
   ``"productPrice": 1234.50``. Some shops only declare prices in JS.
2. Attributes named after prices, e.g. ``data-price="1234"``.
3. Text nodes. Every shop has to print the price to the customer.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .document import DocumentTree
from .models import Locale, PriceInfo, PriceSourceType
from .price_parser import parse_price
from .rules import DEFAULT_RULES, ExtractionRules

logger = logging.getLogger(__name__)


@dataclass
class PriceScan:
    """Raw candidates of one document and whether they came from trusted metadata."""

    candidates: list[PriceInfo] = field(default_factory=list)
    trusted: bool = False

    def __bool__(self) -> bool:
        return bool(self.candidates)


class PriceScanner:
    """Collects every parseable price of a document.

    Usage:
        scan = PriceScanner().scan(tree, "Wireless Mouse", locale)
        for info in scan.candidates:
            print(info.price.decimal, info.source)
    """

    def __init__(self, rules: ExtractionRules = DEFAULT_RULES) -> None:
        self.rules = rules

    def scan(self, tree: DocumentTree, product_name: str, locale: Locale) -> PriceScan:
        trusted = self.scan_trusted(tree, locale)
        if trusted:
            logger.info("Found %d trusted price declarations", len(trusted))
            return PriceScan(candidates=trusted, trusted=True)

        candidates = [
            *self.scan_script(tree, locale),
            *self.scan_attributes(tree, locale),
            *self.scan_text(tree, locale),
        ]
        logger.info(
            "Found %d price candidates for '%s'", len(candidates), product_name
        )
        return PriceScan(candidates=candidates)

    def scan_trusted(self, tree: DocumentTree, locale: Locale) -> list[PriceInfo]:
        found: list[PriceInfo] = []
        for query in self.rules.price_sources:
            node = tree.select_one(query.selector)
            if node is None:
                continue
            price = parse_price(tree.read(node, query.attribute), locale)
            if not price.valid:
                continue
            is_attribute = bool(query.attribute)
            found.append(
                PriceInfo(
                    price=price,
                    source=PriceSourceType.ATTRIBUTE if is_attribute else PriceSourceType.TEXT,
                    attribute_name=query.attribute if is_attribute else None,
                    source_node=tree.node_id(node),
                )
            )
        return found

    def scan_script(self, tree: DocumentTree, locale: Locale) -> list[PriceInfo]:
        found: list[PriceInfo] = []
        for match in self.rules.script_price_pattern.finditer(tree.full_text()):
            price = parse_price(match.group("value"), locale)
            if price.valid:
                found.append(PriceInfo(price=price, source=PriceSourceType.SCRIPT))
        return found

    def scan_attributes(self, tree: DocumentTree, locale: Locale) -> list[PriceInfo]:
        names = self.rules.price_attribute_names
        found: list[PriceInfo] = []
        for node_id, element in tree.elements():
            for attr_name in element.attrs:
                lowered = attr_name.lower()
                if not any(n in lowered for n in names):
                    continue
                price = parse_price(tree.attribute(element, attr_name), locale)
                if price.valid:
                    found.append(
                        PriceInfo(
                            price=price,
                            source=PriceSourceType.ATTRIBUTE,
                            attribute_name=attr_name,
                            source_node=node_id,
                        )
                    )
        return found

    def scan_text(self, tree: DocumentTree, locale: Locale) -> list[PriceInfo]:
        found: list[PriceInfo] = []
        for node_id, node in tree.text_nodes():
            if len(node) <= 1 or tree.is_inside_link(node_id):
                continue
            price = parse_price(str(node), locale)
            if price.valid:
                # The text node's element is what gets displayed
                found.append(
                    PriceInfo(
                        price=price,
                        source=PriceSourceType.TEXT,
                        source_node=tree.parent_id(node_id),
                    )
                )
        return found

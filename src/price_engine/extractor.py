"""Extraction orchestrator.

Auto pipeline: culture -> name -> price sources -> scoring. Each step only
runs when the previous one succeeded; the first failure ends the pass.

Manual pipeline: name, locale and a price selector are supplied by the
user, only the price is read from the document.

Both pipelines are pure functions of their inputs. An ambiguous price is
never resolved here: the caller has to pick one of the returned groups.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from soupsieve import SelectorSyntaxError

from ..common.config import settings
from .culture_detector import CultureDetector
from .document import DocumentTree
from .models import ExtractionResult, FailureReason, Locale, PriceInfo, PriceSourceType
from .name_detector import NameDetector
from .page_loader import PageLoadResult
from .price_parser import parse_price
from .price_scanner import PriceScanner
from .price_scoring import PriceScorer, group_by_value
from .rules import ExtractionRules

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ManualParams:
    """User supplied extraction parameters."""

    name: str | None
    locale: Locale | None
    selector: str | None


class PriceExtractor:
    """Runs the extraction pipelines over a document tree.

    Usage:
        extractor = PriceExtractor()
        result = extractor.extract_auto(tree)
        if result.is_success:
            print(result.name, result.price_info.price.decimal)
    """

    def __init__(self, rules: ExtractionRules | None = None) -> None:
        self.rules = rules or ExtractionRules.from_settings(settings.extraction)
        self.culture_detector = CultureDetector(self.rules)
        self.name_detector = NameDetector(self.rules)
        self.scanner = PriceScanner(self.rules)
        self.scorer = PriceScorer(self.rules)

    def extract(
        self, page: PageLoadResult, manual: ManualParams | None = None
    ) -> ExtractionResult:
        """Extract from a loaded page, reporting loader failures as results."""
        if not page.ok:
            logger.warning("Page %s not loaded: %s", page.url, page.error)
            return ExtractionResult.failed(page.error or FailureReason.NO_RESPONSE)
        if manual is not None:
            return self.extract_manual(page.tree, manual.name, manual.locale, manual.selector)
        return self.extract_auto(page.tree)

    def extract_auto(self, tree: DocumentTree) -> ExtractionResult:
        _check_tree(tree)

        if tree.is_empty:
            return _failed(FailureReason.NO_PRODUCT_DETECTED)

        locale = self.culture_detector.detect(tree)
        if locale is None:
            return _failed(FailureReason.UNKNOWN_CULTURE)

        detected = self.name_detector.detect(tree)
        if detected is None:
            return _failed(FailureReason.UNKNOWN_NAME)

        scan = self.scanner.scan(tree, detected.name, locale)
        if scan.trusted:
            groups = group_by_value(scan.candidates)
        else:
            groups = self.scorer.rank(tree, scan.candidates, detected.name)

        if not groups:
            return _failed(FailureReason.UNKNOWN_PRICE)

        if len(groups) > 1:
            logger.info(
                "Ambiguous price for '%s': %s",
                detected.name,
                ", ".join(f"{g.price} ({g.score})" for g in groups),
            )
            return ExtractionResult.ambiguous(
                groups, name=detected.name, locale=locale, title=detected.title
            )

        price_info = groups[0].prices[0]
        logger.info("Price detected for '%s': %s", detected.name, price_info.price.decimal)
        return ExtractionResult.success(
            price_info, name=detected.name, locale=locale, title=detected.title
        )

    def extract_manual(
        self,
        tree: DocumentTree,
        name: str | None,
        locale: Locale | None,
        selector: str | None,
    ) -> ExtractionResult:
        _check_tree(tree)

        if locale is None or not name or not selector:
            return _failed(FailureReason.MISSING_MANUAL_PARAM)

        try:
            node = tree.select_one(selector)
        except SelectorSyntaxError as exc:
            logger.warning("Invalid price selector %r: %s", selector, exc)
            return _failed(FailureReason.INVALID_MANUAL_PRICE)

        if node is None:
            logger.warning("Price selector %r matched nothing", selector)
            return _failed(FailureReason.INVALID_MANUAL_PRICE)

        # The selector can point at a meta tag; its value is in an attribute
        is_meta = node.name == "meta"
        attribute = self.rules.manual_meta_attribute if is_meta else None
        price = parse_price(tree.read(node, attribute), locale)
        if not price.valid:
            return _failed(FailureReason.INVALID_MANUAL_PRICE)

        price_info = PriceInfo(
            price=price,
            source=PriceSourceType.ATTRIBUTE if is_meta else PriceSourceType.TEXT,
            attribute_name=attribute,
            source_node=tree.node_id(node),
        )
        return ExtractionResult.success(
            price_info, name=name, locale=locale, title=self.name_detector.find_title(tree)
        )


def _check_tree(tree: object) -> None:
    if not isinstance(tree, DocumentTree):
        raise TypeError(f"Expected DocumentTree, got {type(tree).__name__}")


def _failed(reason: FailureReason) -> ExtractionResult:
    logger.warning("Extraction failed: %s", reason.value)
    return ExtractionResult.failed(reason)


def extract_auto(tree: DocumentTree, rules: ExtractionRules | None = None) -> ExtractionResult:
    """Detect culture, name and price of the product in ``tree``."""
    return PriceExtractor(rules).extract_auto(tree)


def extract_manual(
    tree: DocumentTree,
    name: str | None,
    locale: Locale | None,
    selector: str | None,
    rules: ExtractionRules | None = None,
) -> ExtractionResult:
    """Read the price at ``selector`` using a user supplied name and locale."""
    return PriceExtractor(rules).extract_manual(tree, name, locale, selector)

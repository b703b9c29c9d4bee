"""Price group scoring.

Candidates sharing a decimal value form a group. Groups are ranked by a
trust score built from:

- how many times the value occurs;
- whether it is declared in attributes / script code. Being declared only
  there, without ever being displayed, is penalized;
- how close its displayed occurrences are to the product name;
- whether any occurrence carries a currency symbol.
"""

from __future__ import annotations

import logging
import re
from decimal import Decimal

from .document import DocumentTree
from .models import PriceGroup, PriceInfo, PriceSourceType
from .rules import DEFAULT_RULES, ExtractionRules

logger = logging.getLogger(__name__)

ATTRIBUTE_BONUS = 2
SCRIPT_BONUS = 3
EXCLUSIVE_SOURCE_PENALTY = 20
WEAK_SOURCE_PENALTY = 5
NAME_PROXIMITY_BONUS = 10
NAME_DISTANCE_PENALTY = 10


def group_by_value(candidates: list[PriceInfo]) -> list[PriceGroup]:
    """Group candidates by decimal value, in order of first occurrence."""
    groups: dict[Decimal, PriceGroup] = {}
    for info in candidates:
        value = info.price.decimal
        group = groups.get(value)
        if group is None:
            group = groups[value] = PriceGroup(price=value)
        group.prices.append(info)
        if info.source is PriceSourceType.ATTRIBUTE:
            group.attr_count += 1
        elif info.source is PriceSourceType.SCRIPT:
            group.js_count += 1
        else:
            group.text_count += 1
        if info.price.currency_symbol:
            group.has_symbol = True
    return list(groups.values())


def name_pattern(product_name: str) -> re.Pattern:
    """Whole-word, case-insensitive match of the product name."""
    return re.compile(rf"(?<!\w){re.escape(product_name)}(?!\w)", re.IGNORECASE)


class PriceScorer:
    """Ranks price groups by trust score.

    Usage:
        groups = PriceScorer().rank(tree, candidates, "Wireless Mouse")
        best = groups[0]
    """

    def __init__(self, rules: ExtractionRules = DEFAULT_RULES) -> None:
        self.rules = rules

    def name_distances(
        self,
        tree: DocumentTree,
        candidates: list[PriceInfo],
        product_name: str,
    ) -> list[int | None]:
        """Tree distance from each displayed candidate to the closest product name.

        Attribute and script candidates get None.
        """
        pattern = name_pattern(product_name) if product_name else None
        distances: list[int | None] = []
        for info in candidates:
            if (
                pattern is None
                or info.source is not PriceSourceType.TEXT
                or info.source_node is None
            ):
                distances.append(None)
                continue
            distances.append(
                tree.distance_to_closest(info.source_node, lambda text: bool(pattern.search(text)))
            )
        return distances

    def score(self, group: PriceGroup) -> int:
        max_distance = self.rules.max_name_distance
        total = group.total
        score = total

        if group.attr_count or group.js_count:
            if group.attr_count != total:
                score += group.attr_count * ATTRIBUTE_BONUS
            else:
                score -= group.attr_count + EXCLUSIVE_SOURCE_PENALTY

            if group.js_count != total:
                score += group.js_count * SCRIPT_BONUS
            else:
                score -= group.js_count + EXCLUSIVE_SOURCE_PENALTY
        else:
            score -= WEAK_SOURCE_PENALTY

        if group.text_count:
            distance = group.name_distance
            if distance is None:
                distance = max_distance + 1
            if 0 < distance <= max_distance:
                score += NAME_PROXIMITY_BONUS - (distance - 1)
            elif distance > max_distance:
                score -= distance // max_distance * NAME_DISTANCE_PENALTY
        else:
            score -= WEAK_SOURCE_PENALTY

        if group.has_symbol:
            score += self.rules.symbol_bonus

        return score

    def rank(
        self,
        tree: DocumentTree,
        candidates: list[PriceInfo],
        product_name: str,
    ) -> list[PriceGroup]:
        """Group candidates and order the groups by descending score.

        Equal scores keep the order in which the values were first seen.
        """
        if not candidates:
            return []

        distances = self.name_distances(tree, candidates, product_name)
        closest: dict[Decimal, int] = {}
        for info, distance in zip(candidates, distances):
            if distance is None or distance < 0:
                continue
            value = info.price.decimal
            if value not in closest or distance < closest[value]:
                closest[value] = distance

        groups = group_by_value(candidates)
        for group in groups:
            group.name_distance = closest.get(group.price)
            group.score = self.score(group)

        ranked = sorted(groups, key=lambda g: g.score, reverse=True)
        for group in ranked:
            logger.debug(
                "Price %s: score=%d total=%d attr=%d js=%d text=%d symbol=%s distance=%s",
                group.price, group.score, group.total, group.attr_count,
                group.js_count, group.text_count, group.has_symbol, group.name_distance,
            )
        return ranked

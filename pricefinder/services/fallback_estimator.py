import logging
import math
import re
from urllib.parse import quote_plus

from pricefinder.registries import Registries, default_registries
from pricefinder.registries.catalog import BED_SIZE_MULTIPLIERS, DEFAULT_BASE_PRICE, SIZE_CLASS_MULTIPLIERS
from pricefinder.registries.exclusions import ExclusionRule
from pricefinder.registries.retailers import GENERIC_SEARCH_URL
from pricefinder.schemas.price_result import MatchQuality, PriceResult, PricingTrace
from pricefinder.schemas.query import QueryAttributes
from pricefinder.services.query_analyzer import QueryAnalyzer, capacity_class

logger = logging.getLogger(__name__)

# "$45.99", "paid 120", "300 dollars"; never an amount followed by a period ("$45/mo")
_AMOUNT = r"(\d{1,3}(?:,\d{3})+|\d+)(\.\d{1,2})?(?![\d,]|\.\d)"
EXPLICIT_PRICE_RE = re.compile(
    rf"(?:\$\s*{_AMOUNT}|\b(?:paid|cost|costs|priced at|bought (?:it )?for|worth)\s+\$?\s*{_AMOUNT}"
    rf"|\b{_AMOUNT}\s*(?:dollars|usd)\b)"
    r"(?!\s*(?:/|per\b|a\s+(?:mo|month|week|year)\b|an?\s+month|monthly\b|mo\b|/?\s*mo\b|wk\b|yr\b))",
    re.IGNORECASE,
)

EXPLICIT_CONFIDENCE = 0.5
RANGE_CONFIDENCE = 0.35
HEURISTIC_CONFIDENCE = 0.2
MAX_STATED_PRICE = 1_000_000


def explicit_price(text: str) -> float | None:
    """First stated one-off price in the text, ignoring per-period amounts."""
    for match in EXPLICIT_PRICE_RE.finditer(text or ""):
        groups = match.groups()
        for i in range(0, len(groups), 2):
            if groups[i]:
                value = float(groups[i].replace(",", "") + (groups[i + 1] or ""))
                if math.isfinite(value) and 0 < value <= MAX_STATED_PRICE:
                    return round(value, 2)
    return None


def generic_search_url(text: str) -> str:
    return GENERIC_SEARCH_URL.format(q=quote_plus(text.strip() or "household item"))


class FallbackEstimator:
    """Deterministic estimate when search cannot produce a validated listing."""

    def __init__(self, registries: Registries | None = None, analyzer: QueryAnalyzer | None = None):
        self.registries = registries or default_registries()
        self.analyzer = analyzer or QueryAnalyzer(self.registries)
        self._rules = [
            (rule, re.compile(rule.signal, re.IGNORECASE), re.compile(rule.context, re.IGNORECASE))
            for rule in self.registries.exclusion_rules
        ]

    def check_exclusion(self, text: str) -> ExclusionRule | None:
        for rule, signal, context in self._rules:
            if signal.search(text or "") and context.search(text or ""):
                return rule
        return None

    def excluded(self, text: str, rule: ExclusionRule, trace: PricingTrace | None = None) -> PriceResult:
        attrs = self.analyzer.analyze(text)
        logger.info("Excluded %r by rule %s", text, rule.name)
        return PriceResult(
            found=False,
            price=None,
            source="",
            url=None,
            category=attrs.category,
            subcategory=attrs.subcategory,
            is_estimated=True,
            match_quality=MatchQuality.EXCLUDED,
            confidence=0.0,
            notes=rule.reason,
            excluded=True,
            trace=trace or PricingTrace(validation_strategy="exclusion"),
        )

    def estimate(
        self,
        text: str,
        attrs: QueryAttributes | None = None,
        trace: PricingTrace | None = None,
        reason: str = "",
    ) -> PriceResult:
        text = text or ""
        attrs = attrs or self.analyzer.analyze(text)
        trace = trace or PricingTrace()

        rule = self.check_exclusion(text)
        if rule:
            return self.excluded(text, rule, trace)

        price = explicit_price(text)
        if price is not None:
            method, confidence, note = "explicit_price", EXPLICIT_CONFIDENCE, "price stated in the description"
        else:
            price_range = self._price_range(text, attrs)
            if price_range is not None:
                low, high = price_range
                price = (low + high) / 2 * attrs.pack_count
                method, confidence = "range_midpoint", RANGE_CONFIDENCE
                note = f"midpoint of typical range ${low:g}-${high:g}"
            else:
                price = self._heuristic(attrs)
                method, confidence, note = "category_heuristic", HEURISTIC_CONFIDENCE, "category baseline estimate"

        trace.validation_strategy = trace.validation_strategy or method
        notes = f"{reason}; {note}" if reason else note
        logger.info("Estimated %r at %.2f via %s", text, price, method)
        return PriceResult(
            found=False,
            price=round(price, 2),
            source="Estimate",
            url=generic_search_url(text),
            category=attrs.category,
            subcategory=attrs.subcategory,
            is_estimated=True,
            match_quality=MatchQuality.ESTIMATED,
            confidence=confidence,
            notes=notes,
            trace=trace,
        )

    def _price_range(self, text: str, attrs: QueryAttributes) -> tuple[float, float] | None:
        ranges = self.registries.price_ranges
        if attrs.product_type in ranges:
            return ranges[attrs.product_type]
        lowered = self.analyzer.normalize(text)
        for keyword in sorted(ranges, key=len, reverse=True):
            if re.search(rf"(?<![a-z]){re.escape(keyword)}(?:e?s)?(?![a-z])", lowered):
                return ranges[keyword]
        return None

    def _heuristic(self, attrs: QueryAttributes) -> float:
        price = self.registries.category_base_prices.get(attrs.category or "", DEFAULT_BASE_PRICE)
        classes = self.registries.capacity_classes
        size_class = capacity_class(attrs.capacity_value, attrs.capacity_unit, classes) or capacity_class(
            attrs.size_value, attrs.size_unit, classes
        )
        if size_class:
            price *= SIZE_CLASS_MULTIPLIERS.get(size_class, 1.0)
        elif attrs.size_unit in BED_SIZE_MULTIPLIERS:
            price *= BED_SIZE_MULTIPLIERS[attrs.size_unit]
        if attrs.material:
            price *= self.registries.materials.get(attrs.material, 1.0)
        return max(price * attrs.pack_count, 1.0)

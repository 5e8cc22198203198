import logging
import re

from rapidfuzz import fuzz

from pricefinder.config import settings
from pricefinder.registries import Registries, default_registries
from pricefinder.schemas.product_search import Candidate, ScoredCandidate, TrustLevel
from pricefinder.schemas.query import ItemQuery
from pricefinder.services.query_analyzer import (
    WORD_RE,
    QueryAnalyzer,
    brand_key,
    capacity_class,
    parse_capacity,
    parse_pack_size,
    parse_size,
)
from pricefinder.services.source_trust import SourceTrustFilter

logger = logging.getLogger(__name__)

WEIGHTS = {
    "title": 0.30,
    "brand": 0.20,
    "type": 0.25,
    "measure": 0.15,
    "attributes": 0.10,
}

# liquid volumes compared in liters
TO_LITERS = {"l": 1.0, "qt": 0.946, "gal": 3.785, "oz": 0.0296}


def _comparable(value: float, unit: str, other_unit: str) -> float | None:
    if unit == other_unit:
        return value
    if unit in TO_LITERS and other_unit in TO_LITERS:
        return value * TO_LITERS[unit] / TO_LITERS[other_unit]
    return None


def _relative_delta(a: float, b: float) -> float:
    return abs(a - b) / max(a, b) if max(a, b) > 0 else 0.0


def price_outlier_penalty(price: float, target: float | None) -> float:
    if not target:
        return 1.0
    ratio = price / target
    if ratio < 0.25 or ratio > 4:
        return 0.5
    if ratio < 0.5 or ratio > 2:
        return 0.75
    if ratio < 0.7 or ratio > 1.5:
        return 0.9
    return 1.0


class CandidateScorer:
    """Validates provider listings against the parsed query and scores the survivors."""

    def __init__(
        self,
        registries: Registries | None = None,
        analyzer: QueryAnalyzer | None = None,
        min_score: float | None = None,
        class_delta: float | None = None,
    ):
        self.registries = registries or default_registries()
        self.analyzer = analyzer or QueryAnalyzer(self.registries)
        self.trust = SourceTrustFilter(self.registries)
        self.min_score = settings.min_acceptance_score if min_score is None else min_score
        self.class_delta = settings.capacity_class_delta if class_delta is None else class_delta

    def score_all(
        self, candidates: list[Candidate], query: ItemQuery
    ) -> tuple[list[ScoredCandidate], list[ScoredCandidate]]:
        """Return (accepted sorted by score, rejected)."""
        accepted, rejected = [], []
        for candidate in candidates:
            scored = self.score(candidate, query)
            (rejected if scored.disqualified else accepted).append(scored)
        accepted.sort(key=lambda s: (-s.score, s.effective_price))
        logger.info(
            "Validated %d candidates: %d accepted, %d rejected",
            len(candidates), len(accepted), len(rejected),
        )
        return accepted, rejected

    def score(self, candidate: Candidate, query: ItemQuery) -> ScoredCandidate:
        attrs = query.attributes
        pack_size = parse_pack_size(candidate.title)
        unit_price = round(candidate.price / pack_size, 2)
        scored = ScoredCandidate(
            candidate=candidate,
            trust=self.trust.classify(candidate.source, candidate.link),
            retailer=self.trust.display_name(candidate.source, candidate.link),
            pack_size=pack_size,
            unit_price=unit_price,
            effective_price=round(unit_price * attrs.pack_count, 2),
        )

        if scored.trust is TrustLevel.BLOCKED:
            return self._reject(scored, f"blocked source: {candidate.source or candidate.link}")

        title = self.analyzer.normalize(candidate.title)
        alternative = (candidate.strategy or "").startswith("alternate_")

        conflict = self._brand_conflict(query, candidate.title)
        if conflict and not alternative:
            return self._reject(scored, f"brand conflict: {conflict}")
        mismatch = self._measure_mismatch(query, title)
        if mismatch:
            return self._reject(scored, mismatch)

        components: dict[str, float] = {"title": self._title_score(query, title, scored)}
        if attrs.brand:
            key = brand_key(attrs.brand)
            hit = key in self.analyzer.find_brands(candidate.title) or key in re.sub(r"[^a-z0-9]", "", title)
            components["brand"] = 1.0 if hit else 0.0
            if hit:
                scored.matched_attributes["brand"] = attrs.brand
        if attrs.product_type:
            components["type"] = self._type_score(attrs.product_type, attrs.category, candidate.title)
            if components["type"] == 1.0:
                scored.matched_attributes["product_type"] = attrs.product_type
        measure = self._measure_score(query, title, scored)
        if measure is not None:
            components["measure"] = measure
        wanted = {k: v for k, v in (("material", attrs.material), ("color", attrs.color), ("finish", attrs.finish)) if v}
        if wanted:
            hits = 0
            for name, value in wanted.items():
                if re.search(rf"(?<![a-z]){re.escape(value)}(?![a-z])", title):
                    hits += 1
                    scored.matched_attributes[name] = value
            components["attributes"] = hits / len(wanted)

        total_weight = sum(WEIGHTS[k] for k in components)
        score = sum(WEIGHTS[k] * v for k, v in components.items()) / total_weight

        if self.trust.marketplace_adjacent(candidate.source):
            score *= 0.8
            scored.reasons.append("marketplace-adjacent seller")
        penalty = price_outlier_penalty(scored.effective_price, query.target_price)
        if penalty < 1.0:
            score *= penalty
            scored.reasons.append(f"price outlier x{penalty}")
        if alternative:
            scored.reasons.append("alternate brand")

        scored.score = round(score, 4)
        if scored.score < self.min_score:
            return self._reject(scored, f"score {scored.score:.2f} below {self.min_score:.2f}")
        return scored

    @staticmethod
    def _reject(scored: ScoredCandidate, reason: str) -> ScoredCandidate:
        scored.disqualified = True
        scored.reasons.append(reason)
        return scored

    def _brand_conflict(self, query: ItemQuery, title: str) -> str | None:
        brand = query.attributes.brand
        if not brand:
            return None
        found = self.analyzer.find_brands(title)
        key = brand_key(brand)
        if not found or any(f.startswith(key) or key.startswith(f) for f in found):
            return None
        return ", ".join(sorted(found))

    def _measure_mismatch(self, query: ItemQuery, title: str) -> str | None:
        attrs = query.attributes
        classes = self.registries.capacity_classes
        if attrs.capacity_value and attrs.capacity_unit:
            found = parse_capacity(title)
            if found:
                value = _comparable(found[1], found[2], attrs.capacity_unit)
                if value is not None:
                    q_class = capacity_class(attrs.capacity_value, attrs.capacity_unit, classes)
                    c_class = capacity_class(value, attrs.capacity_unit, classes)
                    if q_class != c_class and _relative_delta(attrs.capacity_value, value) > self.class_delta:
                        return f"capacity class {c_class} vs {q_class}"
        if attrs.size_value and attrs.size_unit == "in":
            found = parse_size(title)
            if found:
                q_class = capacity_class(attrs.size_value, "in", classes)
                c_class = capacity_class(found[1], "in", classes)
                if q_class != c_class and _relative_delta(attrs.size_value, found[1]) > self.class_delta:
                    return f"size class {c_class} vs {q_class}"
        return None

    def _title_score(self, query: ItemQuery, title: str, scored: ScoredCandidate) -> float:
        text = self.analyzer.normalize(query.text)
        similarity = fuzz.token_set_ratio(text, title) / 100
        words = set(query.attributes.significant_words)
        if words:
            overlap = len(words & set(WORD_RE.findall(title))) / len(words)
            similarity = 0.5 * similarity + 0.5 * overlap
        compact = re.sub(r"[^a-z0-9]", "", title)
        for token in query.attributes.spec_tokens:
            if re.sub(r"[^a-z0-9]", "", token.lower()) in compact:
                scored.matched_attributes["model"] = token
                similarity = max(similarity, 0.95)
                break
        return similarity

    def _type_score(self, product_type: str, category: str | None, title: str) -> float:
        found = self.analyzer.find_product_type(title)
        if found == product_type:
            return 1.0
        if re.search(rf"(?<![a-z]){re.escape(product_type)}", title.lower()):
            return 1.0
        if found and category and self.registries.product_types[found][0] == category:
            return 0.5
        return 0.0

    def _measure_score(self, query: ItemQuery, title: str, scored: ScoredCandidate) -> float | None:
        attrs = query.attributes
        if attrs.capacity_value and attrs.capacity_unit:
            found = parse_capacity(title)
            value = _comparable(found[1], found[2], attrs.capacity_unit) if found else None
            if value is None:
                return 0.5
            delta = _relative_delta(attrs.capacity_value, value)
            if delta < 0.05:
                scored.matched_attributes["capacity"] = attrs.capacity_raw or ""
            return 1.0 - min(1.0, delta)
        if attrs.size_value and attrs.size_unit == "in":
            found = parse_size(title)
            if not found:
                return 0.5
            delta = _relative_delta(attrs.size_value, found[1])
            if delta < 0.05:
                scored.matched_attributes["size"] = attrs.size_raw or ""
            return 1.0 - min(1.0, delta)
        if attrs.size_raw and attrs.size_unit:
            if re.search(rf"\b{re.escape(attrs.size_raw)}\b", title):
                scored.matched_attributes["size"] = attrs.size_raw
                return 1.0
            return 0.0
        return None

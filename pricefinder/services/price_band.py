import logging
from dataclasses import dataclass
from enum import StrEnum

from pricefinder.config import settings
from pricefinder.schemas.product_search import ScoredCandidate, TrustLevel
from pricefinder.schemas.query import ItemQuery

logger = logging.getLogger(__name__)


class BandLabel(StrEnum):
    IN_BAND = "in_band"
    STRETCH = "stretch"
    GLOBAL = "global"
    NO_TARGET = "no_target"


@dataclass
class BandSelection:
    candidate: ScoredCandidate
    band: BandLabel


def _cheapest(candidates: list[ScoredCandidate]) -> ScoredCandidate:
    return min(candidates, key=lambda c: (c.effective_price, -c.score))


def select_candidate(
    candidates: list[ScoredCandidate],
    target: float | None,
    tolerance_pct: float,
    query: ItemQuery | None = None,
    stretch_multiplier: float | None = None,
) -> BandSelection | None:
    """Pick the lowest trusted price in the tolerance band, then the stretch band, then overall."""
    stretch = stretch_multiplier or settings.stretch_multiplier
    pool = [c for c in candidates if c.trust is TrustLevel.TRUSTED and not c.disqualified]

    if target and query is not None and query.attributes.is_generic:
        floor = target * 0.5
        kept = [c for c in pool if c.effective_price >= floor]
        if len(kept) < len(pool):
            logger.info("Generic-query guardrail dropped %d candidates below %.2f", len(pool) - len(kept), floor)
        pool = kept

    if not pool:
        return None

    if not target:
        return BandSelection(_cheapest(pool), BandLabel.NO_TARGET)

    tau = tolerance_pct / 100
    low, high = target * (1 - tau), target * (1 + tau)
    in_band = [c for c in pool if low <= c.effective_price <= high]
    if in_band:
        band, chosen = BandLabel.IN_BAND, _cheapest(in_band)
    else:
        stretch_band = [c for c in pool if high < c.effective_price <= target * stretch]
        if stretch_band:
            band, chosen = BandLabel.STRETCH, _cheapest(stretch_band)
        else:
            band, chosen = BandLabel.GLOBAL, _cheapest(pool)

    return BandSelection(chosen, band)

from pricefinder.schemas.product_search import Candidate, ScoredCandidate, TrustLevel
from pricefinder.schemas.query import ItemQuery
from pricefinder.services.price_band import BandLabel, select_candidate
from pricefinder.services.query_analyzer import analyze_query


def _scored(price, source="Target", trust=TrustLevel.TRUSTED, score=0.8):
    return ScoredCandidate(
        candidate=Candidate(title=f"item at {price}", price=price, source=source),
        trust=trust,
        retailer=source,
        unit_price=price,
        effective_price=price,
        score=score,
    )


def test_lowest_in_band_candidate_wins():
    pool = [_scored(250), _scored(290), _scored(320), _scored(200)]

    selection = select_candidate(pool, 300, 10)

    assert selection.band is BandLabel.IN_BAND
    assert selection.candidate.effective_price == 290


def test_stretch_band_when_nothing_in_band():
    pool = [_scored(400), _scored(380), _scored(500)]

    selection = select_candidate(pool, 300, 10)

    assert selection.band is BandLabel.STRETCH
    assert selection.candidate.effective_price == 380


def test_global_lowest_when_no_band_matches():
    pool = [_scored(150), _scored(900)]

    selection = select_candidate(pool, 300, 10)

    assert selection.band is BandLabel.GLOBAL
    assert selection.candidate.effective_price == 150


def test_no_target_takes_lowest_trusted():
    pool = [_scored(40), _scored(15, source="eBay", trust=TrustLevel.BLOCKED), _scored(25)]

    selection = select_candidate(pool, None, 10)

    assert selection.band is BandLabel.NO_TARGET
    assert selection.candidate.effective_price == 25


def test_generic_query_guardrail_drops_cheap_accessories():
    query = ItemQuery(text="storage bin", target_price=20, attributes=analyze_query("storage bin"))
    pool = [_scored(4), _scored(9), _scored(25)]

    selection = select_candidate(pool, 20, 10, query)

    assert selection.candidate.effective_price == 25
    assert selection.band is BandLabel.STRETCH


def test_nothing_trusted_returns_none():
    assert select_candidate([_scored(10, trust=TrustLevel.BLOCKED)], 10, 10) is None

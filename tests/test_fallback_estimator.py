import pytest

from pricefinder.schemas.price_result import MatchQuality
from pricefinder.services.fallback_estimator import FallbackEstimator, explicit_price


@pytest.fixture
def estimator():
    return FallbackEstimator()


@pytest.mark.parametrize(
    "text,expected",
    [
        ("Office chair, paid $120", 120.0),
        ("desk lamp $45.99", 45.99),
        ("sofa, bought for 1,299.50", 1299.5),
        ("TV worth 400 dollars", 400.0),
        ("iPhone 15, $45/mo plan", None),
        ("laptop $30 per month", None),
        ("storage bin", None),
        ("Office chair, paid $" + "9" * 400, None),
        ("ring worth 5,000,000 dollars", None),
    ],
)
def test_explicit_price(text, expected):
    assert explicit_price(text) == expected


def test_financed_phone_is_excluded(estimator):
    result = estimator.estimate("iPhone 15, $45/mo plan")

    assert result.excluded
    assert result.price is None
    assert result.match_quality is MatchQuality.EXCLUDED
    assert not result.found


@pytest.mark.parametrize(
    "text",
    ["Prepaid Motorola phone, carrier locked", "Pre-owned Louis Vuitton Neverfull bag"],
)
def test_other_exclusions(estimator, text):
    assert estimator.check_exclusion(text) is not None


def test_financing_words_without_electronics_are_priced(estimator):
    result = estimator.estimate("sofa on payment plan")

    assert not result.excluded
    assert result.price > 0


def test_explicit_price_wins(estimator):
    result = estimator.estimate("Office chair, paid $120")

    assert result.price == 120.0
    assert result.confidence == 0.5
    assert result.trace.validation_strategy == "explicit_price"


def test_range_midpoint_for_known_type(estimator):
    result = estimator.estimate("generic storage bin")

    assert 5 <= result.price <= 50
    assert result.price == 19.0
    assert result.is_estimated
    assert result.match_quality is MatchQuality.ESTIMATED
    assert result.url.startswith("https://www.google.com/search?tbm=shop")


def test_range_scales_with_requested_pack(estimator):
    single = estimator.estimate("storage bin")
    pack = estimator.estimate("storage bin, set of 3")

    assert pack.price == pytest.approx(single.price * 3)


def test_heuristic_baseline_for_unknown_items(estimator):
    result = estimator.estimate("mystery thingamajig")

    assert result.price == 35.0
    assert result.confidence == 0.2
    assert result.trace.validation_strategy == "category_heuristic"


def test_empty_text_still_gets_a_price(estimator):
    result = estimator.estimate("")

    assert result.price > 0
    assert "household+item" in result.url


def test_estimates_are_deterministic(estimator):
    assert estimator.estimate("oak bookshelf").price == estimator.estimate("oak bookshelf").price

from pricefinder.schemas.price_result import CacheEntry, MatchQuality, PriceResult, PricingTrace
from pricefinder.schemas.product_search import Candidate, MerchantOffer, ScoredCandidate, TrustLevel
from pricefinder.schemas.query import BatchLookup, ItemQuery, PriceLookup, QueryAttributes

__all__ = [
    "BatchLookup",
    "CacheEntry",
    "Candidate",
    "ItemQuery",
    "MatchQuality",
    "MerchantOffer",
    "PriceLookup",
    "PriceResult",
    "PricingTrace",
    "QueryAttributes",
    "ScoredCandidate",
    "TrustLevel",
]

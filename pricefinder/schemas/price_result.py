import math
from enum import StrEnum

from pydantic import BaseModel, Field, model_validator


class MatchQuality(StrEnum):
    EXACT = "exact"
    CLOSE = "close"
    ALTERNATIVE = "alternative"
    UNVERIFIED = "unverified"
    CACHED = "cached"
    ESTIMATED = "estimated"
    EXCLUDED = "excluded"


class PricingTrace(BaseModel):
    search_terms: list[str] = Field(default_factory=list)
    candidates_checked: int = 0
    skip_reasons: list[str] = Field(default_factory=list)
    validation_strategy: str = ""
    strategy_used: str | None = None
    resolution_step: str | None = None
    cache_tier: str | None = None  # "memory" or "persistent" on a hit
    elapsed_ms: int = 0


class PriceResult(BaseModel):
    found: bool = False
    price: float | None = None
    currency: str = "USD"
    source: str = ""
    url: str | None = None
    title: str | None = None
    category: str | None = None
    subcategory: str | None = None
    is_estimated: bool = True
    match_quality: MatchQuality = MatchQuality.ESTIMATED
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    notes: str = ""
    matched_attributes: dict[str, str] = Field(default_factory=dict)
    excluded: bool = False
    trace: PricingTrace = Field(default_factory=PricingTrace)

    @model_validator(mode="after")
    def _check_price(self) -> "PriceResult":
        if self.excluded:
            if self.price is not None:
                raise ValueError("excluded results carry no price")
            return self
        if self.price is None or not math.isfinite(self.price) or self.price <= 0:
            raise ValueError("price must be a finite positive number")
        return self


class CacheEntry(BaseModel):
    found: bool
    price: float
    source: str
    url: str
    title: str | None = None
    category: str | None = None
    subcategory: str | None = None
    confidence: float = 0.0

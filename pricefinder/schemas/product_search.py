from enum import StrEnum

from pydantic import BaseModel, Field


class TrustLevel(StrEnum):
    TRUSTED = "trusted"
    BLOCKED = "blocked"


class MerchantOffer(BaseModel):
    name: str = ""
    link: str | None = None
    price: float | None = None


class Candidate(BaseModel):
    """One listing returned by the shopping-search provider."""

    title: str
    price: float
    source: str = ""  # "Amazon", "Best Buy", "Walmart - SellerName", etc.
    link: str | None = None
    product_id: str | None = None
    merchants: list[MerchantOffer] = Field(default_factory=list)
    thumbnail_url: str | None = None
    strategy: str | None = None

    @property
    def dedupe_key(self) -> tuple[str, str, float]:
        return (self.title.strip().lower(), self.source.strip().lower(), round(self.price, 2))


class ScoredCandidate(BaseModel):
    candidate: Candidate
    trust: TrustLevel = TrustLevel.TRUSTED
    retailer: str = ""
    pack_size: int = 1
    unit_price: float
    effective_price: float
    score: float = 0.0
    matched_attributes: dict[str, str] = Field(default_factory=dict)
    reasons: list[str] = Field(default_factory=list)
    disqualified: bool = False

    @property
    def title(self) -> str:
        return self.candidate.title

from pydantic import BaseModel, Field


class QueryAttributes(BaseModel):
    brand: str | None = None
    product_type: str | None = None
    category: str | None = None
    subcategory: str | None = None
    capacity_raw: str | None = None
    capacity_value: float | None = None
    capacity_unit: str | None = None  # "cu_ft", "gal", "qt", "oz", "l"
    size_raw: str | None = None
    size_value: float | None = None
    size_unit: str | None = None  # "in" or a bed size word
    material: str | None = None
    color: str | None = None
    finish: str | None = None
    spec_tokens: list[str] = Field(default_factory=list)
    pack_count: int = 1
    significant_words: list[str] = Field(default_factory=list)

    @property
    def is_generic(self) -> bool:
        """Short queries with no digits tend to match accessories instead of the item."""
        if len(self.significant_words) > 2:
            return False
        return not any(ch.isdigit() for word in self.significant_words for ch in word)


class ItemQuery(BaseModel):
    text: str
    target_price: float | None = Field(default=None, gt=0)
    tolerance_pct: float = Field(default=10.0, gt=0)
    attributes: QueryAttributes = Field(default_factory=QueryAttributes)

    @property
    def tolerance(self) -> float:
        return self.tolerance_pct / 100

    @property
    def price_window(self) -> tuple[float, float] | None:
        if self.target_price is None:
            return None
        return (
            round(self.target_price * (1 - self.tolerance), 2),
            round(self.target_price * (1 + self.tolerance), 2),
        )


class PriceLookup(BaseModel):
    description: str
    target_price: float | None = None
    tolerance_pct: float | None = None


class BatchLookup(BaseModel):
    items: list[PriceLookup] = Field(default_factory=list)

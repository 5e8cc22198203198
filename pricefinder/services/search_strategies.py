import logging
import re
from dataclasses import dataclass
from enum import StrEnum

from pricefinder.config import settings
from pricefinder.registries import Registries, default_registries
from pricefinder.schemas.query import ItemQuery

logger = logging.getLogger(__name__)


class PriceDirection(StrEnum):
    SAME = "same"
    LOWER = "lower"
    HIGHER = "higher"


@dataclass(frozen=True)
class SearchStrategy:
    name: str
    query: str
    priority: int
    price_direction: PriceDirection = PriceDirection.SAME
    timeout_tier: str = "medium"


def _join(*parts: str | None) -> str:
    words = " ".join(p for p in parts if p)
    return re.sub(r"\s+", " ", words).strip()


def _format_number(value: float) -> str:
    return f"{value:.1f}".rstrip("0").rstrip(".")


def _capacity_unit_label(unit: str) -> str:
    return {"cu_ft": "cu ft", "gal": "gallon", "qt": "quart", "oz": "oz", "l": "liter"}.get(unit, unit)


def build_strategies(
    query: ItemQuery,
    registries: Registries | None = None,
    max_strategies: int | None = None,
) -> list[SearchStrategy]:
    """Ranked query variants, most specific first. Duplicate query strings keep the earlier entry."""
    registries = registries or default_registries()
    limit = max_strategies or settings.max_strategies
    attrs = query.attributes
    text = re.sub(r"\s+", " ", query.text).strip()
    specs = " ".join(attrs.spec_tokens[:2])
    brand = attrs.brand
    product_type = attrs.product_type

    raw: list[tuple[str, str, PriceDirection, str]] = []
    if brand and product_type and specs:
        raw.append(("brand_type_specs", _join(brand, product_type, specs), PriceDirection.SAME, "fast"))
    if brand and product_type:
        raw.append(("brand_type", _join(brand, attrs.capacity_raw, product_type), PriceDirection.SAME, "fast"))
    if product_type and (specs or attrs.material or attrs.capacity_raw or attrs.size_raw):
        raw.append((
            "type_specs_material",
            _join(attrs.material, attrs.capacity_raw or attrs.size_raw, product_type, specs),
            PriceDirection.SAME,
            "medium",
        ))
    if brand and brand.lower() not in text.lower():
        raw.append(("brand_text", _join(brand, text), PriceDirection.SAME, "medium"))
    raw.append(("full_text", text, PriceDirection.SAME, "medium"))

    if product_type:
        for alternate in registries.alternate_brands.get(product_type, ())[:2]:
            if brand and alternate.lower() == brand.lower():
                continue
            raw.append((
                f"alternate_{alternate.lower().replace(' ', '_')}",
                _join(alternate, attrs.capacity_raw, product_type),
                PriceDirection.SAME,
                "slow",
            ))

    if product_type and attrs.capacity_value and attrs.capacity_unit:
        unit = _capacity_unit_label(attrs.capacity_unit)
        for name, factor, direction in (
            ("lower_capacity", 0.7, PriceDirection.LOWER),
            ("higher_capacity", 1.3, PriceDirection.HIGHER),
        ):
            value = _format_number(attrs.capacity_value * factor)
            raw.append((name, _join(brand, f"{value} {unit}", product_type), direction, "slow"))

    strategies: list[SearchStrategy] = []
    seen: set[str] = set()
    for name, text_query, direction, tier in raw:
        key = text_query.lower()
        if not key or key in seen:
            continue
        seen.add(key)
        strategies.append(SearchStrategy(
            name=name,
            query=text_query,
            priority=len(strategies) + 1,
            price_direction=direction,
            timeout_tier=tier,
        ))
        if len(strategies) >= limit:
            break

    logger.debug("Built %d strategies for: %s", len(strategies), text)
    return strategies

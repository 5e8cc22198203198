from dataclasses import dataclass, field

from pricefinder.registries import blocklist, brands, catalog
from pricefinder.registries.exclusions import EXCLUSION_RULES, ExclusionRule
from pricefinder.registries.retailers import RETAILERS, Retailer, RetailerRegistry


@dataclass(frozen=True)
class Registries:
    """Data tables the engine is configured with. New retailers or brands are additive."""

    brands: tuple[str, ...] = brands.BRANDS
    brand_typos: dict[str, str] = field(default_factory=lambda: dict(brands.BRAND_TYPOS))
    alternate_brands: dict[str, tuple[str, ...]] = field(
        default_factory=lambda: dict(brands.ALTERNATE_BRANDS)
    )
    product_types: dict[str, tuple[str, str]] = field(
        default_factory=lambda: dict(catalog.PRODUCT_TYPES)
    )
    price_ranges: dict[str, tuple[float, float]] = field(
        default_factory=lambda: dict(catalog.PRICE_RANGES)
    )
    category_base_prices: dict[str, float] = field(
        default_factory=lambda: dict(catalog.CATEGORY_BASE_PRICES)
    )
    materials: dict[str, float] = field(default_factory=lambda: dict(catalog.MATERIALS))
    colors: tuple[str, ...] = catalog.COLORS
    finishes: tuple[str, ...] = catalog.FINISHES
    capacity_classes: dict[str, tuple[tuple[float, str], ...]] = field(
        default_factory=lambda: dict(catalog.CAPACITY_CLASSES)
    )
    blocked_sources: tuple[str, ...] = blocklist.BLOCKED_SOURCE_PATTERNS
    marketplace_adjacent: tuple[str, ...] = blocklist.MARKETPLACE_ADJACENT_PATTERNS
    excluded_sites: tuple[str, ...] = blocklist.EXCLUDED_SITES
    exclusion_rules: tuple[ExclusionRule, ...] = EXCLUSION_RULES
    retailers: RetailerRegistry = field(default_factory=RetailerRegistry)


def default_registries() -> Registries:
    return Registries()


__all__ = ["Registries", "Retailer", "RetailerRegistry", "RETAILERS", "default_registries"]

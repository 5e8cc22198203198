import re
from functools import lru_cache
from urllib.parse import urlparse

from pricefinder.registries import Registries, default_registries
from pricefinder.registries.blocklist import BLOCKED_SOURCE_PATTERNS, MARKETPLACE_ADJACENT_PATTERNS
from pricefinder.schemas.product_search import TrustLevel


@lru_cache(maxsize=32)
def _compile(patterns: tuple[str, ...]) -> tuple[re.Pattern, ...]:
    return tuple(re.compile(p, re.IGNORECASE) for p in patterns)


def classify_source(text: str | None, patterns: tuple[str, ...] = BLOCKED_SOURCE_PATTERNS) -> TrustLevel:
    """Block-list policy: a seller is blocked only if a pattern matches, otherwise trusted."""
    value = (text or "").strip().lower()
    if not value:
        return TrustLevel.TRUSTED
    for pattern in _compile(patterns):
        if pattern.search(value):
            return TrustLevel.BLOCKED
    return TrustLevel.TRUSTED


def is_marketplace_adjacent(
    text: str | None, patterns: tuple[str, ...] = MARKETPLACE_ADJACENT_PATTERNS
) -> bool:
    """Softer signal: a third-party seller on a big marketplace ("Walmart - Shop Name")."""
    value = (text or "").strip()
    return any(p.search(value) for p in _compile(patterns))


def retailer_display_name(source_or_url: str | None, registries: Registries | None = None) -> str:
    """Clean retailer name for a provider source string or a URL."""
    registries = registries or default_registries()
    value = (source_or_url or "").strip()
    if not value:
        return ""

    if value.startswith(("http://", "https://")):
        retailer = registries.retailers.for_url(value)
        if retailer:
            return retailer.name
        host = urlparse(value).netloc.lower().split(":")[0]
        host = re.sub(r"^(?:www\d?|m|shop|store)\.", "", host)
        label = host.split(".")[0] if host else ""
        return label.replace("-", " ").title()

    retailer = registries.retailers.for_source(value)
    if retailer:
        return retailer.name
    # "Some Store - eBay" and "Store.com" both reduce to the store name
    name = re.split(r"\s+-\s+", value)[0]
    name = re.sub(r"\.(?:com|net|org|co|us|shop|store)$", "", name, flags=re.IGNORECASE)
    return name.strip()


class SourceTrustFilter:
    """Applies the trust policy with a configured registry bundle."""

    def __init__(self, registries: Registries | None = None):
        self.registries = registries or default_registries()

    def classify(self, *texts: str | None) -> TrustLevel:
        for text in texts:
            if classify_source(text, self.registries.blocked_sources) is TrustLevel.BLOCKED:
                return TrustLevel.BLOCKED
        return TrustLevel.TRUSTED

    def marketplace_adjacent(self, text: str | None) -> bool:
        return is_marketplace_adjacent(text, self.registries.marketplace_adjacent)

    def display_name(self, source: str | None, url: str | None = None) -> str:
        return retailer_display_name(source or url, self.registries)

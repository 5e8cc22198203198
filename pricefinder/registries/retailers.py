"""Retailer URL-shape registry.

Each retailer lists the hosts it serves, the path shapes of a single sellable
product page, and rewrite rules that turn a catalog/tracking URL into a
product URL when the product id is already present in it. Patterns are
matched against ``path`` or ``path?query`` of a parsed URL.
"""

import re
from dataclasses import dataclass, field
from urllib.parse import parse_qs, quote_plus, unquote, urlparse


@dataclass(frozen=True)
class UrlRewrite:
    pattern: str
    template: str  # formatted with the pattern's groups


@dataclass(frozen=True)
class Retailer:
    key: str
    name: str
    domains: tuple[str, ...]
    aliases: tuple[str, ...]
    direct_patterns: tuple[str, ...]
    search_url: str
    rewrites: tuple[UrlRewrite, ...] = ()
    link_selectors: tuple[str, ...] = ()
    _compiled: tuple[re.Pattern, ...] = field(default=(), init=False, compare=False, repr=False)

    def __post_init__(self):
        object.__setattr__(self, "_compiled", tuple(re.compile(p) for p in self.direct_patterns))

    @property
    def primary_domain(self) -> str:
        return self.domains[0]

    def serves(self, host: str) -> bool:
        host = host.lower().split(":")[0]
        return any(host == d or host.endswith("." + d) for d in self.domains)

    def matches_direct(self, path_and_query: str) -> bool:
        return any(p.search(path_and_query) for p in self._compiled)


GENERIC_SEARCH_URL = "https://www.google.com/search?tbm=shop&q={q}"

# Paths that are always search/listing/catalog pages.
LISTING_PATH = re.compile(
    r"^/(?:s|search|sr|b|c|browse|shop/search|searchpage\.jsp|pl|category|categories|"
    r"site/searchpage\.jsp|shopping)(?:[/?.]|$)",
    re.IGNORECASE,
)

REDIRECT_PARAMS = ("url", "u", "rd", "adurl", "dest", "murl", "redirect", "target", "q")


RETAILERS: tuple[Retailer, ...] = (
    Retailer(
        key="amazon",
        name="Amazon",
        domains=("amazon.com",),
        aliases=("amazon", "amazon.com"),
        direct_patterns=(r"^/(?:[^/?]+/)?(?:dp|gp/product)/[A-Z0-9]{10}(?:[/?]|$)",),
        search_url="https://www.amazon.com/s?k={q}",
        rewrites=(
            UrlRewrite(r"[?&]asin=([A-Z0-9]{10})(?:&|$)", "https://www.amazon.com/dp/{0}"),
            UrlRewrite(r"/gp/(?:aw/d|offer-listing)/([A-Z0-9]{10})", "https://www.amazon.com/dp/{0}"),
        ),
        link_selectors=('a[href*="/dp/"]', 'a[href*="/gp/product/"]'),
    ),
    Retailer(
        key="walmart",
        name="Walmart",
        domains=("walmart.com",),
        aliases=("walmart", "walmart.com"),
        direct_patterns=(r"^/ip/(?:[^/?]+/)?\d{5,}(?:[/?]|$)",),
        search_url="https://www.walmart.com/search?q={q}",
        rewrites=(
            UrlRewrite(r"[?&](?:itemId|item_id)=(\d{5,})(?:&|$)", "https://www.walmart.com/ip/{0}"),
        ),
        link_selectors=('a[href*="/ip/"]',),
    ),
    Retailer(
        key="target",
        name="Target",
        domains=("target.com",),
        aliases=("target", "target.com"),
        direct_patterns=(r"^/p/(?:[^/?]+/)?-/A-\d{6,}(?:[/?#]|$)",),
        search_url="https://www.target.com/s?searchTerm={q}",
        rewrites=(
            UrlRewrite(r"/A-(\d{6,})(?:[/?#]|$)", "https://www.target.com/p/-/A-{0}"),
            UrlRewrite(r"[?&]tcin=(\d{6,})(?:&|$)", "https://www.target.com/p/-/A-{0}"),
        ),
        link_selectors=('a[href*="/p/"]',),
    ),
    Retailer(
        key="homedepot",
        name="Home Depot",
        domains=("homedepot.com",),
        aliases=("home depot", "the home depot", "homedepot", "homedepot.com"),
        direct_patterns=(r"^/p/(?:[^/?]+/)?\d{9}(?:[/?]|$)",),
        search_url="https://www.homedepot.com/s/{q}",
        rewrites=(
            UrlRewrite(r"^/s/(\d{9})(?:[/?]|$)", "https://www.homedepot.com/p/{0}"),
            UrlRewrite(r"[?&]productId=(\d{9})(?:&|$)", "https://www.homedepot.com/p/{0}"),
        ),
        link_selectors=('a[href*="/p/"]',),
    ),
    Retailer(
        key="lowes",
        name="Lowe's",
        domains=("lowes.com",),
        aliases=("lowe's", "lowes", "lowes.com"),
        direct_patterns=(r"^/pd/(?:[^/?]+/)?\d{6,}(?:[/?]|$)",),
        search_url="https://www.lowes.com/search?searchTerm={q}",
        rewrites=(
            UrlRewrite(r"[?&]productId=(\d{6,})(?:&|$)", "https://www.lowes.com/pd/product/{0}"),
        ),
        link_selectors=('a[href*="/pd/"]',),
    ),
    Retailer(
        key="bestbuy",
        name="Best Buy",
        domains=("bestbuy.com",),
        aliases=("best buy", "bestbuy", "bestbuy.com"),
        direct_patterns=(r"^/site/(?:[^/?]+/)?\d{6,8}\.p(?:[/?]|$)",),
        search_url="https://www.bestbuy.com/site/searchpage.jsp?st={q}",
        rewrites=(
            UrlRewrite(r"[?&]skuId=(\d{6,8})(?:&|$)", "https://www.bestbuy.com/site/{0}.p"),
        ),
        link_selectors=('a[href*="/site/"]',),
    ),
    Retailer(
        key="wayfair",
        name="Wayfair",
        domains=("wayfair.com",),
        aliases=("wayfair", "wayfair.com"),
        direct_patterns=(r"^/[^/?]+/pdp/[^/?]+-[a-z0-9]+\.html",),
        search_url="https://www.wayfair.com/keyword.php?keyword={q}",
        link_selectors=('a[href*="/pdp/"]',),
    ),
    Retailer(
        key="costco",
        name="Costco",
        domains=("costco.com",),
        aliases=("costco", "costco.com", "costco wholesale"),
        direct_patterns=(r"^/[^/?]+\.product\.\d+\.html",),
        search_url="https://www.costco.com/CatalogSearch?keyword={q}",
        link_selectors=('a[href*=".product."]',),
    ),
    Retailer(
        key="kohls",
        name="Kohl's",
        domains=("kohls.com",),
        aliases=("kohl's", "kohls", "kohls.com"),
        direct_patterns=(r"^/product/prd-\d+/",),
        search_url="https://www.kohls.com/search.jsp?search={q}",
        link_selectors=('a[href*="/product/prd-"]',),
    ),
    Retailer(
        key="macys",
        name="Macy's",
        domains=("macys.com",),
        aliases=("macy's", "macys", "macys.com"),
        direct_patterns=(r"^/shop/product/[^/?]+\?(?:.*&)?ID=\d+",),
        search_url="https://www.macys.com/shop/search?keyword={q}",
        link_selectors=('a[href*="/shop/product/"]',),
    ),
    Retailer(
        key="williamssonoma",
        name="Williams Sonoma",
        domains=("williams-sonoma.com",),
        aliases=("williams sonoma", "williams-sonoma", "williams-sonoma.com"),
        direct_patterns=(r"^/products/[a-z0-9-]+/?(?:\?|$)",),
        search_url="https://www.williams-sonoma.com/search/results.html?words={q}",
        link_selectors=('a[href*="/products/"]',),
    ),
    Retailer(
        key="crateandbarrel",
        name="Crate & Barrel",
        domains=("crateandbarrel.com",),
        aliases=("crate & barrel", "crate and barrel", "crateandbarrel.com"),
        direct_patterns=(r"^/[a-z0-9-]+/s\d{5,}(?:[/?]|$)",),
        search_url="https://www.crateandbarrel.com/search?query={q}",
    ),
    Retailer(
        key="ikea",
        name="IKEA",
        domains=("ikea.com",),
        aliases=("ikea", "ikea.com"),
        direct_patterns=(r"^/[a-z]{2}/[a-z]{2}/p/[a-z0-9-]+-[s]?\d{8}/?",),
        search_url="https://www.ikea.com/us/en/search/?q={q}",
        link_selectors=('a[href*="/p/"]',),
    ),
    Retailer(
        key="staples",
        name="Staples",
        domains=("staples.com",),
        aliases=("staples", "staples.com"),
        direct_patterns=(r"^/[^/?]+/product_\d+",),
        search_url="https://www.staples.com/search?query={q}",
        link_selectors=('a[href*="/product_"]',),
    ),
    Retailer(
        key="officedepot",
        name="Office Depot",
        domains=("officedepot.com",),
        aliases=("office depot", "officedepot", "office depot officemax", "officedepot.com"),
        direct_patterns=(r"^/a/products/\d+/",),
        search_url="https://www.officedepot.com/a/search/?q={q}",
        link_selectors=('a[href*="/a/products/"]',),
    ),
    Retailer(
        key="acehardware",
        name="Ace Hardware",
        domains=("acehardware.com",),
        aliases=("ace hardware", "acehardware", "acehardware.com"),
        direct_patterns=(r"^/departments/(?:[^/?]+/)+\d{5,}(?:[/?]|$)",),
        search_url="https://www.acehardware.com/search?query={q}",
    ),
    Retailer(
        key="samsclub",
        name="Sam's Club",
        domains=("samsclub.com",),
        aliases=("sam's club", "sams club", "samsclub", "samsclub.com"),
        direct_patterns=(r"^/p/[^/?]+/(?:prod)?\d+(?:[/?]|$)",),
        search_url="https://www.samsclub.com/s/{q}",
        link_selectors=('a[href*="/p/"]',),
    ),
    Retailer(
        key="rei",
        name="REI",
        domains=("rei.com",),
        aliases=("rei", "rei.com", "rei co-op"),
        direct_patterns=(r"^/product/\d+/",),
        search_url="https://www.rei.com/search?q={q}",
        link_selectors=('a[href*="/product/"]',),
    ),
    Retailer(
        key="overstock",
        name="Overstock",
        domains=("overstock.com",),
        aliases=("overstock", "overstock.com"),
        direct_patterns=(r"^/[^/?]+/[^/?]+/\d+/product\.html",),
        search_url="https://www.overstock.com/search?keywords={q}",
        link_selectors=('a[href*="/product.html"]',),
    ),
)


class RetailerRegistry:
    def __init__(self, retailers: tuple[Retailer, ...] = RETAILERS):
        self.retailers = retailers

    def for_url(self, url: str | None) -> Retailer | None:
        if not url:
            return None
        host = urlparse(url).netloc
        if not host:
            return None
        for retailer in self.retailers:
            if retailer.serves(host):
                return retailer
        return None

    def for_source(self, source: str | None) -> Retailer | None:
        """Match a provider source string ("Best Buy", "Walmart - Seller") to a retailer."""
        if not source:
            return None
        text = source.lower().strip()
        best: tuple[int, Retailer] | None = None
        for retailer in self.retailers:
            for alias in retailer.aliases:
                if re.search(rf"(?<![a-z0-9]){re.escape(alias)}(?![a-z0-9])", text):
                    if best is None or len(alias) > best[0]:
                        best = (len(alias), retailer)
        return best[1] if best else None

    def is_direct(self, url: str | None) -> bool:
        """True only for a single-product page on a known retailer."""
        if not url:
            return False
        parsed = urlparse(url)
        if parsed.scheme not in ("http", "https"):
            return False
        retailer = self.for_url(url)
        if retailer is None:
            return False
        if LISTING_PATH.search(parsed.path or "/"):
            return False
        target = parsed.path + (f"?{parsed.query}" if parsed.query else "")
        return retailer.matches_direct(target)

    def rewrite(self, url: str | None) -> str | None:
        """Turn a catalog/search URL into a product URL when it already carries the id."""
        if not url:
            return None
        retailer = self.for_url(url)
        if retailer is None:
            return None
        parsed = urlparse(url)
        target = parsed.path + (f"?{parsed.query}" if parsed.query else "")
        for rule in retailer.rewrites:
            match = re.search(rule.pattern, target)
            if match:
                candidate = rule.template.format(*match.groups())
                if self.is_direct(candidate):
                    return candidate
        return None

    def search_url(self, retailer: Retailer | None, query: str) -> str:
        template = retailer.search_url if retailer else GENERIC_SEARCH_URL
        return template.format(q=quote_plus(query))


def unwrap_redirect(url: str | None) -> str | None:
    """Follow click-tracking wrappers (google.com/url?url=..., ?rd=...) to the target URL."""
    if not url:
        return url
    seen = 0
    while seen < 3:
        parsed = urlparse(url)
        params = parse_qs(parsed.query)
        inner = None
        for name in REDIRECT_PARAMS:
            for value in params.get(name, []):
                value = unquote(value)
                if value.startswith(("http://", "https://")):
                    inner = value
                    break
            if inner:
                break
        if not inner:
            return url
        url = inner
        seen += 1
    return url

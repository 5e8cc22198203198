"""Bounded HTML fetch and product-link extraction for catalog pages."""

import json
import logging
import re
from dataclasses import dataclass, field
from urllib.parse import urljoin

import httpx
from bs4 import BeautifulSoup

from pricefinder.config import settings
from pricefinder.services.shopping_search import parse_price

logger = logging.getLogger(__name__)

DOLLAR_RE = re.compile(r"\$\s*\d{1,3}(?:,\d{3})*(?:\.\d{2})?|\$\s*\d+(?:\.\d{2})?")


@dataclass
class LinkCandidate:
    url: str
    price: float | None = None
    origin: str = "link"  # "link", "canonical" or "json_ld"


@dataclass
class ParsedPage:
    url: str
    canonical: str | None = None
    links: list[LinkCandidate] = field(default_factory=list)


class PageFetcher:
    """GET with browser-like headers, a short timeout and a capped body size."""

    DEFAULT_USER_AGENT = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/120.0.0.0 Safari/537.36"
    )

    DEFAULT_HEADERS = {
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        "Accept-Language": "en-US,en;q=0.9",
        "Accept-Encoding": "gzip, deflate",
    }

    def __init__(
        self,
        client: httpx.AsyncClient,
        timeout: float | None = None,
        max_bytes: int | None = None,
    ):
        self.client = client
        self.timeout = timeout or settings.page_fetch_timeout
        self.max_bytes = max_bytes or settings.page_fetch_max_bytes

    async def fetch(self, url: str) -> str | None:
        """Return the page body, or None on any fetch failure."""
        headers = {**self.DEFAULT_HEADERS, "User-Agent": self.DEFAULT_USER_AGENT}
        try:
            async with self.client.stream(
                "GET", url, headers=headers, timeout=self.timeout, follow_redirects=True
            ) as resp:
                if resp.status_code >= 400:
                    logger.warning("HTTP %d fetching %s", resp.status_code, url)
                    return None
                body = bytearray()
                async for chunk in resp.aiter_bytes():
                    body.extend(chunk)
                    if len(body) >= self.max_bytes:
                        logger.info("Truncated %s at %d bytes", url, self.max_bytes)
                        break
                encoding = resp.encoding or "utf-8"
        except httpx.TimeoutException:
            logger.warning("Timeout fetching %s", url)
            return None
        except httpx.HTTPError as exc:
            logger.warning("Fetch failed for %s: %s", url, exc)
            return None
        return bytes(body[: self.max_bytes]).decode(encoding, errors="replace")

    async def fetch_parsed(self, url: str, selectors: tuple[str, ...] = ()) -> ParsedPage | None:
        html = await self.fetch(url)
        if html is None:
            return None
        return parse_page(html, url, selectors)


def _nearby_price(tag) -> float | None:
    node = tag
    for _ in range(4):
        if node is None:
            break
        match = DOLLAR_RE.search(node.get_text(" ", strip=True))
        if match:
            return parse_price(match.group(0))
        node = node.parent
    return None


def _json_ld_items(data):
    if isinstance(data, list):
        for item in data:
            yield from _json_ld_items(item)
    elif isinstance(data, dict):
        if "@graph" in data:
            yield from _json_ld_items(data["@graph"])
        if data.get("@type") == "ItemList":
            for element in data.get("itemListElement") or []:
                if isinstance(element, dict):
                    yield from _json_ld_items(element.get("item", element))
        yield data


def _json_ld_url(value) -> str | None:
    if isinstance(value, list):
        value = next((v for v in value if isinstance(v, str)), None)
    return value if isinstance(value, str) and value.strip() else None


def _offer_price(offers) -> float | None:
    if isinstance(offers, list):
        prices = [p for p in (_offer_price(o) for o in offers) if p]
        return min(prices) if prices else None
    if isinstance(offers, dict):
        return parse_price(offers.get("price") or offers.get("lowPrice"))
    return None


def parse_page(html: str, base_url: str, selectors: tuple[str, ...] = ()) -> ParsedPage:
    """Collect product link candidates from selectors, the canonical link and JSON-LD Product data."""
    soup = BeautifulSoup(html, "html.parser")
    page = ParsedPage(url=base_url)

    canonical = soup.find("link", rel="canonical")
    if canonical and canonical.get("href"):
        page.canonical = urljoin(base_url, canonical["href"])
        page.links.append(LinkCandidate(page.canonical, origin="canonical"))

    for script in soup.find_all("script", type="application/ld+json"):
        try:
            data = json.loads(script.string or "")
        except (json.JSONDecodeError, TypeError):
            continue
        for item in _json_ld_items(data):
            item_type = item.get("@type")
            types = item_type if isinstance(item_type, list) else [item_type]
            if "Product" not in types:
                continue
            offers = item.get("offers")
            url = _json_ld_url(item.get("url")) or (
                _json_ld_url(offers.get("url")) if isinstance(offers, dict) else None
            )
            if url:
                page.links.append(LinkCandidate(urljoin(base_url, url), _offer_price(offers), "json_ld"))

    seen = {link.url for link in page.links}
    for selector in selectors:
        for tag in soup.select(selector):
            href = tag.get("href")
            if not href or href.startswith(("#", "javascript:")):
                continue
            url = urljoin(base_url, href)
            if url in seen:
                continue
            seen.add(url)
            page.links.append(LinkCandidate(url, _nearby_price(tag)))

    return page

import asyncio
import logging
from dataclasses import dataclass
from urllib.parse import urlparse

from pricefinder.config import settings
from pricefinder.errors import PricingError, ResolutionFailure
from pricefinder.registries import Registries, default_registries
from pricefinder.registries.retailers import Retailer, unwrap_redirect
from pricefinder.schemas.product_search import MerchantOffer, ScoredCandidate
from pricefinder.services.page_fetcher import PageFetcher
from pricefinder.services.shopping_search import ShoppingSearchClient

logger = logging.getLogger(__name__)


@dataclass
class Resolution:
    url: str | None = None
    step: str | None = None
    retailer: str | None = None
    # price listed with the resolved offer or page link, when known
    price: float | None = None

    @property
    def verified(self) -> bool:
        return self.url is not None


class DirectUrlResolver:
    """Finds a single-product page URL for a selected candidate.

    Steps run in order and the first verified URL wins: the candidate's own
    link, alternate merchant links, the provider's product-detail sellers, a
    site-restricted search raced across the retailer's domains, a rewrite of
    the catalog URL, and finally a scan of the catalog page itself. When every
    step comes up empty `ResolutionFailure` is raised.
    """

    def __init__(
        self,
        search_client: ShoppingSearchClient | None,
        fetcher: PageFetcher | None,
        registries: Registries | None = None,
        time_box: float | None = None,
    ):
        self.search_client = search_client
        self.fetcher = fetcher
        self.registries = registries or default_registries()
        self.time_box = time_box or settings.resolver_time_box_seconds

    def _direct(self, url: str | None) -> str | None:
        url = unwrap_redirect(url)
        return url if self.registries.retailers.is_direct(url) else None

    def _retailer_for(self, scored: ScoredCandidate) -> Retailer | None:
        retailers = self.registries.retailers
        return retailers.for_url(unwrap_redirect(scored.candidate.link)) or retailers.for_source(
            scored.candidate.source
        )

    def _done(self, url: str, step: str, price: float | None = None) -> Resolution:
        retailer = self.registries.retailers.for_url(url)
        logger.info("Resolved direct URL via %s: %s", step, url)
        return Resolution(url=url, step=step, retailer=retailer.name if retailer else None, price=price)

    async def resolve(self, scored: ScoredCandidate, target_price: float | None = None) -> Resolution:
        candidate = scored.candidate
        target = target_price or candidate.price

        url = self._direct(candidate.link)
        if url:
            return self._done(url, "own_link")

        offer = self._best_offer(candidate.merchants, target)
        if offer:
            return self._done(offer[0], "merchant_link", offer[1])

        if candidate.product_id and self.search_client and self.search_client.configured:
            offer = await self._from_product_detail(candidate.product_id, target)
            if offer:
                return self._done(offer[0], "product_detail", offer[1])

        retailer = self._retailer_for(scored)
        if retailer and self.search_client and self.search_client.configured:
            url = await self._from_site_search(retailer, candidate.title)
            if url:
                return self._done(url, "site_search")

        for link in [candidate.link, *(m.link for m in candidate.merchants)]:
            url = self.registries.retailers.rewrite(unwrap_redirect(link))
            if url:
                return self._done(url, "rewrite")

        if retailer and self.fetcher:
            found = await self._from_catalog_page(retailer, scored, target)
            if found:
                return self._done(found[0], "page_scan", found[1])

        raise ResolutionFailure(
            f"no direct URL for {candidate.title!r} from {candidate.source or 'unknown source'}",
            retailer=retailer.name if retailer else None,
        )

    def _best_offer(self, offers: list[MerchantOffer], target: float) -> tuple[str, float | None] | None:
        direct = [(o, self._direct(o.link)) for o in offers]
        direct = [(o, url) for o, url in direct if url]
        if not direct:
            return None
        direct.sort(key=lambda pair: abs((pair[0].price or target) - target))
        offer, url = direct[0]
        return url, offer.price

    async def _from_product_detail(self, product_id: str, target: float) -> tuple[str, float | None] | None:
        try:
            offers = await asyncio.wait_for(
                self.search_client.product_offers(product_id, timeout=settings.timeout_fast),
                timeout=self.time_box,
            )
        except (PricingError, TimeoutError) as exc:
            logger.warning("Product detail lookup failed for %s: %s", product_id, exc)
            return None
        return self._best_offer(offers, target)

    async def _site_search_one(self, domain: str, title: str) -> str | None:
        links = await self.search_client.site_search(domain, title, timeout=settings.timeout_fast)
        for link in links:
            url = self._direct(link) or self.registries.retailers.rewrite(unwrap_redirect(link))
            if url:
                return url
        return None

    async def _from_site_search(self, retailer: Retailer, title: str) -> str | None:
        tasks = [asyncio.create_task(self._site_search_one(d, title)) for d in retailer.domains]
        try:
            for next_done in asyncio.as_completed(tasks, timeout=self.time_box):
                try:
                    url = await next_done
                except PricingError as exc:
                    logger.warning("Site search on %s failed: %s", retailer.name, exc)
                    continue
                if url:
                    return url
        except TimeoutError:
            logger.warning("Site search on %s exceeded %.1fs", retailer.name, self.time_box)
        finally:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
        return None

    async def _from_catalog_page(
        self, retailer: Retailer, scored: ScoredCandidate, target: float
    ) -> tuple[str, float | None] | None:
        link = unwrap_redirect(scored.candidate.link)
        if not (link and retailer.serves(urlparse(link).netloc)):
            link = self.registries.retailers.search_url(retailer, scored.candidate.title)
        try:
            page = await asyncio.wait_for(
                self.fetcher.fetch_parsed(link, retailer.link_selectors), timeout=self.time_box
            )
        except TimeoutError:
            logger.warning("Catalog page scan timed out for %s", link)
            return None
        if page is None:
            return None

        options = []
        for found in page.links:
            url = self._direct(found.url) or self.registries.retailers.rewrite(found.url)
            if url:
                distance = abs(found.price - target) if found.price else float("inf")
                options.append((distance, url, found.price))
        if not options:
            return None
        options.sort(key=lambda option: option[0])
        return options[0][1], options[0][2]

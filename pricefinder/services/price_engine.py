import asyncio
import logging
import math
import time

import httpx

from pricefinder.config import settings
from pricefinder.errors import ConfigurationUnavailable, NoQualifyingCandidate, ResolutionFailure
from pricefinder.registries import Registries, default_registries
from pricefinder.schemas.price_result import CacheEntry, MatchQuality, PriceResult, PricingTrace
from pricefinder.schemas.product_search import ScoredCandidate
from pricefinder.schemas.query import ItemQuery, PriceLookup
from pricefinder.services.candidate_scorer import CandidateScorer
from pricefinder.services.fallback_estimator import FallbackEstimator, generic_search_url
from pricefinder.services.page_fetcher import PageFetcher
from pricefinder.services.price_band import BandLabel, BandSelection, select_candidate
from pricefinder.services.price_cache import PriceCache
from pricefinder.services.query_analyzer import QueryAnalyzer
from pricefinder.services.retry_policy import RetryPolicy
from pricefinder.services.search_orchestrator import SearchOrchestrator
from pricefinder.services.search_strategies import PriceDirection, build_strategies
from pricefinder.services.shopping_search import ShoppingSearchClient
from pricefinder.services.url_resolver import DirectUrlResolver, Resolution

logger = logging.getLogger(__name__)

MAX_SKIP_REASONS = 25
MAX_TOLERANCE_PCT = 95.0


class PriceEngine:
    """Finds a validated replacement price and, when possible, a direct product URL.

    One instance per process: it owns the HTTP client, the cache and the
    registries. `find_best_price` never raises for operational failures; every
    dead end becomes a self-describing estimate.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        cache: PriceCache | None = None,
        registries: Registries | None = None,
        api_key: str | None = None,
        retry_policy: RetryPolicy | None = None,
    ):
        self._owns_client = http_client is None
        self.http_client = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(settings.timeout_medium), follow_redirects=True
        )
        self.registries = registries or default_registries()
        self.cache = cache or PriceCache.from_settings()
        self.analyzer = QueryAnalyzer(self.registries)
        self.search_client = ShoppingSearchClient(self.http_client, api_key=api_key, retry_policy=retry_policy)
        self.orchestrator = SearchOrchestrator(self.search_client, excluded_sites=self.registries.excluded_sites)
        self.scorer = CandidateScorer(self.registries, self.analyzer)
        self.resolver = DirectUrlResolver(self.search_client, PageFetcher(self.http_client), self.registries)
        self.estimator = FallbackEstimator(self.registries, self.analyzer)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        await self.cache.close()
        if self._owns_client:
            await self.http_client.aclose()

    async def find_best_price(
        self,
        query: str,
        target_price: float | None = None,
        tolerance_pct: float | None = None,
    ) -> PriceResult:
        started = time.perf_counter()
        trace = PricingTrace()
        text = (query or "").strip()
        try:
            result = await self._find(text, target_price, tolerance_pct, trace)
        except Exception:
            logger.exception("Pricing failed for %r; falling back to estimate", text)
            trace.skip_reasons.append("internal error")
            result = self.estimator.estimate(text, trace=trace, reason="pricing failed")
        result.trace.elapsed_ms = int((time.perf_counter() - started) * 1000)
        return result

    async def find_best_prices(
        self, items: list[PriceLookup], concurrency: int | None = None
    ) -> list[PriceResult]:
        """Price many items with bounded concurrency; results keep the input order."""
        semaphore = asyncio.Semaphore(concurrency or settings.batch_concurrency)

        async def one(item: PriceLookup) -> PriceResult:
            async with semaphore:
                return await self.find_best_price(item.description, item.target_price, item.tolerance_pct)

        results = await asyncio.gather(*(one(item) for item in items))
        logger.info("Batch priced %d items", len(results))
        return list(results)

    async def _find(
        self, text: str, target_price: float | None, tolerance_pct: float | None, trace: PricingTrace
    ) -> PriceResult:
        if not text:
            trace.skip_reasons.append("empty description")
            return self.estimator.estimate("", trace=trace, reason="empty description")

        rule = self.estimator.check_exclusion(text)
        if rule:
            return self.estimator.excluded(text, rule, trace)

        cached = await self.cache.get(text)
        if cached is not None:
            entry, tier = cached
            trace.cache_tier = tier
            return self._from_cache(entry, trace)

        target = target_price if target_price and math.isfinite(target_price) and target_price > 0 else None
        tolerance = (
            min(tolerance_pct, MAX_TOLERANCE_PCT)
            if tolerance_pct and math.isfinite(tolerance_pct) and tolerance_pct > 0
            else settings.default_tolerance_pct
        )
        attrs = self.analyzer.analyze(text)
        item = ItemQuery(text=text, target_price=target, tolerance_pct=tolerance, attributes=attrs)

        if not self.search_client.configured:
            trace.skip_reasons.append("no search credential")
            return self.estimator.estimate(text, attrs, trace, reason="search not configured")

        try:
            selection = await self._select(item, trace)
        except ConfigurationUnavailable as exc:
            trace.skip_reasons.append(str(exc))
            return self.estimator.estimate(text, attrs, trace, reason="search not available")
        except NoQualifyingCandidate as exc:
            return self.estimator.estimate(text, attrs, trace, reason=str(exc))

        chosen = selection.candidate
        trace.validation_strategy = selection.band.value
        trace.strategy_used = chosen.candidate.strategy
        try:
            resolution = await self.resolver.resolve(chosen, item.target_price)
        except ResolutionFailure as exc:
            logger.info("Keeping unverified price: %s", exc)
            resolution = Resolution(retailer=exc.retailer)
        trace.resolution_step = resolution.step

        result = self._from_selection(item, selection, resolution, trace)
        if resolution.verified:
            await self.cache.set(text, CacheEntry(
                found=True,
                price=result.price,
                source=result.source,
                url=result.url,
                title=result.title,
                category=result.category,
                subcategory=result.subcategory,
                confidence=result.confidence,
            ))
        return result

    async def _select(self, item: ItemQuery, trace: PricingTrace) -> BandSelection:
        strategies = build_strategies(item, self.registries)
        trace.search_terms = [s.query for s in strategies]
        outcome = await self.orchestrator.search(item, strategies)
        for name, failure in outcome.failures.items():
            trace.skip_reasons.append(f"strategy {name}: {failure}")

        trace.candidates_checked = len(outcome.candidates)
        if not outcome.candidates:
            raise NoQualifyingCandidate("no search results")

        accepted, rejected = self.scorer.score_all(outcome.candidates, item)
        for scored in rejected:
            if len(trace.skip_reasons) >= MAX_SKIP_REASONS:
                break
            trace.skip_reasons.append(f"{scored.title[:60]}: {scored.reasons[-1]}")

        selection = select_candidate(accepted, item.target_price, item.tolerance_pct, item)
        if selection is None:
            raise NoQualifyingCandidate("no qualifying candidate")
        return selection

    @staticmethod
    def _from_cache(entry: CacheEntry, trace: PricingTrace) -> PriceResult:
        return PriceResult(
            found=entry.found,
            price=entry.price,
            source=entry.source,
            url=entry.url,
            title=entry.title,
            category=entry.category,
            subcategory=entry.subcategory,
            is_estimated=False,
            match_quality=MatchQuality.CACHED,
            confidence=entry.confidence,
            notes="cached result",
            trace=trace,
        )

    def _from_selection(
        self,
        item: ItemQuery,
        selection: BandSelection,
        resolution: Resolution,
        trace: PricingTrace,
    ) -> PriceResult:
        chosen = selection.candidate
        attrs = item.attributes
        notes = [f"{selection.band.value} selection from {trace.candidates_checked} candidates"]
        if chosen.pack_size > 1:
            notes.append(f"pack of {chosen.pack_size} normalized to ${chosen.unit_price:.2f} per unit")

        price = chosen.effective_price
        if resolution.verified:
            quality = self._match_quality(chosen, selection.band)
            confidence = min(0.95, 0.5 + 0.5 * chosen.score)
            url = resolution.url
            source = resolution.retailer or chosen.retailer
            if resolution.price:
                price = round(resolution.price / chosen.pack_size * attrs.pack_count, 2)
                if price != chosen.effective_price:
                    notes.append(f"price from the {source} offer at the resolved URL")
        else:
            quality = MatchQuality.UNVERIFIED
            confidence = min(0.6, 0.3 + 0.4 * chosen.score)
            url = generic_search_url(item.text)
            source = chosen.retailer or chosen.candidate.source
            notes.append("no direct product URL could be verified")

        return PriceResult(
            found=True,
            price=price,
            source=source,
            url=url,
            title=chosen.title,
            category=attrs.category,
            subcategory=attrs.subcategory,
            is_estimated=not resolution.verified,
            match_quality=quality,
            confidence=round(confidence, 3),
            notes="; ".join(notes),
            matched_attributes=chosen.matched_attributes,
            trace=trace,
        )

    @staticmethod
    def _match_quality(chosen: ScoredCandidate, band: BandLabel) -> MatchQuality:
        strategy = chosen.candidate.strategy or ""
        if strategy.startswith("alternate_") or strategy in (
            f"{PriceDirection.LOWER}_capacity",
            f"{PriceDirection.HIGHER}_capacity",
        ):
            return MatchQuality.ALTERNATIVE
        if chosen.score >= 0.8 and band in (BandLabel.IN_BAND, BandLabel.NO_TARGET):
            return MatchQuality.EXACT
        return MatchQuality.CLOSE

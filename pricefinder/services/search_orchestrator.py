import asyncio
import logging
from dataclasses import dataclass, field

from pricefinder.config import settings
from pricefinder.errors import ConfigurationUnavailable, PricingError
from pricefinder.schemas.product_search import Candidate
from pricefinder.schemas.query import ItemQuery
from pricefinder.services.search_strategies import SearchStrategy
from pricefinder.services.shopping_search import ShoppingSearchClient

logger = logging.getLogger(__name__)


@dataclass
class SearchOutcome:
    candidates: list[Candidate] = field(default_factory=list)
    search_terms: list[str] = field(default_factory=list)
    failures: dict[str, str] = field(default_factory=dict)


class SearchOrchestrator:
    """Runs one provider call per strategy concurrently and merges the listings."""

    def __init__(
        self,
        client: ShoppingSearchClient,
        excluded_sites: tuple[str, ...] = (),
        deadline: float | None = None,
    ):
        self.client = client
        self.excluded_sites = excluded_sites
        self.deadline = deadline or settings.search_deadline_seconds

    async def _run(self, strategy: SearchStrategy, query: ItemQuery) -> list[Candidate]:
        return await self.client.search(
            strategy.query,
            price_window=query.price_window,
            excluded_sites=self.excluded_sites,
            timeout=settings.timeout_for(strategy.timeout_tier),
            strategy=strategy.name,
        )

    async def search(self, query: ItemQuery, strategies: list[SearchStrategy]) -> SearchOutcome:
        if not self.client.configured:
            raise ConfigurationUnavailable("no shopping search credential")

        outcome = SearchOutcome(search_terms=[s.query for s in strategies])
        if not strategies:
            return outcome

        tasks = {
            asyncio.create_task(self._run(s, query), name=f"search:{s.name}"): s
            for s in strategies
        }
        done, pending = await asyncio.wait(tasks, timeout=self.deadline)
        for task in pending:
            task.cancel()
            outcome.failures[tasks[task].name] = "deadline exceeded"
            logger.warning("Strategy %s cancelled at search deadline", tasks[task].name)
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

        per_strategy: dict[str, list[Candidate]] = {}
        for task in done:
            strategy = tasks[task]
            exc = task.exception()
            if isinstance(exc, ConfigurationUnavailable):
                raise exc
            if isinstance(exc, PricingError):
                outcome.failures[strategy.name] = str(exc)
                logger.warning("Strategy %s failed: %s", strategy.name, exc)
                continue
            if exc is not None:
                outcome.failures[strategy.name] = repr(exc)
                logger.error("Strategy %s crashed", strategy.name, exc_info=exc)
                continue
            per_strategy[strategy.name] = task.result()

        seen: set[tuple[str, str, float]] = set()
        for strategy in sorted(strategies, key=lambda s: s.priority):
            for candidate in per_strategy.get(strategy.name, []):
                key = candidate.dedupe_key
                if key in seen:
                    continue
                seen.add(key)
                outcome.candidates.append(candidate)

        logger.info(
            "Search merged %d unique candidates from %d/%d strategies",
            len(outcome.candidates), len(per_strategy), len(strategies),
        )
        return outcome

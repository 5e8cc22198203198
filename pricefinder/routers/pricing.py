from fastapi import APIRouter, Depends, Request

from pricefinder.schemas.price_result import PriceResult
from pricefinder.schemas.query import BatchLookup, PriceLookup
from pricefinder.services.price_engine import PriceEngine

router = APIRouter(prefix="/pricing")


def get_engine(request: Request) -> PriceEngine:
    return request.app.state.engine


@router.post("/lookup", response_model=PriceResult)
async def lookup(body: PriceLookup, engine: PriceEngine = Depends(get_engine)):
    return await engine.find_best_price(body.description, body.target_price, body.tolerance_pct)


@router.post("/batch", response_model=list[PriceResult])
async def batch(body: BatchLookup, engine: PriceEngine = Depends(get_engine)):
    return await engine.find_best_prices(body.items)


@router.post("/cache/clear")
async def clear_cache(engine: PriceEngine = Depends(get_engine)):
    cleared = await engine.cache.clear()
    return {"cleared": cleared}


@router.get("/health/cache")
async def cache_health(engine: PriceEngine = Depends(get_engine)):
    return await engine.cache.stats()

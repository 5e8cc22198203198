import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from pricefinder.config import settings
from pricefinder.routers import pricing
from pricefinder.services.price_engine import PriceEngine

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.engine = PriceEngine()
    if not settings.serpapi_api_key:
        logger.warning("SERPAPI_API_KEY not set; every lookup will be an estimate")

    yield

    await app.state.engine.close()


app = FastAPI(title=settings.app_name, lifespan=lifespan)

# routers
app.include_router(pricing.router)


@app.get("/health")
async def health():
    return {"status": "ok"}

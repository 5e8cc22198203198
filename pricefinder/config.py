from pathlib import Path

from dotenv import dotenv_values
from pydantic_settings import BaseSettings

_ENV_FILE = Path.home() / "env" / ".env.pricefinder"
_env_vars = dotenv_values(str(_ENV_FILE)) if _ENV_FILE.exists() else {}


class Settings(BaseSettings):
    app_name: str = "Price Finder"
    debug: bool = False
    log_level: str = "INFO"

    serpapi_api_key: str = ""
    serpapi_base_url: str = "https://serpapi.com/search"
    search_country: str = "us"
    search_language: str = "en"
    results_per_query: int = 20

    redis_url: str = ""
    cache_ttl_seconds: int = 12 * 60 * 60
    memory_cache_size: int = 1000
    cache_key_max_length: int = 200

    default_tolerance_pct: float = 10.0
    stretch_multiplier: float = 1.35
    min_acceptance_score: float = 0.3
    capacity_class_delta: float = 0.35

    timeout_fast: float = 8.0
    timeout_medium: float = 12.0
    timeout_slow: float = 15.0
    search_deadline_seconds: float = 30.0
    max_strategies: int = 8

    retry_max_attempts: int = 3
    retry_base_delay: float = 0.5
    retry_max_delay: float = 4.0

    resolver_time_box_seconds: float = 10.0
    page_fetch_timeout: float = 8.0
    page_fetch_max_bytes: int = 2_000_000

    batch_concurrency: int = 5

    model_config = {
        "env_prefix": "PRICEFINDER_",
        "env_file": ".env",
        "extra": "ignore",
    }

    def model_post_init(self, __context):
        if not self.serpapi_api_key:
            self.serpapi_api_key = _env_vars.get("SERPAPI_API_KEY", "")

    def timeout_for(self, tier: str) -> float:
        return {
            "fast": self.timeout_fast,
            "medium": self.timeout_medium,
            "slow": self.timeout_slow,
        }.get(tier, self.timeout_medium)


settings = Settings()

import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
    wait_random,
)

from pricefinder.config import settings
from pricefinder.errors import PricingError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _is_retryable(exc: BaseException) -> bool:
    return isinstance(exc, PricingError) and exc.retryable


def _log_retry(state: RetryCallState) -> None:
    exc = state.outcome.exception() if state.outcome else None
    logger.warning(
        "Retrying %s after attempt %d: %s",
        getattr(state.fn, "__name__", "call"),
        state.attempt_number,
        exc,
    )


class RetryPolicy:
    """The single retry rule applied to every outbound provider call.

    Only retryable errors (timeouts, rate limits) are retried; everything else
    propagates on the first failure.
    """

    def __init__(
        self,
        max_attempts: int | None = None,
        base_delay: float | None = None,
        max_delay: float | None = None,
    ):
        self.max_attempts = max_attempts or settings.retry_max_attempts
        self.base_delay = settings.retry_base_delay if base_delay is None else base_delay
        self.max_delay = settings.retry_max_delay if max_delay is None else max_delay

    def _retrying(self) -> AsyncRetrying:
        return AsyncRetrying(
            retry=retry_if_exception(_is_retryable),
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=self.base_delay, max=self.max_delay)
            + wait_random(0, self.base_delay),
            before_sleep=_log_retry,
            reraise=True,
        )

    async def call(self, fn: Callable[..., Awaitable[T]], *args, **kwargs) -> T:
        return await self._retrying()(fn, *args, **kwargs)

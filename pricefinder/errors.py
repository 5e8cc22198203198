class PricingError(Exception):
    """Base class for operational failures contained by the price engine."""

    retryable: bool = False


class ConfigurationUnavailable(PricingError):
    """No usable provider credential; the engine goes straight to an estimate."""


class NetworkTimeout(PricingError):
    retryable = True


class RateLimited(PricingError):
    retryable = True


class ParseFailure(PricingError):
    """Provider answered with a payload we could not interpret."""


class NoQualifyingCandidate(PricingError):
    """Search produced nothing that survives validation and band selection."""


class ResolutionFailure(PricingError):
    """No direct product URL could be verified for the selected candidate."""

    def __init__(self, message: str, retailer: str | None = None):
        super().__init__(message)
        self.retailer = retailer


class CacheStoreUnavailable(PricingError):
    pass

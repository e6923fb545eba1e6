"""Exception hierarchy for cryptodash."""


class CryptoDashError(Exception):
    """Base error for the dashboard backend."""


class ConfigurationError(CryptoDashError):
    """Invalid wiring or settings."""


class ExternalServiceError(CryptoDashError):
    """An upstream HTTP API answered with an error or an unusable payload."""


class InvalidQuoteError(ExternalServiceError):
    """A provider answered but the price is missing or not a usable number."""


class UnsupportedCoinError(ExternalServiceError):
    """A provider has no market for the requested coin."""


class AllRelaysFailedError(ExternalServiceError):
    """Every relay in a proxy race failed or timed out."""

    def __init__(self, url: str, errors: list[str]) -> None:
        self.url = url
        self.errors = errors
        super().__init__(f"All relays failed for {url}: {'; '.join(errors)}")

from datetime import UTC, datetime

from cryptodash.domain.models.base import CamelModel


class ProviderHealth(CamelModel):
    """Running success/failure tally for one current-price provider."""

    provider_name: str
    successes: int = 0
    failures: int = 0
    consecutive_failures: int = 0
    last_ok_at: datetime | None = None
    last_error: str | None = None

    def record_success(self) -> None:
        self.successes += 1
        self.consecutive_failures = 0
        self.last_ok_at = datetime.now(UTC)
        self.last_error = None

    def record_failure(self, error: str) -> None:
        self.failures += 1
        self.consecutive_failures += 1
        self.last_error = error[:500]

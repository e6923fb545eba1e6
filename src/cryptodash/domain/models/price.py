"""Domain types for current prices, monthly series and the cached snapshot."""

from datetime import datetime

from pydantic import Field

from cryptodash.domain.enums import ControllerPhase, CycleOutcome, PriceSource
from cryptodash.domain.models.base import CamelModel


class PricePoint(CamelModel):
    """Average USD price for one calendar month."""

    month: str = Field(pattern=r"^\d{4}-\d{2}$")  # YYYY-MM
    price: int = Field(ge=0)


class CurrentPrice(CamelModel):
    """Latest spot price, normalized across providers."""

    price: int = Field(ge=0)
    change24h: float | None = Field(default=None, alias="change24h")  # percent, only some providers report it
    source: PriceSource


class CacheEntry(CamelModel):
    """Last successful aggregation, persisted between restarts."""

    price_data: list[PricePoint]
    current_price: CurrentPrice
    timestamp: int  # epoch milliseconds


class DashboardState(CamelModel):
    """What the UI polls: the merged view plus provenance and cycle status."""

    price_data: list[PricePoint] = []
    current_price: CurrentPrice | None = None
    loading: bool = True
    error: str | None = None
    last_updated: datetime | None = None
    is_live: bool = False
    data_source: str | None = None
    phase: ControllerPhase = ControllerPhase.UNINITIALIZED
    outcome: CycleOutcome | None = None
    last_cycle_error: str | None = None

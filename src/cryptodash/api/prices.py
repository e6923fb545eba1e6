"""Prices API router: the polling interface the dashboard reads."""

from typing import Annotated

from fastapi import APIRouter, Depends

from cryptodash.api.deps import get_price_aggregator
from cryptodash.api.schemas.prices import ProviderHealthList, RefetchResponse
from cryptodash.domain.models import DashboardState
from cryptodash.services.price_aggregator import PriceAggregator

router = APIRouter(prefix="/api/prices", tags=["prices"])

AggregatorDep = Annotated[PriceAggregator, Depends(get_price_aggregator)]


@router.get("", response_model=DashboardState)
async def get_prices(aggregator: AggregatorDep) -> DashboardState:
    return aggregator.snapshot()


@router.post("/refetch", response_model=RefetchResponse)
async def refetch_prices(aggregator: AggregatorDep) -> RefetchResponse:
    """Run a cycle now. If one is already running, return the current view untouched."""
    started = await aggregator.refetch()
    return RefetchResponse(started=started, state=aggregator.snapshot())


@router.get("/providers", response_model=ProviderHealthList)
async def get_provider_health(aggregator: AggregatorDep) -> ProviderHealthList:
    return ProviderHealthList(providers=aggregator.provider_health())

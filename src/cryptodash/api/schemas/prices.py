from cryptodash.domain.models import DashboardState, ProviderHealth
from cryptodash.domain.models.base import CamelModel


class RefetchResponse(CamelModel):
    started: bool  # False when a cycle was already running
    state: DashboardState


class ProviderHealthList(CamelModel):
    providers: list[ProviderHealth]

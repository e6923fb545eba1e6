from cryptodash.domain.enums.news import NewsAgency
from cryptodash.domain.enums.price_source import PriceSource
from cryptodash.domain.enums.status import ControllerPhase, CycleOutcome

__all__ = [
    "ControllerPhase",
    "CycleOutcome",
    "NewsAgency",
    "PriceSource",
]

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from cryptodash.container import Container
from cryptodash.services.news_service import NewsService
from cryptodash.services.price_aggregator import PriceAggregator


@inject
def get_price_aggregator(
    aggregator: PriceAggregator = Depends(Provide[Container.price_aggregator]),
) -> PriceAggregator:
    return aggregator


@inject
def get_news_service(
    news_service: NewsService = Depends(Provide[Container.news_service]),
) -> NewsService:
    return news_service

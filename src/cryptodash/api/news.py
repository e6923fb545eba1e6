from typing import Annotated

from fastapi import APIRouter, Depends

from cryptodash.api.deps import get_news_service
from cryptodash.domain.models import NewsFeed
from cryptodash.services.news_service import NewsService

router = APIRouter(prefix="/api/news", tags=["news"])

NewsDep = Annotated[NewsService, Depends(get_news_service)]


@router.get("", response_model=NewsFeed)
async def get_news(news_service: NewsDep) -> NewsFeed:
    return news_service.snapshot()


@router.post("/refetch", response_model=NewsFeed)
async def refetch_news(news_service: NewsDep) -> NewsFeed:
    return await news_service.refetch()

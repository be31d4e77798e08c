from fastapi import APIRouter, Depends

from broker_backend.api.deps import get_news_service
from broker_backend.controllers.news import upsert_news_controller
from broker_backend.models.news import NewsUpsertRequest, NewsUpsertResponse
from broker_backend.services.news_service import NewsService

router = APIRouter()

@router.post("/upsert-news-with-summary", response_model=NewsUpsertResponse, summary="Store news with AI summary")
async def upsert_news_with_summary(
    request: NewsUpsertRequest,
    news_service: NewsService = Depends(get_news_service),
):
    """
    Stores a news item in the ``news`` collection with a short PT-PT summary.
    The summary is empty when OPENAI_API_KEY is not set or the model call fails.
    """
    return await upsert_news_controller(request, news_service)

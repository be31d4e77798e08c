import logging

from fastapi import HTTPException, status

from broker_backend.models.news import NewsUpsertRequest, NewsUpsertResponse
from broker_backend.services.news_service import NewsService

logger = logging.getLogger(__name__)


async def upsert_news_controller(request: NewsUpsertRequest, news_service: NewsService) -> NewsUpsertResponse:
    try:
        doc_id, summary = await news_service.upsert_with_summary(
            request.title, request.url, request.source, request.region
        )
    except Exception:
        logger.exception("Unexpected error while storing news '%s'", request.title)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal Server Error",
        )
    return NewsUpsertResponse(id=doc_id, summary=summary)

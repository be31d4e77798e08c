import logging
from datetime import datetime, timezone
from typing import Tuple

from starlette.concurrency import run_in_threadpool

from broker_backend.models.news import NewsDocument
from broker_backend.services.database_service import NEWS_COLLECTION, FirestoreService
from broker_backend.services.summary_service import SummaryService

logger = logging.getLogger(__name__)


def utc_now_iso() -> str:
    """Current UTC time as ``2024-01-31T12:00:00.000Z``."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class NewsService:
    def __init__(self, firestore_service: FirestoreService, summary_service: SummaryService):
        self.firestore_service = firestore_service
        self.summary_service = summary_service

    async def upsert_with_summary(
        self,
        title: str,
        url: str,
        source: str,
        region: str = "nacional",
    ) -> Tuple[str, str]:
        """Summarize a news item and store it as a new ``news`` document.

        Returns:
            The new document id and the summary (empty when unavailable).
        """
        summary = await self.summary_service.generate_summary(title, url)
        document = NewsDocument(
            title=title,
            url=url,
            source=source,
            region=region,
            summary=summary,
            publishedAt=utc_now_iso(),
        )
        doc_id = await run_in_threadpool(
            self.firestore_service.create_document,
            NEWS_COLLECTION,
            document.model_dump(exclude_none=True),
        )
        logger.info("Stored news %s (summary: %d chars)", doc_id, len(summary))
        return doc_id, summary

"""Tag the most recent news documents that have no tags yet.

Usage:
    backfill-news-tags [max_docs]

Documents are processed one at a time, newest first (default: 20). Requires
OPENAI_API_KEY and FIREBASE_SERVICE_ACCOUNT_JSON.
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import List, Optional

from starlette.concurrency import run_in_threadpool

from broker_backend.core.config import Settings, get_settings
from broker_backend.core.logging_config import setup_logging
from broker_backend.services.database_service import NEWS_COLLECTION, FirestoreService
from broker_backend.services.tagging_service import TaggingService

logger = logging.getLogger(__name__)

DEFAULT_MAX_DOCS = 20


def require_script_settings(settings: Settings) -> None:
    """Exit with status 1 when the credentials the scripts need are missing."""
    if not settings.OPENAI_API_KEY:
        print("Missing OPENAI_API_KEY in environment", file=sys.stderr)
        sys.exit(1)
    if not settings.FIREBASE_SERVICE_ACCOUNT_JSON:
        print("Missing FIREBASE_SERVICE_ACCOUNT_JSON in environment", file=sys.stderr)
        sys.exit(1)


def parse_max_docs(value: Optional[str]) -> int:
    try:
        number = int(value) if value is not None else DEFAULT_MAX_DOCS
    except ValueError:
        return DEFAULT_MAX_DOCS
    return number if number > 0 else DEFAULT_MAX_DOCS


async def backfill_tags(
    firestore_service: FirestoreService,
    tagging_service: TaggingService,
    max_docs: int,
) -> Optional[dict]:
    """Returns the run counters, or None when the collection is empty."""
    docs = await run_in_threadpool(
        firestore_service.list_documents, NEWS_COLLECTION, order_by="publishedAt", limit=max_docs
    )
    if not docs:
        return None

    processed = 0
    updated = 0
    for doc_id, data in docs:
        if isinstance(data.get("tags"), list) and data["tags"]:
            continue

        processed += 1
        logger.info("Processing doc %s (%s)...", doc_id, data.get("title") or "sem título")
        try:
            tags = await tagging_service.generate_tags(doc_id, data)
            if tags:
                await run_in_threadpool(firestore_service.set_document, f"{NEWS_COLLECTION}/{doc_id}", {"tags": tags})
                updated += 1
                logger.info("Updated doc %s with tags: %s", doc_id, ", ".join(tags))
        except Exception:
            logger.exception("Error processing doc %s", doc_id)

    return {"ok": True, "checked": len(docs), "processed": processed, "updated": updated}


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Backfill tags on news documents.")
    parser.add_argument("max_docs", nargs="?", default=None, help=f"Documents to check (default {DEFAULT_MAX_DOCS}).")
    args = parser.parse_args(argv)

    setup_logging()
    settings = get_settings()
    require_script_settings(settings)

    firestore_service = FirestoreService(settings)
    tagging_service = TaggingService(settings)
    result = asyncio.run(backfill_tags(firestore_service, tagging_service, parse_max_docs(args.max_docs)))
    if result is None:
        print("No news documents found.")
        return
    print(json.dumps(result, indent=2))


if __name__ == "__main__":
    main()

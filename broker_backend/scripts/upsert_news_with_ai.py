"""Store one news item with an AI summary from the command line.

Usage:
    upsert-news-with-ai "title" "url" "source" [region]
"""

import argparse
import asyncio
import json
from typing import List, Optional

from broker_backend.core.config import get_settings
from broker_backend.core.logging_config import setup_logging
from broker_backend.scripts.backfill_news_tags import require_script_settings
from broker_backend.services.database_service import FirestoreService
from broker_backend.services.news_service import NewsService
from broker_backend.services.summary_service import SummaryService


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Store a news item with an AI summary.")
    parser.add_argument("title")
    parser.add_argument("url")
    parser.add_argument("source")
    parser.add_argument("region", nargs="?", default="nacional")
    args = parser.parse_args(argv)

    setup_logging()
    settings = get_settings()
    require_script_settings(settings)

    news_service = NewsService(FirestoreService(settings), SummaryService(settings))
    doc_id, summary = asyncio.run(
        news_service.upsert_with_summary(args.title, args.url, args.source, args.region or "nacional")
    )
    print(json.dumps({"ok": True, "id": doc_id, "summary": summary}, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""
Mirror every news record from the primary store into Elasticsearch.
By default the job is enqueued on Celery (worker must be running); --inline runs it in this process.

If you get 503 / no_shard_available from Elasticsearch, delete the broken index and reindex:
  python scripts/reindex_elasticsearch.py --reset-index

  python scripts/reindex_elasticsearch.py
  python scripts/reindex_elasticsearch.py --inline --batch-size 500
  python scripts/reindex_elasticsearch.py --store-only   # backfill defaults in the store instead
"""

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from news_api.config import get_settings
from news_api.queue.tasks import reindex_news_task, reindex_news_to_search_task
from news_api.search.elasticsearch_client import delete_news_index_sync, ensure_news_index_sync


def main():
    settings = get_settings()
    ap = argparse.ArgumentParser(description="Reindex news records (store -> Elasticsearch, or store -> store)")
    ap.add_argument("--batch-size", type=int, default=settings.bulk_batch_size, help="Records per window")
    ap.add_argument("--reset-index", action="store_true", help="Delete and recreate the news index first")
    ap.add_argument("--store-only", action="store_true", help="Run the store backfill pass instead")
    ap.add_argument("--inline", action="store_true", help="Run in this process instead of enqueueing")
    args = ap.parse_args()

    if args.batch_size < 1:
        ap.error("--batch-size must be >= 1")

    if args.reset_index and not args.store_only:
        if delete_news_index_sync():
            print(f"Deleted index '{settings.news_index}'.")
        else:
            print(f"Index '{settings.news_index}' does not exist (already deleted or never created).")
        ensure_news_index_sync()
        print(f"Created index '{settings.news_index}' with number_of_replicas=0.")

    task = reindex_news_task if args.store_only else reindex_news_to_search_task

    if args.inline:
        result = task(batch_size=args.batch_size)
        if result.get("skipped"):
            print("Another reindex run holds the lock; nothing done.")
            sys.exit(1)
        print(f"Done. Records: {result['processed']}, batches: {result['batches']}")
        return

    async_result = task.delay(batch_size=args.batch_size)
    print(f"Enqueued {task.name} (id={async_result.id}). Ensure Celery worker is running.")
    if not args.store_only:
        print(f"Then check: curl -s '{settings.elasticsearch_url.rstrip('/')}/{settings.news_index}/_count?pretty'")


if __name__ == "__main__":
    main()

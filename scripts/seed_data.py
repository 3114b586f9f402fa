#!/usr/bin/env python3
"""
Seed script: fills the news collection with synthetic records through the API.
Run: API must be running. Afterwards reindex into Elasticsearch to make them searchable.
  python scripts/seed_data.py
  python scripts/seed_data.py --max-records 10000 --reindex
  python scripts/seed_data.py --clear --max-records 500
"""

import argparse
import sys

import httpx

API_BASE = "http://localhost:8000/api/v1"


def _get(client: httpx.Client, path: str, **params) -> dict:
    r = client.get(path, params=params or None)
    if r.status_code != 200:
        print(f"GET {path} failed: {r.status_code} {r.text[:200]}")
        sys.exit(1)
    return r.json()


def main():
    ap = argparse.ArgumentParser(description="Seed synthetic news records via API")
    ap.add_argument("--max-records", type=int, default=2000, help="Number of records to generate")
    ap.add_argument("--base-url", default=API_BASE, help="API base URL")
    ap.add_argument("--clear", action="store_true", help="Clear the collection first")
    ap.add_argument("--reindex", action="store_true", help="Mirror into Elasticsearch afterwards")
    args = ap.parse_args()

    # Bulk jobs can take a while on large seeds
    with httpx.Client(base_url=args.base_url, timeout=600.0) as client:
        if args.clear:
            body = _get(client, "/news/clear-data")
            print(f"Cleared {body.get('deleted', 0)} records.")

        print(f"Seeding {args.max_records} records...")
        body = _get(client, "/news/run-seed", maxRecords=args.max_records)
        print(f"  ... {body['processed']} records in {body['batches']} batches")

        if args.reindex:
            body = _get(client, "/news/re-index-elasticsearch")
            print(f"Indexed {body['processed']} records into Elasticsearch ({body['batches']} batches).")

        total = _get(client, "/news", page=1, limit=1)["total"]

    print(f"\nDone. Records in store: {total}")
    if not args.reindex:
        print("Tip: run scripts/reindex_elasticsearch.py (or pass --reindex) before using search.")


if __name__ == "__main__":
    main()

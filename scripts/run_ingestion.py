#!/usr/bin/env python3
"""Ingestion job for cron.

Behavior:
- Query Naver Shopping for each INGEST_CATEGORIES entry (skipped without
  NAVER_CLIENT_ID / NAVER_CLIENT_SECRET)
- Read the Ppomppu community RSS feed
- Normalize, fingerprint, trust-score and insert-or-replace every candidate
- Failing sources and rejected inserts are logged and skipped

Run:
  python -m scripts.run_ingestion

Optional env vars:
  INGEST_CATEGORIES="캠핑,주방,테크"
  PPOMPPU_RSS_URL="https://www.ppomppu.co.kr/rss.php?id=ppomppu"
"""

import asyncio
import logging
import os
import sys
from dataclasses import asdict


# Ensure imports work when executed as a script/module
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dealsense.services.ingestion import run_ingestion  # noqa: E402
from dealsense.services.naver_client import get_naver_client  # noqa: E402
from dealsense.stores.postgres import close_db, get_session, init_db, ping_db  # noqa: E402


async def main() -> None:
    # Initialize shared connections (same as API lifespan, but for a one-off cron run)
    await init_db()
    await ping_db()

    try:
        async with get_session() as session:
            stats = await run_ingestion(session)

        # Final output for cron logs (single JSON-ish blob)
        print({"ok": True, **asdict(stats), "total_fetched": stats.total_fetched})
    finally:
        await get_naver_client().close()
        await close_db()


if __name__ == "__main__":
    # Outside uvicorn nothing configures the "uvicorn.error" logger.
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    asyncio.run(main())

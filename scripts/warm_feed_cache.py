#!/usr/bin/env python3
"""Pre-populate the feed cache for the current timeline page.

Assembles the latest timeline page once (truncated mode) so comment counts
and comment lists for those posts are cached before traffic arrives. Entries
expire after COMMENT_CACHE_TTL like any other write-back.

Run (local / cron):
  python -m scripts.warm_feed_cache

Optional env vars:
  WARM_FULL=1    hydrate every comment (note: this is what truncated reads
                 will then see until the entries expire)
"""

import asyncio
import logging
import os
import sys


# Ensure imports work when executed as a script/module
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from timeline.routes.deps import get_feed_assembler, get_post_store  # noqa: E402
from timeline.stores.postgres import close_db, init_db, ping_db  # noqa: E402
from timeline.stores.redis import close_redis, init_redis  # noqa: E402


async def main() -> int:
    full = os.getenv("WARM_FULL", "").strip() in ("1", "true", "yes")

    await init_db()
    await ping_db()
    await init_redis()
    try:
        rows = await get_post_store().list_recent()
        posts = await get_feed_assembler().assemble(rows, csrf_token="", full=full)
    finally:
        await close_redis()
        await close_db()

    comments = sum(len(p.comments) for p in posts)
    print(f"warmed {len(posts)} posts, {comments} comments (full={full})")
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    raise SystemExit(asyncio.run(main()))

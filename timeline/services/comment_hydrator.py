"""Comment list hydration for a single post.

Flow:
1. GET the post's comment list key; on hit decode the stored list
2. On miss, join comments with users (newest first, LIMIT 3 unless full)
3. Cache the newest-first list with the standard TTL, in both modes
4. Reverse in place so callers always get oldest-first

Mode interaction:
A full-mode miss caches the unbounded list under the same key a truncated
read consults, so a truncated request within the TTL can return more than
TRUNCATED_COMMENT_LIMIT comments. This is kept as-is (see DESIGN.md).
"""

import logging

from pydantic import TypeAdapter, ValidationError

from timeline.errors import CacheDecodeError
from timeline.schemas import FeedComment
from timeline.services.interfaces import CacheClient, CommentStore
from timeline.stores.redis import comment_list_key

logger = logging.getLogger("uvicorn.error")

TRUNCATED_COMMENT_LIMIT = 3

_COMMENT_LIST = TypeAdapter(list[FeedComment])


def encode_comments(comments: list[FeedComment]) -> str:
    """Serialize a newest-first comment list for the cache."""
    return _COMMENT_LIST.dump_json(comments).decode("utf-8")


def decode_comments(key: str, raw: str | bytes) -> list[FeedComment]:
    """Deserialize a cached comment list (order is kept as stored)."""
    # Writers that marshal an empty list as null are tolerated.
    if raw.strip() in ("null", b"null"):
        return []
    try:
        return _COMMENT_LIST.validate_json(raw)
    except ValidationError as e:
        raise CacheDecodeError(key, f"{e.error_count()} validation error(s)") from e


class CommentHydrator:
    """Resolve the comments of a post, cache first."""

    def __init__(self, cache: CacheClient, store: CommentStore, ttl: int) -> None:
        self._cache = cache
        self._store = store
        self._ttl = ttl

    async def hydrate(self, post_id: int, full: bool) -> list[FeedComment]:
        """Get a post's comments, oldest first.

        Args:
            post_id: Post identifier.
            full: If False, only the TRUNCATED_COMMENT_LIMIT most recent comments
                are read from the store.

        Returns:
            Comments with their author snapshots, oldest first.
        """
        key = comment_list_key(post_id)

        raw = await self._cache.get(key)
        if raw is not None:
            comments = decode_comments(key, raw)
            logger.debug(f"Comments for post {post_id}: cache hit ({len(comments)})")
        else:
            limit = None if full else TRUNCATED_COMMENT_LIMIT
            comments = await self._store.fetch_comments(post_id, limit=limit)
            await self._cache.set(key, encode_comments(comments), self._ttl)
            logger.debug(f"Comments for post {post_id}: loaded {len(comments)} from store (full={full})")

        comments.reverse()
        return comments

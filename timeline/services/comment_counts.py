"""Comment count resolution for a batch of posts.

Flow:
1. One MGET for every post's count key
2. For keys missing from the cache, COUNT(*) per post
3. Write each store-resolved count back with the standard TTL

Any failure aborts the whole batch; callers never see a partial mapping.
"""

import logging
from collections.abc import Iterable

from timeline.errors import CacheDecodeError
from timeline.services.interfaces import CacheClient, CommentStore
from timeline.stores.redis import comment_count_key

logger = logging.getLogger("uvicorn.error")


def decode_count(key: str, raw: str | bytes) -> int:
    """Decode a cached decimal comment count."""
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("ascii")
        except UnicodeDecodeError as e:
            raise CacheDecodeError(key, "not ASCII") from e
    text = raw.strip()
    if not (text.isascii() and text.isdigit()):
        raise CacheDecodeError(key, f"not a non-negative integer: {raw[:32]!r}")
    return int(text)


class CountResolver:
    """Resolve comment counts, cache first."""

    def __init__(self, cache: CacheClient, store: CommentStore, ttl: int) -> None:
        self._cache = cache
        self._store = store
        self._ttl = ttl

    async def resolve(self, post_ids: Iterable[int]) -> dict[int, int]:
        """Get the comment count of every post.

        Args:
            post_ids: Post identifiers (duplicates are resolved once).

        Returns:
            Mapping post_id -> count, in first-seen order.
        """
        keys = {post_id: comment_count_key(post_id) for post_id in post_ids}
        if not keys:
            return {}

        cached = await self._cache.get_multi(list(keys.values()))

        counts: dict[int, int] = {}
        misses = 0
        for post_id, key in keys.items():
            raw = cached.get(key)
            if raw is not None:
                counts[post_id] = decode_count(key, raw)
                continue

            misses += 1
            count = await self._store.count_comments(post_id)
            await self._cache.set(key, str(count), self._ttl)
            counts[post_id] = count

        logger.debug(f"Comment counts: {len(keys) - misses} cached, {misses} from store")
        return counts

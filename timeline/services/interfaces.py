"""Collaborator interfaces consumed by the feed services.

`timeline.stores.redis.RedisCache` and `timeline.stores.comments.SqlCommentStore`
are the production implementations; tests substitute in-memory ones.
"""

from collections.abc import Sequence
from datetime import datetime
from typing import Protocol

from timeline.schemas import FeedComment


class CacheClient(Protocol):
    async def get(self, key: str) -> str | None: ...

    async def get_multi(self, keys: Sequence[str]) -> dict[str, str]: ...

    async def set(self, key: str, value: str, ttl: int) -> None: ...


class CommentStore(Protocol):
    async def count_comments(self, post_id: int) -> int: ...

    async def fetch_comments(
        self,
        post_id: int,
        limit: int | None = None,
        created_before: datetime | None = None,
    ) -> list[FeedComment]: ...

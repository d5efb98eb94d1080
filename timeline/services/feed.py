"""Feed assembly: raw post rows -> hydrated feed entries.

Flow:
1. Resolve comment counts for the whole page (one batched cache read)
2. Hydrate comments post by post, in input order
3. Build entries in input order, echoing the caller's CSRF token

A cache or store failure (any FeedError) aborts the page with BatchAbortError;
no partial feed is returned. Other exceptions are programming errors and
propagate unwrapped from both the sequential and the concurrent path.

Hydrations run sequentially by default. With hydration_concurrency > 1 they
run concurrently (bounded), but results are still placed by input index and
the first failure in input order is the one surfaced.
"""

import asyncio
import logging
from collections.abc import Sequence

from timeline.errors import BatchAbortError, FeedError
from timeline.schemas import FeedComment, FeedPost, PostAuthor, RawPost
from timeline.services.comment_counts import CountResolver
from timeline.services.comment_hydrator import CommentHydrator

logger = logging.getLogger("uvicorn.error")


class FeedAssembler:
    """Single entry point the HTTP layer uses to build feed pages."""

    def __init__(
        self,
        counts: CountResolver,
        hydrator: CommentHydrator,
        *,
        hydration_concurrency: int = 1,
        timeout: float | None = None,
    ) -> None:
        if hydration_concurrency < 1:
            raise ValueError("hydration_concurrency must be >= 1")
        self._counts = counts
        self._hydrator = hydrator
        self._concurrency = hydration_concurrency
        self._timeout = timeout

    async def assemble(self, posts: Sequence[RawPost], csrf_token: str, full: bool) -> list[FeedPost]:
        """Hydrate a page of posts.

        Args:
            posts: Raw post rows, in display order.
            csrf_token: Token echoed unchanged onto every entry.
            full: Hydrate every comment (detail view) instead of the latest few.

        Returns:
            Feed entries, same length and order as `posts`.

        Raises:
            BatchAbortError: If any count or comment lookup failed, or the
                deadline expired. Exceptions that are not FeedError
                propagate unwrapped.
        """
        if self._timeout is None:
            return await self._assemble(posts, csrf_token, full)
        try:
            return await asyncio.wait_for(self._assemble(posts, csrf_token, full), timeout=self._timeout)
        except asyncio.TimeoutError as e:
            logger.warning(f"Feed assembly of {len(posts)} posts exceeded {self._timeout}s")
            raise BatchAbortError(f"Feed assembly exceeded {self._timeout}s deadline") from e

    async def _assemble(self, posts: Sequence[RawPost], csrf_token: str, full: bool) -> list[FeedPost]:
        if not posts:
            return []

        try:
            counts = await self._counts.resolve(post.id for post in posts)
        except FeedError as e:
            logger.warning(f"Feed assembly aborted resolving counts: {e}")
            raise BatchAbortError("Resolving comment counts failed") from e

        if self._concurrency == 1:
            comment_lists = await self._hydrate_sequential(posts, full)
        else:
            comment_lists = await self._hydrate_concurrent(posts, full)

        return [
            FeedPost(
                id=post.id,
                user_id=post.user_id,
                body=post.body,
                mime=post.mime,
                created_at=post.created_at,
                user=PostAuthor(account_name=post.account_name),
                comment_count=counts[post.id],
                comments=comments,
                csrf_token=csrf_token,
            )
            for post, comments in zip(posts, comment_lists)
        ]

    async def _hydrate_sequential(self, posts: Sequence[RawPost], full: bool) -> list[list[FeedComment]]:
        comment_lists: list[list[FeedComment]] = []
        for post in posts:
            try:
                comment_lists.append(await self._hydrator.hydrate(post.id, full))
            except FeedError as e:
                logger.warning(f"Feed assembly aborted hydrating post {post.id}: {e}")
                raise BatchAbortError(f"Hydrating comments of post {post.id} failed", post_id=post.id) from e
        return comment_lists

    async def _hydrate_concurrent(self, posts: Sequence[RawPost], full: bool) -> list[list[FeedComment]]:
        sem = asyncio.Semaphore(self._concurrency)

        async def _hydrate(post_id: int) -> list[FeedComment]:
            async with sem:
                return await self._hydrator.hydrate(post_id, full)

        results = await asyncio.gather(*(_hydrate(post.id) for post in posts), return_exceptions=True)

        comment_lists: list[list[FeedComment]] = []
        for post, res in zip(posts, results):
            if isinstance(res, FeedError):
                logger.warning(f"Feed assembly aborted hydrating post {post.id}: {res}")
                raise BatchAbortError(f"Hydrating comments of post {post.id} failed", post_id=post.id) from res
            if isinstance(res, BaseException):
                raise res
            comment_lists.append(res)
        return comment_lists

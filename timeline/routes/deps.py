"""FastAPI dependencies wiring shared clients into services.

The Redis client and the SQLAlchemy pool are process-wide (created in the
app lifespan); services are cheap per-request wrappers around them.
"""

from fastapi import Header

from timeline.services.comment_counts import CountResolver
from timeline.services.comment_hydrator import CommentHydrator
from timeline.services.feed import FeedAssembler
from timeline.settings import get_settings
from timeline.stores.comments import SqlCommentStore
from timeline.stores.postgres import get_session_factory
from timeline.stores.posts import PostStore
from timeline.stores.redis import get_cache


def get_feed_assembler() -> FeedAssembler:
    """Build the feed assembler over the shared cache and DB pool."""
    settings = get_settings()
    cache = get_cache()
    store = SqlCommentStore(get_session_factory())
    return FeedAssembler(
        CountResolver(cache, store, ttl=settings.comment_cache_ttl),
        CommentHydrator(cache, store, ttl=settings.comment_cache_ttl),
        hydration_concurrency=settings.feed_hydration_concurrency,
        timeout=settings.feed_assembly_timeout,
    )


def get_post_store() -> PostStore:
    """Build the post listing store over the shared DB pool."""
    return PostStore(get_session_factory(), page_size=get_settings().feed_page_size)


def get_csrf_token(x_csrf_token: str = Header(default="")) -> str:
    """CSRF token issued by the session layer, echoed onto feed entries."""
    return x_csrf_token

"""Timeline endpoints.

GET /v1/posts            - Latest page (truncated comments), or the page
                           at/before ?max_created_at= for "load more".
GET /v1/posts/{post_id}  - Single post with every comment.

Routers are thin: listing queries come from PostStore, hydration from FeedAssembler.
"""

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Path, Query

from timeline.routes.deps import get_csrf_token, get_feed_assembler, get_post_store
from timeline.schemas import FeedPost, FeedResponse
from timeline.services.feed import FeedAssembler
from timeline.stores.posts import PostStore

router = APIRouter()


@router.get("", response_model=FeedResponse)
async def list_posts(
    max_created_at: datetime | None = Query(
        default=None,
        description="Only posts created at or before this ISO 8601 instant",
        examples=["2026-01-02T15:04:05+09:00"],
    ),
    assembler: FeedAssembler = Depends(get_feed_assembler),
    post_store: PostStore = Depends(get_post_store),
    csrf_token: str = Depends(get_csrf_token),
) -> FeedResponse:
    """Get a timeline page with the latest comments of each post.

    Raises:
        HTTPException 404: If a paginated request has no more posts.
    """
    if max_created_at is None:
        rows = await post_store.list_recent()
    else:
        rows = await post_store.list_before(max_created_at)

    posts = await assembler.assemble(rows, csrf_token, full=False)

    if max_created_at is not None and not posts:
        raise HTTPException(
            status_code=404,
            detail={
                "error": {
                    "code": "NO_MORE_POSTS",
                    "message": "No posts at or before the given time",
                    "detail": {"max_created_at": max_created_at.isoformat()},
                }
            },
        )

    return FeedResponse(posts=posts)


@router.get("/{post_id}", response_model=FeedPost)
async def get_post(
    post_id: int = Path(description="Post ID", ge=1),
    assembler: FeedAssembler = Depends(get_feed_assembler),
    post_store: PostStore = Depends(get_post_store),
    csrf_token: str = Depends(get_csrf_token),
) -> FeedPost:
    """Get a single post with all of its comments.

    Raises:
        HTTPException 404: If the post does not exist or its author is banned.
    """
    row = await post_store.get_post(post_id)
    if row is None:
        raise HTTPException(
            status_code=404,
            detail={
                "error": {
                    "code": "POST_NOT_FOUND",
                    "message": f"Post {post_id} not found",
                    "detail": {"post_id": post_id},
                }
            },
        )

    posts = await assembler.assemble([row], csrf_token, full=True)
    return posts[0]

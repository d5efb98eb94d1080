"""User page endpoint.

GET /v1/users/{account_name} - The user's latest posts plus activity counters.
"""

from fastapi import APIRouter, Depends, HTTPException, Path

from timeline.routes.deps import get_csrf_token, get_feed_assembler, get_post_store
from timeline.schemas import AccountStats, UserPageResponse
from timeline.services.feed import FeedAssembler
from timeline.stores.posts import PostStore

router = APIRouter()


@router.get("/{account_name}", response_model=UserPageResponse)
async def get_user_page(
    account_name: str = Path(
        description="Account name",
        min_length=1,
        max_length=64,
        pattern=r"^[a-zA-Z0-9_]+$",
    ),
    assembler: FeedAssembler = Depends(get_feed_assembler),
    post_store: PostStore = Depends(get_post_store),
    csrf_token: str = Depends(get_csrf_token),
) -> UserPageResponse:
    """Get a user's page.

    Raises:
        HTTPException 404: If the account does not exist or is banned.
    """
    user = await post_store.get_active_user(account_name)
    if user is None:
        raise HTTPException(
            status_code=404,
            detail={
                "error": {
                    "code": "USER_NOT_FOUND",
                    "message": f"User {account_name} not found",
                    "detail": {"account_name": account_name},
                }
            },
        )

    rows = await post_store.list_for_user(user.id)
    posts = await assembler.assemble(rows, csrf_token, full=False)
    counters = await post_store.get_account_stats(user.id)

    return UserPageResponse(
        account_name=user.account_name,
        stats=AccountStats(
            post_count=counters.post_count,
            comment_count=counters.comment_count,
            commented_count=counters.commented_count,
        ),
        posts=posts,
    )

"""Schemas for feed assembly and the feed endpoints.

`CommentAuthor` and `FeedComment` double as the cache wire format: the
comment list cache entry is a JSON array of `FeedComment` dumped with field
names (not aliases), newest first.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class CommentAuthor(BaseModel):
    """Author snapshot embedded by value in a comment."""

    id: int
    account_name: str = Field(alias="accountName")
    authority: int = 0
    del_flg: int = Field(alias="delFlg", default=0)
    created_at: datetime = Field(alias="createdAt")

    model_config = {"populate_by_name": True}


class FeedComment(BaseModel):
    """A comment with its author, as rendered in a feed entry."""

    id: int
    post_id: int = Field(alias="postId")
    user_id: int = Field(alias="userId")
    comment: str
    created_at: datetime = Field(alias="createdAt")
    user: CommentAuthor

    model_config = {"populate_by_name": True}


class RawPost(BaseModel):
    """Post row as selected by the listing queries, before hydration."""

    id: int
    user_id: int = Field(alias="userId")
    body: str
    mime: str
    account_name: str = Field(alias="accountName")
    created_at: datetime | None = Field(alias="createdAt", default=None)

    model_config = {"populate_by_name": True}


class PostAuthor(BaseModel):
    """Minimal author info carried by a feed entry."""

    account_name: str = Field(alias="accountName")

    model_config = {"populate_by_name": True}


class FeedPost(BaseModel):
    """Fully hydrated feed entry."""

    id: int
    user_id: int = Field(alias="userId")
    body: str
    mime: str
    created_at: datetime | None = Field(alias="createdAt", default=None)
    user: PostAuthor
    comment_count: int = Field(alias="commentCount", ge=0)
    comments: list[FeedComment] = Field(default_factory=list)
    csrf_token: str = Field(alias="csrfToken")

    model_config = {"populate_by_name": True}


class FeedResponse(BaseModel):
    """Response payload for timeline listings."""

    posts: list[FeedPost]


class AccountStats(BaseModel):
    """Activity counters shown on a user page."""

    post_count: int = Field(alias="postCount", ge=0)
    comment_count: int = Field(alias="commentCount", ge=0)
    commented_count: int = Field(alias="commentedCount", ge=0)

    model_config = {"populate_by_name": True}


class UserPageResponse(BaseModel):
    """Response payload for GET /v1/users/{account_name}."""

    account_name: str = Field(alias="accountName")
    stats: AccountStats
    posts: list[FeedPost]

    model_config = {"populate_by_name": True}

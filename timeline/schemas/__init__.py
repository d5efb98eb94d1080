"""Pydantic schemas for API request/response validation."""

from timeline.schemas.common import ErrorDetail, ErrorResponse
from timeline.schemas.feed import (
    AccountStats,
    CommentAuthor,
    FeedComment,
    FeedPost,
    FeedResponse,
    PostAuthor,
    RawPost,
    UserPageResponse,
)

__all__ = [
    "ErrorDetail",
    "ErrorResponse",
    "AccountStats",
    "CommentAuthor",
    "FeedComment",
    "FeedPost",
    "FeedResponse",
    "PostAuthor",
    "RawPost",
    "UserPageResponse",
]

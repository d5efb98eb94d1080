"""Comment queries backing the feed.

Two primitives:
- COUNT(*) of comments for one post
- comments JOIN users for one post, newest first, optionally LIMITed

Rows are mapped to `FeedComment` explicitly; the author is embedded from the
joined columns, never looked up separately.
"""

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from timeline.errors import StoreQueryError
from timeline.models import Comment, User
from timeline.schemas import CommentAuthor, FeedComment


def row_to_comment(row: Mapping[str, Any]) -> FeedComment:
    """Map one joined comment/user row into a comment with its author snapshot."""
    return FeedComment(
        id=row["c_id"],
        post_id=row["post_id"],
        user_id=row["user_id"],
        comment=row["comment"],
        created_at=row["c_created_at"],
        user=CommentAuthor(
            id=row["u_id"],
            account_name=row["account_name"],
            authority=row["authority"],
            del_flg=row["del_flg"],
            created_at=row["u_created_at"],
        ),
    )


class SqlCommentStore:
    """Comment store over the shared SQLAlchemy async session factory."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def count_comments(self, post_id: int) -> int:
        query = select(func.count()).select_from(Comment).where(Comment.post_id == post_id)
        try:
            async with self._session_factory() as session:
                result = await session.execute(query)
                return int(result.scalar_one())
        except SQLAlchemyError as e:
            raise StoreQueryError(f"Counting comments for post {post_id} failed: {e}") from e

    async def fetch_comments(
        self,
        post_id: int,
        limit: int | None = None,
        created_before: datetime | None = None,
    ) -> list[FeedComment]:
        """Fetch comments of a post joined with their authors.

        Args:
            post_id: Post identifier.
            limit: Max rows (None = all comments).
            created_before: Only comments created at or before this instant.

        Returns:
            Comments ordered by created_at DESC (newest first).
        """
        query = (
            select(
                Comment.id.label("c_id"),
                Comment.post_id,
                Comment.user_id,
                Comment.comment,
                Comment.created_at.label("c_created_at"),
                User.id.label("u_id"),
                User.account_name,
                User.authority,
                User.del_flg,
                User.created_at.label("u_created_at"),
            )
            .join(User, Comment.user_id == User.id)
            .where(Comment.post_id == post_id)
        )
        if created_before is not None:
            query = query.where(Comment.created_at <= created_before)
        query = query.order_by(Comment.created_at.desc())
        if limit is not None:
            query = query.limit(limit)

        try:
            async with self._session_factory() as session:
                result = await session.execute(query)
                rows = result.mappings().all()
        except SQLAlchemyError as e:
            raise StoreQueryError(f"Fetching comments for post {post_id} failed: {e}") from e

        return [row_to_comment(row) for row in rows]

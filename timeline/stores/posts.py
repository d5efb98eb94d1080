"""Post listing queries.

These select the raw rows handed to the feed assembler. Posts whose author is
soft-deleted (del_flg = 1) never appear in a listing.
"""

from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import Select, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from timeline.errors import StoreQueryError
from timeline.models import Comment, Post, User
from timeline.schemas import RawPost


@dataclass(frozen=True)
class ActiveUser:
    id: int
    account_name: str


@dataclass(frozen=True)
class AccountCounters:
    post_count: int
    comment_count: int
    commented_count: int


def _listing_query() -> Select:
    return (
        select(
            Post.id,
            Post.user_id,
            Post.body,
            Post.mime,
            Post.created_at,
            User.account_name,
        )
        .join(User, Post.user_id == User.id)
        .where(User.del_flg == 0)
    )


class PostStore:
    """Listing queries over the shared SQLAlchemy async session factory."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession], page_size: int = 20) -> None:
        self._session_factory = session_factory
        self._page_size = page_size

    async def list_recent(self) -> list[RawPost]:
        """Latest page of the global timeline."""
        return await self._fetch_page(_listing_query())

    async def list_before(self, max_created_at: datetime) -> list[RawPost]:
        """Timeline page of posts created at or before `max_created_at`."""
        return await self._fetch_page(_listing_query().where(Post.created_at <= max_created_at))

    async def list_for_user(self, user_id: int) -> list[RawPost]:
        """Latest page of one user's posts."""
        return await self._fetch_page(_listing_query().where(Post.user_id == user_id))

    async def get_post(self, post_id: int) -> RawPost | None:
        posts = await self._fetch_page(_listing_query().where(Post.id == post_id))
        return posts[0] if posts else None

    async def get_active_user(self, account_name: str) -> ActiveUser | None:
        query = select(User.id, User.account_name).where(
            User.account_name == account_name,
            User.del_flg == 0,
        )
        try:
            async with self._session_factory() as session:
                row = (await session.execute(query)).first()
        except SQLAlchemyError as e:
            raise StoreQueryError(f"Looking up user {account_name!r} failed: {e}") from e
        if row is None:
            return None
        return ActiveUser(id=row.id, account_name=row.account_name)

    async def get_account_stats(self, user_id: int) -> AccountCounters:
        """Count the user's posts, the comments they wrote, and comments on their posts."""
        own_posts = select(Post.id).where(Post.user_id == user_id)
        post_count_q = select(func.count()).select_from(Post).where(Post.user_id == user_id)
        comment_count_q = select(func.count()).select_from(Comment).where(Comment.user_id == user_id)
        commented_count_q = (
            select(func.count()).select_from(Comment).where(Comment.post_id.in_(own_posts))
        )
        try:
            async with self._session_factory() as session:
                post_count = (await session.execute(post_count_q)).scalar_one()
                comment_count = (await session.execute(comment_count_q)).scalar_one()
                commented_count = (await session.execute(commented_count_q)).scalar_one()
        except SQLAlchemyError as e:
            raise StoreQueryError(f"Counting activity for user {user_id} failed: {e}") from e

        return AccountCounters(
            post_count=int(post_count),
            comment_count=int(comment_count),
            commented_count=int(commented_count),
        )

    async def _fetch_page(self, query: Select) -> list[RawPost]:
        query = query.order_by(Post.created_at.desc()).limit(self._page_size)
        try:
            async with self._session_factory() as session:
                rows = (await session.execute(query)).mappings().all()
        except SQLAlchemyError as e:
            raise StoreQueryError(f"Listing posts failed: {e}") from e

        return [
            RawPost(
                id=row["id"],
                user_id=row["user_id"],
                body=row["body"],
                mime=row["mime"],
                account_name=row["account_name"],
                created_at=row["created_at"],
            )
            for row in rows
        ]

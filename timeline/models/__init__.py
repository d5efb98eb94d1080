"""SQLAlchemy ORM models.

Models represent database tables:
- users: Accounts (soft-deleted via del_flg)
- posts: Timeline entries
- comments: Immutable comments on posts
"""

from timeline.models.comment import Comment
from timeline.models.post import Post
from timeline.models.user import User

__all__ = ["Comment", "Post", "User"]

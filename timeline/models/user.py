"""User model.

Accounts are never hard-deleted by the application; banning sets del_flg.
"""

from datetime import datetime

from sqlalchemy import DateTime, SmallInteger, String, func
from sqlalchemy.orm import Mapped, mapped_column

from timeline.stores.postgres import Base


class User(Base):
    """Account that authors posts and comments."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    account_name: Mapped[str] = mapped_column(String(64), unique=True)

    # Written by the auth layer; never exposed through feed payloads
    passhash: Mapped[str] = mapped_column(String(128))

    authority: Mapped[int] = mapped_column(SmallInteger, default=0)
    del_flg: Mapped[int] = mapped_column(SmallInteger, default=0)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )

    def __repr__(self) -> str:
        return f"<User {self.account_name}>"

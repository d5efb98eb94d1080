"""SQL issued by the comment and post stores, compiled for PostgreSQL."""

import re
from datetime import datetime, timezone

import pytest
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import OperationalError

from timeline.errors import StoreQueryError
from timeline.stores.comments import SqlCommentStore
from timeline.stores.posts import PostStore

CUTOFF = datetime(2026, 2, 1, 8, 0, tzinfo=timezone.utc)


class StubResult:
    def __init__(self, rows=(), scalar=0) -> None:
        self.rows = list(rows)
        self.scalar = scalar

    def mappings(self):
        return self

    def all(self):
        return list(self.rows)

    def first(self):
        return self.rows[0] if self.rows else None

    def scalar_one(self):
        return self.scalar


class CapturingSession:
    """Async session stand-in that records every statement it executes."""

    def __init__(self, result: StubResult | None = None, error: Exception | None = None) -> None:
        self.result = result or StubResult()
        self.error = error
        self.statements: list = []

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return False

    async def execute(self, statement):
        self.statements.append(statement)
        if self.error is not None:
            raise self.error
        return self.result


def _compile(statement) -> tuple[str, dict]:
    compiled = statement.compile(dialect=postgresql.dialect())
    return " ".join(str(compiled).split()), compiled.params


@pytest.fixture
def session() -> CapturingSession:
    return CapturingSession()


@pytest.fixture
def comment_store(session) -> SqlCommentStore:
    return SqlCommentStore(lambda: session)


@pytest.fixture
def post_store(session) -> PostStore:
    return PostStore(lambda: session, page_size=7)


async def test_truncated_comment_fetch_is_newest_first_with_limit(comment_store, session):
    await comment_store.fetch_comments(5, limit=3)

    sql, params = _compile(session.statements[0])
    assert "FROM comments JOIN users ON comments.user_id = users.id" in sql
    assert "WHERE comments.post_id = " in sql
    assert re.search(r"ORDER BY (comments\.created_at|c_created_at) DESC LIMIT ", sql)
    assert 5 in params.values()
    assert 3 in params.values()


async def test_full_comment_fetch_has_no_limit(comment_store, session):
    await comment_store.fetch_comments(5)

    sql, _ = _compile(session.statements[0])
    assert re.search(r"ORDER BY (comments\.created_at|c_created_at) DESC$", sql)
    assert "LIMIT" not in sql


async def test_comment_fetch_applies_inclusive_cutoff(comment_store, session):
    await comment_store.fetch_comments(5, limit=3, created_before=CUTOFF)

    sql, params = _compile(session.statements[0])
    assert "comments.created_at <= " in sql
    assert CUTOFF in params.values()
    assert sql.index("comments.created_at <= ") < sql.index("ORDER BY")


async def test_comment_fetch_maps_joined_rows(session):
    row = {
        "c_id": 11,
        "post_id": 5,
        "user_id": 3,
        "comment": "nice",
        "c_created_at": CUTOFF,
        "u_id": 3,
        "account_name": "mary",
        "authority": 0,
        "del_flg": 0,
        "u_created_at": CUTOFF,
    }
    session.result = StubResult(rows=[row])

    comments = await SqlCommentStore(lambda: session).fetch_comments(5, limit=3)

    assert [(c.id, c.user.account_name) for c in comments] == [(11, "mary")]


async def test_count_query_filters_by_post(comment_store, session):
    session.result = StubResult(scalar=4)

    assert await comment_store.count_comments(5) == 4

    sql, params = _compile(session.statements[0])
    assert sql.startswith("SELECT count(*) AS count_1 FROM comments WHERE comments.post_id = ")
    assert list(params.values()) == [5]


async def test_recent_listing_skips_deleted_authors_and_pages(post_store, session):
    await post_store.list_recent()

    sql, params = _compile(session.statements[0])
    assert "FROM posts JOIN users ON posts.user_id = users.id" in sql
    assert "WHERE users.del_flg = " in sql
    assert re.search(r"ORDER BY posts\.created_at DESC LIMIT \S+$", sql)
    assert 7 in params.values()
    assert 0 in params.values()


async def test_listing_before_cutoff_is_inclusive(post_store, session):
    await post_store.list_before(CUTOFF)

    sql, params = _compile(session.statements[0])
    assert re.search(r"WHERE users\.del_flg = \S+ AND posts\.created_at <= ", sql)
    assert CUTOFF in params.values()
    assert "ORDER BY posts.created_at DESC LIMIT " in sql


async def test_user_listing_filters_by_author(post_store, session):
    await post_store.list_for_user(42)

    sql, params = _compile(session.statements[0])
    assert re.search(r"WHERE users\.del_flg = \S+ AND posts\.user_id = ", sql)
    assert 42 in params.values()
    assert "LIMIT" in sql


async def test_commented_count_covers_comments_on_own_posts(post_store, session):
    await post_store.get_account_stats(42)

    sql, _ = _compile(session.statements[2])
    assert "comments.post_id IN (SELECT posts.id FROM posts WHERE posts.user_id = " in sql


async def test_database_errors_become_store_query_errors(session):
    session.error = OperationalError("SELECT 1", {}, Exception("server closed the connection"))

    with pytest.raises(StoreQueryError):
        await SqlCommentStore(lambda: session).fetch_comments(5)
    with pytest.raises(StoreQueryError):
        await PostStore(lambda: session).list_recent()

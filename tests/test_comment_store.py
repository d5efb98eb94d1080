from datetime import datetime, timezone

from timeline.stores.comments import row_to_comment


def test_row_to_comment_embeds_author_from_joined_columns() -> None:
    c_created = datetime(2026, 3, 1, 9, 30, tzinfo=timezone.utc)
    u_created = datetime(2025, 12, 24, tzinfo=timezone.utc)
    row = {
        "c_id": 11,
        "post_id": 5,
        "user_id": 3,
        "comment": "nice",
        "c_created_at": c_created,
        "u_id": 3,
        "account_name": "mary",
        "authority": 1,
        "del_flg": 0,
        "u_created_at": u_created,
    }

    comment = row_to_comment(row)

    assert (comment.id, comment.post_id, comment.user_id) == (11, 5, 3)
    assert comment.comment == "nice"
    assert comment.created_at == c_created
    assert comment.user.id == 3
    assert comment.user.account_name == "mary"
    assert comment.user.authority == 1
    assert comment.user.del_flg == 0
    assert comment.user.created_at == u_created

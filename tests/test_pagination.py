import uuid

import pytest
from sqlalchemy import select

from socialnet.core.pagination import (
    CursorPagination,
    OffsetPagination,
    cursor_params,
    offset_params,
    page_fields,
    paginate_cursor,
    paginate_offset,
)
from socialnet.db.models.post import Post
from socialnet.db.models.user import User


@pytest.fixture()
async def posts(make_user, make_post):
    author = await make_user("writer")
    # p0 is the oldest
    return [await make_post(author, f"post {i}", minutes=i) for i in range(5)]


async def ids(db, options=None, newest_first=True):
    rows = await paginate_cursor(db, select(Post), Post, options, newest_first=newest_first)
    return [row.id for row in rows]


async def test_head_of_collection_is_newest_first(db, posts):
    assert await ids(db) == [p.id for p in reversed(posts)]
    assert await ids(db, CursorPagination(limit=2)) == [posts[4].id, posts[3].id]


async def test_after_returns_strictly_older_records(db, posts):
    result = await ids(db, CursorPagination(after=posts[3].id))

    assert posts[3].id not in result
    assert result == [posts[2].id, posts[1].id, posts[0].id]
    assert await ids(db, CursorPagination(after=posts[3].id, limit=2)) == [posts[2].id, posts[1].id]


async def test_before_returns_closest_newer_records_in_order(db, posts):
    assert await ids(db, CursorPagination(before=posts[1].id, limit=2)) == [posts[3].id, posts[2].id]
    assert await ids(db, CursorPagination(before=posts[1].id)) == [posts[4].id, posts[3].id, posts[2].id]


async def test_exhausted_ranges_are_empty(db, posts):
    assert await ids(db, CursorPagination(before=posts[4].id)) == []
    assert await ids(db, CursorPagination(after=posts[0].id)) == []


async def test_unknown_cursor_gives_empty_page(db, posts):
    assert await ids(db, CursorPagination(after=uuid.uuid4())) == []
    assert await ids(db, CursorPagination(before=uuid.uuid4())) == []


async def test_after_wins_when_both_cursors_given(db, posts):
    result = await ids(db, CursorPagination(before=posts[1].id, after=posts[3].id))
    assert result == [posts[2].id, posts[1].id, posts[0].id]


async def test_equal_timestamps_break_ties_by_id(db, make_user, make_post):
    author = await make_user("twins")
    a = await make_post(author, "a", minutes=1)
    b = await make_post(author, "b", minutes=1)
    first, second = sorted([a, b], key=lambda post: post.id)

    assert await ids(db) == [first.id, second.id]
    assert await ids(db, CursorPagination(after=first.id)) == [second.id]
    assert await ids(db, CursorPagination(before=second.id)) == [first.id]


async def test_oldest_first_ordering(db, posts):
    assert await ids(db, newest_first=False) == [p.id for p in posts]
    assert await ids(db, CursorPagination(after=posts[1].id, limit=2), newest_first=False) == [
        posts[2].id,
        posts[3].id,
    ]


async def test_offset_pagination(db, make_user):
    for name in ["u1", "u2", "u3"]:
        await make_user(name)
    stmt = select(User).order_by(User.username)

    rows = await paginate_offset(db, stmt, OffsetPagination(skip=1, limit=1))
    assert [user.username for user in rows] == ["u2"]
    assert len(await paginate_offset(db, stmt)) == 3


def test_page_fields_accepts_models_and_raw_query_values():
    cursor = uuid.uuid4()

    assert page_fields(None) == {}
    assert page_fields(CursorPagination(limit=2, after=cursor)) == {"limit": 2, "after": cursor}
    assert page_fields(cursor_params(limit="3", before=None, after="abc")) == {"limit": "3", "after": "abc"}
    assert page_fields(offset_params(limit=None, skip="1")) == {"skip": "1"}

import uuid

import pytest

from socialnet.core.visibility import VisibilityResolver, as_uuid
from socialnet.db.models.user import Visibility


@pytest.mark.parametrize(
    "visibility, follows, expected",
    [
        (Visibility.PUBLIC, False, True),
        (Visibility.PUBLIC, True, True),
        (Visibility.PRIVATE, False, False),
        (Visibility.PRIVATE, True, True),
        (Visibility.HIDDEN, False, False),
        (Visibility.HIDDEN, True, False),
    ],
)
async def test_can_view_matrix(db, make_user, make_follow, visibility, follows, expected):
    viewer = await make_user("viewer")
    author = await make_user("author", visibility)
    if follows:
        await make_follow(viewer, author)

    assert await VisibilityResolver(db).can_view(viewer.id, author.id) is expected


async def test_can_view_unknown_or_malformed_author(db, make_user):
    viewer = await make_user("viewer")
    resolver = VisibilityResolver(db)

    assert await resolver.can_view(viewer.id, uuid.uuid4()) is False
    assert await resolver.can_view(viewer.id, "not-a-uuid") is False
    assert await resolver.can_view(None, None) is False


async def test_self_access_only_through_explicit_helper(db, make_user):
    hidden = await make_user("hermit", Visibility.HIDDEN)
    resolver = VisibilityResolver(db)

    assert await resolver.can_view(hidden.id, hidden.id) is False
    assert await resolver.can_view_or_is_self(hidden.id, hidden.id) is True
    assert await resolver.can_view_or_is_self(str(hidden.id), hidden.id) is True


async def test_is_following_is_directional(db, make_user, make_follow):
    a = await make_user("a")
    b = await make_user("b")
    await make_follow(a, b)
    resolver = VisibilityResolver(db)

    assert await resolver.is_following(a.id, b.id) is True
    assert await resolver.is_following(b.id, a.id) is False
    assert await resolver.is_following(a.id, "garbage") is False


async def test_user_exists(db, make_user):
    user = await make_user("someone")
    resolver = VisibilityResolver(db)

    assert await resolver.user_exists(user.id)
    assert await resolver.user_exists(str(user.id))
    assert not await resolver.user_exists(uuid.uuid4())
    assert not await resolver.user_exists("")


def test_as_uuid():
    value = uuid.uuid4()
    assert as_uuid(value) is value
    assert as_uuid(str(value)) == value
    assert as_uuid("nope") is None
    assert as_uuid(None) is None

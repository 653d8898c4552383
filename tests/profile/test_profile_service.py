import uuid

import pytest
import sqlalchemy as sa

from tether.auth.models import User
from tether.auth.service import authenticate_user, register_user
from tether.exceptions import (
    FieldsNotUpdatable,
    InvalidCredentials,
    NoUsersFound,
    UserAlreadyExists,
    UsernameTaken,
    UserNotFound,
)
from tether.posts.models import Post
from tether.posts.service import create_post
from tether.profile.service import delete_profile, get_profile, list_users, update_profile
from tether.social_graph import service as social_svc
from tether.social_graph.models import Bookmark, Follow


async def _user(session, name: str) -> User:
    return await register_user(
        session, username=name, email=f"{name}@example.com", password="secret1"
    )


@pytest.mark.asyncio
async def test_get_profile_unknown(db_session) -> None:
    with pytest.raises(UserNotFound):
        await get_profile(db_session, uuid.uuid4())


@pytest.mark.asyncio
async def test_list_users_empty_store(db_session) -> None:
    with pytest.raises(NoUsersFound):
        await list_users(db_session)


@pytest.mark.asyncio
async def test_list_users_in_creation_order(db_session) -> None:
    first = await _user(db_session, "first")
    second = await _user(db_session, "second")
    users = await list_users(db_session)
    assert [u.id for u in users] == [first.id, second.id]


@pytest.mark.asyncio
async def test_update_bio_and_image(db_session) -> None:
    user = await _user(db_session, "patchy")
    updated = await update_profile(
        db_session, user.id, {"bio": "hello there", "profile_image": "http://img/1.png"}
    )
    assert updated.bio == "hello there"
    assert updated.profile_image == "http://img/1.png"
    assert updated.username == "patchy"


@pytest.mark.asyncio
async def test_update_password_is_rehashed(db_session) -> None:
    user = await _user(db_session, "rotate")
    old_hash = user.password_hash

    await update_profile(db_session, user.id, {"password": "brand-new"})
    assert user.password_hash != old_hash
    assert user.password_hash != "brand-new"

    assert (await authenticate_user(db_session, "rotate@example.com", "brand-new")).id == user.id
    with pytest.raises(InvalidCredentials):
        await authenticate_user(db_session, "rotate@example.com", "secret1")


@pytest.mark.asyncio
async def test_update_email_conflict(db_session) -> None:
    await _user(db_session, "taken")
    user = await _user(db_session, "mover")
    with pytest.raises(UserAlreadyExists):
        await update_profile(db_session, user.id, {"email": "TAKEN@example.com"})


@pytest.mark.asyncio
async def test_update_username_conflict(db_session) -> None:
    await _user(db_session, "taken")
    user = await _user(db_session, "mover")
    with pytest.raises(UsernameTaken):
        await update_profile(db_session, user.id, {"username": "taken"})


@pytest.mark.asyncio
async def test_update_email_is_stored_lowercase(db_session) -> None:
    user = await _user(db_session, "casey")
    updated = await update_profile(db_session, user.id, {"email": "CASEY@example.com"})
    assert updated.email == "casey@example.com"


@pytest.mark.asyncio
async def test_update_rejects_relationship_fields(db_session) -> None:
    user = await _user(db_session, "sneaky")
    with pytest.raises(FieldsNotUpdatable) as exc_info:
        await update_profile(db_session, user.id, {"followings": []})
    assert exc_info.value.status_code == 400
    assert "followings" in exc_info.value.detail


@pytest.mark.asyncio
async def test_delete_removes_every_reference(db_session) -> None:
    gone = await _user(db_session, "gone")
    friend = await _user(db_session, "friend")
    fan = await _user(db_session, "fan")

    await social_svc.toggle_follow(db_session, gone.id, friend.id)
    await social_svc.toggle_follow(db_session, fan.id, gone.id)
    own_post = await create_post(db_session, gone.id, content="mine")
    friend_post = await create_post(db_session, friend.id, content="theirs")
    await social_svc.toggle_bookmark(db_session, gone.id, friend_post.id)
    await social_svc.toggle_bookmark(db_session, fan.id, own_post.id)

    await delete_profile(db_session, gone.id)

    with pytest.raises(UserNotFound):
        await get_profile(db_session, gone.id)
    graphs = await social_svc.get_graphs(db_session, [friend.id, fan.id])
    assert graphs[friend.id].followers == []
    assert graphs[fan.id].followings == []
    assert graphs[fan.id].bookmarked_posts == []

    follows = await db_session.execute(
        sa.select(sa.func.count()).select_from(Follow).where(
            sa.or_(Follow.follower_id == gone.id, Follow.following_id == gone.id)
        )
    )
    assert follows.scalar_one() == 0
    bookmarks = await db_session.execute(
        sa.select(sa.func.count()).select_from(Bookmark).where(Bookmark.user_id == gone.id)
    )
    assert bookmarks.scalar_one() == 0
    posts = await db_session.execute(
        sa.select(sa.func.count()).select_from(Post).where(Post.owner_id == gone.id)
    )
    assert posts.scalar_one() == 0
    # Other users' content survives
    remaining = await db_session.execute(sa.select(Post.id).where(Post.id == friend_post.id))
    assert remaining.scalar_one() == friend_post.id


@pytest.mark.asyncio
async def test_delete_unknown_user(db_session) -> None:
    with pytest.raises(UserNotFound):
        await delete_profile(db_session, uuid.uuid4())

import logging
import uuid
from datetime import datetime, timezone

import pytest
import sqlalchemy as sa
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from tether.auth.models import User
from tether.auth.service import register_user
from tether.exceptions import (
    CannotFollowSelf,
    ConcurrentGraphUpdate,
    CurrentUserNotFound,
    FollowTargetsNotFound,
    PostNotFound,
)
from tether.posts.service import create_post
from tether.social_graph import service as svc
from tether.social_graph.models import Bookmark, Follow
from tether_shared.database import Base


async def _user(session, name: str) -> User:
    return await register_user(
        session, username=name, email=f"{name}@example.com", password="secret1"
    )


# ── Follow toggle ─────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_follow_updates_both_sides(db_session) -> None:
    a = await _user(db_session, "a")
    b = await _user(db_session, "b")

    result = await svc.toggle_follow(db_session, a.id, b.id)
    assert result.following is True
    assert result.target.id == b.id
    assert result.follower_count == 1

    graphs = await svc.get_graphs(db_session, [a.id, b.id])
    assert graphs[a.id].followings == [b.id]
    assert graphs[a.id].followers == []
    assert graphs[b.id].followers == [a.id]
    assert graphs[b.id].followings == []


@pytest.mark.asyncio
async def test_toggle_twice_restores_state(db_session) -> None:
    a = await _user(db_session, "a")
    b = await _user(db_session, "b")

    await svc.toggle_follow(db_session, a.id, b.id)
    result = await svc.toggle_follow(db_session, a.id, b.id)
    assert result.following is False
    assert result.follower_count == 0

    graphs = await svc.get_graphs(db_session, [a.id, b.id])
    assert graphs[a.id].followings == []
    assert graphs[b.id].followers == []


@pytest.mark.asyncio
async def test_follow_is_directed(db_session) -> None:
    a = await _user(db_session, "a")
    b = await _user(db_session, "b")

    await svc.toggle_follow(db_session, a.id, b.id)
    await svc.toggle_follow(db_session, b.id, a.id)
    # Unfollowing in one direction leaves the other edge alone
    await svc.toggle_follow(db_session, a.id, b.id)

    graph_a = await svc.get_graph(db_session, a.id)
    graph_b = await svc.get_graph(db_session, b.id)
    assert graph_a.followings == []
    assert graph_a.followers == [b.id]
    assert graph_b.followings == [a.id]
    assert graph_b.followers == []


@pytest.mark.asyncio
async def test_cannot_follow_self(db_session) -> None:
    a = await _user(db_session, "a")
    with pytest.raises(CannotFollowSelf):
        await svc.toggle_follow(db_session, a.id, a.id)
    assert (await svc.get_graph(db_session, a.id)).followings == []


@pytest.mark.asyncio
async def test_follow_missing_target(db_session) -> None:
    a = await _user(db_session, "a")
    with pytest.raises(FollowTargetsNotFound):
        await svc.toggle_follow(db_session, a.id, uuid.uuid4())
    assert (await svc.get_graph(db_session, a.id)).followings == []


@pytest.mark.asyncio
async def test_follow_missing_caller(db_session) -> None:
    b = await _user(db_session, "b")
    with pytest.raises(FollowTargetsNotFound):
        await svc.toggle_follow(db_session, uuid.uuid4(), b.id)


@pytest.mark.asyncio
async def test_lost_insert_race_is_conflict(db_session, monkeypatch) -> None:
    a = await _user(db_session, "a")
    b = await _user(db_session, "b")
    await svc.toggle_follow(db_session, a.id, b.id)

    # Another writer inserted the edge between the existence check and the insert
    async def _stale_check(*_args) -> bool:
        return False

    monkeypatch.setattr(svc, "_follow_exists", _stale_check)
    with pytest.raises(ConcurrentGraphUpdate):
        await svc.toggle_follow(db_session, a.id, b.id)


@pytest.mark.asyncio
async def test_lost_delete_race_is_conflict(db_session, monkeypatch) -> None:
    a = await _user(db_session, "a")
    b = await _user(db_session, "b")

    # Another writer removed the edge between the existence check and the delete
    async def _stale_check(*_args) -> bool:
        return True

    monkeypatch.setattr(svc, "_follow_exists", _stale_check)
    with pytest.raises(ConcurrentGraphUpdate):
        await svc.toggle_follow(db_session, a.id, b.id)


# ── Friends ───────────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_friends_in_following_order(db_session) -> None:
    a = await _user(db_session, "a")
    b = await _user(db_session, "b")
    c = await _user(db_session, "c")

    await svc.toggle_follow(db_session, a.id, c.id)
    await svc.toggle_follow(db_session, a.id, b.id)

    friends = await svc.get_friends(db_session, a.id)
    assert [f.id for f in friends] == [c.id, b.id]


@pytest.mark.asyncio
async def test_friends_empty(db_session) -> None:
    a = await _user(db_session, "a")
    assert await svc.get_friends(db_session, a.id) == []


@pytest.mark.asyncio
async def test_friends_missing_caller(db_session) -> None:
    with pytest.raises(CurrentUserNotFound):
        await svc.get_friends(db_session, uuid.uuid4())


@pytest.mark.asyncio
async def test_friends_skips_dangling_ids(settings, caplog) -> None:
    # Plain engine: SQLite leaves foreign keys unenforced, so a dangling edge can exist
    engine = create_async_engine(settings.database_url)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    factory = async_sessionmaker(engine, expire_on_commit=False)
    try:
        async with factory() as session:
            a = await _user(session, "a")
            b = await _user(session, "b")
            gone = await _user(session, "gone")
            session.add(Follow(follower_id=a.id, following_id=gone.id))
            await session.flush()
            session.add(Follow(follower_id=a.id, following_id=b.id))
            await session.flush()
            await session.execute(sa.delete(User).where(User.id == gone.id))

            with caplog.at_level(logging.WARNING, logger="tether.social_graph.service"):
                friends = await svc.get_friends(session, a.id)

            assert [f.id for f in friends] == [b.id]
            assert "Friend not found" in caplog.text
            assert str(gone.id) in caplog.text
    finally:
        await engine.dispose()


@pytest.mark.asyncio
async def test_same_timestamp_edges_keep_insertion_order(db_session) -> None:
    me = await _user(db_session, "me")
    targets = [await _user(db_session, f"t{i}") for i in range(6)]
    author = await _user(db_session, "author")
    posts = [await create_post(db_session, author.id, content=f"p{i}") for i in range(6)]
    stamp = datetime(2024, 1, 1, tzinfo=timezone.utc)

    for target in reversed(targets):
        db_session.add(Follow(follower_id=me.id, following_id=target.id, created_at=stamp))
        await db_session.flush()
    for post in reversed(posts):
        db_session.add(Bookmark(user_id=me.id, post_id=post.id, created_at=stamp))
        await db_session.flush()

    graph = await svc.get_graph(db_session, me.id)
    assert graph.followings == [t.id for t in reversed(targets)]
    assert graph.bookmarked_posts == [p.id for p in reversed(posts)]
    friends = await svc.get_friends(db_session, me.id)
    assert [f.id for f in friends] == [t.id for t in reversed(targets)]


# ── Non-followed ──────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_non_followed_excludes_self_and_followed(db_session) -> None:
    a = await _user(db_session, "a")
    b = await _user(db_session, "b")
    c = await _user(db_session, "c")
    await svc.toggle_follow(db_session, a.id, b.id)

    users = await svc.get_non_followed_users(db_session, a.id)
    assert [u.id for u in users] == [c.id]


@pytest.mark.asyncio
async def test_non_followed_capped_at_five(db_session) -> None:
    me = await _user(db_session, "me")
    others = [await _user(db_session, f"user{i}") for i in range(8)]
    await svc.toggle_follow(db_session, me.id, others[0].id)
    await svc.toggle_follow(db_session, me.id, others[1].id)

    users = await svc.get_non_followed_users(db_session, me.id)
    ids = {u.id for u in users}
    assert len(users) == 5
    assert me.id not in ids
    assert others[0].id not in ids
    assert others[1].id not in ids


@pytest.mark.asyncio
async def test_non_followed_empty_when_following_everyone(db_session) -> None:
    a = await _user(db_session, "a")
    b = await _user(db_session, "b")
    await svc.toggle_follow(db_session, a.id, b.id)
    assert await svc.get_non_followed_users(db_session, a.id) == []


# ── Bookmarks ─────────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_bookmark_toggle(db_session) -> None:
    author = await _user(db_session, "author")
    reader = await _user(db_session, "reader")
    post = await create_post(db_session, author.id, content="hello")

    first = await svc.toggle_bookmark(db_session, reader.id, post.id)
    assert first.bookmarked is True
    assert first.user.id == reader.id
    assert (await svc.get_graph(db_session, reader.id)).bookmarked_posts == [post.id]
    # The author's record is never touched
    assert (await svc.get_graph(db_session, author.id)).bookmarked_posts == []

    second = await svc.toggle_bookmark(db_session, reader.id, post.id)
    assert second.bookmarked is False
    assert (await svc.get_graph(db_session, reader.id)).bookmarked_posts == []


@pytest.mark.asyncio
async def test_bookmark_missing_post(db_session) -> None:
    reader = await _user(db_session, "reader")
    with pytest.raises(PostNotFound):
        await svc.toggle_bookmark(db_session, reader.id, uuid.uuid4())

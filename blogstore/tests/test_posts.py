import asyncio

import pytest
from sqlalchemy import select, func

from blogstore.db.session import Database
from blogstore.exceptions import ConstraintViolationError, NotFoundError, AggregateUpdateError
from blogstore.models import Post, CommentStatus
from blogstore.schemas.user_schema import UserCreate
from blogstore.schemas.post_schema import PostCreate
from blogstore.services import hooks
from blogstore.services.post_service import PostService
from blogstore.services.user_service import UserService

@pytest.mark.asyncio
async def test_create_post(post_service, user_service, test_user):
    """Test creating a post"""
    post = await post_service.create_post(
        test_user.id,
        PostCreate(title="Hello", content="This is a test post")
    )

    assert post.id is not None
    assert post.user_id == test_user.id
    assert post.comment_status == CommentStatus.NO_COMMENTS.value

    user = await user_service.get_user(test_user.id)
    assert user.post_count == 1

@pytest.mark.asyncio
async def test_post_count_follows_each_insert(post_service, user_service, test_user):
    for expected in range(1, 4):
        await post_service.create_post(
            test_user.id,
            PostCreate(title=f"Post {expected}", content="...")
        )
        user = await user_service.get_user(test_user.id)
        live_posts = await post_service.db.scalar(
            select(func.count(Post.id)).where(Post.user_id == test_user.id)
        )
        assert user.post_count == live_posts == expected

@pytest.mark.asyncio
async def test_create_post_for_unknown_user(post_service):
    with pytest.raises(ConstraintViolationError):
        await post_service.create_post(999, PostCreate(title="Orphan", content="..."))

@pytest.mark.asyncio
async def test_failed_counter_update_rolls_back_post(post_service, user_service, test_user, monkeypatch):
    user_id = test_user.id

    async def failing_hook(db, post):
        raise AggregateUpdateError("post_count", "user", post.user_id, "boom")

    monkeypatch.setattr(hooks, "on_post_created", failing_hook)

    with pytest.raises(AggregateUpdateError):
        await post_service.create_post(user_id, PostCreate(title="Lost", content="..."))

    posts = await post_service.db.scalar(select(func.count(Post.id)))
    assert posts == 0
    assert (await user_service.get_user(user_id)).post_count == 0

@pytest.mark.asyncio
async def test_concurrent_post_creation_loses_no_increment(tmp_path, test_settings, pwd_context):
    database = Database(test_settings, url=f"sqlite+aiosqlite:///{tmp_path / 'concurrent.db'}")
    await database.init_db()
    try:
        async with database.session() as db:
            user = await UserService(db, pwd_context).create_user(UserCreate(
                username="busy",
                email="busy@example.com",
                password="Password123!"
            ))

        async def create(i):
            async with database.session() as db:
                await PostService(db).create_post(user.id, PostCreate(title=f"Post {i}", content="..."))

        await asyncio.gather(*(create(i) for i in range(10)))

        async with database.session() as db:
            refreshed = await UserService(db, pwd_context).get_user(user.id)
            live_posts = await db.scalar(select(func.count(Post.id)).where(Post.user_id == user.id))
            assert refreshed.post_count == live_posts == 10
    finally:
        await database.close()

@pytest.mark.asyncio
async def test_get_post_not_found(post_service):
    with pytest.raises(NotFoundError):
        await post_service.get_post(123)

@pytest.mark.asyncio
async def test_most_commented_post(post_service, test_user, add_comments):
    posts = []
    for title, count in (("three", 3), ("five", 5), ("one", 1)):
        post = await post_service.create_post(test_user.id, PostCreate(title=title, content="..."))
        await add_comments(post.id, test_user.id, count)
        posts.append(post)

    result = await post_service.get_post_with_most_comments()

    assert result.post.id == posts[1].id
    assert result.post.title == "five"
    assert result.comment_count == 5

@pytest.mark.asyncio
async def test_most_commented_post_tie_goes_to_lowest_id(post_service, test_user, add_comments):
    first = await post_service.create_post(test_user.id, PostCreate(title="a", content="..."))
    second = await post_service.create_post(test_user.id, PostCreate(title="b", content="..."))
    await add_comments(second.id, test_user.id, 2)
    await add_comments(first.id, test_user.id, 2)

    result = await post_service.get_post_with_most_comments()

    assert result.post.id == first.id
    assert result.comment_count == 2

@pytest.mark.asyncio
async def test_most_commented_post_ignores_deleted_comments(
    post_service, comment_service, test_user, add_comments
):
    first = await post_service.create_post(test_user.id, PostCreate(title="a", content="..."))
    second = await post_service.create_post(test_user.id, PostCreate(title="b", content="..."))
    await add_comments(first.id, test_user.id, 3)
    await add_comments(second.id, test_user.id, 2)
    await comment_service.delete_comments_by_post(first.id)

    result = await post_service.get_post_with_most_comments()

    assert result.post.id == second.id
    assert result.comment_count == 2

@pytest.mark.asyncio
async def test_most_commented_post_without_comments(post_service, test_post):
    result = await post_service.get_post_with_most_comments()

    assert result.post.id == test_post.id
    assert result.comment_count == 0

@pytest.mark.asyncio
async def test_most_commented_post_without_posts(post_service):
    with pytest.raises(NotFoundError):
        await post_service.get_post_with_most_comments()

@pytest.mark.asyncio
async def test_posts_with_most_comments_returns_all_ties(post_service, test_user, add_comments):
    posts = []
    for count in (2, 4, 4, 1):
        post = await post_service.create_post(test_user.id, PostCreate(title=str(count), content="..."))
        await add_comments(post.id, test_user.id, count)
        posts.append(post)

    results = await post_service.get_posts_with_most_comments()

    assert [r.post.id for r in results] == [posts[1].id, posts[2].id]
    assert all(r.comment_count == 4 for r in results)

@pytest.mark.asyncio
async def test_posts_with_most_comments_empty(post_service, test_post):
    assert await post_service.get_posts_with_most_comments() == []

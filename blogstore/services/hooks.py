"""
Aggregate maintenance run inside the caller's transaction.

Callers flush the triggering write, call the matching hook and only then
commit, so a hook failure rolls back the write together with the aggregate.
"""
from sqlalchemy import select, update, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from blogstore.exceptions import AggregateUpdateError
from blogstore.models import Post, User, Comment, CommentStatus, alive

logger = logging.getLogger(__name__)

async def count_live_comments(db: AsyncSession, post_id: int) -> int:
    stmt = select(func.count(Comment.id)).where(
        Comment.post_id == post_id,
        alive(Comment)
    )
    result = await db.execute(stmt)
    return result.scalar_one()

async def recompute_comment_status(db: AsyncSession, post_id: int) -> CommentStatus:
    """Count live comments of a post and store the matching status"""
    try:
        count = await count_live_comments(db, post_id)
        status = CommentStatus.for_count(count)
        stmt = update(Post).where(Post.id == post_id).values(
            comment_status=status.value
        ).execution_options(synchronize_session=False)
        result = await db.execute(stmt)
    except SQLAlchemyError as e:
        logger.error(f"Error recomputing comment status of post {post_id}: {e}")
        raise AggregateUpdateError("comment_status", "post", post_id, str(e)) from e

    if result.rowcount == 0:
        raise AggregateUpdateError("comment_status", "post", post_id, "post does not exist")
    return status

async def on_post_created(db: AsyncSession, post: Post) -> None:
    """Increment the owner's post_count with a store-evaluated expression"""
    try:
        stmt = update(User).where(User.id == post.user_id).values(
            post_count=User.post_count + 1
        ).execution_options(synchronize_session=False)
        result = await db.execute(stmt)
    except SQLAlchemyError as e:
        logger.error(f"Error incrementing post count of user {post.user_id}: {e}")
        raise AggregateUpdateError("post_count", "user", post.user_id, str(e)) from e

    if result.rowcount == 0:
        raise AggregateUpdateError("post_count", "user", post.user_id, "user does not exist")

async def on_comment_created(db: AsyncSession, comment: Comment) -> CommentStatus:
    return await recompute_comment_status(db, comment.post_id)

async def on_comment_deleted(db: AsyncSession, comment: Comment) -> CommentStatus:
    # The soft delete must already be flushed so the count excludes this row
    return await recompute_comment_status(db, comment.post_id)

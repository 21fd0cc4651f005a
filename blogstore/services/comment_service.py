from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete
from sqlalchemy.exc import IntegrityError
import logging

from blogstore.exceptions import ConstraintViolationError, NotFoundError
from blogstore.models import Comment, alive
from blogstore.models.base import utcnow
from blogstore.schemas.comment_schema import CommentCreate
from blogstore.services import hooks

logger = logging.getLogger(__name__)

class CommentService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_comment(self, post_id: int, comment_data: CommentCreate) -> Comment:
        """Create a comment and recompute the post's comment status"""
        comment = Comment(
            post_id=post_id,
            user_id=comment_data.user_id,
            content=comment_data.content
        )

        try:
            self.db.add(comment)
            await self.db.flush()
            await hooks.on_comment_created(self.db, comment)
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.error(f"Error creating comment on post {post_id}: {e}")
            raise ConstraintViolationError(
                f"Could not create comment on post {post_id}: {e.orig}"
            ) from e
        except Exception as e:
            logger.error(f"Error creating comment on post {post_id}: {e}")
            await self.db.rollback()
            raise

        await self.db.refresh(comment)
        logger.info(f"Created comment {comment.id} by user {comment.user_id} on post {post_id}")
        return comment

    async def get_comment(self, comment_id: int) -> Comment:
        """Get a live comment by ID"""
        stmt = select(Comment).where(Comment.id == comment_id, alive(Comment))
        result = await self.db.execute(stmt)
        comment = result.scalar_one_or_none()
        if not comment:
            raise NotFoundError("comment", comment_id)
        return comment

    async def count_comments(self, post_id: int) -> int:
        """Number of live comments on a post"""
        return await hooks.count_live_comments(self.db, post_id)

    async def delete_comment(self, comment_id: int) -> None:
        """Soft delete a comment and recompute the post's comment status"""
        comment = await self.get_comment(comment_id)

        try:
            comment.deleted_at = utcnow()
            await self.db.flush()
            await hooks.on_comment_deleted(self.db, comment)
            await self.db.commit()
        except Exception as e:
            logger.error(f"Error deleting comment {comment_id}: {e}")
            await self.db.rollback()
            raise

        logger.info(f"Deleted comment {comment_id} from post {comment.post_id}")

    async def delete_comments_by_post(self, post_id: Optional[int]) -> int:
        """Soft delete every live comment of a post.

        The delete hook runs once per comment, as a row-by-row delete would
        fire it. Everything commits together. A falsy post_id is ignored so
        an unset parameter can never match every comment.

        Returns:
            Number of comments deleted.
        """
        if not post_id:
            return 0

        stmt = select(Comment).where(
            Comment.post_id == post_id,
            alive(Comment)
        ).order_by(Comment.id)
        comments = (await self.db.execute(stmt)).scalars().all()

        try:
            for comment in comments:
                comment.deleted_at = utcnow()
                await self.db.flush()
                await hooks.on_comment_deleted(self.db, comment)
            await self.db.commit()
        except Exception as e:
            logger.error(f"Error deleting comments of post {post_id}: {e}")
            await self.db.rollback()
            raise

        logger.info(f"Deleted {len(comments)} comments from post {post_id}")
        return len(comments)

    async def restore_comments_by_post(self, post_id: Optional[int]) -> int:
        """Undo soft deletion of a post's comments; returns how many came back"""
        if not post_id:
            return 0

        stmt = select(Comment).where(
            Comment.post_id == post_id,
            Comment.deleted_at.is_not(None)
        )
        comments = (await self.db.execute(stmt)).scalars().all()
        if not comments:
            return 0

        try:
            for comment in comments:
                comment.deleted_at = None
            await self.db.flush()
            await hooks.recompute_comment_status(self.db, post_id)
            await self.db.commit()
        except Exception as e:
            logger.error(f"Error restoring comments of post {post_id}: {e}")
            await self.db.rollback()
            raise

        logger.info(f"Restored {len(comments)} comments on post {post_id}")
        return len(comments)

    async def purge_deleted_comments(self, post_id: Optional[int] = None) -> int:
        """Physically remove soft-deleted comments, optionally for one post only"""
        delete_stmt = delete(Comment).where(Comment.deleted_at.is_not(None))
        if post_id:
            delete_stmt = delete_stmt.where(Comment.post_id == post_id)

        try:
            result = await self.db.execute(
                delete_stmt.execution_options(synchronize_session=False)
            )
            purged = result.rowcount
            await self.db.commit()
        except Exception as e:
            logger.error(f"Error purging deleted comments: {e}")
            await self.db.rollback()
            raise

        logger.info(f"Purged {purged} deleted comments")
        return purged

from typing import List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, and_, desc, func
from sqlalchemy.exc import IntegrityError
import logging

from blogstore.exceptions import ConstraintViolationError, NotFoundError
from blogstore.models import Post, Comment, CommentStatus, alive
from blogstore.schemas.post_schema import PostCreate, PostInDB, PostCommentCount
from blogstore.services import hooks

logger = logging.getLogger(__name__)

class PostService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_post(self, user_id: int, post_data: PostCreate) -> Post:
        """Create a post and bump the owner's post_count in the same transaction"""
        post = Post(
            user_id=user_id,
            title=post_data.title,
            content=post_data.content,
            comment_status=CommentStatus.NO_COMMENTS.value
        )

        try:
            self.db.add(post)
            await self.db.flush()
            await hooks.on_post_created(self.db, post)
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.error(f"Error creating post for user {user_id}: {e}")
            raise ConstraintViolationError(
                f"Could not create post for user {user_id}: {e.orig}"
            ) from e
        except Exception as e:
            logger.error(f"Error creating post for user {user_id}: {e}")
            await self.db.rollback()
            raise

        await self.db.refresh(post)
        logger.info(f"Created post {post.id} by user {user_id}")
        return post

    async def get_post(self, post_id: int) -> Post:
        """Get a live post by ID"""
        stmt = select(Post).where(Post.id == post_id, alive(Post)).execution_options(
            populate_existing=True
        )
        result = await self.db.execute(stmt)
        post = result.scalar_one_or_none()
        if not post:
            raise NotFoundError("post", post_id)
        return post

    async def refresh_comment_status(self, post_id: int) -> CommentStatus:
        """Recompute and persist a post's comment status"""
        try:
            status = await hooks.recompute_comment_status(self.db, post_id)
            await self.db.commit()
        except Exception as e:
            logger.error(f"Error refreshing comment status of post {post_id}: {e}")
            await self.db.rollback()
            raise
        return status

    def _comment_count_subquery(self):
        return select(
            Comment.post_id.label("post_id"),
            func.count(Comment.id).label("comment_count")
        ).join(
            Post, Post.id == Comment.post_id
        ).where(
            alive(Comment),
            alive(Post)
        ).group_by(
            Comment.post_id
        ).subquery("comment_stats")

    async def get_post_with_most_comments(self) -> PostCommentCount:
        """Get the post with the most live comments.

        A single grouped query; ties go to the lowest post id.
        """
        comment_count = func.count(Comment.id).label("comment_count")
        stmt = select(
            Post,
            comment_count
        ).outerjoin(
            Comment, and_(Comment.post_id == Post.id, alive(Comment))
        ).where(
            alive(Post)
        ).group_by(
            Post.id
        ).order_by(
            desc(comment_count), Post.id
        ).limit(1).execution_options(populate_existing=True)

        result = await self.db.execute(stmt)
        row = result.first()
        if not row:
            raise NotFoundError("post")

        return PostCommentCount(
            post=PostInDB.model_validate(row.Post),
            comment_count=row.comment_count
        )

    async def get_posts_with_most_comments(self) -> List[PostCommentCount]:
        """Get every post sharing the highest live comment count, by post id"""
        stats = self._comment_count_subquery()
        max_count = select(func.max(stats.c.comment_count)).correlate(None).scalar_subquery()

        stmt = select(
            Post,
            stats.c.comment_count
        ).join(
            stats, stats.c.post_id == Post.id
        ).where(
            alive(Post),
            stats.c.comment_count == max_count
        ).order_by(Post.id).execution_options(populate_existing=True)

        result = await self.db.execute(stmt)
        return [
            PostCommentCount(
                post=PostInDB.model_validate(row.Post),
                comment_count=row.comment_count
            )
            for row in result.all()
        ]

from collections import defaultdict
from typing import Optional
from passlib.context import CryptContext
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
import logging

from blogstore.exceptions import ConstraintViolationError, NotFoundError
from blogstore.models import User, Post, Comment, alive
from blogstore.schemas.user_schema import UserCreate, UserWithPosts
from blogstore.schemas.post_schema import PostWithComments
from blogstore.schemas.comment_schema import CommentInDB

logger = logging.getLogger(__name__)

def build_password_context(rounds: int) -> CryptContext:
    """bcrypt context at the given cost (Settings.BCRYPT_ROUNDS)"""
    return CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)

class UserService:
    def __init__(self, db: AsyncSession, pwd_context: CryptContext):
        self.db = db
        self.pwd_context = pwd_context

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        """Verify a password against its hash"""
        return self.pwd_context.verify(plain_password, hashed_password)

    def get_password_hash(self, password: str) -> str:
        """Hash a password"""
        return self.pwd_context.hash(password)

    async def create_user(self, user_data: UserCreate) -> User:
        """Create a new user"""
        user = User(
            username=user_data.username,
            email=user_data.email,
            password_hash=self.get_password_hash(user_data.password),
            post_count=0
        )

        try:
            self.db.add(user)
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.error(f"Error creating user {user_data.username}: {e}")
            raise ConstraintViolationError(
                f"Could not create user {user_data.username!r}: {e.orig}"
            ) from e

        await self.db.refresh(user)
        logger.info(f"Created user {user.id} ({user.username})")
        return user

    async def get_user(self, user_id: int) -> User:
        """Get a live user by ID"""
        stmt = select(User).where(User.id == user_id, alive(User)).execution_options(
            populate_existing=True
        )
        result = await self.db.execute(stmt)
        user = result.scalar_one_or_none()
        if not user:
            raise NotFoundError("user", user_id)
        return user

    async def get_user_by_username(self, username: str) -> Optional[User]:
        stmt = select(User).where(User.username == username, alive(User))
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_user_with_posts_and_comments(self, user_id: int) -> UserWithPosts:
        """Get a user with all of its posts and, nested in each post, its comments.

        Runs three statements no matter how many posts or comments exist:
        the user, the user's posts, and the comments of all those posts.
        Comments are then grouped by post_id in memory.
        """
        user = await self.get_user(user_id)

        posts_stmt = select(Post).where(
            Post.user_id == user_id,
            alive(Post)
        ).order_by(Post.id).execution_options(populate_existing=True)
        posts = (await self.db.execute(posts_stmt)).scalars().all()

        comments_by_post = defaultdict(list)
        if posts:
            comments_stmt = select(Comment).where(
                Comment.post_id.in_([post.id for post in posts]),
                alive(Comment)
            ).order_by(Comment.id)
            for comment in (await self.db.execute(comments_stmt)).scalars():
                comments_by_post[comment.post_id].append(
                    CommentInDB.model_validate(comment)
                )

        return UserWithPosts(
            id=user.id,
            username=user.username,
            email=user.email,
            post_count=user.post_count,
            created_at=user.created_at,
            updated_at=user.updated_at,
            posts=[
                PostWithComments(
                    id=post.id,
                    title=post.title,
                    content=post.content,
                    user_id=post.user_id,
                    comment_status=post.comment_status,
                    created_at=post.created_at,
                    updated_at=post.updated_at,
                    comments=comments_by_post[post.id],
                )
                for post in posts
            ],
        )

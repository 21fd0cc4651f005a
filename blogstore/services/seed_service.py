"""
Sample data for development databases
"""
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from blogstore.models import User
from blogstore.schemas.user_schema import UserCreate
from blogstore.schemas.post_schema import PostCreate
from blogstore.schemas.comment_schema import CommentCreate
from blogstore.services.user_service import UserService
from blogstore.services.post_service import PostService
from blogstore.services.comment_service import CommentService

logger = logging.getLogger(__name__)

SAMPLE_USER = {
    "username": "root",
    "email": "root@example.com",
    "password": "Password123!",
}

# (title, content, comment count)
SAMPLE_POSTS = [
    ("First post", "Content of the first post", 3),
    ("Second post", "Content of the second post", 2),
]

async def seed_sample_data(db: AsyncSession, user_service: UserService) -> User:
    """Create the sample user with two posts (3 and 2 comments).

    Does nothing when the sample user already exists.
    """
    existing = await user_service.get_user_by_username(SAMPLE_USER["username"])
    if existing:
        logger.info(f"Sample user {existing.username} already exists, skipping seed")
        return existing

    user = await user_service.create_user(UserCreate(**SAMPLE_USER))
    post_service = PostService(db)
    comment_service = CommentService(db)

    for title, content, comment_total in SAMPLE_POSTS:
        post = await post_service.create_post(user.id, PostCreate(title=title, content=content))
        for i in range(1, comment_total + 1):
            await comment_service.create_comment(
                post.id,
                CommentCreate(content=f"Comment {i} on {title.lower()}", user_id=user.id)
            )

    logger.info(f"Seeded sample data for user {user.id}")
    return await user_service.get_user(user.id)

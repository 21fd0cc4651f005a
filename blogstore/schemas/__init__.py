"""
Pydantic schemas for blogstore input and output
"""
from blogstore.schemas.comment_schema import CommentCreate, CommentInDB
from blogstore.schemas.post_schema import PostCreate, PostInDB, PostWithComments, PostCommentCount
from blogstore.schemas.user_schema import UserCreate, UserInDB, UserWithPosts

__all__ = [
    'CommentCreate',
    'CommentInDB',
    'PostCreate',
    'PostInDB',
    'PostWithComments',
    'PostCommentCount',
    'UserCreate',
    'UserInDB',
    'UserWithPosts',
]

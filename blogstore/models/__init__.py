"""
Models package for blogstore
"""
from blogstore.models.base import Base, BaseModel, alive
from blogstore.models.user import User
from blogstore.models.post import Post, CommentStatus
from blogstore.models.comment import Comment

__all__ = [
    'Base',
    'BaseModel',
    'alive',
    'User',
    'Post',
    'CommentStatus',
    'Comment',
]

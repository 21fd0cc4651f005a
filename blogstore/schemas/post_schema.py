from pydantic import BaseModel, ConfigDict, Field
from typing import List
from datetime import datetime

from blogstore.models.post import CommentStatus
from blogstore.schemas.comment_schema import CommentInDB

class PostBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    content: str = Field(..., min_length=1)

class PostCreate(PostBase):
    pass

class PostInDB(PostBase):
    model_config = ConfigDict(from_attributes=True)
    
    id: int
    user_id: int
    comment_status: CommentStatus = CommentStatus.NO_COMMENTS
    created_at: datetime
    updated_at: datetime

class PostWithComments(PostInDB):
    comments: List[CommentInDB] = []

class PostCommentCount(BaseModel):
    """A post together with its number of live comments"""
    post: PostInDB
    comment_count: int

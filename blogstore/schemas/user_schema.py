from pydantic import BaseModel, EmailStr, ConfigDict, Field
from typing import Optional, List
from datetime import datetime

from blogstore.schemas.post_schema import PostWithComments

class UserBase(BaseModel):
    username: str = Field(..., min_length=1, max_length=50)
    email: Optional[EmailStr] = None

class UserCreate(UserBase):
    password: str = Field(..., min_length=1)

class UserInDB(UserBase):
    model_config = ConfigDict(from_attributes=True)
    
    id: int
    post_count: int = 0
    created_at: datetime
    updated_at: datetime

class UserWithPosts(UserInDB):
    """A user with every live post, each carrying its live comments"""
    posts: List[PostWithComments] = []

from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime

class CommentBase(BaseModel):
    content: str = Field(..., min_length=1)

class CommentCreate(CommentBase):
    user_id: int

class CommentInDB(CommentBase):
    model_config = ConfigDict(from_attributes=True)
    
    id: int
    post_id: int
    user_id: int
    created_at: datetime
    updated_at: datetime

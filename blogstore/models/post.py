from enum import Enum
from sqlalchemy import Column, String, Text, Integer, ForeignKey
from sqlalchemy.orm import relationship
from blogstore.models.base import BaseModel

class CommentStatus(str, Enum):
    """Denormalized flag telling whether a post has live comments"""
    HAS_COMMENTS = "has_comments"
    NO_COMMENTS = "no_comments"

    @classmethod
    def for_count(cls, count: int) -> "CommentStatus":
        return cls.HAS_COMMENTS if count > 0 else cls.NO_COMMENTS

class Post(BaseModel):
    __tablename__ = "posts"
    
    title = Column(String(200), nullable=False)
    content = Column(Text, nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    comment_status = Column(
        String(20),
        default=CommentStatus.NO_COMMENTS.value,
        server_default=CommentStatus.NO_COMMENTS.value,
        nullable=False
    )
    
    # Relationships
    user = relationship("User", back_populates="posts")
    comments = relationship("Comment", back_populates="post")

    def __repr__(self) -> str:
        return f"Post(id={self.id!r}, title={self.title!r}, user_id={self.user_id!r})"

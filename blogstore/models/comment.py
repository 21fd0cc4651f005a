from sqlalchemy import Column, Text, Integer, ForeignKey
from sqlalchemy.orm import relationship
from blogstore.models.base import BaseModel

class Comment(BaseModel):
    __tablename__ = "comments"
    
    content = Column(Text, nullable=False)
    post_id = Column(Integer, ForeignKey("posts.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    
    # Relationships
    post = relationship("Post", back_populates="comments")
    user = relationship("User", back_populates="comments")

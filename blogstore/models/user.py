from sqlalchemy import Column, String, Integer
from sqlalchemy.orm import relationship
from blogstore.models.base import BaseModel

class User(BaseModel):
    __tablename__ = "users"
    
    username = Column(String(50), unique=True, nullable=False)
    email = Column(String(100), unique=True)
    password_hash = Column(String(255), nullable=False)
    
    # Denormalized count, maintained by services.hooks.on_post_created
    post_count = Column(Integer, default=0, server_default="0", nullable=False)
    
    # Relationships
    posts = relationship("Post", back_populates="user")
    comments = relationship("Comment", back_populates="user")

    def __repr__(self) -> str:
        return f"User(id={self.id!r}, username={self.username!r})"

from sqlalchemy import Column, Integer, DateTime
from datetime import datetime, timezone
from blogstore.db.base import Base

def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)

class BaseModel(Base):
    __abstract__ = True
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)
    # Soft delete marker; NULL means live
    deleted_at = Column(DateTime, nullable=True, index=True)

def alive(model):
    """Criterion selecting rows of ``model`` that are not soft deleted"""
    return model.deleted_at.is_(None)

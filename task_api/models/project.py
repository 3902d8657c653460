from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Text
from ..core.database import Base
from .base import new_id, utcnow


class Project(Base):
    """Project model for database"""
    __tablename__ = "projects"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)

    # Owner is fixed at creation
    owner_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)

    # Soft delete flag
    is_deleted = Column(Boolean, default=False, nullable=False, index=True)

    def __repr__(self):
        return f"<Project(id={self.id}, name='{self.name}', owner_id={self.owner_id})>"

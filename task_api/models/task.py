import enum
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Text
from ..core.database import Base
from .base import new_id, utcnow


class TaskStatus(str, enum.Enum):
    """Task status enumeration"""
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class Task(Base):
    """Task model for database"""
    __tablename__ = "tasks"

    id = Column(String(36), primary_key=True, default=new_id)
    title = Column(String(200), nullable=False, index=True)
    description = Column(Text, nullable=False, default="")

    # Task status as string
    status = Column(
        String(20),
        default=TaskStatus.PENDING.value,
        nullable=False,
        index=True
    )

    # Parent project is fixed at creation
    project_id = Column(String(36), ForeignKey("projects.id"), nullable=False, index=True)

    # Timestamps, naive UTC
    created_at = Column(DateTime, default=utcnow, nullable=False)
    due_date = Column(DateTime, nullable=True, index=True)

    # Soft delete flag
    is_deleted = Column(Boolean, default=False, nullable=False, index=True)

    def __repr__(self):
        return f"<Task(id={self.id}, title='{self.title}', status='{self.status}')>"

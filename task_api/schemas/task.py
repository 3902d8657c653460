"""
Pydantic schemas for tasks.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from ..models.task import TaskStatus
from .common import UtcDatetime


def _require_title(value: Optional[str]) -> str:
    if value is None or not value.strip():
        raise ValueError("Task title is required")
    return value


def _require_status(value: Optional[str]) -> TaskStatus:
    if value is None:
        raise ValueError("Task status is required")
    try:
        return TaskStatus(value)
    except ValueError:
        raise ValueError("Invalid status value")


class TaskCreate(BaseModel):
    """Schema for creating a task"""
    title: Optional[str] = Field(None, validate_default=True, description="Task title")
    description: Optional[str] = Field("", description="Task description")
    status: Optional[str] = Field(None, validate_default=True, description="Task status")
    due_date: Optional[datetime] = Field(None, description="Task due date")

    @field_validator("title")
    @classmethod
    def title_required(cls, value: Optional[str]) -> str:
        return _require_title(value)

    @field_validator("description")
    @classmethod
    def null_description_is_empty(cls, value: Optional[str]) -> str:
        return value or ""

    @field_validator("status")
    @classmethod
    def status_valid(cls, value: Optional[str]) -> TaskStatus:
        return _require_status(value)


class TaskUpdate(BaseModel):
    """Schema for updating a task; only the fields sent are changed"""
    title: Optional[str] = Field(None, description="Task title")
    description: Optional[str] = Field(None, description="Task description")
    status: Optional[str] = Field(None, description="Task status")
    due_date: Optional[datetime] = Field(None, description="Task due date")

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: Optional[str]) -> str:
        return _require_title(value)

    @field_validator("status")
    @classmethod
    def status_valid(cls, value: Optional[str]) -> TaskStatus:
        return _require_status(value)


class TaskBulkStatusUpdate(BaseModel):
    """Schema for setting one status on many tasks"""
    task_ids: List[str] = Field(..., alias="taskIDs", description="Tasks to update")
    status: Optional[str] = Field(None, validate_default=True, description="Target status")

    @field_validator("status")
    @classmethod
    def status_valid(cls, value: Optional[str]) -> TaskStatus:
        if value is None:
            raise ValueError("Invalid status value")
        return _require_status(value)


class TaskResponse(BaseModel):
    """Schema for task response"""
    model_config = ConfigDict(from_attributes=True)

    id: str = Field(..., validation_alias=AliasChoices("id", "_id"), serialization_alias="_id")
    title: str
    description: str = ""
    status: TaskStatus
    due_date: Optional[UtcDatetime] = None
    project: str = Field(..., validation_alias=AliasChoices("project_id", "project"))
    created_at: UtcDatetime
    is_deleted: bool


class TaskEnvelope(BaseModel):
    task: TaskResponse


class PaginationResponse(BaseModel):
    """Pagination metadata for task listings"""
    model_config = ConfigDict(from_attributes=True)

    current_page: int = Field(..., validation_alias=AliasChoices("current_page", "currentPage"), serialization_alias="currentPage")
    page_size: int = Field(..., validation_alias=AliasChoices("page_size", "pageSize"), serialization_alias="pageSize")
    total_count: int = Field(..., validation_alias=AliasChoices("total_count", "totalCount"), serialization_alias="totalCount")
    total_pages: int = Field(..., validation_alias=AliasChoices("total_pages", "totalPages"), serialization_alias="totalPages")


class TaskList(BaseModel):
    """Schema for paginated task list"""
    tasks: List[TaskResponse]
    pagination: PaginationResponse

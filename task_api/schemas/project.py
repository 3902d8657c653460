from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from .common import UtcDatetime


def _require_name(value: Optional[str]) -> str:
    if value is None or not value.strip():
        raise ValueError("Project name is required")
    return value


class ProjectCreate(BaseModel):
    """Schema for creating a project"""
    name: Optional[str] = Field(None, validate_default=True, description="Project name")
    description: Optional[str] = Field(None, description="Project description")

    @field_validator("name")
    @classmethod
    def name_required(cls, value: Optional[str]) -> str:
        return _require_name(value)


class ProjectUpdate(BaseModel):
    """Schema for updating a project; only the fields sent are changed"""
    name: Optional[str] = Field(None, description="Project name")
    description: Optional[str] = Field(None, description="Project description")

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: Optional[str]) -> str:
        return _require_name(value)


class ProjectResponse(BaseModel):
    """Schema for project response"""
    model_config = ConfigDict(from_attributes=True)

    id: str = Field(..., validation_alias=AliasChoices("id", "_id"), serialization_alias="_id")
    name: str
    description: Optional[str] = None
    owner: str = Field(..., validation_alias=AliasChoices("owner_id", "owner"))
    created_at: UtcDatetime
    is_deleted: bool


class ProjectEnvelope(BaseModel):
    project: ProjectResponse


class ProjectList(BaseModel):
    projects: List[ProjectResponse]


class MessageResponse(BaseModel):
    message: str

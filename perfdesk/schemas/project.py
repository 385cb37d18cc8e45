from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from perfdesk.models.project import ProjectStatus, TaskStatus
from perfdesk.schemas.common import normalize_status, reject_nulls

_PROJECT_NON_NULLABLE = ("name", "description", "status")
_TASK_NON_NULLABLE = ("title", "status")


class ProjectCreate(BaseModel):
    name: str = Field(min_length=1)
    description: str = Field(min_length=1)
    status: ProjectStatus = ProjectStatus.ACTIVE
    member_ids: List[int] = []

    @field_validator("status", mode="before")
    @classmethod
    def coerce_status(cls, value):
        return normalize_status(value)


class ProjectUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = Field(default=None, min_length=1)
    status: Optional[ProjectStatus] = None
    member_ids: Optional[List[int]] = None

    @field_validator("status", mode="before")
    @classmethod
    def coerce_status(cls, value):
        return normalize_status(value)

    @model_validator(mode="before")
    @classmethod
    def check_not_null(cls, values):
        return reject_nulls(values, _PROJECT_NON_NULLABLE)


class TaskCreate(BaseModel):
    title: str = Field(min_length=1)
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.TODO
    assigned_to: Optional[int] = None

    @field_validator("status", mode="before")
    @classmethod
    def coerce_status(cls, value):
        return normalize_status(value)


class TaskUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    assigned_to: Optional[int] = None

    @field_validator("status", mode="before")
    @classmethod
    def coerce_status(cls, value):
        return normalize_status(value)

    @model_validator(mode="before")
    @classmethod
    def check_not_null(cls, values):
        return reject_nulls(values, _TASK_NON_NULLABLE)


class TaskResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: Optional[str] = None
    status: TaskStatus
    assigned_to: Optional[int] = None


class ProjectResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str
    status: ProjectStatus
    created_by: int
    member_ids: List[int] = []
    tasks: List[TaskResponse] = []
    created_at: Optional[datetime] = None

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from perfdesk.models.kpi import KpiStatus
from perfdesk.schemas.common import normalize_status, reject_nulls

_NON_NULLABLE = ("kpi_name", "metric", "target", "achieved_value", "weightage", "status")


class KpiCreate(BaseModel):
    kpi_name: str = Field(min_length=1)
    metric: str = Field(min_length=1)
    target: float = Field(ge=0)
    achieved_value: float = Field(default=0, ge=0)
    weightage: float = Field(default=0, ge=0, le=100)
    status: Optional[KpiStatus] = None
    description: Optional[str] = None
    unit: Optional[str] = None
    period: Optional[str] = None
    deadline: Optional[date] = None
    progress_notes: Optional[str] = None
    assigned_to: Optional[int] = None

    @field_validator("status", mode="before")
    @classmethod
    def coerce_status(cls, value):
        return normalize_status(value)


class KpiUpdate(BaseModel):
    """Partial update. Which fields stick depends on the caller's role."""
    model_config = ConfigDict(extra="forbid")

    achieved_value: Optional[float] = Field(default=None, ge=0)
    status: Optional[KpiStatus] = None
    progress_notes: Optional[str] = None
    qualitative_score: Optional[float] = Field(default=None, ge=0, le=100)
    remarks: Optional[str] = None
    supervisor_comments: Optional[str] = None
    assigned_by: Optional[int] = None
    kpi_name: Optional[str] = Field(default=None, min_length=1)
    metric: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    unit: Optional[str] = None
    period: Optional[str] = None
    deadline: Optional[date] = None
    target: Optional[float] = Field(default=None, ge=0)
    weightage: Optional[float] = Field(default=None, ge=0, le=100)

    @field_validator("status", mode="before")
    @classmethod
    def coerce_status(cls, value):
        return normalize_status(value)

    @model_validator(mode="before")
    @classmethod
    def check_not_null(cls, values):
        return reject_nulls(values, _NON_NULLABLE)


class KpiResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    assigned_to: int
    assigned_by: Optional[int] = None
    kpi_name: str
    metric: str
    description: Optional[str] = None
    unit: Optional[str] = None
    period: Optional[str] = None
    deadline: Optional[date] = None
    target: float
    achieved_value: float
    weightage: float
    status: KpiStatus
    score: float
    progress: float
    progress_notes: Optional[str] = None
    qualitative_score: Optional[float] = None
    supervisor_comments: Optional[str] = None
    remarks: Optional[str] = None
    last_updated: Optional[datetime] = None
    created_at: Optional[datetime] = None

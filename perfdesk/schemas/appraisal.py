from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from perfdesk.models.appraisal import AppraisalStatus
from perfdesk.schemas.common import normalize_status, reject_nulls

_NON_NULLABLE = ("achievements", "challenges", "goals", "status")


class AppraisalCreate(BaseModel):
    year: int = Field(ge=1900, le=9999)
    period: str = Field(min_length=1)
    achievements: str = Field(min_length=1)
    challenges: str = Field(min_length=1)
    goals: str = Field(min_length=1)
    draft: Optional[str] = None
    self_appraisal: Optional[str] = None
    status: Optional[AppraisalStatus] = None
    employee_id: Optional[int] = None
    reviewer_id: Optional[int] = None
    reviewer_comments: Optional[str] = None
    reviewer_score: Optional[float] = Field(default=None, ge=0)

    @field_validator("status", mode="before")
    @classmethod
    def coerce_status(cls, value):
        return normalize_status(value)


class AppraisalUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    achievements: Optional[str] = None
    challenges: Optional[str] = None
    goals: Optional[str] = None
    draft: Optional[str] = None
    self_appraisal: Optional[str] = None
    status: Optional[AppraisalStatus] = None
    reviewer_id: Optional[int] = None
    reviewer_comments: Optional[str] = None
    reviewer_score: Optional[float] = Field(default=None, ge=0)

    @field_validator("status", mode="before")
    @classmethod
    def coerce_status(cls, value):
        return normalize_status(value)

    @model_validator(mode="before")
    @classmethod
    def check_not_null(cls, values):
        return reject_nulls(values, _NON_NULLABLE)


class AppraisalResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    employee_id: int
    year: int
    period: str
    achievements: str
    challenges: str
    goals: str
    draft: Optional[str] = None
    self_appraisal: Optional[str] = None
    reviewer_id: Optional[int] = None
    reviewer_comments: Optional[str] = None
    reviewer_score: Optional[float] = None
    final_score: Optional[float] = None
    status: AppraisalStatus
    last_updated: Optional[datetime] = None
    created_at: Optional[datetime] = None


class DraftRequest(BaseModel):
    year: int
    period: str = Field(min_length=1)
    achievements: str = Field(min_length=1)
    challenges: str = Field(min_length=1)
    goals: str = Field(min_length=1)


class DraftResponse(BaseModel):
    draft: str

from pydantic import BaseModel, EmailStr, ConfigDict, Field, model_validator
from typing import Optional
from perfdesk.models.user import UserRole
from perfdesk.schemas.common import reject_nulls
from datetime import datetime

class UserBase(BaseModel):
    name: str = Field(min_length=1)
    email: EmailStr
    role: UserRole = UserRole.EMPLOYEE
    department: Optional[str] = None
    position: Optional[str] = None

class UserCreate(UserBase):
    password: str = Field(min_length=1)

class ProfileUpdate(BaseModel):
    """Self-service profile edit. Role and email are managed by admins."""
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = Field(default=None, min_length=1)
    department: Optional[str] = None
    position: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def check_not_null(cls, values):
        return reject_nulls(values, ("name",))

class UserResponse(UserBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    is_active: bool
    created_at: Optional[datetime] = None

class LoginRequest(BaseModel):
    email: EmailStr
    password: str

class Token(BaseModel):
    access_token: str
    token_type: str
    user: UserResponse

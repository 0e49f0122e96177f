from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1)


class UserSummary(BaseModel):
    """Outward user projection. Never carries the password hash."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str


class UserRead(UserSummary):
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class LoginResponse(BaseModel):
    token: str
    user: UserSummary


class MessageResponse(BaseModel):
    message: str

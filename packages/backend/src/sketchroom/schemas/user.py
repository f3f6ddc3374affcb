"""Pydantic schemas for users and login.

Learn: Pydantic v2 models validate request/response data. Separate
"Create" schemas (input) from "Read" schemas (output) — UserRead has no
password field, so a hash can never be serialized by accident.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


# ─── Login ──────────────────────────────────────────────

class LoginRequest(BaseModel):
    email: str = Field(..., max_length=255, pattern=EMAIL_PATTERN)
    password: str = Field(..., min_length=1)


class UserSummary(BaseModel):
    id: int
    email: str
    full_name: str
    role: str

    model_config = {"from_attributes": True}


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserSummary


class MeRead(BaseModel):
    id: int
    email: str
    role: str
    expires_at: datetime


# ─── Users ──────────────────────────────────────────────

class UserCreate(BaseModel):
    email: str = Field(..., max_length=255, pattern=EMAIL_PATTERN)
    password: str = Field(..., min_length=8)
    full_name: str = Field(..., min_length=1, max_length=255, pattern=r"\S")
    role: Literal["admin", "user"]


class UserRead(UserSummary):
    created_at: datetime

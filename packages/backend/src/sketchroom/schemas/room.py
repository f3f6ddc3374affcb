"""Pydantic schemas for rooms and room grants."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from sketchroom.db.models import MAX_ID


class RoomCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None

    model_config = {"str_strip_whitespace": True}


class RoomRead(BaseModel):
    id: int
    name: str
    description: Optional[str]
    created_by: Optional[int]
    created_at: datetime

    model_config = {"from_attributes": True}


class AccessGrant(BaseModel):
    user_id: int = Field(..., ge=1, le=MAX_ID)

"""Pydantic schemas for diagrams.

Learn: DiagramUpdate relies on pydantic's fields_set to tell "field not
sent" apart from "field sent". Absent fields are left untouched; an
explicit null is rejected rather than treated as a clear.
"""

from datetime import datetime
from typing import Annotated, Any, Optional

from pydantic import BaseModel, Field, StringConstraints, model_validator

from sketchroom.db.models import MAX_ID

# Payload keys are never touched, only the name is trimmed.
DiagramName = Annotated[
    str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)
]


class DiagramCreate(BaseModel):
    room_id: int = Field(..., ge=1, le=MAX_ID)
    name: DiagramName
    data: dict[str, Any]


class DiagramUpdate(BaseModel):
    name: Optional[DiagramName] = None
    data: Optional[dict[str, Any]] = None

    @model_validator(mode="after")
    def reject_explicit_nulls(self):
        for field in ("name", "data"):
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f"{field} may be omitted but not null")
        return self


class DiagramSummary(BaseModel):
    """List view — everything but the payload."""
    id: int
    room_id: int
    name: str
    version: int
    created_by: Optional[int]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class DiagramRead(DiagramSummary):
    data: dict[str, Any]

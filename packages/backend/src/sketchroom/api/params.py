"""Shared path parameter types for resource ids."""

from typing import Annotated

from fastapi import Path

from sketchroom.db.models import MAX_ID

IdPath = Annotated[int, Path(ge=1, le=MAX_ID)]

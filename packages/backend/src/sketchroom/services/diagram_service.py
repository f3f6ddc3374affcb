"""Diagram service — versioned documents scoped to rooms.

Learn: The version counter is the only concurrency control. Every write
that carries a new payload bumps it with a single server-side statement:

    UPDATE diagrams SET data = :data, version = version + 1, ... WHERE id = :id

so two concurrent payload writes starting from version N always end at
N + 2 — the last payload wins, but no increment is lost. Renames leave
the version alone; updated_at moves on every write.

This service performs no authorization. get_diagram() returns the row
with its room_id so the caller can run the room check first.
"""

from typing import Any

import structlog
from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from sketchroom.db.models import Diagram, utcnow
from sketchroom.errors import DiagramNotFoundError

logger = structlog.get_logger()


class _Unset:
    """Marks an update field that was not supplied (distinct from None)."""

    def __repr__(self) -> str:
        return "UNSET"


UNSET: Any = _Unset()


class DiagramService:
    """Business logic for diagram CRUD and versioning."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── Read ────────────────────────────────────────────

    async def list_by_room(self, room_id: int) -> list[Diagram]:
        """Diagrams in a room, most recently updated first."""
        result = await self.db.execute(
            select(Diagram)
            .where(Diagram.room_id == room_id)
            .order_by(Diagram.updated_at.desc(), Diagram.id.desc())
        )
        return list(result.scalars().all())

    async def get_diagram(self, diagram_id: int) -> Diagram:
        diagram = await self.db.get(Diagram, diagram_id, populate_existing=True)
        if diagram is None:
            raise DiagramNotFoundError(diagram_id)
        return diagram

    # ─── Write ───────────────────────────────────────────

    async def create_diagram(
        self,
        room_id: int,
        name: str,
        data: dict[str, Any],
        created_by: int,
    ) -> Diagram:
        now = utcnow()
        diagram = Diagram(
            room_id=room_id,
            name=name,
            data=data,
            version=1,
            created_by=created_by,
            created_at=now,
            updated_at=now,
        )
        self.db.add(diagram)
        await self.db.commit()
        await self.db.refresh(diagram)

        logger.info("diagram.created", diagram_id=diagram.id, room_id=room_id)
        return diagram

    async def update_diagram(
        self,
        diagram_id: int,
        *,
        name: str = UNSET,
        data: dict[str, Any] = UNSET,
    ) -> Diagram:
        """Apply a partial update.

        Only supplied fields are written. A new payload bumps the version
        by exactly one; a name-only update does not.
        """
        values: dict[str, Any] = {"updated_at": utcnow()}
        if name is not UNSET:
            values["name"] = name
        if data is not UNSET:
            values["data"] = data
            values["version"] = Diagram.version + 1

        result = await self.db.execute(
            update(Diagram)
            .where(Diagram.id == diagram_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise DiagramNotFoundError(diagram_id)
        await self.db.commit()

        diagram = await self.get_diagram(diagram_id)
        logger.info(
            "diagram.updated",
            diagram_id=diagram_id,
            version=diagram.version,
            payload_changed=data is not UNSET,
        )
        return diagram

    async def delete_diagram(self, diagram_id: int) -> None:
        result = await self.db.execute(
            delete(Diagram)
            .where(Diagram.id == diagram_id)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise DiagramNotFoundError(diagram_id)
        await self.db.commit()
        logger.info("diagram.deleted", diagram_id=diagram_id)

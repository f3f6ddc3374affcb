"""Room service — room lifecycle and access grants.

Learn: Rooms own their diagrams and their grants; deleting a room
cascades to both in the database. This service trusts the caller's
authorization decision: admin-only checks live in the route layer
(require_admin) and room checks in RoomAccessPolicy.
"""

import structlog
from sqlalchemy import delete, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from sketchroom.auth.jwt import Claims
from sketchroom.db.models import Room, RoomAccess, User, utcnow
from sketchroom.errors import RoomNotFoundError, UserNotFoundError

logger = structlog.get_logger()

_INSERTS = {"postgresql": pg_insert, "sqlite": sqlite_insert}


class RoomService:
    """Business logic for rooms and room grants."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── Rooms ──────────────────────────────────────────

    async def list_rooms(self, identity: Claims) -> list[Room]:
        """Admins see every room, everyone else only granted rooms.

        Newest first.
        """
        query = select(Room).order_by(Room.created_at.desc(), Room.id.desc())
        if not identity.is_admin:
            query = query.join(RoomAccess, RoomAccess.room_id == Room.id).where(
                RoomAccess.user_id == identity.user_id
            )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_room(self, room_id: int) -> Room | None:
        return await self.db.get(Room, room_id)

    async def require_room(self, room_id: int) -> Room:
        room = await self.get_room(room_id)
        if room is None:
            raise RoomNotFoundError(room_id)
        return room

    async def create_room(
        self,
        name: str,
        description: str | None,
        created_by: int,
    ) -> Room:
        room = Room(name=name, description=description, created_by=created_by)
        self.db.add(room)
        await self.db.commit()
        await self.db.refresh(room)

        logger.info("room.created", room_id=room.id, created_by=created_by)
        return room

    async def delete_room(self, room_id: int) -> None:
        """Delete a room together with its diagrams and grants."""
        result = await self.db.execute(delete(Room).where(Room.id == room_id))
        if result.rowcount == 0:
            raise RoomNotFoundError(room_id)
        await self.db.commit()
        logger.info("room.deleted", room_id=room_id)

    # ─── Grants ─────────────────────────────────────────

    async def grant_access(self, room_id: int, user_id: int) -> None:
        """Grant a user read/write on a room. Granting twice is a no-op."""
        await self.require_room(room_id)
        if await self.db.get(User, user_id) is None:
            raise UserNotFoundError(user_id)

        insert = _INSERTS[self.db.get_bind().dialect.name]
        stmt = (
            insert(RoomAccess)
            .values(user_id=user_id, room_id=room_id, granted_at=utcnow())
            .on_conflict_do_nothing(index_elements=["user_id", "room_id"])
        )
        await self.db.execute(stmt)
        await self.db.commit()
        logger.info("room.access_granted", room_id=room_id, user_id=user_id)

    async def revoke_access(self, room_id: int, user_id: int) -> None:
        """Remove a grant. Revoking a grant that doesn't exist is a no-op."""
        await self.db.execute(
            delete(RoomAccess).where(
                RoomAccess.room_id == room_id,
                RoomAccess.user_id == user_id,
            )
        )
        await self.db.commit()
        logger.info("room.access_revoked", room_id=room_id, user_id=user_id)

    async def list_granted_users(self, room_id: int) -> list[User]:
        await self.require_room(room_id)
        result = await self.db.execute(
            select(User)
            .join(RoomAccess, RoomAccess.user_id == User.id)
            .where(RoomAccess.room_id == room_id)
            .order_by(User.email)
        )
        return list(result.scalars().all())

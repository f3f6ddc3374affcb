"""Room access policy.

Learn: Every room-scoped operation asks one question — may this identity
touch this room? The answer is an explicit Decision rather than a bare
bool so routes, services and tests share a single resolution path:

- admin role → ALLOW, no lookup at all
- anyone else → ALLOW iff a room_access row exists for (user, room)

A missing room and a missing grant are indistinguishable here (both
DENY). Callers that need "404 vs 403" check room existence themselves.
Nothing is cached: grants are re-read on every request so a revoke takes
effect on the very next call.
"""

import enum

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from sketchroom.auth.jwt import Claims
from sketchroom.db.models import ROLE_ADMIN, RoomAccess
from sketchroom.errors import RoomAccessDeniedError, SelfDeletionError

logger = structlog.get_logger()


class Decision(str, enum.Enum):
    ALLOW = "allow"
    DENY = "deny"


class RoomAccessPolicy:
    """Resolves room capabilities for an identity."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def decide(self, user_id: int, room_id: int, role: str) -> Decision:
        if role == ROLE_ADMIN:
            return Decision.ALLOW

        result = await self.db.execute(
            select(RoomAccess.user_id).where(
                RoomAccess.user_id == user_id,
                RoomAccess.room_id == room_id,
            )
        )
        if result.first() is None:
            return Decision.DENY
        return Decision.ALLOW

    async def can_access_room(self, user_id: int, room_id: int, role: str) -> bool:
        return await self.decide(user_id, room_id, role) is Decision.ALLOW

    async def enforce(self, identity: Claims, room_id: int) -> None:
        """Raise RoomAccessDeniedError unless the identity may use the room."""
        decision = await self.decide(identity.user_id, room_id, identity.role)
        if decision is Decision.DENY:
            logger.info(
                "room.access_denied",
                user_id=identity.user_id,
                room_id=room_id,
            )
            raise RoomAccessDeniedError(room_id)


def ensure_not_self(identity: Claims, target_user_id: int) -> None:
    """Accounts may not delete themselves, admins included."""
    if identity.user_id == target_user_id:
        raise SelfDeletionError()

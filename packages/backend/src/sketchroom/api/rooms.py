"""Room API routes.

Learn: Listing is open to any authenticated user (scoped by role);
every mutation is admin-only via the require_admin dependency. The
service layer trusts that decision and does no role checks of its own.

- GET /rooms → rooms visible to the caller
- POST /rooms → create a room
- POST /rooms/:id/access → grant a user access
- DELETE /rooms/:id/access/:user_id → revoke a grant
- GET /rooms/:id/users → users holding a grant
- DELETE /rooms/:id → delete a room (cascades to diagrams + grants)
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from sketchroom.api.params import IdPath
from sketchroom.auth.dependencies import CurrentIdentity, get_current_user, require_admin
from sketchroom.db.engine import get_db
from sketchroom.schemas.room import AccessGrant, RoomCreate, RoomRead
from sketchroom.schemas.user import UserSummary
from sketchroom.services.room_service import RoomService

router = APIRouter(prefix="/rooms")


def _svc(db: AsyncSession = Depends(get_db)) -> RoomService:
    return RoomService(db)


@router.get("", response_model=list[RoomRead])
async def list_rooms(
    identity: CurrentIdentity = Depends(get_current_user),
    svc: RoomService = Depends(_svc),
):
    return await svc.list_rooms(identity)


@router.post("", response_model=RoomRead, status_code=201)
async def create_room(
    body: RoomCreate,
    identity: CurrentIdentity = Depends(require_admin),
    svc: RoomService = Depends(_svc),
):
    return await svc.create_room(
        name=body.name,
        description=body.description or None,
        created_by=identity.user_id,
    )


# ─── Access grants ──────────────────────────────────────

@router.post("/{room_id}/access", dependencies=[Depends(require_admin)])
async def grant_access(
    room_id: IdPath,
    body: AccessGrant,
    svc: RoomService = Depends(_svc),
):
    await svc.grant_access(room_id, body.user_id)
    return {"granted": True}


@router.delete("/{room_id}/access/{user_id}", dependencies=[Depends(require_admin)])
async def revoke_access(
    room_id: IdPath,
    user_id: IdPath,
    svc: RoomService = Depends(_svc),
):
    await svc.revoke_access(room_id, user_id)
    return {"revoked": True}


@router.get(
    "/{room_id}/users",
    response_model=list[UserSummary],
    dependencies=[Depends(require_admin)],
)
async def list_room_users(room_id: IdPath, svc: RoomService = Depends(_svc)):
    return await svc.list_granted_users(room_id)


@router.delete("/{room_id}", dependencies=[Depends(require_admin)])
async def delete_room(room_id: IdPath, svc: RoomService = Depends(_svc)):
    await svc.delete_room(room_id)
    return {"deleted": True}

"""User administration API. Every route is admin-only.

- GET /users → all users, newest first (no password hashes)
- POST /users → create a user (409 on duplicate email)
- DELETE /users/:id → delete a user (400 when deleting yourself)
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from sketchroom.api.params import IdPath
from sketchroom.auth.dependencies import CurrentIdentity, require_admin
from sketchroom.auth.policy import ensure_not_self
from sketchroom.db.engine import get_db
from sketchroom.schemas.user import UserCreate, UserRead
from sketchroom.services.user_service import UserService

router = APIRouter(prefix="/users")


def _svc(db: AsyncSession = Depends(get_db)) -> UserService:
    return UserService(db)


@router.get("", response_model=list[UserRead])
async def list_users(
    identity: CurrentIdentity = Depends(require_admin),
    svc: UserService = Depends(_svc),
):
    return await svc.list_users()


@router.post("", response_model=UserRead, status_code=201)
async def create_user(
    body: UserCreate,
    identity: CurrentIdentity = Depends(require_admin),
    svc: UserService = Depends(_svc),
):
    return await svc.create_user(
        email=body.email,
        password=body.password,
        full_name=body.full_name,
        role=body.role,
    )


@router.delete("/{user_id}")
async def delete_user(
    user_id: IdPath,
    identity: CurrentIdentity = Depends(require_admin),
    svc: UserService = Depends(_svc),
):
    ensure_not_self(identity, user_id)
    await svc.delete_user(user_id)
    return {"deleted": True}

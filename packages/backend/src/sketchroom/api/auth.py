"""Auth API — login and current identity.

Learn: Routes for session handling:
- POST /auth/login → email/password → JWT (24h) + user summary
- GET /auth/me → the claims carried by the caller's token
"""

import structlog
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from sketchroom.auth.dependencies import CurrentIdentity, get_current_user
from sketchroom.auth.jwt import issue_token
from sketchroom.db.engine import get_db
from sketchroom.schemas.user import LoginRequest, LoginResponse, MeRead, UserSummary
from sketchroom.services.user_service import UserService

logger = structlog.get_logger()

router = APIRouter(prefix="/auth")


@router.post("/login", response_model=LoginResponse)
async def login(body: LoginRequest, db: AsyncSession = Depends(get_db)):
    """Login with email and password → JWT token."""
    user = await UserService(db).authenticate(body.email, body.password)

    token = issue_token(user.id, user.email, user.role)
    logger.info("auth.login", user_id=user.id)

    return LoginResponse(
        access_token=token,
        user=UserSummary.model_validate(user),
    )


@router.get("/me", response_model=MeRead)
async def get_me(identity: CurrentIdentity = Depends(get_current_user)):
    """Who the token says the caller is. No database lookup."""
    return MeRead(
        id=identity.user_id,
        email=identity.email,
        role=identity.role,
        expires_at=identity.expires_at,
    )

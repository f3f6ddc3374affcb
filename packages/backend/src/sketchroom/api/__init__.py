"""API route aggregation.

All routers registered here get mounted in main.py.

Learn: Authentication is applied inside each router through
get_current_user / require_admin, because the rooms and diagrams routers
mix role levels. Health and login are open.
"""

from fastapi import APIRouter

from sketchroom.api.auth import router as auth_router
from sketchroom.api.diagrams import router as diagrams_router
from sketchroom.api.health import router as health_router
from sketchroom.api.rooms import router as rooms_router
from sketchroom.api.users import router as users_router

api_router = APIRouter(prefix="/api/v1")

api_router.include_router(health_router, tags=["health"])
api_router.include_router(auth_router, tags=["auth"])
api_router.include_router(rooms_router, tags=["rooms"])
api_router.include_router(diagrams_router, tags=["diagrams"])
api_router.include_router(users_router, tags=["users"])

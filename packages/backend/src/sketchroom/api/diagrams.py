"""Diagram API routes.

Learn: Every route here is room-scoped. The order of checks is fixed:
1. resolve the room (from the path, the body, or the diagram row)
2. RoomAccessPolicy.enforce → 403 for callers without a grant
3. only then read or mutate

For single-diagram routes the row is loaded first (404 if missing) to
find its room; the payload is never returned before the room check.

- GET /diagrams/room/:room_id → diagram summaries, newest update first
- GET /diagrams/:id → full diagram
- POST /diagrams → create (version 1)
- PUT /diagrams/:id → partial update (payload bumps version)
- DELETE /diagrams/:id → delete
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from sketchroom.api.params import IdPath
from sketchroom.auth.dependencies import CurrentIdentity, get_current_user
from sketchroom.auth.policy import RoomAccessPolicy
from sketchroom.db.engine import get_db
from sketchroom.schemas.diagram import (
    DiagramCreate,
    DiagramRead,
    DiagramSummary,
    DiagramUpdate,
)
from sketchroom.services.diagram_service import UNSET, DiagramService
from sketchroom.services.room_service import RoomService

router = APIRouter(prefix="/diagrams")


class _Ctx:
    """Per-request bundle of the services a diagram route needs."""

    def __init__(self, db: AsyncSession, identity: CurrentIdentity):
        self.identity = identity
        self.policy = RoomAccessPolicy(db)
        self.rooms = RoomService(db)
        self.diagrams = DiagramService(db)


def _ctx(
    db: AsyncSession = Depends(get_db),
    identity: CurrentIdentity = Depends(get_current_user),
) -> _Ctx:
    return _Ctx(db, identity)


@router.get("/room/{room_id}", response_model=list[DiagramSummary])
async def list_diagrams(room_id: IdPath, ctx: _Ctx = Depends(_ctx)):
    await ctx.policy.enforce(ctx.identity, room_id)
    await ctx.rooms.require_room(room_id)
    return await ctx.diagrams.list_by_room(room_id)


@router.get("/{diagram_id}", response_model=DiagramRead)
async def get_diagram(diagram_id: IdPath, ctx: _Ctx = Depends(_ctx)):
    diagram = await ctx.diagrams.get_diagram(diagram_id)
    await ctx.policy.enforce(ctx.identity, diagram.room_id)
    return diagram


@router.post("", response_model=DiagramRead, status_code=201)
async def create_diagram(body: DiagramCreate, ctx: _Ctx = Depends(_ctx)):
    await ctx.policy.enforce(ctx.identity, body.room_id)
    await ctx.rooms.require_room(body.room_id)
    return await ctx.diagrams.create_diagram(
        room_id=body.room_id,
        name=body.name,
        data=body.data,
        created_by=ctx.identity.user_id,
    )


@router.put("/{diagram_id}", response_model=DiagramRead)
async def update_diagram(
    diagram_id: IdPath,
    body: DiagramUpdate,
    ctx: _Ctx = Depends(_ctx),
):
    diagram = await ctx.diagrams.get_diagram(diagram_id)
    await ctx.policy.enforce(ctx.identity, diagram.room_id)

    sent = body.model_fields_set
    return await ctx.diagrams.update_diagram(
        diagram_id,
        name=body.name if "name" in sent else UNSET,
        data=body.data if "data" in sent else UNSET,
    )


@router.delete("/{diagram_id}")
async def delete_diagram(diagram_id: IdPath, ctx: _Ctx = Depends(_ctx)):
    diagram = await ctx.diagrams.get_diagram(diagram_id)
    await ctx.policy.enforce(ctx.identity, diagram.room_id)
    await ctx.diagrams.delete_diagram(diagram_id)
    return {"deleted": True}

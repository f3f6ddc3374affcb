"""DiagramService tests — version counter under interleaved writers.

Learn: Two sessions stand in for two concurrent requests. Each loads the
diagram (seeing the same version) before either writes, then both write
a payload. The counter must end two higher, never one.
"""

import pytest

from sketchroom.errors import DiagramNotFoundError
from sketchroom.services.diagram_service import DiagramService
from sketchroom.services.room_service import RoomService


@pytest.mark.asyncio
async def test_interleaved_payload_writes_lose_no_increment(
    session_factory, admin_user
):
    async with session_factory() as setup:
        room = await RoomService(setup).create_room("Race", None, admin_user.id)
        diagram = await DiagramService(setup).create_diagram(
            room.id, "Contended", {"rev": 0}, admin_user.id
        )
        await DiagramService(setup).update_diagram(diagram.id, data={"rev": 1})
        await DiagramService(setup).update_diagram(diagram.id, data={"rev": 2})

    async with session_factory() as first, session_factory() as second:
        a = DiagramService(first)
        b = DiagramService(second)

        seen_a = await a.get_diagram(diagram.id)
        seen_b = await b.get_diagram(diagram.id)
        assert seen_a.version == seen_b.version == 3
        # Both reads are finished before either write starts
        await first.commit()
        await second.commit()

        after_a = await a.update_diagram(diagram.id, data={"writer": "a"})
        after_b = await b.update_diagram(diagram.id, data={"writer": "b"})

    assert after_a.version == 4
    assert after_b.version == 5
    assert after_b.data == {"writer": "b"}


@pytest.mark.asyncio
async def test_update_reloads_stale_identity_map(db_session, admin_user):
    """The returned row reflects the database, not the session's copy."""
    room = await RoomService(db_session).create_room("Reload", None, admin_user.id)
    svc = DiagramService(db_session)
    diagram = await svc.create_diagram(room.id, "Doc", {"v": 1}, admin_user.id)

    updated = await svc.update_diagram(diagram.id, data={"v": 2})
    assert updated is diagram
    assert updated.version == 2
    assert updated.data == {"v": 2}


@pytest.mark.asyncio
async def test_rename_leaves_version_and_moves_updated_at(db_session, admin_user):
    room = await RoomService(db_session).create_room("Rename", None, admin_user.id)
    svc = DiagramService(db_session)
    diagram = await svc.create_diagram(room.id, "Old", {"k": "v"}, admin_user.id)
    created_at = diagram.created_at
    first_update = diagram.updated_at

    updated = await svc.update_diagram(diagram.id, name="New")
    assert updated.name == "New"
    assert updated.version == 1
    assert updated.data == {"k": "v"}
    assert updated.created_at == created_at
    assert updated.updated_at >= first_update


@pytest.mark.asyncio
async def test_update_missing_diagram_raises(db_session):
    with pytest.raises(DiagramNotFoundError):
        await DiagramService(db_session).update_diagram(404, data={})


@pytest.mark.asyncio
async def test_delete_missing_diagram_raises(db_session):
    with pytest.raises(DiagramNotFoundError):
        await DiagramService(db_session).delete_diagram(404)

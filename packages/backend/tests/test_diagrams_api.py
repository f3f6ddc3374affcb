"""Diagram API tests — room-scoped CRUD and server-side versioning.

Learn: Tests cover:
1. The full collaboration flow: room → grant → diagram → edit → revoke
2. Version semantics: payload writes bump, renames don't
3. Partial updates: absent fields untouched, explicit nulls rejected
4. Room checks on every operation (403 before any data is returned)
5. Admin bypass and 404s
"""

import pytest
import pytest_asyncio


def _diagram(room_id, name="Login flow", data=None):
    return {
        "room_id": room_id,
        "name": name,
        "data": data if data is not None else {"shapes": [{"type": "rect", "x": 0}]},
    }


@pytest_asyncio.fixture()
async def diagram(client, granted_room, member_headers):
    r = await client.post(
        "/api/v1/diagrams", json=_diagram(granted_room["id"]), headers=member_headers
    )
    assert r.status_code == 201
    return r.json()


# ═══════════════════════════════════════════════════════════
# End-to-end flow
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_sprint_planning_flow(client, admin_headers, member_user, member_headers):
    """Admin creates a room and grants a member, who draws, edits and
    then loses access when the grant is revoked."""
    r = await client.post(
        "/api/v1/rooms", json={"name": "Sprint Planning"}, headers=admin_headers
    )
    room_id = r.json()["id"]

    r = await client.post(
        f"/api/v1/rooms/{room_id}/access",
        json={"user_id": member_user.id},
        headers=admin_headers,
    )
    assert r.status_code == 200

    r = await client.post(
        "/api/v1/diagrams",
        json=_diagram(room_id, name="Board", data={"shapes": []}),
        headers=member_headers,
    )
    assert r.status_code == 201
    created = r.json()
    assert created["version"] == 1
    assert created["room_id"] == room_id
    assert created["created_by"] == member_user.id

    r = await client.put(
        f"/api/v1/diagrams/{created['id']}",
        json={"data": {"shapes": [{"type": "ellipse"}]}},
        headers=member_headers,
    )
    assert r.status_code == 200
    assert r.json()["version"] == 2
    assert r.json()["data"] == {"shapes": [{"type": "ellipse"}]}

    r = await client.delete(
        f"/api/v1/rooms/{room_id}/access/{member_user.id}", headers=admin_headers
    )
    assert r.status_code == 200

    r = await client.get(f"/api/v1/diagrams/{created['id']}", headers=member_headers)
    assert r.status_code == 403
    assert r.json()["detail"] == "Access denied to this room"


# ═══════════════════════════════════════════════════════════
# Create / read
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_create_diagram_keeps_payload_verbatim(client, granted_room, member_headers):
    data = {" padded key ": "  padded value  ", "nested": {"a": [1, 2.5, None, True]}}
    r = await client.post(
        "/api/v1/diagrams",
        json=_diagram(granted_room["id"], name="  Trimmed  ", data=data),
        headers=member_headers,
    )
    assert r.status_code == 201
    assert r.json()["name"] == "Trimmed"

    r = await client.get(f"/api/v1/diagrams/{r.json()['id']}", headers=member_headers)
    assert r.json()["data"] == data


@pytest.mark.asyncio
async def test_create_diagram_validation(client, granted_room, member_headers):
    r = await client.post(
        "/api/v1/diagrams",
        json={"room_id": granted_room["id"], "name": "", "data": {}},
        headers=member_headers,
    )
    assert r.status_code == 400

    r = await client.post(
        "/api/v1/diagrams",
        json={"room_id": granted_room["id"], "name": "No data"},
        headers=member_headers,
    )
    assert r.status_code == 400

    r = await client.post(
        "/api/v1/diagrams",
        json={"room_id": granted_room["id"], "name": "List data", "data": [1, 2]},
        headers=member_headers,
    )
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_list_diagrams_most_recently_updated_first(
    client, granted_room, member_headers
):
    ids = []
    for name in ("A", "B", "C"):
        r = await client.post(
            "/api/v1/diagrams",
            json=_diagram(granted_room["id"], name=name),
            headers=member_headers,
        )
        ids.append(r.json()["id"])

    # Touching A moves it to the front
    await client.put(
        f"/api/v1/diagrams/{ids[0]}", json={"name": "A2"}, headers=member_headers
    )

    r = await client.get(
        f"/api/v1/diagrams/room/{granted_room['id']}", headers=member_headers
    )
    assert r.status_code == 200
    listed = r.json()
    assert [d["name"] for d in listed] == ["A2", "C", "B"]
    assert all("data" not in d for d in listed)


@pytest.mark.asyncio
async def test_list_diagrams_empty_room(client, granted_room, member_headers):
    r = await client.get(
        f"/api/v1/diagrams/room/{granted_room['id']}", headers=member_headers
    )
    assert r.status_code == 200
    assert r.json() == []


# ═══════════════════════════════════════════════════════════
# Update / versioning
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_rename_keeps_version(client, diagram, member_headers):
    r = await client.put(
        f"/api/v1/diagrams/{diagram['id']}",
        json={"name": "Renamed"},
        headers=member_headers,
    )
    assert r.status_code == 200
    body = r.json()
    assert body["name"] == "Renamed"
    assert body["version"] == 1
    assert body["data"] == diagram["data"]


@pytest.mark.asyncio
async def test_payload_and_name_together_bump_once(client, diagram, member_headers):
    r = await client.put(
        f"/api/v1/diagrams/{diagram['id']}",
        json={"name": "Both", "data": {"shapes": []}},
        headers=member_headers,
    )
    assert r.json()["version"] == 2
    assert r.json()["name"] == "Both"


@pytest.mark.asyncio
async def test_sequential_payload_writes_bump_each_time(client, diagram, member_headers):
    for expected in (2, 3, 4):
        r = await client.put(
            f"/api/v1/diagrams/{diagram['id']}",
            json={"data": {"rev": expected}},
            headers=member_headers,
        )
        assert r.json()["version"] == expected


@pytest.mark.asyncio
async def test_identical_payload_still_bumps(client, diagram, member_headers):
    r = await client.put(
        f"/api/v1/diagrams/{diagram['id']}",
        json={"data": diagram["data"]},
        headers=member_headers,
    )
    assert r.json()["version"] == 2


@pytest.mark.asyncio
async def test_empty_update_only_touches_timestamp(client, diagram, member_headers):
    r = await client.put(
        f"/api/v1/diagrams/{diagram['id']}", json={}, headers=member_headers
    )
    assert r.status_code == 200
    body = r.json()
    assert body["version"] == 1
    assert body["name"] == diagram["name"]
    assert body["data"] == diagram["data"]


@pytest.mark.asyncio
async def test_explicit_null_is_400(client, diagram, member_headers):
    for payload in ({"data": None}, {"name": None}):
        r = await client.put(
            f"/api/v1/diagrams/{diagram['id']}", json=payload, headers=member_headers
        )
        assert r.status_code == 400

    r = await client.get(f"/api/v1/diagrams/{diagram['id']}", headers=member_headers)
    assert r.json()["version"] == 1
    assert r.json()["data"] == diagram["data"]


# ═══════════════════════════════════════════════════════════
# Room checks
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_outsider_is_denied_everywhere(client, granted_room, diagram, outsider_headers):
    room_id = granted_room["id"]
    diagram_id = diagram["id"]
    requests = [
        ("GET", f"/api/v1/diagrams/room/{room_id}", None),
        ("GET", f"/api/v1/diagrams/{diagram_id}", None),
        ("POST", "/api/v1/diagrams", _diagram(room_id)),
        ("PUT", f"/api/v1/diagrams/{diagram_id}", {"data": {"stolen": True}}),
        ("DELETE", f"/api/v1/diagrams/{diagram_id}", None),
    ]
    for method, url, body in requests:
        r = await client.request(method, url, json=body, headers=outsider_headers)
        assert r.status_code == 403, (method, url)
        assert "data" not in r.json()


@pytest.mark.asyncio
async def test_denied_update_changes_nothing(
    client, diagram, outsider_headers, member_headers
):
    await client.put(
        f"/api/v1/diagrams/{diagram['id']}",
        json={"data": {"stolen": True}},
        headers=outsider_headers,
    )
    r = await client.get(f"/api/v1/diagrams/{diagram['id']}", headers=member_headers)
    assert r.json()["version"] == 1
    assert r.json()["data"] == diagram["data"]


@pytest.mark.asyncio
async def test_unauthenticated_is_401(client, diagram):
    r = await client.get(f"/api/v1/diagrams/{diagram['id']}")
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_admin_bypasses_grants(client, room, admin_headers):
    """Admins hold no grant on `room` but can still use it."""
    r = await client.post(
        "/api/v1/diagrams", json=_diagram(room["id"]), headers=admin_headers
    )
    assert r.status_code == 201
    diagram_id = r.json()["id"]

    r = await client.put(
        f"/api/v1/diagrams/{diagram_id}",
        json={"data": {"admin": True}},
        headers=admin_headers,
    )
    assert r.json()["version"] == 2

    r = await client.get(f"/api/v1/diagrams/room/{room['id']}", headers=admin_headers)
    assert len(r.json()) == 1


# ═══════════════════════════════════════════════════════════
# Not found / delete
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_missing_diagram_is_404(client, member_headers, admin_headers):
    for headers in (member_headers, admin_headers):
        r = await client.get("/api/v1/diagrams/9999", headers=headers)
        assert r.status_code == 404
        assert r.json()["detail"] == "Diagram not found"

    r = await client.put(
        "/api/v1/diagrams/9999", json={"name": "x"}, headers=admin_headers
    )
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_missing_room(client, admin_headers, member_headers):
    """Admins learn the room is gone; everyone else is denied first."""
    r = await client.get("/api/v1/diagrams/room/9999", headers=admin_headers)
    assert r.status_code == 404

    r = await client.post("/api/v1/diagrams", json=_diagram(9999), headers=admin_headers)
    assert r.status_code == 404

    r = await client.get("/api/v1/diagrams/room/9999", headers=member_headers)
    assert r.status_code == 403


@pytest.mark.asyncio
async def test_delete_diagram(client, diagram, member_headers):
    r = await client.delete(f"/api/v1/diagrams/{diagram['id']}", headers=member_headers)
    assert r.status_code == 200
    assert r.json() == {"deleted": True}

    r = await client.get(f"/api/v1/diagrams/{diagram['id']}", headers=member_headers)
    assert r.status_code == 404

    r = await client.delete(f"/api/v1/diagrams/{diagram['id']}", headers=member_headers)
    assert r.status_code == 404

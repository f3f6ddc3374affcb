#!/usr/bin/env python3
"""
Sketchroom Quickstart — Full lifecycle in one script.

Creates a member → room → grant → diagram → edit → rename → revoke.
Run with: python examples/quickstart.py

Requires: pip install httpx
Backend must be running: http://localhost:8000
An admin must exist: sketchroom bootstrap-admin
"""

import uuid

from _common import admin_client, create_member, login


def main():
    run_id = uuid.uuid4().hex[:6]
    admin = admin_client()

    # ── Create member ─────────────────────────────────────────────
    print("\n1. Creating member...")
    member_user, password = create_member(admin, "Mel")
    print(f"   User: {member_user['email']} (id={member_user['id']})")

    # ── Create room ───────────────────────────────────────────────
    print("\n2. Creating room...")
    resp = admin.post("/rooms", json={
        "name": f"Sprint Planning {run_id}",
        "description": "Weekly board",
    })
    assert resp.status_code == 201, f"Failed: {resp.text}"
    room = resp.json()
    print(f"   Room: {room['name']} (id={room['id']})")

    # ── Grant access ──────────────────────────────────────────────
    print("\n3. Granting access...")
    resp = admin.post(f"/rooms/{room['id']}/access", json={"user_id": member_user["id"]})
    assert resp.status_code == 200, f"Failed: {resp.text}"
    users = admin.get(f"/rooms/{room['id']}/users").json()
    print(f"   Granted: {', '.join(u['email'] for u in users)}")

    member = login(member_user["email"], password)

    # ── Draw ──────────────────────────────────────────────────────
    print("\n4. Member creates a diagram...")
    resp = member.post("/diagrams", json={
        "room_id": room["id"],
        "name": "Backlog",
        "data": {"shapes": [{"type": "rect", "x": 10, "y": 10, "w": 120, "h": 60}]},
    })
    assert resp.status_code == 201, f"Failed: {resp.text}"
    diagram = resp.json()
    print(f"   Diagram: {diagram['name']} v{diagram['version']}")

    # ── Edit payload (bumps version) ──────────────────────────────
    print("\n5. Editing the drawing...")
    data = diagram["data"]
    data["shapes"].append({"type": "arrow", "from": 0, "to": 1})
    resp = member.put(f"/diagrams/{diagram['id']}", json={"data": data})
    assert resp.status_code == 200, f"Failed: {resp.text}"
    print(f"   Version: {diagram['version']} → {resp.json()['version']}")

    # ── Rename (version unchanged) ────────────────────────────────
    print("\n6. Renaming...")
    resp = member.put(f"/diagrams/{diagram['id']}", json={"name": "Backlog (groomed)"})
    assert resp.status_code == 200, f"Failed: {resp.text}"
    print(f"   {resp.json()['name']} still v{resp.json()['version']}")

    # ── Revoke ────────────────────────────────────────────────────
    print("\n7. Revoking access...")
    resp = admin.delete(f"/rooms/{room['id']}/access/{member_user['id']}")
    assert resp.status_code == 200, f"Failed: {resp.text}"
    resp = member.get(f"/diagrams/{diagram['id']}")
    print(f"   Member now gets: {resp.status_code} {resp.json()['detail']}")
    assert resp.status_code == 403

    print("\nDone.")


if __name__ == "__main__":
    main()

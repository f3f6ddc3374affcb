"""
Shared helpers for Sketchroom examples.

Handles the health check and admin login so each example can focus on
its specific workflow. The admin account comes from
`sketchroom bootstrap-admin`; pass the same credentials here via
SKETCHROOM_ADMIN_EMAIL / SKETCHROOM_ADMIN_PASSWORD.
"""

import os
import sys
import uuid

import httpx

BASE = os.environ.get("SKETCHROOM_API_URL", "http://localhost:8000").rstrip("/") + "/api/v1"


def check_backend() -> None:
    """Verify the backend is reachable and healthy."""
    try:
        resp = httpx.get(f"{BASE}/health", timeout=5)
    except httpx.ConnectError:
        print(f"ERROR: Backend not reachable at {BASE}")
        print("Start it with:  cd packages/backend && uvicorn sketchroom.main:app --reload --port 8000")
        sys.exit(1)

    if resp.status_code != 200:
        print(f"ERROR: Health check returned {resp.status_code}")
        sys.exit(1)

    health = resp.json()
    print("Backend health:")
    print(f"  Database: {'✓' if health['database'] == 'ok' else '✗'}")
    print(f"  Redis:    {'✓' if health['redis'] == 'ok' else '✗'}")

    if health["status"] != "healthy":
        print("\nERROR: Database is not connected.")
        sys.exit(1)


def login(email: str, password: str) -> httpx.Client:
    """Log in and return an httpx Client carrying the bearer token."""
    resp = httpx.post(
        f"{BASE}/auth/login",
        json={"email": email, "password": password},
        timeout=10,
    )
    if resp.status_code != 200:
        print(f"ERROR: Login failed for {email}: {resp.status_code} {resp.text}")
        sys.exit(1)

    return httpx.Client(
        base_url=BASE,
        timeout=10,
        headers={"Authorization": f"Bearer {resp.json()['access_token']}"},
    )


def admin_client() -> httpx.Client:
    """Check backend and log in as the bootstrap admin."""
    check_backend()
    email = os.environ.get("SKETCHROOM_ADMIN_EMAIL")
    password = os.environ.get("SKETCHROOM_ADMIN_PASSWORD")
    if not email or not password:
        print("ERROR: set SKETCHROOM_ADMIN_EMAIL and SKETCHROOM_ADMIN_PASSWORD")
        sys.exit(1)
    client = login(email, password)
    print("  Auth:     ✓ (admin JWT)")
    return client


def create_member(admin: httpx.Client, name: str) -> tuple[dict, str]:
    """Create a regular user with a unique email. Returns (user, password)."""
    run_id = uuid.uuid4().hex[:8]
    password = "demo-password-123"
    resp = admin.post("/users", json={
        "email": f"{name.lower()}-{run_id}@example.com",
        "password": password,
        "full_name": f"{name} {run_id}",
        "role": "user",
    })
    assert resp.status_code == 201, f"User creation failed: {resp.text}"
    return resp.json(), password

"""Sketchroom CLI — provisioning and operator commands.

Usage:
    sketchroom bootstrap-admin                    # uses SKETCHROOM_ADMIN_* env vars
    sketchroom bootstrap-admin --email a@b.io     # flags override env
    sketchroom login --email a@b.io               # print a bearer token
    sketchroom rooms --token $TOKEN               # list rooms visible to a token

bootstrap-admin talks to the database directly and is idempotent: an
existing account with the admin email is left untouched. The other
commands go through the HTTP API.
"""

from __future__ import annotations

import asyncio
import os
import sys
from typing import Optional

import click
import httpx

DEFAULT_API_URL = "http://localhost:8000"


def _api_url() -> str:
    return os.environ.get("SKETCHROOM_API_URL", DEFAULT_API_URL).rstrip("/")


def _client(token: Optional[str] = None) -> httpx.Client:
    headers = {"Authorization": f"Bearer {token}"} if token else {}
    return httpx.Client(base_url=_api_url(), timeout=30.0, headers=headers)


def _print_table(rows: list[dict], columns: list[tuple[str, str, int]]):
    """Print a simple ASCII table.

    columns: list of (header, dict_key, width)
    """
    header = "  ".join(h.ljust(w) for h, _, w in columns)
    click.secho(header, bold=True)
    click.echo("-" * len(header))
    for row in rows:
        line = "  ".join(str(row.get(k) or "-")[:w].ljust(w) for _, k, w in columns)
        click.echo(line)


async def _bootstrap_admin(email: str, password: str, name: str) -> tuple[str, bool]:
    from sketchroom.db.engine import async_session_factory, engine
    from sketchroom.services.user_service import UserService

    try:
        async with async_session_factory() as session:
            user, created = await UserService(session).ensure_admin(email, password, name)
            return user.email, created
    finally:
        await engine.dispose()


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version="0.1.0", prog_name="sketchroom")
def main():
    """Sketchroom — rooms, grants and versioned diagrams."""


@main.command("bootstrap-admin")
@click.option("--email", envvar="SKETCHROOM_ADMIN_EMAIL", help="Admin email")
@click.option("--password", envvar="SKETCHROOM_ADMIN_PASSWORD", help="Admin password")
@click.option("--name", envvar="SKETCHROOM_ADMIN_NAME", default="Admin", show_default=True)
def bootstrap_admin(email: Optional[str], password: Optional[str], name: str):
    """Create the initial admin account if it doesn't exist yet."""
    if not email or not password:
        click.secho(
            "No admin credentials provided. Skipping admin user creation.\n"
            "Set SKETCHROOM_ADMIN_EMAIL and SKETCHROOM_ADMIN_PASSWORD (or pass "
            "--email/--password) to create one.",
            fg="yellow",
            err=True,
        )
        return
    if len(password) < 8:
        click.secho("Error: admin password must be at least 8 characters", fg="red", err=True)
        sys.exit(1)

    admin_email, created = asyncio.run(_bootstrap_admin(email, password, name))
    if created:
        click.secho(f"Admin user created: {admin_email}", fg="green")
    else:
        click.echo(f"Admin user already exists ({admin_email}). Skipping creation.")


@main.command()
@click.option("--email", required=True)
@click.option("--password", prompt=True, hide_input=True)
def login(email: str, password: str):
    """Log in and print a bearer token."""
    with _client() as c:
        r = c.post("/api/v1/auth/login", json={"email": email, "password": password})
    if r.status_code != 200:
        click.secho(f"Login failed: {r.json().get('detail', r.text)}", fg="red", err=True)
        sys.exit(1)
    click.echo(r.json()["access_token"])


@main.command()
@click.option("--token", envvar="SKETCHROOM_TOKEN", required=True, help="Bearer token")
def rooms(token: str):
    """List rooms visible to the token's user."""
    with _client(token) as c:
        r = c.get("/api/v1/rooms")
    if r.status_code != 200:
        click.secho(f"Error {r.status_code}: {r.json().get('detail', r.text)}", fg="red", err=True)
        sys.exit(1)
    _print_table(
        r.json(),
        [("ID", "id", 6), ("Name", "name", 30), ("Description", "description", 40)],
    )

#!/usr/bin/env python3
"""Seed a running RBAC Console with a starter set of roles and permissions.

Usage:
  export API_URL=http://localhost:8000
  # when the API validates tokens:
  export KEYCLOAK_URL=... KEYCLOAK_REALM=... KEYCLOAK_CLIENT_ID=... KEYCLOAK_CLIENT_SECRET=...
  export SEED_USER=... SEED_PASSWORD=...
  uv run python scripts/seed_rbac.py [--dry-run]

Existing names and links are skipped (409 responses), so the script can be rerun.
"""
from __future__ import annotations

import argparse
import os
import sys

import httpx

PERMISSIONS = [
    ("can_view_reports", "View reports and dashboards"),
    ("can_edit_articles", "Edit existing articles"),
    ("can_publish_content", "Publish content to the site"),
    ("can_delete", "Delete content"),
    ("can_manage_users", "Invite, update and remove users"),
]

ROLES = {
    "Viewer": ("Read-only access", ["can_view_reports"]),
    "Content Editor": ("Writes and edits content", ["can_view_reports", "can_edit_articles"]),
    "Marketing Manager": ("Owns publishing", ["can_view_reports", "can_publish_content"]),
    "Admin": ("Full access", [name for name, _ in PERMISSIONS]),
}


def get_token(
    keycloak_url: str,
    realm: str,
    client_id: str,
    client_secret: str,
    username: str,
    password: str,
) -> str:
    url = f"{keycloak_url.rstrip('/')}/realms/{realm}/protocol/openid-connect/token"
    r = httpx.post(
        url,
        data={
            "grant_type": "password",
            "client_id": client_id,
            "client_secret": client_secret,
            "username": username,
            "password": password,
        },
        headers={"Content-Type": "application/x-www-form-urlencoded"},
        timeout=30.0,
    )
    r.raise_for_status()
    return r.json()["access_token"]


def ensure(client: httpx.Client, path: str, body: dict) -> bool:
    """POST body; True if created, False if it already existed."""
    r = client.post(path, json=body)
    if r.status_code == 409:
        return False
    r.raise_for_status()
    return True


def by_name(client: httpx.Client, path: str) -> dict[str, str]:
    r = client.get(path)
    r.raise_for_status()
    return {item["name"]: item["id"] for item in r.json()["items"]}


def main() -> int:
    parser = argparse.ArgumentParser(description="Seed starter roles and permissions")
    parser.add_argument("--dry-run", action="store_true", help="Print the plan and exit")
    args = parser.parse_args()

    if args.dry_run:
        for name, description in PERMISSIONS:
            print(f"permission {name}: {description}")
        for role, (description, granted) in ROLES.items():
            print(f"role {role}: {description} -> {', '.join(granted)}")
        return 0

    api_url = os.environ.get("API_URL", "http://localhost:8000").rstrip("/")
    headers = {"Content-Type": "application/json"}
    if os.environ.get("KEYCLOAK_CLIENT_SECRET"):
        print("Getting token...")
        token = get_token(
            os.environ.get("KEYCLOAK_URL", "http://localhost:8080"),
            os.environ.get("KEYCLOAK_REALM", "rbac-console"),
            os.environ.get("KEYCLOAK_CLIENT_ID", "rbac-console-api"),
            os.environ["KEYCLOAK_CLIENT_SECRET"],
            os.environ.get("SEED_USER", "admin"),
            os.environ.get("SEED_PASSWORD", "admin"),
        )
        headers["Authorization"] = f"Bearer {token}"

    created = skipped = 0
    with httpx.Client(base_url=api_url, headers=headers, timeout=30.0) as client:
        for name, description in PERMISSIONS:
            if ensure(client, "/v1/permissions", {"name": name, "description": description}):
                created += 1
            else:
                skipped += 1
        for role, (description, _) in ROLES.items():
            if ensure(client, "/v1/roles", {"name": role, "description": description}):
                created += 1
            else:
                skipped += 1

        permission_ids = by_name(client, "/v1/permissions")
        role_ids = by_name(client, "/v1/roles")
        for role, (_, granted) in ROLES.items():
            for permission in granted:
                path = f"/v1/roles/{role_ids[role]}/permissions"
                if ensure(client, path, {"permission_id": permission_ids[permission]}):
                    created += 1
                else:
                    skipped += 1

    print(f"Seed complete: {created} created, {skipped} already present")
    return 0


if __name__ == "__main__":
    sys.exit(main())

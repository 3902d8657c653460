# tests/helpers.py

from __future__ import annotations

from typing import Any

PASSWORD = "Password123"
UNKNOWN_ID = "00000000-0000-4000-8000-000000000000"


def auth(user: dict[str, Any]) -> dict[str, str]:
    """Authorization header for a registered user."""
    return {"Authorization": f"Bearer {user['token']}"}

from __future__ import annotations

from fastapi import HTTPException, Request

from ..store import get_store
from .models import Role
from .users import session_user


def get_current_user(request: Request) -> dict | None:
    """Session user (``id``, ``username``, ``email``, ``role``) or ``None``."""
    return request.session.get("user")


def _is_admin(user: dict) -> bool:
    return user.get("role") == Role.admin.value


def require_user(request: Request) -> dict:
    """The logged-in user, reloaded from the store.

    A session whose account was deleted is cleared. Role and profile come
    from the stored document, so demotions apply on the next request.
    """
    user = get_current_user(request)
    if not user:
        raise HTTPException(status_code=401, detail="Not authenticated")
    record = get_store().users.get(user.get("id", ""))
    if record is None:
        request.session.clear()
        raise HTTPException(status_code=401, detail="Not authenticated")
    current = session_user(record)
    if current != user:
        request.session["user"] = current
    return current


def require_admin(request: Request) -> dict:
    """401 without a session, 403 for non-admins."""
    user = require_user(request)
    if not _is_admin(user):
        raise HTTPException(status_code=403, detail="You are not an admin!")
    return user


def require_self_or_admin(user_id: str, request: Request) -> dict:
    """Allow the account owner or an admin to act on ``user_id``."""
    user = require_user(request)
    if user.get("id") != user_id and not _is_admin(user):
        raise HTTPException(status_code=403, detail="You are not authorized!")
    return user

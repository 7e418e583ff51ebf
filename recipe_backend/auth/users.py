from __future__ import annotations

import logging
from typing import Any

import bcrypt

from ..errors import ValidationError, NotFoundError
from ..store import DuplicateError, get_store
from .config import DEFAULT_AUTH_CONFIG, AuthConfig
from .models import RegisterRequest, Role

logger = logging.getLogger(__name__)

_DEMO_USERS = [
    ("user", "user@example.com", "user123", Role.user),
    ("admin", "admin@example.com", "admin123", Role.admin),
]

_DUPLICATE_MESSAGES = {
    "username": "Username already exists!",
    "email": "Email already exists!",
}


def hash_password(plain: str, config: AuthConfig = DEFAULT_AUTH_CONFIG) -> str:
    return bcrypt.hashpw(plain.encode(), bcrypt.gensalt(rounds=config.bcrypt_rounds)).decode()


def verify_password(plain: str, hashed: str) -> bool:
    return bcrypt.checkpw(plain.encode(), hashed.encode())


def session_user(doc: dict[str, Any]) -> dict[str, Any]:
    """The subset of a user document kept in the signed session cookie."""
    return {
        "id": doc["id"],
        "username": doc["username"],
        "email": doc["email"],
        "role": doc.get("role", Role.user.value),
    }


def duplicate_message(exc: DuplicateError) -> str:
    return _DUPLICATE_MESSAGES.get(exc.field, "User already exists!")


def register(body: RegisterRequest, role: Role = Role.user) -> dict[str, Any]:
    """Create a user with a bcrypt-hashed password."""
    users = get_store().users
    if users.find_by_username(body.username):
        raise ValidationError(_DUPLICATE_MESSAGES["username"])
    if users.find_by_email(body.email):
        raise ValidationError(_DUPLICATE_MESSAGES["email"])

    try:
        doc = users.insert({
            "username": body.username,
            "email": body.email,
            "passwordHash": hash_password(body.password),
            "role": role.value,
            "favorites": [],
        })
    except DuplicateError as exc:
        raise ValidationError(duplicate_message(exc)) from exc

    logger.info("Registered user %s", doc["username"])
    return doc


def authenticate(email: str, password: str) -> dict[str, Any]:
    """Verify credentials. Returns the stored user document."""
    record = get_store().users.find_by_email(email)
    if not record:
        raise NotFoundError("User not found!")
    if not verify_password(password, record["passwordHash"]):
        raise ValidationError("Wrong email or password!")
    return record


def seed_demo_users() -> None:
    """Pre-seed demo accounts; existing accounts are left alone."""
    users = get_store().users
    for username, email, password, role in _DEMO_USERS:
        if users.find_by_email(email):
            continue
        register(RegisterRequest(username=username, email=email, password=password), role=role)

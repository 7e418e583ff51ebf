from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class AuthConfig:
    session_secret: str = os.getenv("SESSION_SECRET", "mood-recipes-secret-change-in-production")
    session_max_age: int = 24 * 60 * 60
    bcrypt_rounds: int = int(os.getenv("BCRYPT_ROUNDS", "12"))
    seed_demo_users: bool = _env_flag("SEED_DEMO_USERS", "true")


DEFAULT_AUTH_CONFIG = AuthConfig()

"""
Bearer token authentication for the Taskboard API.

On startup:
- Uses JWT_SECRET if set
- Otherwise generates a secure random secret and persists it to .env

Passwords are stored as argon2 hashes. Tokens are HS256 JWTs carrying the
user id and a 7-day expiry.
"""

import logging
import os
import secrets
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional

import jwt
from fastapi import Depends, Header
from passlib.context import CryptContext

from taskboard_api.store import get_store
from taskboard_core.config import ApiConfig
from taskboard_core.constants import (
    ROLE_ADMIN,
    ROLE_MEMBER,
    TOKEN_ALGORITHM,
    TOKEN_LIFETIME_DAYS,
    USERS_COLLECTION,
)
from taskboard_core.exceptions import ForbiddenError, UnauthorizedError

logger = logging.getLogger(__name__)

_jwt_secret: str = ""
_admin_invite_token: Optional[str] = None

# Repo root (one level up from taskboard_api/)
_REPO_ROOT = Path(__file__).resolve().parent.parent

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


def init_auth(config: ApiConfig) -> None:
    """Load or generate the token signing secret. Call once at startup."""
    global _jwt_secret, _admin_invite_token

    _admin_invite_token = config.admin_invite_token
    _jwt_secret = config.jwt_secret

    if _jwt_secret:
        logger.info("Token signing secret loaded from environment")
        return

    _jwt_secret = secrets.token_urlsafe(48)

    env_path = _REPO_ROOT / ".env"
    _update_env_file(env_path, "JWT_SECRET", _jwt_secret)
    os.environ["JWT_SECRET"] = _jwt_secret

    logger.warning("JWT_SECRET not set; generated a new one and wrote it to %s", env_path)


def _update_env_file(env_path: Path, key: str, value: str) -> None:
    """Write or update a key=value pair in a .env file."""
    lines: list[str] = []
    found = False

    if env_path.exists():
        with open(env_path, "r") as f:
            for line in f:
                if line.startswith(f"{key}="):
                    lines.append(f"{key}={value}\n")
                    found = True
                else:
                    lines.append(line)

    if not found:
        lines.append(f"{key}={value}\n")

    with open(env_path, "w") as f:
        f.writelines(lines)


# ── Passwords ────────────────────────────────────────────────────────────────

def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def role_for_invite(invite_token: Optional[str]) -> str:
    """Admin if the invite token matches the server secret, member otherwise."""
    if invite_token and _admin_invite_token and secrets.compare_digest(invite_token, _admin_invite_token):
        return ROLE_ADMIN
    return ROLE_MEMBER


# ── Tokens ───────────────────────────────────────────────────────────────────

def create_token(user_id: str, now: Optional[datetime] = None) -> str:
    """Issue a signed token for a user id."""
    issued = now or datetime.now(timezone.utc)
    payload = {
        "id": user_id,
        "iat": issued,
        "exp": issued + timedelta(days=TOKEN_LIFETIME_DAYS),
    }
    return jwt.encode(payload, _jwt_secret, algorithm=TOKEN_ALGORITHM)


def decode_token(token: str) -> str:
    """Verify signature and expiry; return the user id the token binds."""
    try:
        claims = jwt.decode(token, _jwt_secret, algorithms=[TOKEN_ALGORITHM])
    except jwt.PyJWTError as exc:
        raise UnauthorizedError("Not authorized, token failed") from exc
    user_id = claims.get("id")
    if not user_id:
        raise UnauthorizedError("Not authorized, token failed")
    return user_id


def public_user(user: dict) -> dict:
    """User document without its password hash."""
    return {k: v for k, v in user.items() if k != "password"}


# ── Dependencies ─────────────────────────────────────────────────────────────

async def get_current_user(authorization: Optional[str] = Header(None)) -> dict:
    """FastAPI dependency: resolves the Authorization: Bearer <token> header to a user."""
    if not authorization or not authorization.startswith("Bearer "):
        raise UnauthorizedError("Not authorized, no token")

    user_id = decode_token(authorization[len("Bearer "):].strip())
    user = get_store().get(USERS_COLLECTION, user_id)
    if user is None:
        raise UnauthorizedError("Not authorized, user not found")
    return public_user(user)


async def require_admin(user: dict = Depends(get_current_user)) -> dict:
    """FastAPI dependency: the current user, who must hold the admin role."""
    if user.get("role") != ROLE_ADMIN:
        raise ForbiddenError("Not authorized as an admin")
    return user


def is_admin(user: dict) -> bool:
    return user.get("role") == ROLE_ADMIN

"""
Authentication & profile routes.

Endpoints:
  POST   /auth/register        Create an account, return it with a token
  POST   /auth/login           Exchange email + password for a token
  GET    /auth/profile         Current user
  PUT    /auth/update-profile  Change name, email, password or image URL
  POST   /auth/upload-image    Upload a profile image, return its URL
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, File, Request, UploadFile
from pydantic import Field

from taskboard_api.auth import (
    create_token,
    get_current_user,
    hash_password,
    public_user,
    role_for_invite,
    verify_password,
)
from taskboard_api.schemas import AuthResponse, CamelModel, UserResponse
from taskboard_api.store import get_store
from taskboard_api.uploads import save_image
from taskboard_core.constants import USERS_COLLECTION
from taskboard_core.exceptions import ConflictError, NotFoundError, UnauthorizedError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


# ── Request models ───────────────────────────────────────────────────────────

class RegisterRequest(CamelModel):
    name: str = Field(..., min_length=1)
    email: str = Field(..., pattern=EMAIL_PATTERN)
    password: str = Field(..., min_length=1)
    profile_image_url: Optional[str] = None
    admin_invite_token: Optional[str] = None


class LoginRequest(CamelModel):
    email: str
    password: str


class UpdateProfileRequest(CamelModel):
    name: Optional[str] = Field(None, min_length=1)
    email: Optional[str] = Field(None, pattern=EMAIL_PATTERN)
    password: Optional[str] = Field(None, min_length=1)
    profile_image_url: Optional[str] = None


class ImageUploadResponse(CamelModel):
    image_url: str


# ── Helpers ─────────────────────────────────────────────────────────────────

def normalize_email(email: str) -> str:
    return email.strip().lower()


def find_user_by_email(email: str) -> Optional[dict]:
    users = get_store().find(USERS_COLLECTION, [("email", "==", normalize_email(email))], limit=1)
    return users[0] if users else None


def _auth_response(user: dict) -> AuthResponse:
    return AuthResponse(**public_user(user), token=create_token(user["id"]))


# ── Routes ──────────────────────────────────────────────────────────────────

@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(body: RegisterRequest):
    """Register a new user. A matching admin invite token grants the admin role."""
    email = normalize_email(body.email)
    if find_user_by_email(email) is not None:
        raise ConflictError("User already exists")

    now = datetime.now(timezone.utc)
    user = get_store().insert(USERS_COLLECTION, {
        "name": body.name,
        "email": email,
        "password": hash_password(body.password),
        "profile_image_url": body.profile_image_url,
        "role": role_for_invite(body.admin_invite_token),
        "created_at": now,
        "updated_at": now,
    })
    logger.info("Registered user %s (role=%s)", email, user["role"])
    return _auth_response(user)


@router.post("/login", response_model=AuthResponse)
async def login(body: LoginRequest):
    """Log in. Unknown email and wrong password fail identically."""
    user = find_user_by_email(body.email)
    if user is None or not verify_password(body.password, user["password"]):
        logger.info("Failed login for %s", normalize_email(body.email))
        raise UnauthorizedError("Invalid email or password")
    return _auth_response(user)


@router.get("/profile", response_model=UserResponse)
async def profile(user: dict = Depends(get_current_user)):
    """Return the authenticated user."""
    return UserResponse(**user)


@router.put("/update-profile", response_model=AuthResponse)
async def update_profile(body: UpdateProfileRequest, user: dict = Depends(get_current_user)):
    """Update the authenticated user's profile and issue a fresh token."""
    updates = body.model_dump(exclude_unset=True, exclude_none=True)

    if "email" in updates:
        updates["email"] = normalize_email(updates["email"])
        existing = find_user_by_email(updates["email"])
        if existing is not None and existing["id"] != user["id"]:
            raise ConflictError("Email is already in use")

    if "password" in updates:
        updates["password"] = hash_password(updates["password"])

    updates["updated_at"] = datetime.now(timezone.utc)
    updated = get_store().update(USERS_COLLECTION, user["id"], updates)
    if updated is None:
        raise NotFoundError("User not found")
    return _auth_response(updated)


@router.post("/upload-image", response_model=ImageUploadResponse)
async def upload_image(request: Request, image: UploadFile = File(...)):
    """Store an uploaded image and return the absolute URL it is served from."""
    filename = save_image(image)
    return ImageUploadResponse(image_url=f"{request.base_url}uploads/{filename}")

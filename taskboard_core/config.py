"""
Configuration objects for the Taskboard API server
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from taskboard_core.constants import DEFAULT_PORT, DEFAULT_STORE_URL, DEFAULT_UPLOAD_DIR
from taskboard_core.exceptions import ValidationError


@dataclass
class ApiConfig:
    """
    Configuration for the HTTP server, read from the environment.
    """
    store_url: str = DEFAULT_STORE_URL  # memory:// or firestore://<project>[/<database>]
    jwt_secret: str = ""  # Empty = generate on startup
    admin_invite_token: str | None = None  # Shared secret that grants the admin role
    allowed_origin: str = "*"  # CORS origin of the frontend
    port: int = DEFAULT_PORT
    upload_dir: str = DEFAULT_UPLOAD_DIR
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, dotenv: bool = True) -> "ApiConfig":
        """Build a config from environment variables (and .env when present)."""
        if dotenv:
            load_dotenv()

        port_raw = os.environ.get("PORT", "").strip()
        try:
            port = int(port_raw) if port_raw else DEFAULT_PORT
        except ValueError as exc:
            raise ValidationError(f"PORT must be an integer, got {port_raw!r}") from exc

        return cls(
            store_url=os.environ.get("TASKBOARD_STORE_URL", "").strip() or DEFAULT_STORE_URL,
            jwt_secret=os.environ.get("JWT_SECRET", "").strip(),
            admin_invite_token=os.environ.get("ADMIN_INVITE_TOKEN", "").strip() or None,
            allowed_origin=os.environ.get("FRONTEND_URL", "").strip() or "*",
            port=port,
            upload_dir=os.environ.get("UPLOAD_DIR", "").strip() or DEFAULT_UPLOAD_DIR,
            log_level=os.environ.get("LOG_LEVEL", "INFO").strip().upper() or "INFO",
        )

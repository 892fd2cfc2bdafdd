"""
Root conftest.py: test-suite wide configuration.

Pins the environment the API reads at import time so the suite never touches
a developer's .env, a real store or the working directory's uploads/.
"""

import os
import tempfile

os.environ.setdefault("JWT_SECRET", "test-jwt-secret")
os.environ.setdefault("ADMIN_INVITE_TOKEN", "test-admin-invite")
os.environ.setdefault("TASKBOARD_STORE_URL", "memory://")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="taskboard-uploads-"))

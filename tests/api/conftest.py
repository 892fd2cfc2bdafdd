"""
Shared fixtures for API tests.
"""
import pytest
from fastapi.testclient import TestClient

from taskboard_api.main import app
from taskboard_api.store import MemoryStore, set_store
from taskboard_core.config import ApiConfig

TEST_JWT_SECRET = "test-jwt-secret"
TEST_ADMIN_INVITE = "test-admin-invite"
TEST_PASSWORD = "s3cret-pass"


@pytest.fixture(autouse=True)
def store(tmp_path):
    """Fresh secrets, an empty in-memory store and a private upload dir for each test."""
    import taskboard_api.auth as auth_mod
    import taskboard_api.uploads as uploads_mod

    auth_mod.init_auth(ApiConfig(jwt_secret=TEST_JWT_SECRET, admin_invite_token=TEST_ADMIN_INVITE))
    mem = MemoryStore()
    set_store(mem)
    uploads_mod.init_uploads(str(tmp_path / "uploads"))
    yield mem
    mem.clear()


@pytest.fixture()
def client():
    """FastAPI TestClient with the API mounted."""
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def register_user(client):
    """Register a user through the API and return the response body (with token)."""
    def _register(name, email, password=TEST_PASSWORD, invite=None, **extra):
        body = {"name": name, "email": email, "password": password, **extra}
        if invite is not None:
            body["adminInviteToken"] = invite
        resp = client.post("/api/auth/register", json=body)
        assert resp.status_code == 201, resp.text
        return resp.json()
    return _register


@pytest.fixture()
def bearer():
    return lambda user: {"Authorization": f"Bearer {user['token']}"}


@pytest.fixture()
def admin(register_user):
    return register_user("Ada Admin", "ada@example.com", invite=TEST_ADMIN_INVITE)


@pytest.fixture()
def member(register_user):
    return register_user("Milo Member", "milo@example.com", profileImageUrl="http://img/milo.png")


@pytest.fixture()
def other_member(register_user):
    return register_user("Olga Other", "olga@example.com")


@pytest.fixture()
def admin_headers(admin, bearer):
    return bearer(admin)


@pytest.fixture()
def member_headers(member, bearer):
    return bearer(member)


@pytest.fixture()
def other_headers(other_member, bearer):
    return bearer(other_member)


@pytest.fixture()
def make_task(client, admin_headers):
    """Create a task as the admin and return it."""
    def _make(assigned_to, **fields):
        body = {"title": "Write report", "assignedTo": assigned_to, **fields}
        resp = client.post("/api/tasks", json=body, headers=admin_headers)
        assert resp.status_code == 201, resp.text
        return resp.json()["task"]
    return _make

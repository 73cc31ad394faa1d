"""Shared fixtures for the EduDash test suite."""

import pytest
from httpx import ASGITransport, AsyncClient

from api.config import Settings
from api.main import create_app
from dashboard.models import ContentItem, ZoneData
from dashboard.ZoneClient import ApiResult
from database.ZoneRepository import ZoneRepository
from database.ZoneStore import LocalZoneFile
from database.errors import ZoneStoreError

TEST_SECRET = "test-secret-for-edudash-sessions-0123456789"


# =============================================================================
# Content fixtures
# =============================================================================


def item(item_id, item_type="folder", parent=None, name=None, **fields):
    return ContentItem(
        id=item_id,
        name=name or item_id,
        type=item_type,
        parent_id=parent,
        created_at="2024-01-01",
        **fields,
    )


@pytest.fixture
def make_item():
    """Factory for ContentItem instances with terse defaults."""
    return item


@pytest.fixture
def sample_tree():
    """Two top-level folders, one nested three levels deep.

    lecture/
        physics/
            mechanics/
                v-mech (video)
            v-phys (video)
        p-notes (pdf)
    notes/
        v-root-note (video)
    v-root (video, at root)
    """
    return [
        item("lecture", name="Lecture"),
        item("physics", parent="lecture", name="Physics"),
        item("mechanics", parent="physics", name="Mechanics"),
        item(
            "v-mech",
            "video",
            parent="mechanics",
            name="Newton",
            video_url="https://www.youtube.com/watch?v=W6NZfCO5SIk",
        ),
        item("v-phys", "video", parent="physics", video_url="https://youtu.be/TNhaISOUy6Q"),
        item("p-notes", "pdf", parent="lecture", pdf_url="https://example.com/n.pdf"),
        item("notes", name="Notes"),
        item("v-root-note", "video", parent="notes", video_url="https://example.com/v.mp4"),
        item("v-root", "video", video_url="https://example.com/root.mp4"),
    ]


# =============================================================================
# Storage fakes
# =============================================================================


class FakeRemoteStore:
    """In-memory stand-in for the Supabase store."""

    def __init__(self):
        self.rows = {}
        self.fail_reads = False
        self.fail_writes = False

    def load(self, key):
        if self.fail_reads:
            raise ZoneStoreError("remote read failed")
        return self.rows.get(key)

    def save(self, key, data):
        if self.fail_writes:
            raise ZoneStoreError("remote write failed")
        self.rows[key] = data


@pytest.fixture
def remote():
    return FakeRemoteStore()


@pytest.fixture
def local_file(tmp_path):
    return LocalZoneFile(tmp_path / "folder-structure.json")


@pytest.fixture
def repository(remote, local_file):
    return ZoneRepository(remote=remote, local=local_file)


class FakeZoneClient:
    """Records what the Dashboard sends and serves a fixed document."""

    def __init__(self, document=None, save_result=None):
        self.document = document or ZoneData(contents=[])
        self.save_result = save_result or ApiResult(ok=True)
        self.fetched_keys = []
        self.saved = []

    def fetch_zone(self, key=None):
        self.fetched_keys.append(key)
        return self.document

    def save_zone(self, data, key=None):
        self.saved.append((data, key))
        return self.save_result


@pytest.fixture
def fake_client():
    return FakeZoneClient()


# =============================================================================
# API fixtures
# =============================================================================


@pytest.fixture
def settings(tmp_path):
    """Development settings with the fallback roster and no remote store."""
    return Settings.from_env(
        {
            "JWT_SECRET": TEST_SECRET,
            "LOCAL_DATA_PATH": str(tmp_path / "folder-structure.json"),
        }
    )


@pytest.fixture
def app(settings, repository):
    return create_app(settings, repository)


@pytest.fixture
async def client(app):
    """Create an in-process client for the app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client


@pytest.fixture
async def admin_client(client):
    """A client already holding an admin session cookie."""
    response = await client.post(
        "/api/login", json={"username": "Rehan", "password": "10820"}
    )
    assert response.status_code == 200
    return client


@pytest.fixture
def valid_zone():
    return {
        "categories": [],
        "videos": [],
        "contents": [
            {
                "id": "f1",
                "name": "Lecture",
                "type": "folder",
                "parentId": None,
                "createdAt": "2024-01-01",
            }
        ],
    }

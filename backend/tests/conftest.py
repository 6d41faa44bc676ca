from __future__ import annotations

from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient

from app.config import Settings
from app.main import create_app
from app.services.auth import StaticTokenVerifier
from app.services.feedback_service import FeedbackService
from app.storage.document_store import DocumentStore

ADMIN_TOKEN = "test-admin-token"
AUTH_HEADERS = {"Authorization": f"Bearer {ADMIN_TOKEN}"}


@pytest.fixture
def tmp_data_dir(tmp_path: Path) -> Path:
    return tmp_path / "data"


@pytest.fixture
def store(tmp_data_dir: Path) -> DocumentStore:
    return DocumentStore(data_dir=tmp_data_dir)


@pytest.fixture
def service(store: DocumentStore) -> FeedbackService:
    return FeedbackService(store, StaticTokenVerifier(ADMIN_TOKEN))


@pytest.fixture
def test_settings(tmp_data_dir: Path) -> Settings:
    return Settings(data_dir=tmp_data_dir, admin_token=ADMIN_TOKEN)


@pytest.fixture
def app(test_settings: Settings, store: DocumentStore):
    return create_app(settings=test_settings, store=store)


@pytest.fixture
async def client(app) -> AsyncClient:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


def make_payload(**overrides) -> dict:
    payload = {
        "name": "Jordan",
        "email": "jordan@example.com",
        "experience": "good",
        "feedback": "The workshop helped me a lot.",
        "improvements": "More breathing exercises",
        "resilienceScore": 80,
    }
    payload.update(overrides)
    return payload

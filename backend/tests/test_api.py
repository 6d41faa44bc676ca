"""End-to-end tests through the HTTP surface."""

import csv
import io
from datetime import datetime
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient

from app.config import Settings
from app.main import create_app
from app.storage.document_store import DocumentKind, DocumentStore, StorageError

from conftest import AUTH_HEADERS, make_payload


class TestHealth:
    @pytest.mark.asyncio
    async def test_health(self, client):
        resp = await client.get("/health")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "healthy"
        assert data["service"] == "Life Strings API"
        assert "timestamp" in data


class TestSubmitFeedback:
    @pytest.mark.asyncio
    async def test_accepts_valid_submission(self, client):
        resp = await client.post(
            "/api/feedback", json=make_payload(), headers={"User-Agent": "pytest-agent"}
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["success"] is True
        assert data["feedbackId"]

        listed = await client.get("/api/feedback/all", headers=AUTH_HEADERS)
        record = listed.json()["data"]["feedback"][0]
        assert record["id"] == data["feedbackId"]
        assert record["clientMeta"]["userAgent"] == "pytest-agent"

    @pytest.mark.asyncio
    async def test_minimal_submission(self, client):
        resp = await client.post(
            "/api/feedback", json={"experience": "average", "feedback": "Ten chars!"}
        )
        assert resp.status_code == 200

        listed = await client.get("/api/feedback/all", headers=AUTH_HEADERS)
        record = listed.json()["data"]["feedback"][0]
        assert record["name"] == "Anonymous"
        assert record["email"] is None
        assert record["resilienceScore"] is None

    @pytest.mark.asyncio
    async def test_invalid_experience(self, client):
        resp = await client.post("/api/feedback", json=make_payload(experience="terrible"))
        assert resp.status_code == 400
        assert resp.json() == {"success": False, "error": "Invalid experience rating"}

    @pytest.mark.asyncio
    async def test_feedback_too_short(self, client):
        resp = await client.post("/api/feedback", json=make_payload(feedback="too short"))
        assert resp.status_code == 400
        assert resp.json()["error"] == "Feedback must be between 10 and 2000 characters"

    @pytest.mark.asyncio
    async def test_string_score_is_parsed(self, client):
        await client.post("/api/feedback", json=make_payload(resilienceScore="75"))
        resp = await client.get("/api/analytics")
        assert resp.json()["data"]["averageScore"] == 75

    @pytest.mark.asyncio
    async def test_malformed_json(self, client):
        resp = await client.post(
            "/api/feedback",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )
        assert resp.status_code == 400
        assert resp.json()["success"] is False

    @pytest.mark.asyncio
    async def test_wrong_field_type(self, client):
        resp = await client.post("/api/feedback", json=make_payload(feedback=12345678901))
        assert resp.status_code == 400
        assert "feedback" in resp.json()["error"]

    @pytest.mark.asyncio
    async def test_oversized_body(self, tmp_data_dir: Path):
        app = create_app(settings=Settings(data_dir=tmp_data_dir, max_body_size=100))
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
            resp = await c.post("/api/feedback", json=make_payload(feedback="x" * 500))
        assert resp.status_code == 413


class TestAnalytics:
    @pytest.mark.asyncio
    async def test_empty_analytics(self, client):
        resp = await client.get("/api/analytics")
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["totalSubmissions"] == 0
        assert data["averageScore"] == 0
        assert data["experienceCounts"] == {}
        assert data["topImprovementWords"] == []

    @pytest.mark.asyncio
    async def test_scenario(self, client):
        await client.post("/api/feedback", json=make_payload(resilienceScore=80, experience="good"))
        await client.post("/api/feedback", json=make_payload(resilienceScore=100, experience="excellent"))
        data = (await client.get("/api/analytics")).json()["data"]
        assert data["totalSubmissions"] == 2
        assert data["experienceCounts"] == {"good": 1, "excellent": 1}
        assert data["averageScore"] == 90

    @pytest.mark.asyncio
    async def test_corrupt_analytics_is_generic_500(self, client, tmp_data_dir: Path):
        tmp_data_dir.mkdir(parents=True, exist_ok=True)
        (tmp_data_dir / "analytics.json").write_text("{broken")
        resp = await client.get("/api/analytics")
        assert resp.status_code == 500
        assert resp.json() == {"success": False, "error": "Internal server error"}


class TestProtectedEndpoints:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["/api/feedback/all", "/api/export/csv", "/api/export/json"])
    @pytest.mark.parametrize(
        "headers",
        [{}, {"Authorization": "Bearer wrong"}, {"Authorization": "test-admin-token"}],
    )
    async def test_rejects_bad_credentials(self, client, path, headers):
        resp = await client.get(path, headers=headers)
        assert resp.status_code == 401
        assert resp.json() == {"success": False, "error": "Unauthorized"}

    @pytest.mark.asyncio
    async def test_unconfigured_token_rejects_everything(self, tmp_data_dir: Path):
        app = create_app(settings=Settings(data_dir=tmp_data_dir, admin_token=""))
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
            resp = await c.get("/api/feedback/all", headers={"Authorization": "Bearer "})
        assert resp.status_code == 401

    @pytest.mark.asyncio
    async def test_list_all_newest_first(self, client):
        ids = []
        for name in ("one", "two", "three"):
            resp = await client.post("/api/feedback", json=make_payload(name=name))
            ids.append(resp.json()["feedbackId"])

        resp = await client.get("/api/feedback/all", headers=AUTH_HEADERS)
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["total"] == 3
        timestamps = [
            datetime.fromisoformat(r["submittedAt"].replace("Z", "+00:00")) for r in data["feedback"]
        ]
        assert timestamps == sorted(timestamps, reverse=True)
        assert {r["id"] for r in data["feedback"]} == set(ids)

    @pytest.mark.asyncio
    async def test_csv_export(self, client):
        await client.post("/api/feedback", json=make_payload(feedback='He said "hi" to us'))
        resp = await client.get("/api/export/csv", headers=AUTH_HEADERS)
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/csv")
        assert "life-strings-feedback.csv" in resp.headers["content-disposition"]
        assert '"He said ""hi"" to us"' in resp.text
        rows = list(csv.DictReader(io.StringIO(resp.text)))
        assert rows[0]["feedbackText"] == 'He said "hi" to us'

    @pytest.mark.asyncio
    async def test_json_export_headers(self, client):
        await client.post("/api/feedback", json=make_payload())
        resp = await client.get("/api/export/json", headers=AUTH_HEADERS)
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("application/json")
        assert "life-strings-feedback.json" in resp.headers["content-disposition"]
        assert len(resp.json()) == 1

    @pytest.mark.asyncio
    async def test_unknown_export_format_still_requires_token(self, client):
        resp = await client.get("/api/export/xml")
        assert resp.status_code == 401

    @pytest.mark.asyncio
    async def test_unknown_export_format(self, client):
        resp = await client.get("/api/export/xml", headers=AUTH_HEADERS)
        assert resp.status_code == 404
        assert resp.json() == {"success": False, "error": "Endpoint not found"}


class TestErrorHandling:
    @pytest.mark.asyncio
    async def test_unknown_route(self, client):
        resp = await client.get("/api/nothing-here")
        assert resp.status_code == 404
        assert resp.json() == {"success": False, "error": "Endpoint not found"}

    @pytest.mark.asyncio
    async def test_wrong_method(self, client):
        resp = await client.delete("/api/feedback")
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_log_write_failure_is_generic_500(self, tmp_data_dir: Path, test_settings: Settings):
        class BrokenStore(DocumentStore):
            async def save(self, kind, document):
                raise StorageError(f"permission denied on {kind.value}")

        app = create_app(settings=test_settings, store=BrokenStore(tmp_data_dir))
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
            resp = await c.post("/api/feedback", json=make_payload())
        assert resp.status_code == 500
        assert resp.json() == {"success": False, "error": "Internal server error"}

    @pytest.mark.asyncio
    async def test_unexpected_error_hides_details(self, tmp_data_dir: Path, test_settings: Settings):
        class ExplodingStore(DocumentStore):
            async def load(self, kind):
                raise RuntimeError("secret internals")

        app = create_app(settings=test_settings, store=ExplodingStore(tmp_data_dir))
        transport = ASGITransport(app=app, raise_app_exceptions=False)
        async with AsyncClient(transport=transport, base_url="http://test") as c:
            resp = await c.get("/api/analytics")
        assert resp.status_code == 500
        assert "secret internals" not in resp.text
        assert resp.json()["success"] is False

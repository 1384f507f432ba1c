"""Knowledge-base documents and the ingest webhook trigger."""

import httpx
import pytest

from foodtech.core.config import settings
from foodtech.core.roles import UserRole
from foodtech.models.kb import KBCategory, KBDocument, KBIndexStatus
from foodtech.services.kb_service import kb_service

WEBHOOK_URL = "https://workflows.foodtech.test/webhook/kb-ingest"


@pytest.fixture()
def coo(make_profile):
    return make_profile("coo@foodtech.test", role=UserRole.coo, name="COO")


@pytest.fixture()
def document(db, coo):
    return kb_service.create_document(
        db, {"title": "HACCP plan", "category": KBCategory.SOP}, created_by=coo.id,
    )


@pytest.fixture()
def webhook_configured(monkeypatch):
    monkeypatch.setattr(settings, "KB_INGEST_WEBHOOK_URL", WEBHOOK_URL)
    monkeypatch.setattr(settings, "KB_INGEST_SHARED_SECRET", "s3cret")


@pytest.fixture()
def webhook(monkeypatch, webhook_configured):
    """Record webhook calls and answer with ``webhook.status``."""
    class Recorder:
        status = 200
        calls = []

        def post(self, url, json=None, headers=None, timeout=None):
            self.calls.append({"url": url, "json": json, "headers": headers})
            return httpx.Response(self.status, text="", request=httpx.Request("POST", url))

    recorder = Recorder()
    recorder.calls = []
    monkeypatch.setattr("foodtech.services.kb_service.httpx.post", recorder.post)
    return recorder


def _trigger(client, headers, document_id):
    return client.post("/api/functions/kb-trigger-ingest", json={"document_id": document_id}, headers=headers)


class TestTriggerIngest:

    def test_success_marks_pending_and_calls_webhook(self, client, db, coo, document, auth_headers, webhook):
        response = _trigger(client, auth_headers(coo), document.id)

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Ingest triggered", "document_id": document.id}
        assert webhook.calls == [{
            "url": WEBHOOK_URL,
            "json": {"document_id": document.id},
            "headers": {"X-Api-Key": "s3cret"},
        }]
        db.refresh(document)
        assert document.index_status == KBIndexStatus.pending
        assert document.index_error is None

    def test_webhook_error_marks_document(self, client, db, coo, document, auth_headers, webhook):
        webhook.status = 500
        response = _trigger(client, auth_headers(coo), document.id)

        assert response.status_code == 502
        assert response.json() == {"error": "Ingest webhook error: 500"}
        db.refresh(document)
        assert document.index_status == KBIndexStatus.error
        assert document.index_error == "Ingest webhook error: 500"

    def test_unreachable_webhook(self, client, db, coo, document, auth_headers, webhook_configured, monkeypatch):
        def refuse(*args, **kwargs):
            raise httpx.ConnectError("connection refused")

        monkeypatch.setattr("foodtech.services.kb_service.httpx.post", refuse)
        response = _trigger(client, auth_headers(coo), document.id)

        assert response.status_code == 502
        db.refresh(document)
        assert document.index_status == KBIndexStatus.error

    def test_not_configured_is_503(self, client, db, coo, document, auth_headers, monkeypatch):
        monkeypatch.setattr(settings, "KB_INGEST_WEBHOOK_URL", None)
        response = _trigger(client, auth_headers(coo), document.id)

        assert response.status_code == 503
        db.refresh(document)
        assert document.index_status == KBIndexStatus.not_indexed

    def test_role_gate(self, client, document, make_profile, auth_headers, webhook):
        user = make_profile("acc@foodtech.test", role=UserRole.accountant)
        assert _trigger(client, auth_headers(user), document.id).status_code == 403
        assert webhook.calls == []

    def test_unknown_document_is_404(self, client, coo, auth_headers, webhook):
        assert _trigger(client, auth_headers(coo), 4242).status_code == 404


class TestDocuments:

    def test_crud(self, client, db, coo, auth_headers):
        headers = auth_headers(coo)
        created = client.post(
            "/api/kb/documents",
            json={"title": "Org chart", "category": "OrgStructure"},
            headers=headers,
        )
        assert created.status_code == 201
        doc_id = created.json()["id"]
        assert created.json()["index_status"] == "not_indexed"

        updated = client.put(f"/api/kb/documents/{doc_id}", json={"status": "archived"}, headers=headers)
        assert updated.json()["status"] == "archived"
        assert updated.json()["title"] == "Org chart"

        assert client.delete(f"/api/kb/documents/{doc_id}", headers=headers).status_code == 200
        assert db.query(KBDocument).count() == 0

    def test_invalid_category(self, client, coo, auth_headers):
        response = client.post(
            "/api/kb/documents", json={"title": "X", "category": "Gossip"}, headers=auth_headers(coo),
        )
        assert response.status_code == 400

    def test_file_upload_and_signed_url(self, client, storage, coo, document, auth_headers):
        headers = auth_headers(coo)
        response = client.post(
            f"/api/kb/documents/{document.id}/file",
            files={"file": ("plan.pdf", b"%PDF", "application/pdf")},
            headers=headers,
        )
        assert response.status_code == 200
        path = response.json()["storage_path"]
        assert path.startswith(f"{document.id}/") and path.endswith(".pdf")
        assert storage.keys("kb") == [path]

        url = client.get(f"/api/kb/documents/{document.id}/file", headers=headers).json()["url"]
        assert path in url

    def test_signed_url_without_file_is_404(self, client, coo, document, auth_headers):
        response = client.get(f"/api/kb/documents/{document.id}/file", headers=auth_headers(coo))
        assert response.status_code == 404

    def test_readers_cannot_edit(self, client, document, make_profile, auth_headers):
        reader = make_profile("reader@foodtech.test", role=UserRole.lawyer)
        headers = auth_headers(reader)
        assert client.get("/api/kb/documents", headers=headers).status_code == 200
        assert client.delete(f"/api/kb/documents/{document.id}", headers=headers).status_code == 403

"""MinIO error mapping in the storage service."""

from unittest.mock import MagicMock

import pytest
from minio.error import S3Error
from urllib3.exceptions import MaxRetryError

from foodtech.core.exceptions import StorageError
from foodtech.models.rd import RdRequest, RdRequestAttachment
from foodtech.services.attachment_service import IncomingFile, rd_attachments
from foodtech.services.storage_service import StorageService


def _s3_error(code):
    return S3Error(
        code=code,
        message=code,
        resource="/rd-attachments/requests/1/a.pdf",
        request_id="req",
        host_id="host",
        response=None,
    )


def _unreachable():
    return MaxRetryError(None, "/rd-attachments/requests/1/a.pdf", reason=ConnectionRefusedError())


@pytest.fixture()
def service():
    svc = StorageService()
    svc.client = MagicMock()
    return svc


class TestRemove:

    def test_missing_key_is_ignored(self, service):
        service.client.remove_object.side_effect = _s3_error("NoSuchKey")
        service.remove("rd-attachments", "requests/1/a.pdf")

    def test_other_s3_error_is_storage_error(self, service):
        service.client.remove_object.side_effect = _s3_error("AccessDenied")
        with pytest.raises(StorageError):
            service.remove("rd-attachments", "requests/1/a.pdf")

    def test_unreachable_endpoint_is_storage_error(self, service):
        service.client.remove_object.side_effect = _unreachable()
        with pytest.raises(StorageError):
            service.remove("rd-attachments", "requests/1/a.pdf")

    def test_socket_error_is_storage_error(self, service):
        service.client.remove_object.side_effect = ConnectionResetError("reset")
        with pytest.raises(StorageError):
            service.remove("rd-attachments", "requests/1/a.pdf")


class TestUploadAndUrls:

    def test_upload_unreachable(self, service):
        service.client.put_object.side_effect = _unreachable()
        with pytest.raises(StorageError, match="Failed to upload file"):
            service.upload("rd-attachments", "requests/1/a.pdf", b"x", "application/pdf")

    def test_upload_passes_length_and_type(self, service):
        service.upload("rd-attachments", "requests/1/a.pdf", b"abc", "application/pdf")
        _, kwargs = service.client.put_object.call_args
        assert kwargs["length"] == 3
        assert kwargs["content_type"] == "application/pdf"

    def test_presign_unreachable(self, service):
        service.client.presigned_get_object.side_effect = _unreachable()
        with pytest.raises(StorageError):
            service.presigned_url("rd-attachments", "requests/1/a.pdf")


class TestAttachmentsOverRealStorage:

    @pytest.fixture()
    def rd_request(self, db, make_profile):
        author = make_profile("dev@foodtech.test")
        request = RdRequest(title="Brisket", author_id=author.id)
        db.add(request)
        db.commit()
        return request, author

    def test_delete_with_unreachable_storage_still_removes_row(
        self, db, cache, service, rd_request, monkeypatch,
    ):
        request, author = rd_request
        monkeypatch.setattr(rd_attachments, "storage", service)
        row = rd_attachments.upload(
            db, IncomingFile("a.pdf", "application/pdf", b"x"), "request", request.id, author.id,
        )

        service.client.remove_object.side_effect = _unreachable()
        rd_attachments.delete(db, "request", row.id, row.file_path)

        assert db.query(RdRequestAttachment).count() == 0

    def test_delete_twice_after_object_is_gone(self, db, cache, service, rd_request, monkeypatch):
        request, author = rd_request
        monkeypatch.setattr(rd_attachments, "storage", service)
        row = rd_attachments.upload(
            db, IncomingFile("a.pdf", "application/pdf", b"x"), "request", request.id, author.id,
        )
        service.client.remove_object.side_effect = _s3_error("NoSuchKey")

        rd_attachments.remove_object_quietly(row.file_path)
        rd_attachments.delete(db, "request", row.id, row.file_path)
        assert db.query(RdRequestAttachment).count() == 0

    def test_unreachable_upload_fails_one_file_only(
        self, client, service, rd_request, auth_headers, monkeypatch,
    ):
        request, author = rd_request
        monkeypatch.setattr(rd_attachments, "storage", service)
        calls = {"n": 0}

        def flaky_put(*args, **kwargs):
            calls["n"] += 1
            if calls["n"] == 1:
                raise _unreachable()

        service.client.put_object.side_effect = flaky_put
        response = client.post(
            f"/api/rd/requests/{request.id}/attachments",
            files=[
                ("files", ("first.pdf", b"1", "application/pdf")),
                ("files", ("second.pdf", b"2", "application/pdf")),
            ],
            headers=auth_headers(author),
        )
        assert response.status_code == 200
        assert [r["success"] for r in response.json()["results"]] == [False, True]

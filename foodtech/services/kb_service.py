"""Knowledge-base service: document CRUD, source files and ingestion triggering."""

import logging
import uuid
from datetime import timedelta
from typing import Any, Dict, List

import httpx
from sqlalchemy.orm import Session

from foodtech.core.config import settings
from foodtech.core.exceptions import (
    ResourceNotFoundError, ServiceUnavailableError, UpstreamError,
)
from foodtech.models.kb import KBDocument, KBIndexStatus
from foodtech.services.storage_service import storage_service

logger = logging.getLogger("foodtech")


class KBService:
    """Manages knowledge-base documents and hands them to the indexing workflow."""

    def __init__(self):
        self.storage = storage_service
        self.bucket = settings.KB_BUCKET

    @staticmethod
    def list_documents(db: Session) -> List[KBDocument]:
        return db.query(KBDocument).order_by(KBDocument.updated_at.desc(), KBDocument.id.desc()).all()

    @staticmethod
    def get_document(db: Session, document_id: int) -> KBDocument:
        doc = db.get(KBDocument, document_id)
        if doc is None:
            raise ResourceNotFoundError(f"Document {document_id} not found")
        return doc

    @staticmethod
    def create_document(db: Session, values: Dict[str, Any], created_by: int) -> KBDocument:
        doc = KBDocument(created_by=created_by, **values)
        db.add(doc)
        db.commit()
        db.refresh(doc)
        return doc

    def update_document(self, db: Session, document_id: int, values: Dict[str, Any]) -> KBDocument:
        doc = self.get_document(db, document_id)
        for key, value in values.items():
            setattr(doc, key, value)
        db.commit()
        db.refresh(doc)
        return doc

    def delete_document(self, db: Session, document_id: int) -> None:
        doc = self.get_document(db, document_id)
        if doc.storage_path:
            self.storage.remove(doc.storage_bucket or self.bucket, doc.storage_path)
        db.delete(doc)
        db.commit()

    def upload_file(
        self, db: Session, document_id: int, file_name: str, content_type: str, content: bytes,
    ) -> KBDocument:
        """Store the document's source file and point the document at it."""
        doc = self.get_document(db, document_id)
        ext = file_name.rsplit(".", 1)[1] if "." in file_name else "bin"
        path = f"{document_id}/{uuid.uuid4()}.{ext}"
        self.storage.upload(self.bucket, path, content, content_type)

        doc.storage_bucket = self.bucket
        doc.storage_path = path
        doc.mime_type = content_type
        db.commit()
        db.refresh(doc)
        return doc

    def signed_url(self, db: Session, document_id: int) -> str:
        doc = self.get_document(db, document_id)
        if not doc.storage_path:
            raise ResourceNotFoundError(f"Document {document_id} has no file")
        return self.storage.presigned_url(doc.storage_bucket or self.bucket, doc.storage_path, timedelta(hours=1))

    @staticmethod
    def ingest_configured() -> bool:
        return bool(settings.KB_INGEST_WEBHOOK_URL and settings.KB_INGEST_SHARED_SECRET)

    def trigger_ingest(self, db: Session, document_id: int) -> None:
        """Mark the document pending and call the ingestion webhook.

        On a webhook failure the document is marked ``error`` and
        UpstreamError is raised.
        """
        if not self.ingest_configured():
            raise ServiceUnavailableError(
                "Ingest webhook is not configured. Set KB_INGEST_WEBHOOK_URL and KB_INGEST_SHARED_SECRET."
            )

        doc = self.get_document(db, document_id)
        doc.index_status = KBIndexStatus.pending
        doc.index_error = None
        db.commit()

        logger.info("Calling ingest webhook for document %s", document_id)
        try:
            response = httpx.post(
                settings.KB_INGEST_WEBHOOK_URL,
                json={"document_id": document_id},
                headers={"X-Api-Key": settings.KB_INGEST_SHARED_SECRET},
                timeout=settings.KB_INGEST_TIMEOUT_SECONDS,
            )
        except httpx.HTTPError as e:
            logger.error("Ingest webhook unreachable: %s", e)
            self._mark_failed(db, doc, "Ingest webhook unreachable")
            raise UpstreamError("Ingest webhook unreachable")

        if not response.is_success:
            logger.error("Ingest webhook error: %s - %s", response.status_code, response.text)
            message = f"Ingest webhook error: {response.status_code}"
            self._mark_failed(db, doc, message)
            raise UpstreamError(message)

        logger.info("Ingest triggered for document %s", document_id)

    @staticmethod
    def _mark_failed(db: Session, doc: KBDocument, message: str) -> None:
        doc.index_status = KBIndexStatus.error
        doc.index_error = message
        db.commit()


kb_service = KBService()

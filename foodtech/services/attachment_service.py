"""Attachment service: files attached to purchase requests, invoices and R&D requests.

The storage object and its metadata row are written as a pair. When the
metadata insert fails after a successful upload, the object is removed again
(best effort, not atomic with the upload).
"""

import logging
import time
import uuid
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional, Dict, Any, List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from foodtech.core.config import settings
from foodtech.core.exceptions import (
    StorageError, ResourceNotFoundError, TooLargeError,
    UnsupportedTypeError, ValidationError,
)
from foodtech.models.purchase import PurchaseRequestAttachment, PurchaseInvoiceAttachment
from foodtech.models.rd import RdRequestAttachment
from foodtech.services.cache_service import cache_service
from foodtech.services.storage_service import storage_service

logger = logging.getLogger("foodtech")

MAX_FILE_SIZE = 5 * 1024 * 1024  # 5 MiB
SIGNED_URL_TTL = timedelta(hours=1)

PURCHASE_ALLOWED_TYPES = (
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "application/vnd.ms-excel",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "image/jpeg",
    "image/png",
)

RD_ALLOWED_TYPES = PURCHASE_ALLOWED_TYPES + (
    "application/vnd.ms-powerpoint",
    "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    "text/plain",
    "text/csv",
    "image/gif",
    "image/webp",
    "application/zip",
    "application/x-rar-compressed",
    "application/x-7z-compressed",
)


@dataclass
class IncomingFile:
    """A file received from a client, fully read into memory."""
    file_name: str
    content_type: str
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class AttachmentTarget:
    """Metadata table and owning-entity column for one entity type."""
    model: type
    fk_column: str


def build_storage_key(entity_type: str, entity_id: int, file_name: str) -> str:
    """Derive a collision-resistant key; the original name only contributes its extension."""
    ext = "bin"
    if "." in file_name:
        ext = file_name.rsplit(".", 1)[1].lower() or "bin"
    safe_name = f"{int(time.time() * 1000)}_{uuid.uuid4()}.{ext}"
    return f"{entity_type}s/{entity_id}/{safe_name}"


def format_file_size(size_bytes: int) -> str:
    """Human-readable size, e.g. ``1.5 KB``."""
    if size_bytes <= 0:
        return "0 B"
    units = ["B", "KB", "MB", "GB"]
    value = float(size_bytes)
    i = 0
    while value >= 1024 and i < len(units) - 1:
        value /= 1024
        i += 1
    return f"{round(value, 1):g} {units[i]}"


def file_icon(mime_type: str) -> str:
    if mime_type == "application/pdf":
        return "📄"
    if "word" in mime_type:
        return "📝"
    if "excel" in mime_type or "spreadsheet" in mime_type:
        return "📊"
    if "powerpoint" in mime_type or "presentation" in mime_type:
        return "📽️"
    if mime_type.startswith("image/"):
        return "🖼️"
    if any(x in mime_type for x in ("zip", "rar", "7z")):
        return "📦"
    if mime_type in ("text/plain", "text/csv"):
        return "📃"
    return "📎"


class AttachmentService:
    """Validates, uploads, lists and deletes attachments of one family of entities."""

    def __init__(
        self,
        variant: str,
        bucket: str,
        targets: Dict[str, AttachmentTarget],
        allowed_types: tuple,
        max_file_size: int = MAX_FILE_SIZE,
    ):
        self.variant = variant
        self.bucket = bucket
        self.targets = targets
        self.allowed_types = allowed_types
        self.max_file_size = max_file_size
        self.storage = storage_service
        self.cache = cache_service

    def validate(self, file: IncomingFile) -> None:
        """Raise if the file's type is not allowed or it is too large."""
        self.check(file.content_type, file.size)

    def check(self, content_type: str, size: int) -> None:
        """Type then size check on declared metadata, before any content is read."""
        if content_type not in self.allowed_types:
            raise UnsupportedTypeError(
                f"Unsupported file type '{content_type}'."
            )
        if size > self.max_file_size:
            limit_mb = self.max_file_size // (1024 * 1024)
            raise TooLargeError(f"File is too large. Maximum size: {limit_mb} MB")

    def upload(
        self,
        db: Session,
        file: IncomingFile,
        entity_type: str,
        entity_id: int,
        uploader_id: int,
        event_id: Optional[int] = None,
    ):
        """Store the file and write its metadata row.

        Returns:
            The created attachment ORM object.
        """
        target = self._target(entity_type)
        self.validate(file)

        file_path = build_storage_key(entity_type, entity_id, file.file_name)
        self.storage.upload(self.bucket, file_path, file.content, file.content_type)

        values = {
            target.fk_column: entity_id,
            "file_name": file.file_name,
            "file_path": file_path,
            "file_type": file.content_type,
            "file_size": file.size,
            "uploaded_by": uploader_id,
        }
        if event_id is not None:
            values["event_id"] = event_id

        attachment = target.model(**values)
        try:
            db.add(attachment)
            db.commit()
            db.refresh(attachment)
        except SQLAlchemyError as e:
            db.rollback()
            logger.error("Attachment metadata insert failed for %s: %s", file_path, e)
            self.remove_object_quietly(file_path)
            raise StorageError("Failed to save file metadata")

        self.cache.delete(self._cache_key(entity_type, entity_id))
        logger.info(
            "Attachment %s uploaded to %s/%s by profile %s",
            attachment.id, self.bucket, file_path, uploader_id,
        )
        return attachment

    def list(self, db: Session, entity_type: str, entity_id: int) -> List[Dict[str, Any]]:
        """All attachments of an entity, oldest first."""
        target = self._target(entity_type)
        cache_key = self._cache_key(entity_type, entity_id)
        cached = self.cache.get_json(cache_key)
        if cached is not None:
            return cached

        model = target.model
        rows = (
            db.query(model)
            .filter(getattr(model, target.fk_column) == entity_id)
            .order_by(model.created_at.asc(), model.id.asc())
            .all()
        )
        result = [self.to_dict(row) for row in rows]
        self.cache.set_json(cache_key, result, ttl_seconds=settings.ATTACHMENT_CACHE_TTL_SECONDS)
        return result

    def get(self, db: Session, entity_type: str, attachment_id: int):
        target = self._target(entity_type)
        attachment = db.get(target.model, attachment_id)
        if attachment is None:
            raise ResourceNotFoundError(f"Attachment {attachment_id} not found")
        return attachment

    def delete(self, db: Session, entity_type: str, attachment_id: int, storage_path: str) -> None:
        """Remove the stored object, then the metadata row."""
        target = self._target(entity_type)
        self.remove_object_quietly(storage_path)

        attachment = db.get(target.model, attachment_id)
        if attachment is None:
            raise ResourceNotFoundError(f"Attachment {attachment_id} not found")
        entity_id = getattr(attachment, target.fk_column)
        try:
            db.delete(attachment)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error("Attachment %s metadata delete failed: %s", attachment_id, e)
            raise StorageError("Failed to delete file")

        self.cache.delete(self._cache_key(entity_type, entity_id))

    def signed_url(self, storage_path: str) -> str:
        """Time-limited (1 hour) download URL."""
        return self.storage.presigned_url(self.bucket, storage_path, expires=SIGNED_URL_TTL)

    def public_url(self, storage_path: str) -> str:
        return self.storage.public_url(self.bucket, storage_path)

    def remove_object_quietly(self, storage_path: str) -> None:
        """Remove a stored object; failures are logged and swallowed."""
        try:
            self.storage.remove(self.bucket, storage_path)
        except StorageError as e:
            logger.warning("Could not remove %s/%s: %s", self.bucket, storage_path, e.message)

    def _target(self, entity_type: str) -> AttachmentTarget:
        target = self.targets.get(entity_type)
        if target is None:
            raise ValidationError(f"Unsupported entity type '{entity_type}'")
        return target

    def _cache_key(self, entity_type: str, entity_id: int) -> str:
        return f"attachments:{self.variant}:{entity_type}:{entity_id}"

    @staticmethod
    def to_dict(row) -> Dict[str, Any]:
        data = {
            "id": row.id,
            "file_name": row.file_name,
            "file_path": row.file_path,
            "file_type": row.file_type,
            "file_size": row.file_size,
            "uploaded_by": row.uploaded_by,
            "created_at": row.created_at.isoformat() if row.created_at else None,
        }
        for column in ("request_id", "invoice_id", "event_id"):
            if hasattr(row, column):
                data[column] = getattr(row, column)
        return data


purchase_attachments = AttachmentService(
    variant="purchase",
    bucket=settings.PURCHASE_BUCKET,
    targets={
        "request": AttachmentTarget(PurchaseRequestAttachment, "request_id"),
        "invoice": AttachmentTarget(PurchaseInvoiceAttachment, "invoice_id"),
    },
    allowed_types=PURCHASE_ALLOWED_TYPES,
)

rd_attachments = AttachmentService(
    variant="rd",
    bucket=settings.RD_BUCKET,
    targets={"request": AttachmentTarget(RdRequestAttachment, "request_id")},
    allowed_types=RD_ALLOWED_TYPES,
)

ATTACHMENT_SERVICES = {
    "purchase": purchase_attachments,
    "rd": rd_attachments,
}

"""Attachments API router: purchase and R&D upload zones."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from sqlalchemy.orm import Session

from foodtech.db.session import get_db
from foodtech.schemas.schemas import (
    AttachmentOut, MessageResponse, SignedUrlResponse, UploadBatchResponse, UploadResult,
)
from foodtech.services.attachment_service import (
    ATTACHMENT_SERVICES, SIGNED_URL_TTL, AttachmentService, IncomingFile,
    purchase_attachments, rd_attachments,
)
from foodtech.core.security import get_current_user_id
from foodtech.core.exceptions import FoodTechError, ValidationError

logger = logging.getLogger("foodtech")

router = APIRouter(tags=["attachments"])

# URL segment -> entity type
PURCHASE_ENTITIES = {"requests": "request", "invoices": "invoice"}


def _purchase_entity(segment: str) -> str:
    entity_type = PURCHASE_ENTITIES.get(segment)
    if entity_type is None:
        raise ValidationError(f"Unsupported entity type '{segment}'")
    return entity_type


def _upload_batch(
    service: AttachmentService,
    db: Session,
    files: List[UploadFile],
    entity_type: str,
    entity_id: int,
    user_id: int,
    event_id: Optional[int] = None,
) -> UploadBatchResponse:
    """Upload files one at a time; a failed file does not stop the rest.

    Declared size and type are checked before the body is read.
    """
    results = []
    for upload in files:
        file_name = upload.filename or "file"
        content_type = upload.content_type or "application/octet-stream"
        try:
            if upload.size is not None:
                service.check(content_type, upload.size)
            incoming = IncomingFile(
                file_name=file_name,
                content_type=content_type,
                content=upload.file.read(),
            )
            row = service.upload(db, incoming, entity_type, entity_id, user_id, event_id=event_id)
            results.append(UploadResult(
                file_name=file_name,
                success=True,
                attachment=AttachmentOut(**service.to_dict(row)),
            ))
        except FoodTechError as e:
            logger.warning("Upload of %s failed: %s", file_name, e.message)
            results.append(UploadResult(file_name=file_name, success=False, error=e.message))

    uploaded = sum(1 for r in results if r.success)
    return UploadBatchResponse(uploaded=uploaded, failed=len(results) - uploaded, results=results)


# ---- Purchase ----

@router.post("/purchase/{segment}/{entity_id}/attachments", response_model=UploadBatchResponse)
def upload_purchase_attachments(
    segment: str,
    entity_id: int,
    files: List[UploadFile] = File(...),
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    entity_type = _purchase_entity(segment)
    return _upload_batch(purchase_attachments, db, files, entity_type, entity_id, user_id)


@router.get("/purchase/{segment}/{entity_id}/attachments", response_model=List[AttachmentOut])
def list_purchase_attachments(
    segment: str,
    entity_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    return purchase_attachments.list(db, _purchase_entity(segment), entity_id)


@router.delete("/purchase/{segment}/attachments/{attachment_id}", response_model=MessageResponse)
def delete_purchase_attachment(
    segment: str,
    attachment_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    entity_type = _purchase_entity(segment)
    row = purchase_attachments.get(db, entity_type, attachment_id)
    purchase_attachments.delete(db, entity_type, attachment_id, row.file_path)
    return MessageResponse(message="File deleted")


# ---- R&D ----

@router.post("/rd/requests/{request_id}/attachments", response_model=UploadBatchResponse)
def upload_rd_attachments(
    request_id: int,
    files: List[UploadFile] = File(...),
    event_id: Optional[int] = Form(None),
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    return _upload_batch(rd_attachments, db, files, "request", request_id, user_id, event_id=event_id)


@router.get("/rd/requests/{request_id}/attachments", response_model=List[AttachmentOut])
def list_rd_attachments(
    request_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    return rd_attachments.list(db, "request", request_id)


@router.delete("/rd/attachments/{attachment_id}", response_model=MessageResponse)
def delete_rd_attachment(
    attachment_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    row = rd_attachments.get(db, "request", attachment_id)
    rd_attachments.delete(db, "request", attachment_id, row.file_path)
    return MessageResponse(message="File deleted")


@router.get("/attachments/signed-url", response_model=SignedUrlResponse)
def get_signed_url(
    variant: str = Query(...),
    path: str = Query(..., min_length=1),
    user_id: int = Depends(get_current_user_id),
):
    """Short-lived download URL for a stored attachment."""
    service = ATTACHMENT_SERVICES.get(variant)
    if service is None:
        raise ValidationError(f"Unknown attachment variant '{variant}'")
    return SignedUrlResponse(
        url=service.signed_url(path),
        expires_in=int(SIGNED_URL_TTL.total_seconds()),
    )

"""Knowledge-base API router: documents and their source files."""

from typing import List

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.orm import Session

from foodtech.db.session import get_db
from foodtech.schemas.schemas import (
    KBDocumentCreate, KBDocumentOut, KBDocumentUpdate, MessageResponse, SignedUrlResponse,
)
from foodtech.services.kb_service import kb_service
from foodtech.core.security import get_current_user_id, require_kb_ingest

router = APIRouter(prefix="/kb", tags=["knowledge-base"])


@router.get("/documents", response_model=List[KBDocumentOut])
def list_documents(db: Session = Depends(get_db), user_id: int = Depends(get_current_user_id)):
    return kb_service.list_documents(db)


@router.post("/documents", response_model=KBDocumentOut, status_code=201)
def create_document(
    body: KBDocumentCreate,
    db: Session = Depends(get_db),
    payload: dict = Depends(require_kb_ingest),
):
    return kb_service.create_document(db, body.model_dump(), created_by=int(payload["sub"]))


@router.get("/documents/{document_id}", response_model=KBDocumentOut)
def get_document(
    document_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    return kb_service.get_document(db, document_id)


@router.put("/documents/{document_id}", response_model=KBDocumentOut)
def update_document(
    document_id: int,
    body: KBDocumentUpdate,
    db: Session = Depends(get_db),
    payload: dict = Depends(require_kb_ingest),
):
    return kb_service.update_document(db, document_id, body.model_dump(exclude_unset=True))


@router.delete("/documents/{document_id}", response_model=MessageResponse)
def delete_document(
    document_id: int,
    db: Session = Depends(get_db),
    payload: dict = Depends(require_kb_ingest),
):
    kb_service.delete_document(db, document_id)
    return MessageResponse(message="Document deleted")


@router.post("/documents/{document_id}/file", response_model=KBDocumentOut)
def upload_document_file(
    document_id: int,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    payload: dict = Depends(require_kb_ingest),
):
    """Attach (or replace) the document's source file."""
    content = file.file.read()
    return kb_service.upload_file(
        db, document_id, file.filename or "document",
        file.content_type or "application/octet-stream", content,
    )


@router.get("/documents/{document_id}/file", response_model=SignedUrlResponse)
def get_document_file_url(
    document_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    return SignedUrlResponse(url=kb_service.signed_url(db, document_id))

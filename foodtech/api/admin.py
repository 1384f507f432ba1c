"""Admin handlers router: user provisioning and knowledge-base ingest.

Each handler is a POST with a JSON body answering ``{"success": true, ...}``;
errors are rendered as ``{"error": message}`` by the application handlers.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from foodtech.db.session import get_db
from foodtech.schemas.schemas import (
    CreateUserRequest, ImportUsersRequest, ImportUsersResponse, ResetPasswordRequest,
    TriggerIngestRequest, UpdateRoleRequest, UsersAuthInfoResponse,
)
from foodtech.services.kb_service import kb_service
from foodtech.services.user_admin_service import user_admin_service
from foodtech.core.security import require_admin, require_kb_ingest

router = APIRouter(prefix="/functions", tags=["admin"])


@router.post("/create-user")
def create_user(
    body: CreateUserRequest,
    db: Session = Depends(get_db),
    payload: dict = Depends(require_admin),
):
    """Create a confirmed user and email the set-password invite."""
    profile = user_admin_service.create_user(db, body.email, body.name.strip(), body.role)
    return {"success": True, "user_id": profile.id}


@router.post("/import-users", response_model=ImportUsersResponse, response_model_exclude_none=True)
def import_users(
    body: ImportUsersRequest,
    db: Session = Depends(get_db),
    payload: dict = Depends(require_admin),
):
    results = user_admin_service.import_users(
        db, [u.model_dump() for u in body.users], send_invites=body.send_invites,
    )
    imported = sum(1 for r in results if r["success"])
    return {
        "success": True,
        "imported": imported,
        "failed": len(results) - imported,
        "results": results,
    }


@router.post("/reset-user-password")
def reset_user_password(
    body: ResetPasswordRequest,
    db: Session = Depends(get_db),
    payload: dict = Depends(require_admin),
):
    user_admin_service.reset_password(db, body.user_id)
    return {"success": True}


@router.post("/update-user-role")
def update_user_role(
    body: UpdateRoleRequest,
    db: Session = Depends(get_db),
    payload: dict = Depends(require_admin),
):
    profile = user_admin_service.update_role(db, int(payload["sub"]), body.user_id, body.new_role)
    return {"success": True, "message": f"Role updated to {profile.role.value}"}


@router.post("/get-users-auth-info", response_model=UsersAuthInfoResponse)
def get_users_auth_info(
    db: Session = Depends(get_db),
    payload: dict = Depends(require_admin),
):
    return {"users": user_admin_service.list_auth_info(db)}


@router.post("/kb-trigger-ingest")
def kb_trigger_ingest(
    body: TriggerIngestRequest,
    db: Session = Depends(get_db),
    payload: dict = Depends(require_kb_ingest),
):
    """Hand a document to the external indexing workflow."""
    kb_service.trigger_ingest(db, body.document_id)
    return {
        "success": True,
        "message": "Ingest triggered",
        "document_id": body.document_id,
    }

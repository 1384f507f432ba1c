"""Auth API router: login, set-password, me."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from foodtech.db.session import get_db
from foodtech.schemas.schemas import (
    LoginRequest, SetPasswordRequest, TokenResponse, ProfileOut, MessageResponse,
)
from foodtech.services.auth_service import auth_service
from foodtech.core.security import get_current_user_id

router = APIRouter(prefix="/auth", tags=["auth"])


def profile_out(profile) -> ProfileOut:
    return ProfileOut(
        id=profile.id,
        email=profile.email,
        name=profile.display_name,
        role=profile.role.value,
        is_active=profile.is_active,
        created_at=profile.created_at,
    )


@router.post("/login", response_model=TokenResponse)
async def login(body: LoginRequest, db: Session = Depends(get_db)):
    """Authenticate and return an access token."""
    return auth_service.authenticate(db, body.email, body.password)


@router.post("/set-password", response_model=MessageResponse)
async def set_password(body: SetPasswordRequest, db: Session = Depends(get_db)):
    """Consume an invite or reset link and set the account password."""
    profile = auth_service.set_password(db, body.token, body.password)
    return MessageResponse(message="Password set", detail={"user_id": profile.id})


@router.get("/me", response_model=ProfileOut)
async def me(db: Session = Depends(get_db), user_id: int = Depends(get_current_user_id)):
    return profile_out(auth_service.get_profile(db, user_id))

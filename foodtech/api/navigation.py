"""Navigation API router: the sidebar a role may see."""

from dataclasses import asdict

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from foodtech.db.session import get_db
from foodtech.models.profile import Profile
from foodtech.schemas.schemas import NavigationResponse
from foodtech.services.navigation import compose_navigation
from foodtech.core.security import get_current_user_id

router = APIRouter(prefix="/navigation", tags=["navigation"])


@router.get("", response_model=NavigationResponse)
async def get_navigation(
    path: str = Query("/"),
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """Modules visible to the caller's stored role, with the active one marked."""
    profile = db.get(Profile, user_id)
    if profile is None:
        return NavigationResponse()
    nav = compose_navigation(profile.role, path)
    return NavigationResponse(
        entries=[asdict(entry) for entry in nav.entries],
        active_id=nav.active_id,
    )
